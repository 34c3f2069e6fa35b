"""Best-effort extraction of structure from free-form critique text.

The critique prompt asks the model for fenced sections (``═══ 標題 ═══``),
one ``評分（1-10）：N`` line per evaluation dimension, a numbered suggestion
list and a closing summary. Models drift from that template, so every field
is optional: whatever can be found is returned, the rest keeps its default.
"""

import re
from typing import List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field

FENCE = "═══"

# (display name, category key, accepted spellings)
DIMENSIONS: List[Tuple[str, str, Tuple[str, ...]]] = [
    ("劇情節奏", "pacing", ("劇情節奏", "剧情节奏")),
    ("爽點設計", "cool_points", ("爽點設計", "爽点设计")),
    ("懸念鉤子", "hooks", ("懸念鉤子", "悬念钩子")),
    ("對話質量", "dialogue", ("對話質量", "对话质量")),
    ("水文檢測", "filler", ("水文檢測", "水文检测")),
]

_RATING = r"[評评]分[（(]1-10[)）][：:]\s*(\d+)"
_RATING_RE = re.compile(_RATING)
_SECTION_RE = re.compile(FENCE + r"\s*([^═]+?)\s*" + FENCE + r"([\s\S]*?)(?=" + FENCE + r"|\Z)")
_LIST_PREFIX_RE = re.compile(r"^(\d+\.|[-•])\s+")
_COLON_RE = re.compile(r"[：:]")
_INT_RE = re.compile(r"\d+")
_TOTAL_SCORE_RE = re.compile(r"(?:總體評分|总体评分).*?[：:]\s*(\d+)")

SUGGESTION_MARKERS = ("修改建議", "修改建议", "五")
SUMMARY_MARKERS = ("總體評價", "总体评价", "六")

HIGHLIGHT_KEYS = ("亮點", "亮点")
PROBLEM_KEYS = ("問題", "问题")
TOTAL_SCORE_KEYS = ("總體評分", "总体评分")
ONE_SENTENCE_KEYS = ("一句話總結", "一句话总结", "總結", "总结")


def _dimension_pattern(aliases: Tuple[str, ...]) -> "re.Pattern":
    names = "|".join(re.escape(a) for a in aliases)
    return re.compile(r"(?:" + names + r").*?" + _RATING, re.IGNORECASE)


_DIMENSION_PATTERNS = [
    (name, key, _dimension_pattern(aliases)) for name, key, aliases in DIMENSIONS
]


class CritiqueScore(BaseModel):
    name: str
    value: int = Field(ge=1, le=10)
    category: str


class CritiqueSection(BaseModel):
    title: str
    content: str
    rating: Optional[int] = None


class CritiqueSummary(BaseModel):
    highlights: str = ""
    problems: str = ""
    overall_score: int = 0
    one_sentence: str = ""


class CritiqueData(BaseModel):
    scores: List[CritiqueScore] = Field(default_factory=list)
    sections: List[CritiqueSection] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    summary: CritiqueSummary = Field(default_factory=CritiqueSummary)
    raw_content: str = ""

    @property
    def is_empty(self) -> bool:
        """True when nothing structured could be pulled out of the text."""
        return not (self.scores or self.sections or self.suggestions or self.summary.overall_score)


def _contains_any(text: str, needles: Tuple[str, ...]) -> bool:
    return any(n in text for n in needles)


def _after_colon(line: str) -> str:
    parts = _COLON_RE.split(line, maxsplit=1)
    return parts[-1].strip()


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def extract_scores(content: str) -> List[CritiqueScore]:
    """Find the per-dimension ratings anywhere in the text, in canonical order."""
    scores = []
    for name, key, pattern in _DIMENSION_PATTERNS:
        match = pattern.search(content)
        if not match:
            continue
        value = int(match.group(1))
        if 1 <= value <= 10:
            scores.append(CritiqueScore(name=name, value=value, category=key))
    return scores


def extract_sections(content: str) -> List[CritiqueSection]:
    sections = []
    for match in _SECTION_RE.finditer(content):
        body = match.group(2).strip()
        rating_match = _RATING_RE.search(body)
        sections.append(
            CritiqueSection(
                title=match.group(1).strip(),
                content=body,
                rating=int(rating_match.group(1)) if rating_match else None,
            )
        )
    return sections


def find_section(
    sections: List[CritiqueSection], markers: Tuple[str, ...]
) -> Optional[CritiqueSection]:
    for section in sections:
        if _contains_any(section.title, markers):
            return section
    return None


def extract_suggestions(section: CritiqueSection) -> List[str]:
    suggestions = []
    for line in section.content.split("\n"):
        line = line.strip()
        if not _LIST_PREFIX_RE.match(line):
            continue
        text = _LIST_PREFIX_RE.sub("", line, count=1).strip()
        if len(text) > 5:
            suggestions.append(text)
    return suggestions


def extract_summary(section: CritiqueSection) -> CritiqueSummary:
    """Classify summary lines; a later line overwrites an earlier one."""
    summary = CritiqueSummary()
    for line in section.content.split("\n"):
        line = line.strip()
        if not line:
            continue
        if _contains_any(line, HIGHLIGHT_KEYS):
            summary.highlights = _after_colon(line)
        elif _contains_any(line, PROBLEM_KEYS):
            summary.problems = _after_colon(line)
        elif _contains_any(line, TOTAL_SCORE_KEYS):
            # Not the line's first integer: prefer the one after the colon so
            # the "（1-10）" range marker is skipped. Falls back to the first.
            number = _INT_RE.search(_after_colon(line)) or _INT_RE.search(line)
            if number:
                summary.overall_score = int(number.group(0))
        elif _contains_any(line, ONE_SENTENCE_KEYS):
            summary.one_sentence = _after_colon(line)
    return summary


def parse_critique(content: Optional[str]) -> Optional[CritiqueData]:
    """Parse raw critique text into CritiqueData.

    Returns None for empty input or if parsing blows up; partial input gives
    a partially filled result.
    """
    if not content or not content.strip():
        return None

    try:
        scores = extract_scores(content)
        sections = extract_sections(content)

        suggestions: List[str] = []
        suggestion_section = find_section(sections, SUGGESTION_MARKERS)
        if suggestion_section:
            suggestions = extract_suggestions(suggestion_section)

        summary = CritiqueSummary()
        summary_section = find_section(sections, SUMMARY_MARKERS)
        if summary_section:
            summary = extract_summary(summary_section)

        if not scores:
            total = _TOTAL_SCORE_RE.search(content)
            if total:
                summary.overall_score = int(total.group(1))

        if summary.overall_score == 0 and scores:
            mean = sum(s.value for s in scores) / len(scores)
            summary.overall_score = _round_half_up(mean)

        logger.debug(
            "Parsed critique: {} scores, {} sections, {} suggestions",
            len(scores), len(sections), len(suggestions),
        )

        return CritiqueData(
            scores=scores,
            sections=sections,
            suggestions=suggestions,
            summary=summary,
            raw_content=content,
        )
    except Exception:
        logger.exception("Failed to parse critique")
        return None
