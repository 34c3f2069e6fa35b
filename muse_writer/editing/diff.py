"""Paragraph-level comparison of a chapter and its AI-revised version."""

import re
from difflib import SequenceMatcher
from typing import Iterable, List

from pydantic import BaseModel

_PARAGRAPH_SPLIT = re.compile(r"\n+")


class DiffParagraph(BaseModel):
    index: int
    original: str
    improved: str
    has_changes: bool
    change_type: str  # added | removed | modified | unchanged
    similarity: float


def split_paragraphs(text: str) -> List[str]:
    return [p for p in _PARAGRAPH_SPLIT.split(text or "") if p.strip()]


def analyze_differences(original_content: str, improved_content: str) -> List[DiffParagraph]:
    """Pair paragraphs by position and classify each pair.

    Paragraphs are compared index by index, so an inserted paragraph shows up
    as a run of modified pairs followed by an added one.
    """
    originals = split_paragraphs(original_content)
    improveds = split_paragraphs(improved_content)

    paragraphs = []
    for i in range(max(len(originals), len(improveds))):
        original = originals[i] if i < len(originals) else ""
        improved = improveds[i] if i < len(improveds) else ""

        matcher = SequenceMatcher(None, original, improved, autojunk=False)
        has_changes = any(tag != "equal" for tag, *_ in matcher.get_opcodes())

        if not original and improved:
            change_type = "added"
        elif original and not improved:
            change_type = "removed"
        elif has_changes:
            change_type = "modified"
        else:
            change_type = "unchanged"

        paragraphs.append(
            DiffParagraph(
                index=i,
                original=original,
                improved=improved,
                has_changes=has_changes,
                change_type=change_type,
                similarity=round(matcher.ratio(), 4),
            )
        )

    return paragraphs


def merge_paragraphs(
    original_content: str,
    improved_content: str,
    selected_indices: Iterable[int],
) -> str:
    """Take the improved paragraph at each selected index, the original elsewhere."""
    originals = split_paragraphs(original_content)
    improveds = split_paragraphs(improved_content)
    selected = set(selected_indices)

    merged = []
    for idx, orig in enumerate(originals):
        if idx in selected and idx < len(improveds):
            merged.append(improveds[idx])
        else:
            merged.append(orig)

    # Paragraphs only present in the revision
    for idx in range(len(originals), len(improveds)):
        if idx in selected:
            merged.append(improveds[idx])

    return "\n\n".join(merged)
