"""Tests for muse_writer.critique.parser."""

import pytest
from unittest.mock import patch

from muse_writer.critique.parser import (
    CritiqueData,
    extract_sections,
    parse_critique,
)


# ---------------------------------------------------------------------------
# empty input
# ---------------------------------------------------------------------------


class TestEmptyInput:

    @pytest.mark.parametrize("raw", ["", "   ", "\n\t\n", None])
    def test_returns_none(self, raw):
        assert parse_critique(raw) is None


# ---------------------------------------------------------------------------
# full template
# ---------------------------------------------------------------------------


class TestWellFormedCritique:

    def test_returns_critique_data(self, sample_critique):
        data = parse_critique(sample_critique)
        assert isinstance(data, CritiqueData)
        assert data.raw_content == sample_critique

    def test_scores_in_canonical_order(self, sample_critique):
        data = parse_critique(sample_critique)
        assert [(s.category, s.value) for s in data.scores] == [
            ("pacing", 7),
            ("cool_points", 9),
            ("hooks", 4),
            ("dialogue", 6),
            ("filler", 8),
        ]
        assert data.scores[0].name == "劇情節奏"

    def test_sections(self, sample_critique):
        data = parse_critique(sample_critique)
        titles = [s.title for s in data.sections]
        assert titles == [
            "一、劇情節奏分析",
            "二、爽點設計",
            "三、懸念鉤子",
            "四、對話質量與水文檢測",
            "五、具體修改建議",
            "六、總體評價",
        ]
        assert data.sections[0].rating == 7
        # first rating line in the body wins
        assert data.sections[3].rating == 6
        assert data.sections[4].rating is None

    def test_section_body_excludes_fences(self, sample_critique):
        data = parse_critique(sample_critique)
        for section in data.sections:
            assert "═══" not in section.content
        assert data.sections[1].content.startswith("主角當眾破境")

    def test_suggestions(self, sample_critique):
        data = parse_critique(sample_critique)
        assert len(data.suggestions) == 3
        assert data.suggestions[0] == "將開頭三段的天氣描寫壓縮為一段，盡快進入衝突。"
        assert not any(s[0].isdigit() for s in data.suggestions)

    def test_summary(self, sample_critique):
        summary = parse_critique(sample_critique).summary
        assert summary.highlights == "破境場面張力十足，群像反應生動。"
        assert summary.problems == "開篇拖沓，章末懸念不足。"
        assert summary.overall_score == 8
        assert summary.one_sentence == "爽點到位但節奏需要再收緊。"

    def test_not_empty(self, sample_critique):
        assert not parse_critique(sample_critique).is_empty


# ---------------------------------------------------------------------------
# dimension scores
# ---------------------------------------------------------------------------


class TestScores:

    def test_inline_scores_without_fences(self):
        raw = (
            "劇情節奏：推進緊湊，評分（1-10）：7\n"
            "爽點設計評分(1-10): 9\n"
            "懸念鉤子評分（1-10）：4\n"
            "對話質量評分（1-10）：6\n"
            "水文檢測評分（1-10）：8\n"
        )
        data = parse_critique(raw)
        assert [s.value for s in data.scores] == [7, 9, 4, 6, 8]
        assert data.sections == []
        assert data.suggestions == []

    def test_order_independent_of_source(self):
        raw = "水文檢測評分（1-10）：3\n劇情節奏評分（1-10）：5\n"
        data = parse_critique(raw)
        assert [s.category for s in data.scores] == ["pacing", "filler"]

    @pytest.mark.parametrize("value", ["0", "11", "99"])
    def test_out_of_range_ignored(self, value):
        data = parse_critique(f"劇情節奏評分（1-10）：{value}")
        assert data.scores == []

    def test_rating_must_be_on_same_line(self):
        data = parse_critique("劇情節奏分析\n評分（1-10）：7")
        assert data.scores == []

    def test_simplified_spelling(self):
        data = parse_critique("剧情节奏评分（1-10）：5")
        assert len(data.scores) == 1
        assert data.scores[0].name == "劇情節奏"
        assert data.scores[0].category == "pacing"


# ---------------------------------------------------------------------------
# sections
# ---------------------------------------------------------------------------


class TestSections:

    def test_no_rating_is_none(self):
        sections = extract_sections("═══ 觀察 ═══\n只是一些文字")
        assert sections[0].rating is None

    def test_explicit_zero_rating_kept(self):
        sections = extract_sections("═══ 觀察 ═══\n評分（1-10）：0")
        assert sections[0].rating == 0

    def test_text_before_first_fence_ignored(self):
        sections = extract_sections("前言\n═══ A ═══\n甲\n═══ B ═══\n乙")
        assert [(s.title, s.content) for s in sections] == [("A", "甲"), ("B", "乙")]

    def test_trailing_empty_section(self):
        sections = extract_sections("═══ A ═══")
        assert len(sections) == 1
        assert sections[0].content == ""


# ---------------------------------------------------------------------------
# suggestions
# ---------------------------------------------------------------------------


class TestSuggestions:

    def test_ordinal_marker_matches(self):
        raw = "═══ 五、建議 ═══\n1. 把第一場戰鬥寫得更具體一點\n"
        assert parse_critique(raw).suggestions == ["把第一場戰鬥寫得更具體一點"]

    def test_bullets_and_short_lines(self):
        raw = (
            "═══ 修改建議 ═══\n"
            "- 刪除重複的心理描寫段落\n"
            "• 增加師姐的台詞份量與個性\n"
            "1. 太短了\n"
            "這一行沒有編號所以不算\n"
            "2.沒有空格也不算建議的一行\n"
        )
        assert parse_critique(raw).suggestions == [
            "刪除重複的心理描寫段落",
            "增加師姐的台詞份量與個性",
        ]

    def test_no_suggestion_section(self):
        raw = "═══ 一、節奏 ═══\n1. 這不是建議區塊裡的內容\n"
        assert parse_critique(raw).suggestions == []


# ---------------------------------------------------------------------------
# summary and total score
# ---------------------------------------------------------------------------


class TestSummary:

    def test_last_matching_line_wins(self):
        raw = (
            "═══ 六、總體評價 ═══\n"
            "- 主要問題：開篇拖沓\n"
            "- 次要問題：配角臉譜化\n"
        )
        assert parse_critique(raw).summary.problems == "配角臉譜化"

    def test_total_score_skips_range_marker(self):
        raw = "═══ 總體評價 ═══\n總體評分（1-10）：6"
        assert parse_critique(raw).summary.overall_score == 6

    def test_line_without_colon(self):
        raw = "═══ 總體評價 ═══\n本章亮點不多"
        assert parse_critique(raw).summary.highlights == "本章亮點不多"

    def test_mean_when_no_total(self, sample_critique):
        raw = sample_critique.replace("- 總體評分（1-10）：8\n", "")
        data = parse_critique(raw)
        # mean(7, 9, 4, 6, 8) = 6.8
        assert data.summary.overall_score == 7

    def test_mean_rounds_half_up(self):
        raw = "劇情節奏評分（1-10）：7\n爽點設計評分（1-10）：8\n"
        assert parse_critique(raw).summary.overall_score == 8

    def test_total_from_raw_when_no_scores(self):
        raw = "整體而言還不錯。\n總體評分：6\n"
        data = parse_critique(raw)
        assert data.scores == []
        assert data.summary.overall_score == 6

    def test_plain_text_degrades(self):
        data = parse_critique("這是一段沒有任何結構的點評。")
        assert data is not None
        assert data.is_empty
        assert data.summary.overall_score == 0


# ---------------------------------------------------------------------------
# failure handling
# ---------------------------------------------------------------------------


class TestFailures:

    def test_unexpected_error_returns_none(self, sample_critique):
        with patch(
            "muse_writer.critique.parser.extract_sections",
            side_effect=RuntimeError("template changed"),
        ):
            assert parse_critique(sample_critique) is None

    def test_truncated_input(self, sample_critique):
        data = parse_critique(sample_critique[: len(sample_critique) // 2])
        assert data is not None
        assert len(data.scores) >= 2
