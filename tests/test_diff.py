from muse_writer.editing.diff import (
    analyze_differences,
    merge_paragraphs,
    split_paragraphs,
)

ORIGINAL = "第一段。\n\n第二段。\n第三段。"
IMPROVED = "第一段。\n第二段，改寫過了。\n\n\n第三段。\n第四段。"


def test_split_drops_blank_paragraphs():
    assert split_paragraphs("甲\n\n\n乙\n  \n丙") == ["甲", "乙", "丙"]
    assert split_paragraphs("") == []


def test_analyze_change_types():
    paragraphs = analyze_differences(ORIGINAL, IMPROVED)
    assert [p.change_type for p in paragraphs] == ["unchanged", "modified", "unchanged", "added"]
    assert [p.index for p in paragraphs] == [0, 1, 2, 3]
    assert paragraphs[0].has_changes is False
    assert paragraphs[1].has_changes is True
    assert paragraphs[3].original == ""


def test_similarity():
    paragraphs = analyze_differences(ORIGINAL, IMPROVED)
    assert paragraphs[0].similarity == 1.0
    assert 0.0 < paragraphs[1].similarity < 1.0
    assert paragraphs[3].similarity == 0.0


def test_removed_paragraph():
    paragraphs = analyze_differences("甲。\n乙。", "甲。")
    assert paragraphs[1].change_type == "removed"
    assert paragraphs[1].improved == ""


def test_identical_texts():
    paragraphs = analyze_differences(ORIGINAL, ORIGINAL)
    assert all(p.change_type == "unchanged" for p in paragraphs)


def test_merge_selected():
    merged = merge_paragraphs(ORIGINAL, IMPROVED, [1, 3])
    assert merged == "第一段。\n\n第二段，改寫過了。\n\n第三段。\n\n第四段。"


def test_merge_nothing_selected():
    assert merge_paragraphs(ORIGINAL, IMPROVED, []) == "第一段。\n\n第二段。\n\n第三段。"


def test_merge_falls_back_to_original():
    # index 1 has no counterpart in the revision
    assert merge_paragraphs("甲。\n乙。", "丙。", [0, 1]) == "丙。\n\n乙。"
