from .diff import DiffParagraph, analyze_differences, merge_paragraphs, split_paragraphs

__all__ = ["DiffParagraph", "analyze_differences", "merge_paragraphs", "split_paragraphs"]
