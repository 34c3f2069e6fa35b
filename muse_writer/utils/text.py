"""Text helpers shared by prompt builders."""

SENTENCE_BREAKS = ["。", "！", "？", "」", ". ", "! ", "? ", "\n"]


def tail_at_sentence(text: str, max_chars: int, slack: int = 200) -> str:
    """Keep at most the last ``max_chars`` characters, starting on a sentence.

    Looks within the first ``slack`` characters of the kept tail for a
    sentence break; if none is found the hard cut is marked with an ellipsis,
    which counts toward ``max_chars``.
    """
    if len(text) <= max_chars:
        return text

    chunk = text[len(text) - max_chars:]
    best = None
    for sep in SENTENCE_BREAKS:
        idx = chunk.find(sep)
        if idx != -1 and idx < slack and (best is None or idx + len(sep) < best):
            best = idx + len(sep)
    if best is not None and best < len(chunk):
        return chunk[best:]
    return "…" + text[len(text) - max_chars + 1:]
