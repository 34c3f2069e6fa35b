"""Cheap content fingerprints for detecting chapter edits.

The digest matches the one the browser editor stores next to each critique,
so it walks UTF-16 code units rather than Python code points.
"""

from typing import Optional

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _utf16_units(text: str):
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def content_fingerprint(text: str) -> str:
    """Return a short base-36 digest of ``text``.

    Not collision resistant; only meant to tell "edited" from "untouched".
    Empty text yields an empty string.
    """
    if not text:
        return ""

    h = 0
    for code in _utf16_units(text):
        h = _to_int32((h << 5) - h + code)
    return _base36(abs(h))


def has_content_changed(current_text: str, stored_fingerprint: Optional[str]) -> bool:
    """Whether ``current_text`` differs from the text behind ``stored_fingerprint``.

    With nothing stored we assume a change; with no current text there is
    nothing that could have changed.
    """
    if not stored_fingerprint:
        return True
    if not current_text:
        return False
    return content_fingerprint(current_text) != stored_fingerprint
