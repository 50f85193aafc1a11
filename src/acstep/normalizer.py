"""
normalizer.py
--------------
Text preparation before building or scanning.

Steps:
1. Convert bytes to str (utf-8, latin1 fallback which is lossless)
2. Unicode normalization (NFC by default) so composed and decomposed
   forms of the same character match
3. Case folding if requested

Patterns and text must go through the same steps, otherwise matches are
silently missed.
"""

import unicodedata


def bytes_to_text(payload: bytes) -> str:
    """Decode utf-8, falling back to latin1 for arbitrary bytes."""
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        return payload.decode("latin1")


def normalize_text(s: str, *, to_lower=False, form="NFC") -> str:
    if form:
        s = unicodedata.normalize(form, s)
    if to_lower:
        s = s.casefold()
    return s
