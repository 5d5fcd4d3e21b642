"""
Text normalization shared by the intent classifier and the specialty matcher.
"""

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")
_EDGE_PUNCTUATION = " \t\r\n.,!?;:…\"'()"


def lowercase_text(text: str) -> str:
    """Lower-cases and NFC-composes text, keeping diacritics."""
    composed = unicodedata.normalize("NFC", text or "")
    return _WHITESPACE.sub(" ", composed.lower()).strip()


def fold_diacritics(text: str) -> str:
    """Removes Vietnamese diacritics: "đau đầu" becomes "dau dau"."""
    decomposed = unicodedata.normalize("NFD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    # đ has no combining form
    return stripped.replace("đ", "d").replace("Đ", "D")


def normalize_text(text: str) -> str:
    """
    Lower-cases text and strips Vietnamese diacritics.

    "Đồng ý!" becomes "dong y". Surrounding punctuation and repeated
    whitespace are removed so short answers compare exactly.
    """
    stripped = fold_diacritics((text or "").lower())
    return _WHITESPACE.sub(" ", stripped).strip(_EDGE_PUNCTUATION)
