"""
Shared string normalization utilities used across ranking and curation modules.

Three flavours of key are needed:
- title keys for matching ranking evidence to album tracks (alphanumerics only)
- source keys for deduplicating ranking sources (word characters and spaces)
- user-ranking keys for matching a listener's own ranking to track titles
"""
import re
import unicodedata
from typing import Any

# Typography normalization shared by every key flavour
_TYPOGRAPHY_TRANSLATION = {
    ord("‘"): "'",  # left single quotation mark
    ord("’"): "'",  # right single quotation mark
    ord("‚"): "'",  # single low-9 quotation mark
    ord("‛"): "'",  # single high-reversed-9 quotation mark
    ord("′"): "'",  # prime
    ord("“"): '"',  # left double quotation mark
    ord("”"): '"',  # right double quotation mark
    ord("„"): '"',  # double low-9 quotation mark
    ord("″"): '"',  # double prime
    ord("‐"): "-",  # hyphen
    ord("‑"): "-",  # non-breaking hyphen
    ord("–"): "-",  # en dash
    ord("—"): "-",  # em dash
    ord("−"): "-",  # minus sign
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_WORD = re.compile(r"[^\w\s]")
_USER_KEY_STRIP = re.compile(r"[^\w\s'\"-]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: Any, lowercase: bool = True, strip: bool = True) -> str:
    """
    Normalize text for consistent comparisons.

    Handles Unicode normalization (NFC), typography variants, optional case
    folding, and whitespace.

    Args:
        text: Text to normalize (None and non-strings are tolerated)
        lowercase: Apply case folding
        strip: Remove leading/trailing whitespace

    Returns:
        Normalized text string
    """
    if text is None:
        return ""

    text = unicodedata.normalize("NFC", str(text))
    text = text.translate(_TYPOGRAPHY_TRANSLATION)

    if lowercase:
        text = text.casefold()

    if strip:
        text = text.strip()

    return text


def normalize_title_key(title: Any) -> str:
    """
    Normalize a track title to a key for matching ranking evidence.

    Only ASCII letters and digits survive, so "Don't Stop (Live)" and
    "dont stop live" produce the same key.
    """
    if not title:
        return ""
    text = unicodedata.normalize("NFKD", normalize_text(title))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", text)


def normalize_source_key(name: Any) -> str:
    """
    Normalize a ranking source name to its deduplication key.

    Case and punctuation are ignored: "BestEverAlbums" and "besteveralbums!"
    share a key.
    """
    if not name:
        return ""
    return _NON_WORD.sub("", normalize_text(name))


def normalize_user_title(title: Any) -> str:
    """
    Normalize a title for matching a user-defined ranking.

    Collapses whitespace, unifies quotes and drops special characters while
    keeping apostrophes, quotes and hyphens.
    """
    if not title:
        return ""
    text = _WHITESPACE.sub(" ", normalize_text(title))
    return _USER_KEY_STRIP.sub("", text)
