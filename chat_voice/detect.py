"""Language detection by Unicode block and diacritic heuristics."""

import re

from chat_voice.constants import DEFAULT_LANGUAGE, LANGUAGE_NAMES
from chat_voice.models import LanguageTag

# Checked in order; the first block found anywhere in the text wins
INDIC_BLOCKS = [
    (re.compile(r"[\u0900-\u097F]"), "hi-IN"),
    (re.compile(r"[\u0A80-\u0AFF]"), "gu-IN"),
    (re.compile(r"[\u0980-\u09FF]"), "bn-BD"),
    (re.compile(r"[\u0B80-\u0BFF]"), "ta-IN"),
    (re.compile(r"[\u0C00-\u0C7F]"), "te-IN"),
    (re.compile(r"[\u0C80-\u0CFF]"), "kn-IN"),
    (re.compile(r"[\u0D00-\u0D7F]"), "ml-IN"),
]

ARABIC_BLOCK = re.compile(r"[\u0600-\u06FF]")
URDU_LETTERS = re.compile(r"[یہںپچگکڑ]")
URDU_WORDS = re.compile(r"(?<!\w)(?:یہ|ہے|میں|کا|کی|سے|کو|اور|آپ|تم|وہ)(?!\w)")

EAST_BLOCKS = [
    (re.compile(r"[\u4E00-\u9FFF]"), "zh-CN"),
    (re.compile(r"[\u3040-\u309F\u30A0-\u30FF]"), "ja-JP"),
    (re.compile(r"[\uAC00-\uD7AF]"), "ko-KR"),
    (re.compile(r"[\u0400-\u04FF]"), "ru-RU"),
]

LATIN_MARKERS = [
    (re.compile(r"[ñáéíóúü¿¡]"), "es-ES"),
    (re.compile(r"[àâäéèêëïîôöùûüÿç]"), "fr-FR"),
    (re.compile(r"[äöüß]"), "de-DE"),
    (re.compile(r"[àèéìíîòóù]"), "it-IT"),
    (re.compile(r"[ãõçáéíóúâêîôû]"), "pt-BR"),
]

# Script classes used to tokenize mixed text; Han and kana share one class
SCRIPT_RANGES = [
    (0x0900, 0x097F, "devanagari"),
    (0x0980, 0x09FF, "bengali"),
    (0x0A80, 0x0AFF, "gujarati"),
    (0x0B80, 0x0BFF, "tamil"),
    (0x0C00, 0x0C7F, "telugu"),
    (0x0C80, 0x0CFF, "kannada"),
    (0x0D00, 0x0D7F, "malayalam"),
    (0x0600, 0x06FF, "arabic"),
    (0x4E00, 0x9FFF, "cjk"),
    (0x3040, 0x30FF, "cjk"),
    (0xAC00, 0xD7AF, "hangul"),
    (0x0400, 0x04FF, "cyrillic"),
]
LATIN = "latin"


def detect_language(text: str) -> LanguageTag:
    """Map text to a language tag. Total and deterministic.

    Order: Indic blocks, Arabic (with Urdu disambiguation), CJK/Hangul/Cyrillic,
    Latin diacritics, then English.
    """
    for pattern, tag in INDIC_BLOCKS:
        if pattern.search(text):
            return tag

    if ARABIC_BLOCK.search(text):
        if URDU_LETTERS.search(text) or URDU_WORDS.search(text):
            return "ur-PK"
        return "ar-SA"

    for pattern, tag in EAST_BLOCKS:
        if pattern.search(text):
            return tag

    for pattern, tag in LATIN_MARKERS:
        if pattern.search(text):
            return tag

    return DEFAULT_LANGUAGE


def script_of(ch: str) -> str | None:
    """Script class of a single character.

    Returns None for script-neutral characters (whitespace, digits, punctuation,
    symbols). Letters outside the known blocks count as Latin.
    """
    code = ord(ch)
    for start, end, script in SCRIPT_RANGES:
        if start <= code <= end:
            return script
    if ch.isalpha():
        return LATIN
    return None


def is_foreign_script(ch: str) -> bool:
    """True for characters in one of the non-Latin blocks the detector knows."""
    script = script_of(ch)
    return script is not None and script != LATIN


def base_language(tag: LanguageTag) -> str:
    """"ur-PK" → "ur"; also accepts underscore locales like "hi_IN"."""
    return tag.replace("_", "-").split("-")[0].lower()


def language_name(tag: LanguageTag) -> str:
    """Human-readable English name for a tag, falling back to the tag itself."""
    return LANGUAGE_NAMES.get(tag, tag)
