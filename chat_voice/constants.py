"""All magic numbers, language tables and configuration constants."""

DEFAULT_LANGUAGE = "en-US"
MIN_FOREIGN_CHARS = 3               # below this many non-Latin chars, text is one segment
MIN_SEGMENT_WORDS = 3               # shorter segments merge into a same-family neighbour
CLOUD_TTS_TIMEOUT = 10.0            # seconds, edge-tts fetch before falling back
TRANSLATE_TTS_TIMEOUT = 5.0         # seconds, per mirror URL
TRANSLATE_TTS_MAX_CHARS = 200       # translate endpoint rejects longer queries
PLATFORM_BASE_WPM = 200             # pyttsx3 words per minute at rate 1.0
DEFAULT_RATE = 0.9
CLOUD_RATE = 0.9
ANNOUNCEMENT_RATE = 0.8
FFPLAY = "ffplay"
VERSION = "0.1.0"

# Platform speech rate by base language: slower for tonal and complex scripts
PLATFORM_RATES = {
    "zh": 0.8, "ja": 0.8, "ko": 0.8, "th": 0.8,
    "hi": 0.85, "bn": 0.85, "ta": 0.85, "te": 0.85, "ar": 0.85, "gu": 0.85,
}
CLOUD_RATES = {"gu-IN": 0.8}

LANGUAGE_NAMES = {
    "en-US": "English",
    "es-ES": "Spanish",
    "fr-FR": "French",
    "de-DE": "German",
    "it-IT": "Italian",
    "pt-BR": "Portuguese",
    "ru-RU": "Russian",
    "zh-CN": "Chinese",
    "ja-JP": "Japanese",
    "ko-KR": "Korean",
    "ar-SA": "Arabic",
    "ur-PK": "Urdu",
    "hi-IN": "Hindi",
    "gu-IN": "Gujarati",
    "bn-BD": "Bengali",
    "ta-IN": "Tamil",
    "te-IN": "Telugu",
    "kn-IN": "Kannada",
    "ml-IN": "Malayalam",
    "mr-IN": "Marathi",
    "pa-IN": "Punjabi",
}

INDIC_LANGUAGES = frozenset({
    "hi-IN", "gu-IN", "bn-BD", "ta-IN", "te-IN", "kn-IN", "ml-IN", "mr-IN", "pa-IN",
})
ARABIC_LANGUAGES = frozenset({"ar-SA", "ur-PK"})

# Languages in one family may absorb each other's short segments
SCRIPT_FAMILIES = {
    "arabic": ARABIC_LANGUAGES,
    "indic": INDIC_LANGUAGES,
}

# Named edge-tts voices; Indic languages without a dedicated voice borrow Hindi
CLOUD_VOICES = {
    "es-ES": "es-ES-ElviraNeural",
    "fr-FR": "fr-FR-DeniseNeural",
    "de-DE": "de-DE-KatjaNeural",
    "it-IT": "it-IT-ElsaNeural",
    "pt-BR": "pt-BR-FranciscaNeural",
    "ru-RU": "ru-RU-SvetlanaNeural",
    "hi-IN": "hi-IN-SwaraNeural",
    "gu-IN": "hi-IN-SwaraNeural",
    "bn-BD": "bn-BD-NabanitaNeural",
    "ta-IN": "ta-IN-PallaviNeural",
    "te-IN": "te-IN-ShrutiNeural",
    "kn-IN": "hi-IN-SwaraNeural",
    "ml-IN": "hi-IN-SwaraNeural",
    "mr-IN": "hi-IN-SwaraNeural",
    "pa-IN": "hi-IN-SwaraNeural",
    "ur-PK": "ur-PK-UzmaNeural",
    "ar-SA": "ar-SA-ZariyahNeural",
    "zh-CN": "zh-CN-XiaoxiaoNeural",
    "ja-JP": "ja-JP-NanamiNeural",
    "ko-KR": "ko-KR-SunHiNeural",
    "nl-NL": "nl-NL-ColetteNeural",
    "sv-SE": "sv-SE-SofieNeural",
    "nb-NO": "nb-NO-PernilleNeural",
    "da-DK": "da-DK-ChristelNeural",
    "pl-PL": "pl-PL-ZofiaNeural",
    "tr-TR": "tr-TR-EmelNeural",
}

# Major language whose platform voice stands in for an Indic language
RELATED_LANGUAGE = {
    "gu-IN": "hi-IN",
    "bn-BD": "hi-IN",
    "ta-IN": "hi-IN",
    "te-IN": "hi-IN",
    "kn-IN": "hi-IN",
    "ml-IN": "hi-IN",
    "mr-IN": "hi-IN",
    "pa-IN": "hi-IN",
}

# Platform voice lookups for Arabic-script languages, in order
PLATFORM_FALLBACKS = {
    "ar-SA": ["ar-SA"],
    "ur-PK": ["ur-PK", "hi-IN"],
}

TRANSLATE_TTS_CODES = {
    "ar-SA": "ar",
    "ur-PK": "hi",
}

# Mirrors of the translation TTS endpoint, tried in order
TRANSLATE_TTS_URLS = [
    "https://translate.google.com/translate_tts?ie=UTF-8&q={text}&tl={lang}&client=tw-ob",
    "https://translate.google.com/translate_tts?ie=UTF-8&q={text}&tl={lang}&client=gtx",
    "https://translate.google.com/translate_tts?ie=UTF-8&q={text}&tl={lang}&total=1&idx=0&textlen={length}&client=tw-ob",
]

# One sample sentence per language for the `demo` command
DEMO_SENTENCES = [
    ("Hello, how are you today?", "en-US"),
    ("Hola, ¿cómo estás hoy?", "es-ES"),
    ("Bonjour, comment allez-vous aujourd'hui?", "fr-FR"),
    ("Hallo, wie geht es dir heute?", "de-DE"),
    ("Ciao, come stai oggi?", "it-IT"),
    ("नमस्ते, आप आज कैसे हैं?", "hi-IN"),
    ("નમસ્તે, તમે કેમ છો?", "gu-IN"),
    ("مرحبا، كيف حالك اليوم؟", "ar-SA"),
    ("آپ آج کیسے ہیں؟", "ur-PK"),
    ("你好，你今天好吗？", "zh-CN"),
]
