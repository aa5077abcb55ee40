"""Word-for-word phonetic substitution tables for borrowed voices.

A language without a voice of its own can still be read aloud by a related
language's voice (Gujarati by a Hindi voice) or, as a last resort, by an English
voice reading Latin phonetics. The tables are heuristic and cover common words
only; anything not listed passes through unchanged.
"""

import re

from chat_voice.models import LanguageTag

LATIN = "latin"

# A word is a maximal run without whitespace or punctuation; vowel signs stay inside it
WORD = re.compile(r"[^\s.,!?;:\"'()\[\]{}\u0964\u0965\u060C\u061F\u06D4]+")

GUJARATI_TO_HINDI = {
    "નમસ્તે": "नमस्ते",
    "તમે": "तुम",
    "કેમ": "कैसे",
    "છો": "हो",
    "શું": "क्या",
    "છે": "है",
    "માં": "में",
    "અને": "और",
    "ના": "का",
    "ને": "को",
    "થી": "से",
    "પર": "पर",
    "આ": "यह",
    "તે": "वह",
    "એક": "एक",
    "બે": "दो",
    "ત્રણ": "तीन",
    "ચાર": "चार",
    "પાંચ": "पांच",
    "સારું": "अच्छा",
    "ખરાબ": "बुरा",
    "મોટું": "बड़ा",
    "નાનું": "छोटा",
    "નામ": "नाम",
    "ઘર": "घर",
    "પાણી": "पानी",
    "જમવું": "खाना",
    "આવો": "आओ",
    "જાવ": "जाओ",
    "બેસો": "बैठो",
    "ઊભા": "खड़े",
    "સમય": "समय",
    "દિવસ": "दिन",
    "રાત": "रात",
    "સવાર": "सुबह",
    "સાંજ": "शाम",
}

GUJARATI_TO_LATIN = {
    "નમસ્તે": "namaste",
    "તમે": "tame",
    "કેમ": "kem",
    "છો": "cho",
    "શું": "shu",
    "છે": "che",
    "માં": "maa",
    "અને": "ane",
    "ના": "na",
    "ને": "ne",
    "થી": "thi",
    "પર": "par",
    "આ": "aa",
    "તે": "te",
    "એક": "ek",
    "બે": "be",
    "ત્રણ": "tran",
    "ચાર": "char",
    "પાંચ": "panch",
    "સારું": "saaru",
    "ખરાબ": "kharaab",
    "મોટું": "motu",
    "નાનું": "naanu",
    "નામ": "naam",
    "ઘર": "ghar",
    "પાણી": "paani",
    "જમવું": "jamvu",
    "આવો": "aavo",
    "જાવ": "jaav",
    "બેસો": "beso",
    "ઊભા": "ubha",
    "સમય": "samay",
    "દિવસ": "divas",
    "રાત": "raat",
    "સવાર": "savar",
    "સાંજ": "saanj",
}

SUBSTITUTIONS: dict[tuple[LanguageTag, str], dict[str, str]] = {
    ("gu-IN", "hi-IN"): GUJARATI_TO_HINDI,
    ("gu-IN", LATIN): GUJARATI_TO_LATIN,
}


def substitute(text: str, source: LanguageTag, target: str) -> str:
    """Replace known source-language words with their target equivalents.

    Only whole words are looked up, so a key inside a longer word ("આ" in
    "આવો", "રાત" in "ગુજરાતી") is left alone. Spacing and punctuation are kept.
    """
    table = SUBSTITUTIONS.get((source, target))
    if not table:
        return text
    return WORD.sub(lambda m: table.get(m.group(), m.group()), text)


def transliterate(text: str, language: LanguageTag) -> str:
    """Latin phonetics for an English voice to read."""
    return substitute(text, language, LATIN)