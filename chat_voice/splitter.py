"""Split mixed-language text into single-language segments."""

import logging
import re
from dataclasses import dataclass

from chat_voice.constants import MIN_FOREIGN_CHARS, MIN_SEGMENT_WORDS, SCRIPT_FAMILIES
from chat_voice.detect import detect_language, is_foreign_script, script_of
from chat_voice.models import LanguageTag, Segment

logger = logging.getLogger(__name__)

WORD = re.compile(r"\S+\s*")
WORD_LEVEL_SCRIPTS = {"arabic"}


@dataclass
class _Span:
    """A run of the source text, as [start, end) offsets."""
    start: int
    end: int
    language: LanguageTag = ""


def script_family(language: LanguageTag) -> str | None:
    """Name of the family a language belongs to, or None."""
    for family, members in SCRIPT_FAMILIES.items():
        if language in members:
            return family
    return None


def compatible(a: LanguageTag, b: LanguageTag) -> bool:
    """Two languages may share a segment if equal or in the same script family."""
    if a == b:
        return True
    family = script_family(a)
    return family is not None and family == script_family(b)


def _script_runs(text: str) -> list[tuple[_Span, str]]:
    """Cut text into runs of one script class.

    Neutral characters (spaces, digits, punctuation) stay with the run in
    progress; leading neutrals join the first run.
    """
    runs: list[tuple[_Span, str]] = []
    current_script = None
    start = 0
    for i, ch in enumerate(text):
        script = script_of(ch)
        if script is None:
            continue
        if current_script is None:
            current_script = script
        elif script != current_script:
            runs.append((_Span(start, i), current_script))
            start = i
            current_script = script
    if current_script is not None:
        runs.append((_Span(start, len(text)), current_script))
    return runs


def _words(text: str, run: _Span) -> list[_Span]:
    """Split a run into words; words without script characters join their neighbour."""
    spans: list[_Span] = []
    lettered: list[bool] = []
    for match in WORD.finditer(text, run.start, run.end):
        has_script = any(script_of(ch) for ch in match.group())
        if spans and (not has_script or not lettered[-1]):
            spans[-1].end = match.end()
            lettered[-1] = lettered[-1] or has_script
        else:
            spans.append(_Span(match.start(), match.end()))
            lettered.append(has_script)
    if spans:
        spans[0].start = run.start
        spans[-1].end = run.end
    return spans


def _tokenize(text: str) -> list[_Span]:
    """Script runs, with runs of shared-block scripts broken into words.

    Arabic and Urdu share one Unicode block, so an Arabic-script run is
    classified word by word and the merge pass folds stray words back together.
    """
    spans: list[_Span] = []
    for run, script in _script_runs(text):
        if script in WORD_LEVEL_SCRIPTS:
            spans.extend(_words(text, run))
        else:
            spans.append(run)
    return [s for s in spans if text[s.start:s.end].strip()]


def _coalesce(spans: list[_Span]) -> list[_Span]:
    """Join neighbouring spans that carry the same language."""
    out: list[_Span] = []
    for span in spans:
        if out and out[-1].language == span.language:
            out[-1].end = span.end
        else:
            out.append(span)
    return out


def _word_count(text: str, span: _Span) -> int:
    return len(text[span.start:span.end].split())


def _text_length(text: str, span: _Span) -> int:
    return len(text[span.start:span.end].strip())


def _merge_short(text: str, spans: list[_Span]) -> list[_Span]:
    """Fold short segments into a compatible neighbour until nothing changes."""
    spans = list(spans)
    merged = True
    while merged:
        merged = False
        for i, span in enumerate(spans):
            if _word_count(text, span) >= MIN_SEGMENT_WORDS:
                continue
            for j in (i - 1, i + 1):
                if j < 0 or j >= len(spans) or not compatible(span.language, spans[j].language):
                    continue
                left, right = sorted((i, j))
                a, b = spans[left], spans[right]
                language = a.language if _text_length(text, a) >= _text_length(text, b) else b.language
                logger.debug("Merging short segment %r into %s", text[span.start:span.end], language)
                spans[left:right + 1] = [_Span(a.start, b.end, language)]
                merged = True
                break
            if merged:
                break
    return _coalesce(spans)


def count_foreign_chars(text: str) -> int:
    """Number of characters in a non-Latin script block."""
    return sum(1 for ch in text if is_foreign_script(ch))


def split_segments(text: str) -> list[Segment]:
    """Partition text into ordered single-language segments.

    Text with fewer than MIN_FOREIGN_CHARS non-Latin characters is returned as
    one segment, so a stray foreign word or symbol never splits an utterance.
    """
    if not text:
        return []

    if count_foreign_chars(text) < MIN_FOREIGN_CHARS:
        return [Segment(text=text.strip() or text, language=detect_language(text))]

    spans = _tokenize(text)
    for span in spans:
        span.language = detect_language(text[span.start:span.end])
    spans = _merge_short(text, _coalesce(spans))

    segments = [Segment(text=text[s.start:s.end].strip(), language=s.language) for s in spans]
    logger.debug("Split into %d segments: %s", len(segments), [s.language for s in segments])
    return segments
