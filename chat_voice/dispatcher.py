"""Per-segment delivery through an ordered cascade of speech backends."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from chat_voice.constants import (
    ANNOUNCEMENT_RATE,
    ARABIC_LANGUAGES,
    CLOUD_RATE,
    CLOUD_RATES,
    DEFAULT_LANGUAGE,
    DEFAULT_RATE,
    INDIC_LANGUAGES,
    PLATFORM_FALLBACKS,
    PLATFORM_RATES,
    RELATED_LANGUAGE,
    TRANSLATE_TTS_CODES,
)
from chat_voice.detect import base_language, language_name
from chat_voice.errors import BackendUnavailable, NoVoiceAvailable
from chat_voice.models import LanguageTag, Outcome, Segment, SegmentResult
from chat_voice.phonetics import substitute, transliterate
from chat_voice.voices import VoiceResolver

logger = logging.getLogger(__name__)


@dataclass
class Attempt:
    """One cascade step.

    `run` returns None for a faithful delivery, or a reason string when the
    audio played but with reduced fidelity (borrowed voice, transliteration).
    """
    name: str
    run: Callable[[], Awaitable[str | None]]


async def first_success(segment: Segment, attempts: list[Attempt]) -> SegmentResult:
    """Run attempts in order until one returns; absorb every backend failure.

    Cancellation propagates; nothing else does.
    """
    failures = []
    for attempt in attempts:
        try:
            degraded = await attempt.run()
        except Exception as e:
            logger.warning("%s failed for %s: %s", attempt.name, segment.language, e)
            failures.append(f"{attempt.name}: {e}")
            continue
        outcome = Outcome.DEGRADED if degraded else Outcome.OK
        logger.info("%s delivered %s segment (%s)", attempt.name, segment.language, outcome.value)
        return SegmentResult(segment, outcome, backend=attempt.name, reason=degraded or "", failures=failures)

    logger.warning("No backend could speak %s segment %r", segment.language, segment.text[:50])
    return SegmentResult(segment, Outcome.UNAVAILABLE, reason="all backends failed", failures=failures)


def platform_rate(language: LanguageTag) -> float:
    return PLATFORM_RATES.get(base_language(language), DEFAULT_RATE)


class TTSDispatcher:
    """Choose and run the backend cascade for one (text, language) pair."""

    def __init__(self, resolver: VoiceResolver, synthesizer=None, cloud=None, translator=None):
        self.resolver = resolver
        self.synthesizer = synthesizer
        self.cloud = cloud
        self.translator = translator

    # --- individual backends ---

    async def _platform(self, text: str, language: LanguageTag, *, rate: float | None = None,
                        native_only: bool = False) -> str | None:
        if self.synthesizer is None:
            raise BackendUnavailable("No platform speech synthesis")
        handle = self.resolver.resolve(language)
        if handle is None or (native_only and handle.is_fallback):
            raise NoVoiceAvailable(f"No platform voice for {language}")
        await self.synthesizer.speak(
            text, handle.voice, rate=rate if rate is not None else platform_rate(language),
        )
        if handle.is_fallback:
            return f"no {language_name(language)} voice installed, used {handle.name}"
        return None

    async def _cloud(self, text: str, language: LanguageTag) -> str | None:
        if self.cloud is None:
            raise BackendUnavailable("No cloud TTS")
        voice_name = self.cloud.voice_for(language)
        if voice_name is None:
            raise NoVoiceAvailable(f"No cloud voice for {language}")
        voice_language = "-".join(voice_name.split("-")[:2])
        if voice_language != language:
            text = substitute(text, language, voice_language)
        await self.cloud.speak(text, voice_name, rate=CLOUD_RATES.get(language, CLOUD_RATE))
        if voice_language != language:
            return f"{language_name(voice_language)} cloud voice stood in for {language_name(language)}"
        return None

    async def _translate(self, text: str, language: LanguageTag) -> str | None:
        if self.translator is None:
            raise BackendUnavailable("No translate TTS")
        code = TRANSLATE_TTS_CODES[language]
        await self.translator.speak(text, code)
        if code != base_language(language):
            return f"translate TTS read {language_name(language)} with language code {code!r}"
        return None

    async def _platform_with_fallbacks(self, text: str, language: LanguageTag) -> str | None:
        if self.synthesizer is None:
            raise BackendUnavailable("No platform speech synthesis")
        candidates = PLATFORM_FALLBACKS.get(language, [language])
        handle = self.resolver.find_native(candidates)
        if handle is None:
            raise NoVoiceAvailable(f"No platform voice for any of {candidates}")
        await self.synthesizer.speak(text, handle.voice, rate=platform_rate(language))
        if handle.language != language:
            return f"{language_name(handle.language)} voice stood in for {language_name(language)}"
        return None

    async def _announce(self, language: LanguageTag) -> str | None:
        name = language_name(language)
        message = f"{name} text detected, but no {name} voice is available."
        await self._platform(message, DEFAULT_LANGUAGE, rate=ANNOUNCEMENT_RATE)
        return f"no {name} voice, spoke an English notice instead"

    async def _related(self, text: str, language: LanguageTag, related: LanguageTag) -> str | None:
        await self._platform(text, related, rate=platform_rate(language), native_only=True)
        return f"{language_name(related)} voice read {language_name(language)} text"

    async def _transliterated(self, text: str, language: LanguageTag) -> str | None:
        latin = transliterate(text, language)
        logger.debug("Transliterated %s: %r", language, latin[:50])
        await self._platform(latin, DEFAULT_LANGUAGE, rate=platform_rate(language))
        return f"{language_name(language)} transliterated for an English voice"

    # --- cascades ---

    def plan(self, text: str, language: LanguageTag) -> list[Attempt]:
        """Ordered cascade for this language."""
        if language in INDIC_LANGUAGES and not self.resolver.has_native_voice(language):
            related = RELATED_LANGUAGE.get(language)
            attempts = [Attempt("cloud", lambda: self._cloud(text, language))]
            if related is not None:
                attempts.append(Attempt("platform-related", lambda: self._related(text, language, related)))
            attempts.append(Attempt("transliteration", lambda: self._transliterated(text, language)))
            return attempts

        if language in ARABIC_LANGUAGES:
            return [
                Attempt("translate", lambda: self._translate(text, language)),
                Attempt("cloud", lambda: self._cloud(text, language)),
                Attempt("platform", lambda: self._platform_with_fallbacks(text, language)),
                Attempt("announcement", lambda: self._announce(language)),
            ]

        attempts = []
        if self.cloud is not None and self.cloud.voice_for(language) is not None:
            attempts.append(Attempt("cloud", lambda: self._cloud(text, language)))
        attempts.append(Attempt("platform", lambda: self._platform(text, language)))
        return attempts

    async def speak_segment(self, text: str, language: LanguageTag) -> SegmentResult:
        """Deliver one segment; resolves on success, degradation or exhaustion."""
        segment = Segment(text=text, language=language)
        attempts = self.plan(text, language)
        logger.debug("Cascade for %s: %s", language, [a.name for a in attempts])
        return await first_success(segment, attempts)

    def cancel(self) -> None:
        """Stop whatever backend is producing audio. Safe when idle."""
        for backend in (self.synthesizer, self.cloud, self.translator):
            if backend is not None:
                backend.cancel()
