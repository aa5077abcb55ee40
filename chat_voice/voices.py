"""Platform voice selection with a per-language consistency cache."""

import logging
from typing import Callable, Protocol

from chat_voice.detect import base_language
from chat_voice.models import LanguageTag, PlatformVoice, VoiceHandle

logger = logging.getLogger(__name__)


class VoiceCatalog(Protocol):
    def get_voices(self) -> list[PlatformVoice]: ...


def _name_has(*keywords: str) -> Callable[[PlatformVoice], bool]:
    def predicate(voice: PlatformVoice) -> bool:
        name = voice.name.lower()
        return any(k in name for k in keywords)
    return predicate


# Ordered quality tiers; the first tier with a matching candidate wins
VOICE_PRIORITY: list[tuple[str, Callable[[PlatformVoice], bool]]] = [
    ("quality", _name_has("neural", "premium", "enhanced")),
    ("microsoft", _name_has("microsoft", "aria", "guy", "jenny")),
    ("google", _name_has("google")),
    ("female", _name_has("female", "woman", "samantha", "victoria", "karen", "susan")),
    ("default", lambda v: v.default),
]
FALLBACK_RANK = len(VOICE_PRIORITY) + 1


def voice_matches(voice: PlatformVoice, language: LanguageTag) -> bool:
    """True when the voice's locale shares the base language of `language`."""
    return base_language(voice.lang) == base_language(language)


class VoiceResolver:
    """Pick the best platform voice per language and remember the choice.

    Once a language has a cached voice it keeps that voice until the cache is
    cleared, so the same language always sounds the same across calls. The
    generic default returned for a language with no matching voice is never
    cached: platform catalogs often finish loading after the first request.
    """

    def __init__(self, catalog: VoiceCatalog | None, priority=None):
        self.catalog = catalog
        self.priority = priority if priority is not None else VOICE_PRIORITY
        self._cache: dict[LanguageTag, VoiceHandle] = {}

    def available_voices(self) -> list[PlatformVoice]:
        if self.catalog is None:
            return []
        try:
            return list(self.catalog.get_voices())
        except Exception as e:
            logger.warning("Voice catalog unavailable: %s", e)
            return []

    def _rank(self, candidates: list[PlatformVoice]) -> tuple[PlatformVoice, int]:
        for rank, (tier, predicate) in enumerate(self.priority):
            for voice in candidates:
                if predicate(voice):
                    logger.debug("Voice tier %s matched %s", tier, voice.name)
                    return voice, rank
        return candidates[0], len(self.priority)

    def resolve(self, language: LanguageTag) -> VoiceHandle | None:
        """Cached voice for `language`, else the best match, else the default.

        Returns None only when the platform exposes no voices at all.
        """
        cached = self._cache.get(language)
        if cached is not None:
            return cached

        voices = self.available_voices()
        if not voices:
            logger.info("No platform voices available for %s", language)
            return None

        candidates = [v for v in voices if voice_matches(v, language)]
        if not candidates:
            default = next((v for v in voices if v.default), voices[0])
            logger.info("No %s voice installed, using default %s (not cached)", language, default.name)
            return VoiceHandle(voice=default, language=default.lang, rank=FALLBACK_RANK, is_fallback=True)

        voice, rank = self._rank(candidates)
        handle = VoiceHandle(voice=voice, language=language, rank=rank)
        self._cache[language] = handle
        logger.info("Selected and cached voice for %s: %s (%s)", language, voice.name, voice.lang)
        return handle

    def has_native_voice(self, language: LanguageTag) -> bool:
        if language in self._cache:
            return True
        return any(voice_matches(v, language) for v in self.available_voices())

    def find_native(self, languages: list[LanguageTag]) -> VoiceHandle | None:
        """First real (non-default) voice among `languages`, in order."""
        for language in languages:
            handle = self.resolve(language)
            if handle is not None and not handle.is_fallback:
                return handle
        return None

    def clear(self, language: LanguageTag | None = None) -> None:
        """Forget one cached language, or all of them."""
        if language is None:
            self._cache.clear()
            logger.info("Voice cache cleared")
        elif self._cache.pop(language, None) is not None:
            logger.info("Voice cache cleared for %s", language)

    def cached_languages(self) -> list[LanguageTag]:
        return list(self._cache)

    def voices_by_language(self) -> dict[str, list[str]]:
        """Voice names grouped by base language, for diagnostics."""
        grouped: dict[str, list[str]] = {}
        for voice in self.available_voices():
            grouped.setdefault(base_language(voice.lang), []).append(voice.name)
        return grouped
