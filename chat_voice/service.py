"""VoiceService: one cancelable speak() at a time, plus status and recognition."""

import asyncio
import logging
from typing import Protocol

from chat_voice.constants import DEFAULT_LANGUAGE
from chat_voice.dispatcher import TTSDispatcher
from chat_voice.errors import RecognitionUnavailable
from chat_voice.models import LanguageTag, PlaybackSession, Segment, SpeechResult, VoiceStatus
from chat_voice.splitter import split_segments
from chat_voice.voices import VoiceResolver

logger = logging.getLogger(__name__)


class Recognizer(Protocol):
    async def listen(self, language: LanguageTag) -> str: ...

    def stop(self) -> None: ...


class VoiceService:
    """Speech output and input for a chat UI.

    Construct one per UI and pass it where speech is needed. Each instance owns
    its voice cache and its single playback slot: starting `speak()` stops the
    utterance in progress and waits for its teardown before producing audio,
    so two utterances never overlap.
    """

    def __init__(self, synthesizer=None, cloud=None, translator=None, recognizer: Recognizer | None = None):
        self.resolver = VoiceResolver(synthesizer)
        self.dispatcher = TTSDispatcher(self.resolver, synthesizer, cloud, translator)
        self.recognizer = recognizer
        self.is_listening = False
        self._session: PlaybackSession | None = None
        self._task: asyncio.Task | None = None
        self._draining: set[asyncio.Task] = set()

    @classmethod
    def default(cls, offline: bool = False) -> "VoiceService":
        """Production stack: pyttsx3 voices, edge-tts, translate endpoint over httpx."""
        from chat_voice.cloud import AudioPlayer, EdgeCloudTTS, TranslateTTS
        from chat_voice.synthesis import Pyttsx3Synthesizer

        player = AudioPlayer()
        return cls(
            synthesizer=Pyttsx3Synthesizer(),
            cloud=EdgeCloudTTS(player, enabled=not offline),
            translator=TranslateTTS(player, enabled=not offline),
        )

    @property
    def is_speaking(self) -> bool:
        return self._session is not None and self._session.active

    # --- speech output ---

    async def speak(self, text: str, language: LanguageTag | None = None) -> SpeechResult:
        """Speak text, segment by segment, and return how it went.

        With an explicit language the whole text is one segment. Never raises
        on backend failure or on cancellation by `stop_all()` / a newer `speak()`.
        """
        self.stop_all()
        draining = list(self._draining)

        if not text.strip():
            segments = []
        elif language:
            segments = [Segment(text=text, language=language)]
        else:
            segments = split_segments(text)

        session = PlaybackSession(active=True)
        task = asyncio.ensure_future(self._play(session, segments, draining))
        self._session, self._task = session, task
        try:
            await task
        except asyncio.CancelledError:
            if not session.cancel_requested:
                # Cancelled by the caller, not by stop_all(): silence the backends too
                session.cancel_requested = True
                self.dispatcher.cancel()
                raise
        finally:
            session.active = False
            if self._session is session:
                self._session, self._task = None, None
        return session.result()

    async def _play(self, session: PlaybackSession, segments: list[Segment], draining: list[asyncio.Task]) -> None:
        if draining:
            await asyncio.wait(draining)
        for index, segment in enumerate(segments):
            if session.cancel_requested:
                break
            session.current_segment_index = index
            logger.info("Speaking segment %d/%d (%s)", index + 1, len(segments), segment.language)
            result = await self.dispatcher.speak_segment(segment.text, segment.language)
            session.results.append(result)

    def stop_all(self) -> None:
        """Cancel the active utterance and every backend. No-op when idle."""
        session, task = self._session, self._task
        if session is None:
            return
        logger.info("Stopping all audio")
        session.cancel_requested = True
        session.active = False
        self.dispatcher.cancel()
        if task is not None and not task.done():
            task.cancel()
            self._draining.add(task)
            task.add_done_callback(self._draining.discard)
        self._session, self._task = None, None

    def stop_speaking(self) -> None:
        self.stop_all()

    # --- speech input ---

    def is_supported(self) -> bool:
        return self.recognizer is not None

    async def start_listening(self, language: LanguageTag = DEFAULT_LANGUAGE) -> str:
        """Transcribe one utterance. Calling again while listening stops and returns ""."""
        if self.recognizer is None:
            raise RecognitionUnavailable("Speech recognition not supported")
        if self.is_listening:
            self.stop_listening()
            return ""
        self.is_listening = True
        try:
            return await self.recognizer.listen(language)
        finally:
            self.is_listening = False

    def stop_listening(self) -> None:
        if self.recognizer is not None and self.is_listening:
            self.recognizer.stop()
            self.is_listening = False

    # --- diagnostics ---

    def status(self) -> VoiceStatus:
        return VoiceStatus(
            is_speaking=self.is_speaking,
            is_listening=self.is_listening,
            cached_languages=self.resolver.cached_languages(),
            available_voices=len(self.resolver.available_voices()),
        )

    def clear_voice_cache(self, language: LanguageTag | None = None) -> None:
        self.resolver.clear(language)

    async def aclose(self) -> None:
        self.stop_all()
        if self._draining:
            await asyncio.wait(list(self._draining))
        translator = self.dispatcher.translator
        if translator is not None and hasattr(translator, "aclose"):
            await translator.aclose()
