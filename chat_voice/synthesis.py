"""Local platform speech synthesis through pyttsx3 (SAPI5, NSSpeech, eSpeak)."""

import asyncio
import logging
import threading

import pyttsx3

from chat_voice.constants import PLATFORM_BASE_WPM
from chat_voice.errors import SynthesisError
from chat_voice.models import PlatformVoice

logger = logging.getLogger(__name__)


def _decode_languages(raw) -> list[str]:
    """pyttsx3 drivers report languages as str or bytes (eSpeak prefixes a priority byte)."""
    langs = []
    for item in raw or []:
        if isinstance(item, (bytes, bytearray)):
            item = bytes(item).decode("utf-8", errors="ignore").lstrip("\x00\x01\x02\x03\x04\x05")
        item = str(item).strip()
        if item:
            langs.append(item)
    return langs


class Pyttsx3Synthesizer:
    """Platform voices and utterances backed by a single pyttsx3 engine.

    Utterances run in a worker thread so the event loop is never blocked;
    `cancel()` interrupts the one in progress.
    """

    def __init__(self, driver_name: str | None = None):
        self.driver_name = driver_name
        self._engine = None
        self._lock = threading.Lock()

    def _get_engine(self):
        if self._engine is None:
            try:
                self._engine = pyttsx3.init(self.driver_name)
            except Exception as e:
                raise SynthesisError(f"pyttsx3 engine unavailable: {e}") from e
        return self._engine

    def get_voices(self) -> list[PlatformVoice]:
        try:
            engine = self._get_engine()
        except SynthesisError as e:
            logger.warning("%s", e)
            return []
        current = engine.getProperty("voice")
        voices = []
        for v in engine.getProperty("voices") or []:
            voice_id = getattr(v, "id", None)
            name = getattr(v, "name", None) or voice_id or ""
            langs = _decode_languages(getattr(v, "languages", None))
            voices.append(PlatformVoice(
                name=name,
                lang=langs[0] if langs else "",
                default=voice_id is not None and voice_id == current,
                id=voice_id,
            ))
        return voices

    def _speak_blocking(self, text: str, voice: PlatformVoice | None, rate: float, volume: float) -> None:
        with self._lock:
            engine = self._get_engine()
            try:
                if voice is not None and voice.id:
                    engine.setProperty("voice", voice.id)
                engine.setProperty("rate", int(PLATFORM_BASE_WPM * rate))
                engine.setProperty("volume", max(0.0, min(1.0, volume)))
                engine.say(text)
                engine.runAndWait()
            except Exception as e:
                raise SynthesisError(f"Platform synthesis failed: {e}") from e

    async def speak(
        self,
        text: str,
        voice: PlatformVoice | None,
        *,
        rate: float = 1.0,
        pitch: float = 1.0,
        volume: float = 1.0,
    ) -> None:
        """Speak text and return once the utterance ends or is cancelled.

        Pitch is accepted for interface parity; the OS drivers ignore it.
        """
        logger.debug("Platform speak with %s: %r", voice.name if voice else "default voice", text[:50])
        await asyncio.to_thread(self._speak_blocking, text, voice, rate, volume)

    def cancel(self) -> None:
        if self._engine is None:
            return
        try:
            self._engine.stop()
        except Exception as e:
            logger.debug("Engine stop failed: %s", e)
