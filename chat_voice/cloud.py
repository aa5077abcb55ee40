"""Cloud TTS backends (edge-tts named voices, translate endpoint) and audio playback."""

import asyncio
import io
import logging
import os
import subprocess
import tempfile
from urllib.parse import quote

import edge_tts
import httpx
from pydub import AudioSegment
from pydub.utils import ratio_to_db

from chat_voice.constants import (
    CLOUD_RATE,
    CLOUD_TTS_TIMEOUT,
    CLOUD_VOICES,
    FFPLAY,
    TRANSLATE_TTS_MAX_CHARS,
    TRANSLATE_TTS_TIMEOUT,
    TRANSLATE_TTS_URLS,
)
from chat_voice.errors import AudioPlaybackError, BackendUnavailable, CloudTTSError
from chat_voice.models import LanguageTag

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {"User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36"}


def _decode(data: bytes) -> AudioSegment:
    try:
        return AudioSegment.from_file(io.BytesIO(data))
    except Exception as e:
        raise AudioPlaybackError(f"Could not decode audio: {e}") from e


class AudioPlayer:
    """Play one clip at a time through an ffplay subprocess.

    Audio is decoded with pydub and written to a temporary WAV that is removed
    as soon as playback ends, fails or is stopped.
    """

    def __init__(self, ffplay: str = FFPLAY):
        self.ffplay = ffplay
        self._process: asyncio.subprocess.Process | None = None
        self._stopped = False

    @property
    def is_playing(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def play(self, data: bytes, volume: float = 1.0) -> None:
        audio = await asyncio.to_thread(_decode, data)
        if len(audio) == 0:
            raise AudioPlaybackError("Audio clip is empty")
        if volume != 1.0:
            audio = audio + ratio_to_db(max(volume, 0.01))

        fd, path = tempfile.mkstemp(suffix=".wav", prefix="chat_voice_")
        os.close(fd)
        try:
            await asyncio.to_thread(audio.export, path, format="wav")
            self._stopped = False
            try:
                process = await asyncio.create_subprocess_exec(
                    self.ffplay, "-nodisp", "-autoexit", "-hide_banner", "-loglevel", "error", path,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except OSError as e:
                raise AudioPlaybackError(f"Cannot start {self.ffplay}: {e}") from e

            self._process = process
            try:
                returncode = await process.wait()
            except asyncio.CancelledError:
                self._terminate(process)
                raise
            finally:
                self._process = None

            if returncode != 0 and not self._stopped:
                raise AudioPlaybackError(f"{self.ffplay} exited with status {returncode}")
        finally:
            os.remove(path)

    def _terminate(self, process) -> None:
        if process.returncode is None:
            try:
                process.terminate()
            except ProcessLookupError:
                pass

    def stop(self) -> None:
        self._stopped = True
        if self._process is not None:
            self._terminate(self._process)


def _percent(value: float) -> str:
    """Multiplier to edge-tts relative string: 0.9 → "-10%"."""
    return f"{round((value - 1) * 100):+d}%"


def _hertz(value: float) -> str:
    return f"{round((value - 1) * 100):+d}Hz"


class EdgeCloudTTS:
    """Named neural voices from the edge-tts service."""

    def __init__(self, player: AudioPlayer, voices: dict[LanguageTag, str] | None = None, enabled: bool = True):
        self.player = player
        self.voices = voices if voices is not None else CLOUD_VOICES
        self.enabled = enabled

    def voice_for(self, language: LanguageTag) -> str | None:
        return self.voices.get(language)

    async def synthesize(self, text: str, voice_name: str, *, rate: float = CLOUD_RATE,
                         pitch: float = 1.0, volume: float = 1.0) -> bytes:
        """Collect the MP3 stream for one utterance."""
        communicate = edge_tts.Communicate(
            text, voice_name, rate=_percent(rate), pitch=_hertz(pitch), volume=_percent(volume),
        )
        audio = bytearray()
        async for chunk in communicate.stream():
            if chunk["type"] == "audio":
                audio.extend(chunk["data"])
        return bytes(audio)

    async def speak(
        self,
        text: str,
        voice_name: str,
        *,
        rate: float = CLOUD_RATE,
        pitch: float = 1.0,
        volume: float = 1.0,
        timeout: float = CLOUD_TTS_TIMEOUT,
    ) -> None:
        """Fetch within `timeout` seconds, then play to the end.

        The timeout bounds the network fetch only; playback runs until the
        clip ends or `cancel()` is called.
        """
        if not self.enabled:
            raise BackendUnavailable("Cloud TTS disabled")
        logger.info("Cloud TTS: %s for %r", voice_name, text[:50])
        try:
            audio = await asyncio.wait_for(
                self.synthesize(text, voice_name, rate=rate, pitch=pitch, volume=volume),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise CloudTTSError(f"{voice_name} timed out after {timeout}s") from e
        except Exception as e:
            raise CloudTTSError(f"{voice_name} failed: {e}") from e

        if not audio:
            raise CloudTTSError(f"{voice_name} returned no audio")
        await self.player.play(audio)

    def cancel(self) -> None:
        self.player.stop()


class TranslateTTS:
    """Translation-service TTS endpoint reached through mirrored GET URLs."""

    def __init__(
        self,
        player: AudioPlayer,
        client: httpx.AsyncClient | None = None,
        urls: list[str] | None = None,
        timeout: float = TRANSLATE_TTS_TIMEOUT,
        enabled: bool = True,
    ):
        self.player = player
        self.urls = urls if urls is not None else TRANSLATE_TTS_URLS
        self.timeout = timeout
        self.enabled = enabled
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(headers=REQUEST_HEADERS, follow_redirects=True)
        return self._client

    def build_urls(self, text: str, lang_code: str) -> list[str]:
        text = text[:TRANSLATE_TTS_MAX_CHARS]
        return [u.format(text=quote(text, safe=""), lang=lang_code, length=len(text)) for u in self.urls]

    async def fetch(self, text: str, lang_code: str) -> bytes:
        """Audio from the first mirror that answers with a non-empty clip."""
        errors = []
        for i, url in enumerate(self.build_urls(text, lang_code), start=1):
            try:
                response = await self.client.get(url, timeout=self.timeout)
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.info("Translate TTS mirror %d/%d failed: %s", i, len(self.urls), e)
                errors.append(f"mirror {i}: {e!r}")
                continue
            content_type = response.headers.get("content-type", "")
            if not response.content or not content_type.startswith("audio/"):
                logger.info("Translate TTS mirror %d/%d returned %r, not audio", i, len(self.urls), content_type)
                errors.append(f"mirror {i}: no audio")
                continue
            return response.content
        raise CloudTTSError("All translate TTS mirrors failed: " + "; ".join(errors))

    async def speak(self, text: str, lang_code: str) -> None:
        if not self.enabled:
            raise BackendUnavailable("Translate TTS disabled")
        logger.info("Translate TTS (%s): %r", lang_code, text[:50])
        audio = await self.fetch(text, lang_code)
        await self.player.play(audio)

    def cancel(self) -> None:
        self.player.stop()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
