"""Shared fixtures and fake backends for voice subsystem tests."""

import asyncio

import pytest

from chat_voice.errors import CloudTTSError, SynthesisError
from chat_voice.models import PlatformVoice


class FakeSynthesizer:
    """Platform synthesizer that records calls into a shared event log.

    Utterances whose text is in `hold` wait until `cancel()` is called, like a
    long sentence still being read out.
    """

    def __init__(self, voices=None, events=None, fail=False, hold=()):
        self.voices = list(voices or [])
        self.events = events if events is not None else []
        self.fail = fail
        self.hold = set(hold)
        self.spoken = []
        self._release = None

    def get_voices(self):
        return list(self.voices)

    async def speak(self, text, voice, *, rate=1.0, pitch=1.0, volume=1.0):
        self.events.append(f"platform:start:{text}")
        self.spoken.append((text, voice.name if voice else None, rate))
        try:
            if self.fail:
                raise SynthesisError("synthesis failed")
            if text in self.hold:
                self._release = asyncio.Event()
                await self._release.wait()
            else:
                await asyncio.sleep(0)
        finally:
            self.events.append(f"platform:end:{text}")

    def cancel(self):
        self.events.append("platform:cancel")
        if self._release is not None:
            self._release.set()


class FakeCloud:
    """Named-voice cloud backend."""

    def __init__(self, voices=None, events=None, fail=False):
        self.voices = voices if voices is not None else {"es-ES": "es-ES-ElviraNeural", "hi-IN": "hi-IN-SwaraNeural",
                                                          "gu-IN": "hi-IN-SwaraNeural", "ar-SA": "ar-SA-ZariyahNeural",
                                                          "ur-PK": "ur-PK-UzmaNeural"}
        self.events = events if events is not None else []
        self.fail = fail
        self.spoken = []

    def voice_for(self, language):
        return self.voices.get(language)

    async def speak(self, text, voice_name, *, rate=0.9, pitch=1.0, volume=1.0, timeout=10.0):
        self.events.append(f"cloud:start:{text}")
        self.spoken.append((text, voice_name, rate))
        await asyncio.sleep(0)
        if self.fail:
            raise CloudTTSError("cloud unreachable")
        self.events.append(f"cloud:end:{text}")

    def cancel(self):
        self.events.append("cloud:cancel")


class FakeTranslator:
    """Translate-endpoint backend."""

    def __init__(self, events=None, fail=False):
        self.events = events if events is not None else []
        self.fail = fail
        self.spoken = []

    async def speak(self, text, lang_code):
        self.events.append(f"translate:start:{text}")
        self.spoken.append((text, lang_code))
        await asyncio.sleep(0)
        if self.fail:
            raise CloudTTSError("all mirrors failed")

    def cancel(self):
        self.events.append("translate:cancel")


@pytest.fixture
def catalog_voices():
    """A small platform catalog resembling a desktop OS install."""
    return [
        PlatformVoice(name="Microsoft David - English (United States)", lang="en-US", default=True, id="david"),
        PlatformVoice(name="Microsoft Zira - English (United States)", lang="en-US", id="zira"),
        PlatformVoice(name="Google Deutsch", lang="de-DE", id="google-de"),
        PlatformVoice(name="Anna", lang="de-DE", id="anna"),
        PlatformVoice(name="Microsoft Hemant - Hindi (India)", lang="hi-IN", id="hemant"),
    ]


@pytest.fixture
def events():
    return []
