"""Tests for VoiceService playback sessions and speech input."""

import asyncio

import pytest

from chat_voice.errors import RecognitionUnavailable
from chat_voice.models import Outcome
from chat_voice.service import VoiceService

from conftest import FakeSynthesizer, FakeTranslator


class FakeRecognizer:
    """Returns a fixed transcript, or waits for stop() when holding."""

    def __init__(self, transcript="hello there", hold=False):
        self.transcript = transcript
        self.hold = hold
        self.language = None
        self.stopped = False
        self._done = asyncio.Event() if hold else None

    async def listen(self, language):
        self.language = language
        if self.hold:
            await self._done.wait()
            return ""
        return self.transcript

    def stop(self):
        self.stopped = True
        if self._done is not None:
            self._done.set()


async def _ticks(n=5):
    for _ in range(n):
        await asyncio.sleep(0)


def test_speak_english(catalog_voices, events):
    service = VoiceService(synthesizer=FakeSynthesizer(catalog_voices, events))
    result = asyncio.run(service.speak("Hello world"))
    assert result.outcome == Outcome.OK
    assert events == ["platform:start:Hello world", "platform:end:Hello world"]
    assert not service.is_speaking


def test_mixed_text_spoken_in_order(catalog_voices, events):
    service = VoiceService(
        synthesizer=FakeSynthesizer(catalog_voices, events),
        translator=FakeTranslator(events),
    )
    result = asyncio.run(service.speak("Hi! مرحبا كيف حالك؟"))
    assert [r.segment.language for r in result.segments] == ["en-US", "ar-SA"]
    assert [r.backend for r in result.segments] == ["platform", "translate"]
    assert events[0] == "platform:start:Hi!"
    assert events[-1] == "translate:start:مرحبا كيف حالك؟"


def test_explicit_language_skips_splitting(catalog_voices, events):
    service = VoiceService(synthesizer=FakeSynthesizer(catalog_voices, events))
    result = asyncio.run(service.speak("Hi! नमस्ते दुनिया", language="hi-IN"))
    assert len(result.segments) == 1
    assert result.segments[0].segment.language == "hi-IN"


def test_explicit_language_blank_text(catalog_voices, events):
    service = VoiceService(synthesizer=FakeSynthesizer(catalog_voices, events))
    result = asyncio.run(service.speak("   ", language="en-US"))
    assert result.segments == []
    assert events == []


def test_blank_text_without_language_speaks_nothing(catalog_voices, events):
    service = VoiceService(synthesizer=FakeSynthesizer(catalog_voices, events))
    result = asyncio.run(service.speak(" \n\t "))
    assert result.segments == []
    assert events == []


def test_no_voices_anywhere_resolves_unavailable(events):
    """Zero platform voices and no cloud: speak() still returns normally."""
    service = VoiceService(synthesizer=FakeSynthesizer([], events))
    result = asyncio.run(service.speak("Hello"))
    assert result.outcome == Outcome.UNAVAILABLE
    assert result.segments[0].failures


def test_new_speak_waits_for_previous_teardown(catalog_voices, events):
    """The second utterance starts only after the first has fully stopped."""
    synth = FakeSynthesizer(catalog_voices, events, hold={"first utterance"})
    service = VoiceService(synthesizer=synth)

    async def scenario():
        first = asyncio.ensure_future(service.speak("first utterance", "en-US"))
        await _ticks()
        assert service.is_speaking
        second = await service.speak("second utterance", "en-US")
        return await first, second

    first, second = asyncio.run(scenario())
    assert first.outcome == Outcome.CANCELLED
    assert second.outcome == Outcome.OK
    assert events.index("platform:end:first utterance") < events.index("platform:start:second utterance")
    assert events.count("platform:start:second utterance") == 1


def test_stop_all_cancels_active_speech(catalog_voices, events):
    synth = FakeSynthesizer(catalog_voices, events, hold={"long text"})
    service = VoiceService(synthesizer=synth)

    async def scenario():
        task = asyncio.ensure_future(service.speak("long text", "en-US"))
        await _ticks()
        service.stop_all()
        assert not service.is_speaking
        return await task

    result = asyncio.run(scenario())
    assert result.cancelled
    assert result.outcome == Outcome.CANCELLED
    assert "platform:cancel" in events
    assert events[-1] == "platform:end:long text"


def test_cancelling_speak_task_stops_backends(catalog_voices, events):
    """Cancelling the caller's task also stops the engine in its worker thread."""
    synth = FakeSynthesizer(catalog_voices, events, hold={"long text"})
    service = VoiceService(synthesizer=synth)

    async def scenario():
        task = asyncio.ensure_future(service.speak("long text", "en-US"))
        await _ticks()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert "platform:cancel" in events
    assert "platform:end:long text" in events
    assert not service.is_speaking


def test_stop_all_when_idle_is_noop(catalog_voices, events):
    service = VoiceService(synthesizer=FakeSynthesizer(catalog_voices, events))
    service.stop_all()
    service.stop_all()
    service.stop_speaking()
    assert events == []
    assert not service.is_speaking


def test_status(catalog_voices, events):
    service = VoiceService(synthesizer=FakeSynthesizer(catalog_voices, events))
    asyncio.run(service.speak("Hello world"))
    status = service.status()
    assert not status.is_speaking
    assert not status.is_listening
    assert status.cached_languages == ["en-US"]
    assert status.available_voices == len(catalog_voices)


def test_clear_voice_cache(catalog_voices, events):
    service = VoiceService(synthesizer=FakeSynthesizer(catalog_voices, events))
    asyncio.run(service.speak("Hello world"))
    service.clear_voice_cache()
    assert service.status().cached_languages == []


# --- speech input ---

def test_listening_unsupported():
    service = VoiceService()
    assert not service.is_supported()
    with pytest.raises(RecognitionUnavailable):
        asyncio.run(service.start_listening())


def test_listening_returns_transcript():
    recognizer = FakeRecognizer("hello there")
    service = VoiceService(recognizer=recognizer)
    assert service.is_supported()
    assert asyncio.run(service.start_listening("ur-PK")) == "hello there"
    assert recognizer.language == "ur-PK"
    assert not service.is_listening


def test_second_start_listening_stops():
    recognizer = FakeRecognizer(hold=True)
    service = VoiceService(recognizer=recognizer)

    async def scenario():
        first = asyncio.ensure_future(service.start_listening())
        await _ticks()
        assert service.is_listening
        second = await service.start_listening()
        return await first, second

    first, second = asyncio.run(scenario())
    assert (first, second) == ("", "")
    assert recognizer.stopped
    assert not service.is_listening
