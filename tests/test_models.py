"""Tests for data models."""

from chat_voice.models import (
    Outcome,
    PlaybackSession,
    PlaybackState,
    PlatformVoice,
    Segment,
    SegmentResult,
    SpeechResult,
    VoiceHandle,
)


def _result(outcome, language="en-US"):
    return SegmentResult(segment=Segment(text="x", language=language), outcome=outcome)


def test_segment_is_hashable():
    assert Segment("Hi", "en-US") == Segment(text="Hi", language="en-US")
    assert len({Segment("Hi", "en-US"), Segment("Hi", "en-US")}) == 1


def test_voice_handle_name():
    voice = PlatformVoice(name="Microsoft Zira", lang="en-US")
    handle = VoiceHandle(voice=voice, language="en-US", rank=1)
    assert handle.name == "Microsoft Zira"
    assert not handle.is_fallback


def test_speech_result_all_ok():
    result = SpeechResult(segments=[_result(Outcome.OK), _result(Outcome.OK, "ar-SA")])
    assert result.outcome == Outcome.OK


def test_speech_result_degraded_when_any_degraded():
    result = SpeechResult(segments=[_result(Outcome.OK), _result(Outcome.DEGRADED, "gu-IN")])
    assert result.outcome == Outcome.DEGRADED


def test_speech_result_degraded_when_partly_unavailable():
    """Some audio played, some segment got none."""
    result = SpeechResult(segments=[_result(Outcome.OK), _result(Outcome.UNAVAILABLE, "ur-PK")])
    assert result.outcome == Outcome.DEGRADED


def test_speech_result_unavailable():
    result = SpeechResult(segments=[_result(Outcome.UNAVAILABLE)])
    assert result.outcome == Outcome.UNAVAILABLE


def test_empty_speech_result_is_unavailable():
    assert SpeechResult().outcome == Outcome.UNAVAILABLE


def test_cancelled_wins():
    result = SpeechResult(segments=[_result(Outcome.OK)], cancelled=True)
    assert result.outcome == Outcome.CANCELLED


def test_playback_session_states():
    session = PlaybackSession()
    assert session.state == PlaybackState.IDLE
    session.active = True
    assert session.state == PlaybackState.SPEAKING
    session.cancel_requested = True
    assert session.state == PlaybackState.CANCELLED


def test_playback_session_result_snapshot():
    session = PlaybackSession(active=True)
    session.results.append(_result(Outcome.OK))
    result = session.result()
    session.results.append(_result(Outcome.OK))
    assert len(result.segments) == 1
    assert not result.cancelled
