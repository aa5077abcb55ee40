"""Exceptions raised by speech backends."""


class VoiceError(Exception):
    """Base class for every voice subsystem error."""


class BackendUnavailable(VoiceError):
    """A backend is disabled or its library/engine could not be started."""


class NoVoiceAvailable(VoiceError):
    """No usable voice exists for the requested language."""


class SynthesisError(VoiceError):
    """Platform speech synthesis failed."""


class CloudTTSError(VoiceError):
    """A cloud TTS request failed, timed out or returned no audio."""


class AudioPlaybackError(VoiceError):
    """Fetched audio could not be decoded or played."""


class RecognitionUnavailable(VoiceError):
    """No speech recognizer is configured."""
