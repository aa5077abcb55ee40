"""Data models for multilingual speech output."""

from dataclasses import dataclass, field
from enum import Enum

LanguageTag = str  # BCP-47-like, e.g. "ar-SA"


@dataclass(frozen=True)
class Segment:
    text: str
    language: LanguageTag


@dataclass(frozen=True)
class PlatformVoice:
    name: str
    lang: str              # locale as reported by the platform, e.g. "hi-IN" or "hi_IN"
    default: bool = False
    id: str | None = None  # engine-specific identifier, when different from name


@dataclass(frozen=True)
class VoiceHandle:
    voice: PlatformVoice
    language: LanguageTag
    rank: int              # lower is better; FALLBACK_RANK for the generic default
    is_fallback: bool = False

    @property
    def name(self) -> str:
        return self.voice.name


class Outcome(Enum):
    OK = "ok"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"
    CANCELLED = "cancelled"


@dataclass
class SegmentResult:
    segment: Segment
    outcome: Outcome
    backend: str | None = None     # name of the cascade step that delivered audio
    reason: str = ""               # why fidelity degraded, or why nothing played
    failures: list[str] = field(default_factory=list)


@dataclass
class SpeechResult:
    segments: list[SegmentResult] = field(default_factory=list)
    cancelled: bool = False

    @property
    def outcome(self) -> Outcome:
        """Aggregate outcome of the whole utterance."""
        if self.cancelled:
            return Outcome.CANCELLED
        delivered = [r for r in self.segments if r.outcome in (Outcome.OK, Outcome.DEGRADED)]
        if not delivered:
            return Outcome.UNAVAILABLE
        if len(delivered) < len(self.segments) or any(r.outcome == Outcome.DEGRADED for r in delivered):
            return Outcome.DEGRADED
        return Outcome.OK


class PlaybackState(Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    CANCELLED = "cancelled"


@dataclass
class PlaybackSession:
    active: bool = False
    current_segment_index: int = 0
    cancel_requested: bool = False
    results: list[SegmentResult] = field(default_factory=list)

    @property
    def state(self) -> PlaybackState:
        if self.cancel_requested:
            return PlaybackState.CANCELLED
        if self.active:
            return PlaybackState.SPEAKING
        return PlaybackState.IDLE

    def result(self) -> SpeechResult:
        return SpeechResult(segments=list(self.results), cancelled=self.cancel_requested)


@dataclass
class VoiceStatus:
    is_speaking: bool
    is_listening: bool
    cached_languages: list[LanguageTag]
    available_voices: int = 0
