import logging
import math
import os
from typing import Iterable, Optional, Sequence

from pydub import AudioSegment
from pydub.playback import play

from tietone.music.synthesis import (
    DEFAULT_SAMPLE_RATE,
    buffer_to_segment,
    render_chord,
    render_tied_sequence,
    render_tone,
)
from tietone.music.types import DurationLike, SampleBuffer
from tietone.performance import Step, render_performance

DEFAULT_BPM = 150.0

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"", "0", "false", "no", "off"}


class Player:
    """Renders notation with the configured rate and tempo and plays the result."""

    def __init__(
        self,
        sample_rate: Optional[int] = None,
        bpm: Optional[float] = None,
        strict: Optional[bool] = None,
        phase_continuous: Optional[bool] = None,
    ) -> None:
        self.sample_rate = sample_rate if sample_rate is not None else self._load_sample_rate()
        self.bpm = bpm if bpm is not None else self._load_bpm()
        self.strict = strict if strict is not None else self._load_flag("TIETONE_STRICT")
        self.phase_continuous = (
            phase_continuous if phase_continuous is not None else self._load_flag("TIETONE_PHASE_CONTINUOUS")
        )
        if not (self.sample_rate > 0 and math.isfinite(self.sample_rate)):
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate!r}")
        if not (self.bpm > 0 and math.isfinite(self.bpm)):
            raise ValueError(f"BPM must be positive, got {self.bpm!r}")
        self._log = logging.getLogger("tietone.player")

    @staticmethod
    def _load_sample_rate() -> int:
        raw_rate = os.getenv("TIETONE_SAMPLE_RATE")
        if not raw_rate:
            return DEFAULT_SAMPLE_RATE
        try:
            return int(raw_rate)
        except ValueError:
            raise RuntimeError(f"TIETONE_SAMPLE_RATE must be an integer, got {raw_rate!r}") from None

    @staticmethod
    def _load_bpm() -> float:
        raw_bpm = os.getenv("TIETONE_BPM")
        if not raw_bpm:
            return DEFAULT_BPM
        try:
            return float(raw_bpm)
        except ValueError:
            raise RuntimeError(f"TIETONE_BPM must be a number, got {raw_bpm!r}") from None

    @staticmethod
    def _load_flag(name: str) -> bool:
        raw_flag = os.getenv(name, "").strip().lower()
        if raw_flag in _TRUTHY:
            return True
        if raw_flag in _FALSY:
            return False
        raise RuntimeError(f"{name} must be one of on/off, true/false, yes/no or 1/0, got {raw_flag!r}")

    def tone(self, note_name: str, octave: int, duration: DurationLike) -> SampleBuffer:
        return render_tone(note_name, octave, duration, self.bpm, self.sample_rate, self.strict)

    def chord(self, notes: Sequence[Sequence[object]], default_octave: int, duration: DurationLike) -> SampleBuffer:
        return render_chord(notes, default_octave, duration, self.bpm, self.sample_rate, self.strict)

    def tied(self, events: Iterable[Sequence[object]]) -> SampleBuffer:
        return render_tied_sequence(
            events,
            self.bpm,
            self.sample_rate,
            strict=self.strict,
            phase_continuous=self.phase_continuous,
        )

    def perform(self, steps: Iterable[Step]) -> SampleBuffer:
        return render_performance(
            steps,
            self.bpm,
            self.sample_rate,
            strict=self.strict,
            phase_continuous=self.phase_continuous,
        )

    def to_segment(self, buffer: SampleBuffer) -> AudioSegment:
        return buffer_to_segment(buffer)

    def play(self, buffer: SampleBuffer) -> None:
        if len(buffer) == 0:
            self._log.info("Nothing to play.")
            return
        self._log.info("Playing %.2f seconds at %s Hz", buffer.duration, buffer.sample_rate)
        play(self.to_segment(buffer))
