import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from tietone.music.notation import duration_seconds, frequency_hz
from tietone.music.synthesis import (
    DEFAULT_SAMPLE_RATE,
    chord_frequencies,
    merge_tied_events,
    render_segments,
    sine_chord,
    sine_tone,
)
from tietone.music.types import DurationLike, SampleBuffer

_LOG = logging.getLogger("tietone.performance")


@dataclass(frozen=True)
class Tone:
    note_name: str
    octave: int
    duration: DurationLike


@dataclass(frozen=True)
class Chord:
    notes: Tuple[Tuple[object, str], ...]  # (octave or None for default, note name)
    default_octave: int
    duration: DurationLike


@dataclass(frozen=True)
class Rest:
    duration: DurationLike


@dataclass(frozen=True)
class Tied:
    events: Tuple[Sequence[object], ...]


Step = Union[Tone, Chord, Rest, Tied]


def _render_timed(
    step: Step,
    bpm: float,
    sample_rate: int,
    strict: bool,
    phase_continuous: bool,
) -> Tuple[Optional[SampleBuffer], float]:
    if isinstance(step, Tied):
        segments = merge_tied_events(step.events, bpm, strict=strict)
        seconds = sum(segment.seconds for segment in segments)
        return render_segments(segments, sample_rate, strict, phase_continuous), seconds
    if isinstance(step, Tone):
        frequency = frequency_hz(step.octave, step.note_name, strict)
        seconds = duration_seconds(step.duration, bpm, strict)
        return sine_tone(frequency, seconds, sample_rate), seconds
    if isinstance(step, Chord):
        frequencies = chord_frequencies(step.notes, step.default_octave, strict)
        seconds = duration_seconds(step.duration, bpm, strict)
        return sine_chord(frequencies, seconds, sample_rate), seconds
    if isinstance(step, Rest):
        return None, duration_seconds(step.duration, bpm, strict)
    raise TypeError(f"Unsupported step {step!r}")


def step_seconds(step: Step, bpm: float, strict: bool = False) -> float:
    if isinstance(step, Tied):
        return sum(segment.seconds for segment in merge_tied_events(step.events, bpm, strict=strict))
    if isinstance(step, (Tone, Chord, Rest)):
        return duration_seconds(step.duration, bpm, strict)
    raise TypeError(f"Unsupported step {step!r}")


def render_step(
    step: Step,
    bpm: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    strict: bool = False,
    phase_continuous: bool = False,
) -> Optional[SampleBuffer]:
    return _render_timed(step, bpm, sample_rate, strict, phase_continuous)[0]


def render_performance(
    steps: Iterable[Step],
    bpm: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    strict: bool = False,
    phase_continuous: bool = False,
) -> SampleBuffer:
    """Lay a list of steps out on one timeline, the way a player would.

    Every step starts where the previous step's notated length ends. A
    sounding step cuts off whatever the step before it still had ringing;
    a rest lets it ring out.
    """
    placed: List[Tuple[int, SampleBuffer]] = []
    cursor = 0.0
    end = 0
    for step in steps:
        start = int(round(cursor * sample_rate))
        buffer, seconds = _render_timed(step, bpm, sample_rate, strict, phase_continuous)
        cursor += seconds
        if buffer is not None:
            placed.append((start, buffer))
            end = max(end, start + len(buffer))
        else:
            end = max(end, int(round(cursor * sample_rate)))

    timeline = np.zeros(end, dtype=np.float64)
    for start, buffer in placed:
        timeline[start : start + len(buffer)] = buffer.samples
    _LOG.info("Rendered %d sounding steps into %.2f seconds of audio", len(placed), end / sample_rate)
    return SampleBuffer(timeline, sample_rate)
