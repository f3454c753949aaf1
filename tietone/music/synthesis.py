import logging
import math
from typing import Iterable, List, Sequence, Union

import numpy as np
from pydub import AudioSegment

from .errors import EmptyChord, InvalidEventSpec
from .notation import (
    REFERENCE_OCTAVE,
    NoteLike,
    duration_seconds,
    event_from_fields,
    frequency_hz,
    is_tied,
    note_token,
    parse_octave,
)
from .types import ActiveSegment, DurationLike, Idle, NoteEvent, SampleBuffer, SegmentState

_LOG = logging.getLogger("tietone.synthesis")

DEFAULT_SAMPLE_RATE = 44100
IDLE = Idle()

EventFields = Union[NoteEvent, Sequence[object]]


def sample_count(seconds: float, sample_rate: int) -> int:
    # ceil, so the last fraction of a period is never cut off
    return int(math.ceil(sample_rate * seconds))


def _check_sample_rate(sample_rate: int) -> None:
    if not (sample_rate > 0 and math.isfinite(sample_rate)):
        raise ValueError(f"Sample rate must be positive, got {sample_rate!r}")


def _sine(frequency: float, count: int, sample_rate: int, start_index: int = 0) -> np.ndarray:
    indices = np.arange(start_index, start_index + count, dtype=np.float64)
    return np.sin(2.0 * np.pi * frequency * indices / sample_rate)


def sine_tone(frequency: float, seconds: float, sample_rate: int, start_index: int = 0) -> SampleBuffer:
    _check_sample_rate(sample_rate)
    return SampleBuffer(_sine(frequency, sample_count(seconds, sample_rate), sample_rate, start_index), sample_rate)


def sine_chord(frequencies: Sequence[float], seconds: float, sample_rate: int) -> SampleBuffer:
    """Average one sine per frequency, so the result stays in [-1, 1]."""
    if not frequencies:
        raise EmptyChord()
    _check_sample_rate(sample_rate)
    count = sample_count(seconds, sample_rate)
    total = np.zeros(count, dtype=np.float64)
    for frequency in frequencies:
        total += _sine(frequency, count, sample_rate)
    return SampleBuffer(total / len(frequencies), sample_rate)


def chord_frequencies(
    notes: Iterable[Sequence[object]],
    default_octave: int,
    strict: bool = False,
) -> List[float]:
    frequencies: List[float] = []
    for info in notes:
        if isinstance(info, str) or len(info) < 2:
            raise InvalidEventSpec(info, expected=2)
        octave = parse_octave(info[0], default_octave)
        frequencies.append(frequency_hz(octave, note_token(info[1]), strict))
    if not frequencies:
        raise EmptyChord()
    return frequencies


def render_tone(
    note_name: NoteLike,
    octave: int,
    duration: DurationLike,
    bpm: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    strict: bool = False,
) -> SampleBuffer:
    _check_sample_rate(sample_rate)
    seconds = duration_seconds(duration, bpm, strict)
    return sine_tone(frequency_hz(octave, note_name, strict), seconds, sample_rate)


def render_chord(
    notes: Iterable[Sequence[object]],
    default_octave: int,
    duration: DurationLike,
    bpm: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    strict: bool = False,
) -> SampleBuffer:
    """Render ``(octave, note_name)`` pairs as one averaged chord.

    Voices are averaged rather than summed, so each voice gets quieter as
    the chord grows.
    """
    frequencies = chord_frequencies(notes, default_octave, strict)
    _check_sample_rate(sample_rate)
    seconds = duration_seconds(duration, bpm, strict)
    return sine_chord(frequencies, seconds, sample_rate)


def merge_tied_events(
    events: Iterable[EventFields],
    bpm: float,
    default_octave: int = REFERENCE_OCTAVE,
    strict: bool = False,
) -> List[ActiveSegment]:
    """Fold a note list into the segments a tied render will play.

    Consecutive events merge while they share a pitch; an event without
    ``~`` closes the segment it belongs to.
    """
    segments: List[ActiveSegment] = []
    state: SegmentState = IDLE
    for fields in events:
        try:
            event = event_from_fields(fields, default_octave)
        except InvalidEventSpec as exc:
            if strict:
                raise
            _LOG.warning("%s; skipping it", exc)
            continue

        seconds = duration_seconds(event.duration, bpm, strict)
        if isinstance(state, ActiveSegment) and state.pitch == event.pitch:
            state = state.extend(seconds)
        else:
            if isinstance(state, ActiveSegment):
                segments.append(state)
            state = ActiveSegment(event.pitch, seconds)

        if not is_tied(event.duration):
            segments.append(state)
            state = IDLE

    if isinstance(state, ActiveSegment):
        segments.append(state)
    return segments


def render_segments(
    segments: Iterable[ActiveSegment],
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    strict: bool = False,
    phase_continuous: bool = False,
) -> SampleBuffer:
    """Render merged segments back to back.

    Each segment restarts its sine at phase 0 unless ``phase_continuous`` is
    set, in which case the sample index keeps running across segments.
    """
    _check_sample_rate(sample_rate)
    parts: List[SampleBuffer] = []
    offset = 0
    for segment in segments:
        frequency = frequency_hz(segment.pitch.octave, segment.pitch.note_name, strict)
        part = sine_tone(frequency, segment.seconds, sample_rate, offset if phase_continuous else 0)
        parts.append(part)
        offset += len(part)
    return SampleBuffer.concatenate(parts, sample_rate)


def render_tied_sequence(
    events: Iterable[EventFields],
    bpm: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    default_octave: int = REFERENCE_OCTAVE,
    strict: bool = False,
    phase_continuous: bool = False,
) -> SampleBuffer:
    """Render a melody, joining tied same-pitch notes into single tones."""
    _check_sample_rate(sample_rate)
    segments = merge_tied_events(events, bpm, default_octave, strict)
    return render_segments(segments, sample_rate, strict, phase_continuous)


def buffer_to_segment(buffer: SampleBuffer) -> AudioSegment:
    samples = (np.clip(buffer.samples, -1.0, 1.0) * 32767).astype(np.int16)
    return AudioSegment(
        samples.tobytes(),
        frame_rate=buffer.sample_rate,
        sample_width=2,
        channels=1,
    )
