"""Notation parsing and sine synthesis for TieTone."""

from .errors import EmptyChord, InvalidDurationFormat, InvalidEventSpec, NotationError, UnknownNoteName
from .notation import duration_seconds, frequency_hz, parse_duration, semitone_class
from .synthesis import buffer_to_segment, merge_tied_events, render_chord, render_tied_sequence, render_tone
from .types import NoteEvent, NoteName, Pitch, SampleBuffer

__all__ = [
    "EmptyChord",
    "InvalidDurationFormat",
    "InvalidEventSpec",
    "NotationError",
    "NoteEvent",
    "NoteName",
    "Pitch",
    "SampleBuffer",
    "UnknownNoteName",
    "buffer_to_segment",
    "duration_seconds",
    "frequency_hz",
    "merge_tied_events",
    "parse_duration",
    "render_chord",
    "render_tied_sequence",
    "render_tone",
    "semitone_class",
]
