import logging
import math
import re
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from .errors import InvalidDurationFormat, InvalidEventSpec, UnknownNoteName
from .types import DurationLike, DurationToken, NoteEvent, NoteName

_LOG = logging.getLogger("tietone.notation")

A4_FREQUENCY = 442.0  # tuned high on purpose, keep it
REFERENCE_OCTAVE = 4
DOT_MARKER = "."
TIE_MARKER = "~"
_DENOMINATOR = re.compile(r"[0-9]+")

SEMITONE_CLASSES: Mapping[NoteName, int] = MappingProxyType(
    {
        NoteName.C: 0,
        NoteName.C_SHARP: 1,
        NoteName.D_FLAT: 1,
        NoteName.D: 2,
        NoteName.D_SHARP: 3,
        NoteName.E_FLAT: 3,
        NoteName.E: 4,
        NoteName.F: 5,
        NoteName.F_SHARP: 6,
        NoteName.G_FLAT: 6,
        NoteName.G: 7,
        NoteName.G_SHARP: 8,
        NoteName.A_FLAT: 8,
        NoteName.A: 9,
        NoteName.A_SHARP: 10,
        NoteName.B_FLAT: 10,
        NoteName.B: 11,
    }
)

NoteLike = Union[NoteName, str]


def note_name_from_token(token: NoteLike) -> NoteName:
    if isinstance(token, NoteName):
        return token
    try:
        return NoteName(token)
    except ValueError:
        raise UnknownNoteName(str(token)) from None


def semitone_class(note_name: NoteLike) -> int:
    return SEMITONE_CLASSES[note_name_from_token(note_name)]


def note_token(note_name: object) -> str:
    return note_name.value if isinstance(note_name, NoteName) else str(note_name)


def duration_text(token: DurationLike) -> str:
    """Return the token as text; whole numbers such as ``8`` or ``8.0`` read as ``"8"``."""
    if isinstance(token, str):
        return token
    if isinstance(token, bool):
        raise InvalidDurationFormat(repr(token))
    if isinstance(token, int):
        return str(token)
    if isinstance(token, float) and token.is_integer():
        return str(int(token))
    raise InvalidDurationFormat(repr(token))


def parse_duration(token: DurationLike) -> DurationToken:
    """Split a token such as ``"4.~"`` into its denominator and markers.

    ``.`` and ``~`` are pure markers and may appear anywhere in the token;
    what remains after removing them must be plain digits, so ``"1_6"``,
    ``" 4 "`` and ``"1e1"`` are rejected.
    """
    text = duration_text(token)
    dotted = DOT_MARKER in text
    tied = TIE_MARKER in text
    remainder = text.replace(DOT_MARKER, "").replace(TIE_MARKER, "")
    if not _DENOMINATOR.fullmatch(remainder):
        raise InvalidDurationFormat(text)
    denominator = float(remainder)
    if denominator <= 0:
        raise InvalidDurationFormat(text)
    return DurationToken(denominator=denominator, dotted=dotted, tied=tied)


def is_tied(token: DurationLike) -> bool:
    return isinstance(token, str) and TIE_MARKER in token


def beat_seconds(bpm: float) -> float:
    if not (bpm > 0 and math.isfinite(bpm)):
        raise ValueError(f"BPM must be positive, got {bpm!r}")
    return 60.0 / bpm


def duration_seconds(token: DurationLike, bpm: float, strict: bool = False) -> float:
    beat = beat_seconds(bpm)
    try:
        parsed = parse_duration(token)
    except InvalidDurationFormat as exc:
        if strict:
            raise
        _LOG.error("%s; treating it as 0 seconds", exc)
        return 0.0
    seconds = (4.0 / parsed.denominator) * beat
    if parsed.dotted:
        seconds *= 1.5
    return seconds


def frequency_hz(octave: int, note_name: NoteLike, strict: bool = False) -> float:
    try:
        note_class = semitone_class(note_name)
    except UnknownNoteName as exc:
        if strict:
            raise
        _LOG.error("%s; rendering it at 0 Hz", exc)
        return 0.0
    semitone_offset = note_class - SEMITONE_CLASSES[NoteName.A]
    octave_diff = octave - REFERENCE_OCTAVE
    return A4_FREQUENCY * math.pow(2.0, (semitone_offset + octave_diff * 12) / 12.0)


def parse_octave(raw: object, default: int) -> int:
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return default
    return default


def event_from_fields(fields: Union[NoteEvent, Sequence[object]], default_octave: int = REFERENCE_OCTAVE) -> NoteEvent:
    """Build a NoteEvent from a ``(duration, note_name, octave)`` triple."""
    if isinstance(fields, NoteEvent):
        return fields
    if isinstance(fields, str) or len(fields) < 3:
        raise InvalidEventSpec(fields, expected=3)
    duration, note_name, octave = fields[0], fields[1], fields[2]
    if not isinstance(duration, (str, int, float)):
        duration = str(duration)
    return NoteEvent(
        duration=duration,
        note_name=note_token(note_name),
        octave=parse_octave(octave, default_octave),
    )
