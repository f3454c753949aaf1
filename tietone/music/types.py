from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

import numpy as np


class NoteName(Enum):
    C = "C"
    C_SHARP = "C+"
    D_FLAT = "D-"
    D = "D"
    D_SHARP = "D+"
    E_FLAT = "E-"
    E = "E"
    F = "F"
    F_SHARP = "F+"
    G_FLAT = "G-"
    G = "G"
    G_SHARP = "G+"
    A_FLAT = "A-"
    A = "A"
    A_SHARP = "A+"
    B_FLAT = "B-"
    B = "B"


DurationLike = Union[str, int, float]


@dataclass(frozen=True)
class DurationToken:
    denominator: float  # 4 = quarter, 8 = eighth, 12 = eighth triplet ...
    dotted: bool
    tied: bool


@dataclass(frozen=True)
class Pitch:
    note_name: str  # raw token, so C+ and D- stay distinct tones
    octave: int


@dataclass(frozen=True)
class NoteEvent:
    duration: DurationLike
    note_name: str
    octave: int

    @property
    def pitch(self) -> Pitch:
        return Pitch(self.note_name, self.octave)


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """Mono float samples in [-1, 1]; the array is copied and frozen on creation."""

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float64)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        return len(self) / self.sample_rate

    @classmethod
    def concatenate(cls, buffers: Iterable["SampleBuffer"], sample_rate: int) -> "SampleBuffer":
        parts = []
        for buffer in buffers:
            if buffer.sample_rate != sample_rate:
                raise ValueError(
                    f"Cannot join a {buffer.sample_rate} Hz buffer into a {sample_rate} Hz one."
                )
            parts.append(buffer.samples)
        if not parts:
            return cls(np.zeros(0), sample_rate)
        return cls(np.concatenate(parts), sample_rate)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class ActiveSegment:
    pitch: Pitch
    seconds: float

    def extend(self, seconds: float) -> "ActiveSegment":
        return ActiveSegment(self.pitch, self.seconds + seconds)


SegmentState = Union[Idle, ActiveSegment]
