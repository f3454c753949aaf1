from typing import List

from tietone.performance import Chord, Rest, Step, Tone

_G_MINOR_SEVENTH = ((3, "G"), (3, "B-"), (4, "F"))
_D_MINOR_SEVENTH = ((3, "D"), (3, "F"), (4, "C"))
_E_FLAT_FIFTH = ((3, "E-"), (3, "B-"))
_B_FLAT_FIFTH = ((2, "B-"), (3, "F"))

# count-in tone, then the left-hand pattern
ACCOMPANIMENT: List[Step] = [
    Tone("C", 0, "4"),
    Chord(((3, "G"), (3, "B-")), 3, "8"),
    Rest("8"),
    Rest("4"),
    Chord(_G_MINOR_SEVENTH, 3, "8"),
    Rest("16"),
    Chord(_G_MINOR_SEVENTH, 3, "16"),
    Rest("8"),
    Chord(_D_MINOR_SEVENTH, 3, "8"),
    Rest("8"),
    Chord(_D_MINOR_SEVENTH, 3, "8"),
    Chord(_D_MINOR_SEVENTH, 3, "8"),
    Rest("8"),
    Chord(_D_MINOR_SEVENTH, 3, "8"),
    Rest("8"),
    Rest("4"),
    Chord(_E_FLAT_FIFTH, 3, "8"),
    Rest("8"),
    Rest("8"),
    Chord(_E_FLAT_FIFTH, 3, "8"),
    Chord(_E_FLAT_FIFTH, 3, "8"),
    Rest("16"),
    Chord(_E_FLAT_FIFTH, 3, "16"),
    Rest("8"),
    Chord(_B_FLAT_FIFTH, 3, "8"),
    Rest("8"),
    Chord(_B_FLAT_FIFTH, 3, "8"),
    Chord(_B_FLAT_FIFTH, 3, "8"),
    Rest("8"),
    Chord(_B_FLAT_FIFTH, 3, "8"),
    Rest("16"),
    Chord(((3, "F+"), (4, "C")), 3, "16"),
    Rest("4"),
]
