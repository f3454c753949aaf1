"""Tests for single tones, chords and buffer hand-off."""

import math

import numpy as np
import pytest

from tietone.music.errors import EmptyChord, InvalidEventSpec, UnknownNoteName
from tietone.music.notation import duration_seconds, frequency_hz
from tietone.music.synthesis import buffer_to_segment, render_chord, render_tone, sample_count, sine_chord
from tietone.music.types import SampleBuffer


@pytest.mark.parametrize(
    "token, bpm, sample_rate",
    [("4", 150.0, 44100), ("8.", 120.0, 22050), ("12", 90.0, 8000), ("16", 133.0, 44100), ("2~", 60.0, 8)],
)
def test_tone_length_rounds_up(token: str, bpm: float, sample_rate: int) -> None:
    buffer = render_tone("A", 4, token, bpm, sample_rate)
    assert len(buffer) == math.ceil(sample_rate * duration_seconds(token, bpm))
    assert buffer.sample_rate == sample_rate


def test_sample_count_never_floors() -> None:
    assert sample_count(1.0 / 3.0, 10) == 4
    assert sample_count(2.0, 8) == 16
    assert sample_count(0.0, 44100) == 0


def test_tone_follows_sine_formula() -> None:
    buffer = render_tone("C", 4, "4", 60.0, 8000)
    frequency = frequency_hz(4, "C")
    assert buffer.samples[0] == 0.0
    for i in (1, 17, 999, 7999):
        assert buffer.samples[i] == pytest.approx(math.sin(2 * math.pi * frequency * i / 8000), abs=1e-9)


def test_tone_is_deterministic() -> None:
    first = render_tone("F+", 3, "8.", 150.0, 22050)
    second = render_tone("F+", 3, "8.", 150.0, 22050)
    np.testing.assert_array_equal(first.samples, second.samples)


def test_tone_is_not_normalised_or_faded() -> None:
    buffer = render_tone("A", 4, "4", 60.0, 44100)
    assert np.max(np.abs(buffer.samples)) == pytest.approx(1.0, abs=1e-3)
    assert np.max(np.abs(buffer.samples)) <= 1.0


def test_unknown_note_renders_silence() -> None:
    buffer = render_tone("H", 4, "4", 60.0, 100)
    assert len(buffer) == 100
    assert not np.any(buffer.samples)


def test_bad_duration_renders_empty_buffer() -> None:
    assert len(render_tone("A", 4, "four", 60.0, 100)) == 0


def test_sample_rate_must_be_positive() -> None:
    with pytest.raises(ValueError):
        render_tone("A", 4, "4", 60.0, 0)


def test_buffers_are_read_only() -> None:
    buffer = render_tone("A", 4, "4", 60.0, 100)
    with pytest.raises(ValueError):
        buffer.samples[0] = 0.5


def test_buffer_copies_its_input() -> None:
    raw = np.zeros(4)
    buffer = SampleBuffer(raw, 4)
    raw[0] = 1.0
    assert buffer.samples[0] == 0.0
    assert buffer.duration == 1.0


def test_concatenate_checks_sample_rate() -> None:
    joined = SampleBuffer.concatenate([SampleBuffer(np.ones(2), 8), SampleBuffer(np.zeros(3), 8)], 8)
    np.testing.assert_array_equal(joined.samples, [1.0, 1.0, 0.0, 0.0, 0.0])
    assert len(SampleBuffer.concatenate([], 8)) == 0
    with pytest.raises(ValueError):
        SampleBuffer.concatenate([SampleBuffer(np.ones(2), 16)], 8)


def test_chord_of_identical_notes_equals_the_tone() -> None:
    chord = render_chord([(4, "A"), ("4", "A")], 4, "4", 150.0, 8000)
    tone = render_tone("A", 4, "4", 150.0, 8000)
    np.testing.assert_array_equal(chord.samples, tone.samples)


def test_chord_averages_voices() -> None:
    chord = render_chord([(4, "C"), (4, "E"), (4, "G")], 4, "8", 120.0, 8000)
    voices = [render_tone(name, 4, "8", 120.0, 8000).samples for name in ("C", "E", "G")]
    np.testing.assert_allclose(chord.samples, sum(voices) / 3, atol=1e-12)
    assert np.max(np.abs(chord.samples)) <= 1.0
    assert len(chord) == math.ceil(8000 * duration_seconds("8", 120.0))


def test_chord_octave_falls_back_to_default() -> None:
    defaulted = render_chord([("", "G"), (None, "B-"), ("x", "F")], 3, "8", 150.0, 8000)
    explicit = render_chord([(3, "G"), (3, "B-"), (3, "F")], 3, "8", 150.0, 8000)
    np.testing.assert_array_equal(defaulted.samples, explicit.samples)


def test_chord_with_unknown_note_keeps_its_share_silent() -> None:
    chord = render_chord([(4, "A"), (4, "H")], 4, "4", 60.0, 1000)
    tone = render_tone("A", 4, "4", 60.0, 1000)
    np.testing.assert_allclose(chord.samples, tone.samples / 2, atol=1e-12)


def test_chord_unknown_note_raises_when_strict() -> None:
    with pytest.raises(UnknownNoteName):
        render_chord([(4, "A"), (4, "H")], 4, "4", 60.0, 1000, strict=True)


def test_empty_chord_is_rejected() -> None:
    with pytest.raises(EmptyChord):
        render_chord([], 4, "4", 60.0, 1000)


def test_chord_entries_need_octave_and_name() -> None:
    with pytest.raises(InvalidEventSpec):
        render_chord([(4, "A"), ("C",)], 4, "4", 60.0, 1000)


def test_buffer_to_segment_is_16_bit_mono() -> None:
    buffer = render_tone("A", 4, "8", 120.0, 8000)
    segment = buffer_to_segment(buffer)
    assert segment.frame_rate == 8000
    assert segment.channels == 1
    assert segment.sample_width == 2
    pcm = segment.get_array_of_samples()
    assert len(pcm) == len(buffer)
    assert max(abs(value) for value in pcm) <= 32767
    assert pcm[0] == 0


def test_empty_chord_from_a_generator_is_rejected() -> None:
    with pytest.raises(EmptyChord):
        render_chord((note for note in []), 4, "4", 60.0, 8)
    with pytest.raises(EmptyChord):
        sine_chord([], 1.0, 8)


def test_chord_accepts_any_iterable_of_pairs() -> None:
    from_generator = render_chord(((4, name) for name in ("C", "E")), 4, "4", 60.0, 8)
    from_list = render_chord([(4, "C"), (4, "E")], 4, "4", 60.0, 8)
    np.testing.assert_array_equal(from_generator.samples, from_list.samples)


def test_whole_number_durations_match_their_tokens() -> None:
    expected = render_tone("A", 4, "4", 60.0, 8).samples
    np.testing.assert_array_equal(render_tone("A", 4, 4, 60.0, 8).samples, expected)
    np.testing.assert_array_equal(render_chord([(4, "A")], 4, 4.0, 60.0, 8).samples, expected)


@pytest.mark.parametrize("bpm, sample_rate", [(float("nan"), 8), (float("inf"), 8), (60.0, float("nan"))])
def test_non_finite_rate_or_tempo_is_rejected(bpm: float, sample_rate: float) -> None:
    with pytest.raises(ValueError, match="must be positive"):
        render_tone("A", 4, "4", bpm, sample_rate)  # type: ignore[arg-type]
