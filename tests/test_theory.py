import pytest

import chordflow.chords
import chordflow.intervals
import chordflow.theory


def test_c_major_scale_chords () -> None:

	"""C major yields the seven diatonic triads with the major quality pattern."""

	chords = chordflow.theory.scale_chords("C", "major")

	assert [c.symbol for c in chords] == ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]
	assert [c.quality for c in chords] == ["", "m", "m", "", "", "m", "dim"]
	assert [c.scale_degree for c in chords] == [1, 2, 3, 4, 5, 6, 7]
	assert all(c.duration_beats == 4 for c in chords)


def test_minor_scale_qualities () -> None:

	"""Natural minor puts minor on 1, 4, 5 and diminished on 2."""

	chords = chordflow.theory.scale_chords("A", "minor")

	assert [c.symbol for c in chords] == ["Am", "Bdim", "C", "Dm", "Em", "F", "G"]
	assert [c.roman_numeral for c in chords] == ["i", "ii°", "III", "iv", "v", "VI", "VII"]


def test_flat_key_is_spelled_with_flats () -> None:

	"""F major has a Bb, not an A#."""

	chords = chordflow.theory.scale_chords("F", "major")

	assert chords[3].root == "Bb"
	assert chords[3].pitch_classes == ["Bb", "D", "F"]


def test_sharp_key_spelling () -> None:

	"""E major spells its degrees with sharps."""

	assert chordflow.intervals.scale_notes("E") == ["E", "F#", "G#", "A", "B", "C#", "D#"]


@pytest.mark.parametrize("root, scale_type", [("H", "major"), ("C", "lydian"), ("", "major")])
def test_unresolvable_key_returns_empty (root: str, scale_type: str, caplog: pytest.LogCaptureFixture) -> None:

	"""An unknown root or scale gives no chords and logs a warning."""

	assert chordflow.theory.scale_chords(root, scale_type) == []
	assert "Cannot build scale" in caplog.text


@pytest.mark.parametrize("degree, quality, expected", [
	(2, "m7", "ii7"),
	(7, "dim", "vii°"),
	(5, "aug", "V+"),
	(4, "maj7", "IV7"),
	(1, "", "I"),
	(6, "m", "vi"),
	(9, "", "I"),
])
def test_roman_numeral (degree: int, quality: str, expected: str) -> None:

	"""Roman numerals follow case, diminished, augmented and seventh rules."""

	assert chordflow.theory.roman_numeral(degree, quality) == expected


def test_harmonic_function_table () -> None:

	"""Both scale types share one function table; out of range is tonic."""

	hf = chordflow.theory.HarmonicFunction

	assert chordflow.theory.harmonic_function(5, "major") is hf.DOMINANT
	assert chordflow.theory.harmonic_function(7, "minor") is hf.LEADING_TONE
	assert chordflow.theory.harmonic_function(0) is hf.TONIC
	assert hf.LEADING_TONE.value == "Leading Tone"


def test_edit_chord_rederives_notation () -> None:

	"""Changing quality keeps degree and function but recomputes the rest."""

	dm = chordflow.theory.scale_chords("C")[1]
	dm7 = chordflow.theory.edit_chord(dm, quality="m7")

	assert dm7.symbol == "Dm7"
	assert dm7.pitch_classes == ["D", "F", "A", "C"]
	assert dm7.roman_numeral == "ii7"
	assert dm7.scale_degree == 2
	assert dm7.harmonic_function is chordflow.theory.HarmonicFunction.SUPERTONIC
	assert dm.symbol == "Dm"


def test_edit_chord_slash_bass () -> None:

	"""A slash bass goes first; an empty bass removes it again."""

	c = chordflow.theory.scale_chords("C")[0]

	inverted = chordflow.theory.edit_chord(c, bass="E")
	assert inverted.symbol == "C/E"
	assert inverted.pitch_classes == ["E", "G", "C"]

	foreign = chordflow.theory.edit_chord(c, bass="Bb")
	assert foreign.pitch_classes == ["Bb", "C", "E", "G"]

	plain = chordflow.theory.edit_chord(inverted, bass="")
	assert plain.symbol == "C"
	assert plain.bass_note is None


def test_edit_chord_rejects_unknown_quality () -> None:

	"""An unrecognised quality token is a precondition failure."""

	c = chordflow.theory.scale_chords("C")[0]

	with pytest.raises(ValueError, match="Unknown chord quality"):
		chordflow.theory.edit_chord(c, quality="xyz")


def test_chord_pitch_classes_extended () -> None:

	"""Extended qualities spell their upper tones by letter."""

	assert chordflow.chords.chord_pitch_classes("G", "7") == ["G", "B", "D", "F"]
	assert chordflow.chords.chord_pitch_classes("C", "maj9") == ["C", "E", "G", "B", "D"]
	assert chordflow.chords.chord_pitch_classes("B", "m7b5") == ["B", "D", "F", "A"]
	assert chordflow.chords.chord_pitch_classes("Eb", "") == ["Eb", "G", "Bb"]


def test_voice_upward_stacks_notes () -> None:

	"""Each voiced note sits above the previous one."""

	assert chordflow.chords.voice_upward(["B", "D", "F"]) == [71, 74, 77]
	assert chordflow.chords.voice_upward(["E", "G", "C"]) == [64, 67, 72]


def test_parse_note_rejects_garbage () -> None:

	"""Note names must start with a letter A-G."""

	with pytest.raises(ValueError):
		chordflow.chords.parse_note("X#")
