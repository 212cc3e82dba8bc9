import random
import typing

import pytest

import chordflow.composer
import chordflow.genres
import chordflow.song
import chordflow.theory


class ScriptedRng:

	"""Deterministic stand-in for random.Random: always picks the first item, never substitutes."""

	def __init__ (self, roll: float = 0.99) -> None:

		self.roll = roll


	def choice (self, seq: typing.Sequence[typing.Any]) -> typing.Any:

		return seq[0]


	def random (self) -> float:

		return self.roll


def test_generate_uses_a_known_structure () -> None:

	"""The section types follow one of the catalogued song forms."""

	sections = chordflow.composer.generate("C", "major", "pop", rng=random.Random(42))

	assert [s.type for s in sections] in chordflow.composer.SONG_STRUCTURES
	assert all(s.loop_count == 1 for s in sections)
	assert all(s.name == s.type.value for s in sections)


def test_generate_is_repeatable_with_a_seed () -> None:

	"""The same seed produces the same song."""

	a = chordflow.composer.generate("D", "minor", "emotional", rng=random.Random(7))
	b = chordflow.composer.generate("D", "minor", "emotional", rng=random.Random(7))

	assert [[c.symbol for c in s.chords] for s in a] == [[c.symbol for c in s.chords] for s in b]


def test_same_type_sections_share_progression_but_not_objects () -> None:

	"""Sections of the same type are deep-equal yet independent copies."""

	sections = chordflow.composer.generate("G", "major", "rock", rng=random.Random(3))
	choruses = [s for s in sections if s.type is chordflow.song.SectionType.CHORUS]

	assert len(choruses) >= 2
	assert choruses[0].chords == choruses[1].chords
	assert choruses[0].chords[0] is not choruses[1].chords[0]

	choruses[0].chords[0].pitch_classes.append("X")

	assert "X" not in choruses[1].chords[0].pitch_classes


def test_first_progression_mapped_through_scale () -> None:

	"""With a scripted rng the pop canon maps onto C major's diatonic chords."""

	sections = chordflow.composer.generate("C", "major", "pop", rng=ScriptedRng())

	assert [s.type for s in sections] == chordflow.composer.SONG_STRUCTURES[0]
	assert [c.symbol for c in sections[0].chords] == ["C", "G", "Am", "F"]
	assert [c.roman_numeral for c in sections[0].chords] == ["I", "V", "vi", "IV"]


def test_substitution_draws_from_palette () -> None:

	"""A low roll substitutes the palette's first non-empty pick and re-derives the numeral."""

	scale = chordflow.theory.scale_chords("C", "major")
	template = chordflow.genres.ProgressionTemplate((7,), "test", "test")

	chords = chordflow.composer.build_progression(template, scale, "pop", ScriptedRng(roll=0.0))
	assert chords[0].quality == "dim"

	class PickSus2 (ScriptedRng):

		def choice (self, seq: typing.Sequence[typing.Any]) -> typing.Any:
			return "sus2" if "sus2" in seq else seq[0]

	chords = chordflow.composer.build_progression(template, scale, "pop", PickSus2(roll=0.0))
	assert chords[0].symbol == "Bsus2"
	assert chords[0].pitch_classes == ["B", "C#", "F#"]
	assert chords[0].roman_numeral == "VII"
	assert chords[0].scale_degree == 7


def test_empty_palette_entry_keeps_diatonic_quality () -> None:

	"""Drawing the empty palette entry leaves the chord unchanged."""

	scale = chordflow.theory.scale_chords("C", "major")
	template = chordflow.genres.ProgressionTemplate((2,), "test", "test")

	chords = chordflow.composer.build_progression(template, scale, "pop", ScriptedRng(roll=0.0))

	assert chords[0].symbol == "Dm"


@pytest.mark.parametrize("seed", range(10))
def test_complex_genre_forces_sevenths (seed: int) -> None:

	"""Every complex chord on degrees 1-6 carries its forced seventh quality."""

	sections = chordflow.composer.generate("C", "major", "complex", rng=random.Random(seed))

	for section in sections:
		for chord in section.chords:
			expected = chordflow.genres.COMPLEX_QUALITY_OVERRIDES.get(chord.scale_degree)
			if expected is not None:
				assert chord.quality == expected


def test_complex_two_five_one () -> None:

	"""The jazz standard progression in C is Dm7 G7 Cmaj7 Am7."""

	sections = chordflow.composer.generate("C", "major", "complex", rng=ScriptedRng())

	assert [c.symbol for c in sections[0].chords] == ["Dm7", "G7", "Cmaj7", "Am7"]
	assert [c.roman_numeral for c in sections[0].chords] == ["ii7", "V7", "I7", "vi7"]
	assert [c.pitch_classes for c in sections[0].chords] == [
		["D", "F", "A", "C"],
		["G", "B", "D", "F"],
		["C", "E", "G", "B"],
		["A", "C", "E", "G"],
	]


def test_unknown_key_gives_empty_sections () -> None:

	"""An unresolvable key still produces the form, just without chords."""

	sections = chordflow.composer.generate("Q", "major", "pop", rng=random.Random(1))

	assert sections
	assert all(s.chords == [] and s.bars == 0 for s in sections)


def test_unknown_genre_raises () -> None:

	"""Genres outside the catalogue are rejected."""

	with pytest.raises(ValueError, match="Unknown genre"):
		chordflow.composer.generate("C", "major", "polka", rng=random.Random(1))


def test_regenerate_replaces_song_sections () -> None:

	"""regenerate() rebuilds sections for the song's own key and genre."""

	song = chordflow.song.Song("A", "minor", "rock")
	sections = chordflow.composer.regenerate(song, rng=ScriptedRng())

	assert song.sections is sections
	assert sections[0].chords[0].symbol == "Am"
