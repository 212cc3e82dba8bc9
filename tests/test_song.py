import pytest

import chordflow.song
import chordflow.theory


SectionType = chordflow.song.SectionType


def _song_with_sections (count: int = 3) -> chordflow.song.Song:

	"""Build a C major song with ``count`` two-chord verses."""

	song = chordflow.song.Song("C", "major", "pop")
	scale = chordflow.theory.scale_chords("C")

	for i in range(count):
		song.add_section(chordflow.song.Section(type=SectionType.VERSE, name=f"S{i}", chords=[scale[0], scale[4]]))

	return song


def test_section_defaults () -> None:

	"""A section takes its type's display name and gets a unique id."""

	a = chordflow.song.Section(type=SectionType.PRE_CHORUS)
	b = chordflow.song.Section(type=SectionType.PRE_CHORUS)

	assert a.name == "Pre-Chorus"
	assert a.loop_count == 1
	assert a.bars == 0
	assert a.id != b.id


@pytest.mark.parametrize("requested, stored", [(0, 1), (-3, 1), (4, 4), (8, 8), (20, 8)])
def test_loop_count_is_clamped (requested: int, stored: int) -> None:

	"""Loop counts are clamped to 1-8 on creation and on update."""

	assert chordflow.song.Section(type=SectionType.VERSE, loop_count=requested).loop_count == stored

	song = _song_with_sections(1)
	assert song.update_section(0, loop_count=requested).loop_count == stored


@pytest.mark.parametrize("requested, stored", [(10, 40), (40, 40), (133, 133), (300, 240)])
def test_tempo_is_clamped (requested: float, stored: float) -> None:

	"""Tempo is kept within 40-240 BPM."""

	song = chordflow.song.Song()

	assert song.set_tempo(requested) == stored
	assert song.tempo == stored
	assert chordflow.song.Song(tempo=requested).tempo == stored


def test_bars_follow_chord_edits () -> None:

	"""bars always equals the number of chords after adds and removes."""

	song = _song_with_sections(1)
	section = song.sections[0]

	assert section.bars == 2

	added = song.add_chord(0)
	assert section.bars == 3
	assert added.symbol == "G"
	assert added is not section.chords[1]

	song.remove_chord(0, 0)
	song.remove_chord(0, 0)
	assert section.bars == 1


def test_add_chord_to_empty_section_uses_tonic () -> None:

	"""An empty section gets a C major tonic by default."""

	song = chordflow.song.Song()
	song.add_section()

	chord = song.add_chord(0)

	assert chord.symbol == "C"
	assert chord.scale_degree == 1
	assert song.sections[0].name == "New Section"


def test_update_chord_rederives () -> None:

	"""Editing a chord's quality and length keeps the record consistent."""

	song = _song_with_sections(1)

	chord = song.update_chord(0, 1, quality="7", duration_beats=2)

	assert chord.symbol == "G7"
	assert chord.roman_numeral == "V7"
	assert chord.duration_beats == 2
	assert song.sections[0].chords[1] is chord


def test_move_section () -> None:

	"""Sections move within range; out of range destinations are ignored."""

	song = _song_with_sections(3)

	song.move_section(0, 2)
	assert [s.name for s in song.sections] == ["S1", "S2", "S0"]

	song.move_section(0, 5)
	song.move_section(0, -1)
	assert [s.name for s in song.sections] == ["S1", "S2", "S0"]


def test_remove_and_reset () -> None:

	"""Sections can be removed one at a time or all at once."""

	song = _song_with_sections(3)

	removed = song.remove_section(1)
	assert removed.name == "S1"
	assert len(song.sections) == 2

	song.reset()
	assert song.sections == []


def test_index_of_rejects_foreign_section () -> None:

	"""A section from another song is not found."""

	song = _song_with_sections(2)
	other = chordflow.song.Section(type=SectionType.BRIDGE)

	assert song.index_of(song.sections[1]) == 1

	with pytest.raises(ValueError):
		song.index_of(other)


def test_missing_index_raises () -> None:

	"""Indexes that do not exist raise IndexError."""

	song = _song_with_sections(1)

	with pytest.raises(IndexError):
		song.update_section(4, name="Nope")

	with pytest.raises(IndexError):
		song.add_chord(3)


def test_set_key_and_genre () -> None:

	"""Key and genre changes only update the stored request."""

	song = _song_with_sections(1)
	song.set_key("Eb", "minor")
	song.set_genre("complex")

	assert (song.key_root, song.scale_type, song.genre) == ("Eb", "minor", "complex")
	assert song.sections[0].chords[0].symbol == "C"
