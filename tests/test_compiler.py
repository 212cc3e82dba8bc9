import pytest

import chordflow.compiler
import chordflow.song
import chordflow.theory


def _section (beats: list, loop_count: int = 1) -> chordflow.song.Section:

	"""Build a section of C major chords with the given lengths."""

	scale = chordflow.theory.scale_chords("C")
	chords = [chordflow.theory.edit_chord(scale[i % 7], duration_beats=b) for i, b in enumerate(beats)]

	return chordflow.song.Section(type=chordflow.song.SectionType.VERSE, chords=chords, loop_count=loop_count)


def test_mixed_durations_total () -> None:

	"""Whole, half, quarter and eighth at 120 BPM last 3.75 seconds."""

	schedule = chordflow.compiler.compile_events(_section([4, 2, 1, 0.5]), bpm=120)

	assert [e.offset for e in schedule.events] == [0.0, 2.0, 3.0, 3.5]
	assert [e.duration for e in schedule.events] == ["1n", "2n", "4n", "8n"]
	assert schedule.total_duration == pytest.approx(3.75)


def test_loop_count_repeats_chords () -> None:

	"""Each chord occurrence gets its own event, offsets keep running."""

	schedule = chordflow.compiler.compile_events(_section([4, 4], loop_count=3), bpm=60, section_index=5)

	assert len(schedule.events) == 6
	assert [e.chord_index for e in schedule.events] == [0, 1, 0, 1, 0, 1]
	assert all(e.section_index == 5 for e in schedule.events)
	assert schedule.events[-1].offset == pytest.approx(20.0)
	assert schedule.total_duration == pytest.approx(24.0)


def test_song_sections_in_order () -> None:

	"""A list of sections is indexed 0..n-1 and laid end to end."""

	sections = [_section([4]), _section([2, 2], loop_count=2)]
	schedule = chordflow.compiler.compile_events(sections, bpm=120)

	assert [(e.section_index, e.chord_index) for e in schedule.events] == [(0, 0), (1, 0), (1, 1), (1, 0), (1, 1)]
	assert [e.offset for e in schedule.events] == [0.0, 2.0, 3.0, 4.0, 5.0]
	assert schedule.total_duration == pytest.approx(6.0)


def test_offsets_never_decrease () -> None:

	"""Event offsets are monotonically non-decreasing."""

	schedule = chordflow.compiler.compile_events([_section([1, 0.5, 2], 2), _section([4, 1])], bpm=97)
	offsets = [e.offset for e in schedule.events]

	assert offsets == sorted(offsets)


def test_missing_duration_defaults_to_whole () -> None:

	"""Unset or non-positive lengths play as a whole note; odd lengths get the whole token."""

	schedule = chordflow.compiler.compile_events(_section([0, 3]), bpm=120)

	assert schedule.events[1].offset == pytest.approx(2.0)
	assert [e.duration for e in schedule.events] == ["1n", "1n"]
	assert schedule.total_duration == pytest.approx(3.5)


def test_drum_trigger_flag () -> None:

	"""Every event carries the drums flag."""

	with_drums = chordflow.compiler.compile_events(_section([4, 4]), bpm=120, drums=True)
	without = chordflow.compiler.compile_events(_section([4, 4]), bpm=120)

	assert all(e.drum_trigger for e in with_drums.events)
	assert not any(e.drum_trigger for e in without.events)


def test_empty_section () -> None:

	"""No chords means no events and no time."""

	schedule = chordflow.compiler.compile_events(_section([]), bpm=120)

	assert schedule.events == ()
	assert schedule.total_duration == 0.0


@pytest.mark.parametrize("bpm", [0, -10])
def test_non_positive_bpm_raises (bpm: float) -> None:

	"""The compiler rejects a non-positive tempo."""

	with pytest.raises(ValueError):
		chordflow.compiler.compile_events(_section([4]), bpm=bpm)
