"""Event compiler - flatten sections into absolute-time playback events.

:func:`compile_events` walks sections in order, repeats each one
``loop_count`` times and emits one :class:`PlaybackEvent` per chord
occurrence at the running offset.  The returned
:class:`CompiledSchedule` also carries the grand total, so the caller can
arm a terminal clean-up at the very end.

Drum accompaniment is expressed as a per-event flag.  The scheduler restarts
the one-bar drum pattern at every flagged event, so drum timing is relative
to each chord boundary rather than continuous across a section.
"""

import dataclasses
import typing

import chordflow.constants.durations
import chordflow.song
import chordflow.theory


@dataclasses.dataclass(frozen=True)
class PlaybackEvent:

	"""
	One chord onset on the transport timeline.

	Attributes:
		offset: Seconds from the start of playback.
		section_index: Index of the section in the song.
		chord_index: Index of the chord within that section.
		chord: The chord to sound.
		duration: Note-value token the voice should sustain for.
		drum_trigger: Whether to start a drum pattern at this offset.
	"""

	offset: float
	section_index: int
	chord_index: int
	chord: chordflow.theory.ScaleDegreeChord
	duration: str
	drum_trigger: bool = False


@dataclasses.dataclass(frozen=True)
class CompiledSchedule:

	"""The ordered events of one play action and the time the last one ends."""

	events: typing.Tuple[PlaybackEvent, ...]
	total_duration: float


def chord_beats (chord: chordflow.theory.ScaleDegreeChord) -> float:

	"""Return how many beats a chord advances the timeline (a whole note if unset)."""

	if not chord.duration_beats or chord.duration_beats <= 0:
		return chordflow.constants.durations.WHOLE

	return chord.duration_beats


def compile_events (
	target: typing.Union[chordflow.song.Section, typing.Sequence[chordflow.song.Section]],
	bpm: float,
	drums: bool = False,
	section_index: int = 0
) -> CompiledSchedule:

	"""Compile a section, or a list of sections, into timed events.

	Parameters:
		target: A single section, or the song's sections in playing order.
		bpm: Tempo in beats per minute.
		drums: Flag every event as a drum-pattern trigger.
		section_index: Index reported for a single ``target`` section (the
			section's position in the song).  Ignored for lists.

	Raises:
		ValueError: If ``bpm`` is not positive.

	Example:
		```python
		schedule = compile_events(section, bpm=120)
		# Chords of 4, 2, 1 and 0.5 beats at 120 BPM → total_duration == 3.75
		```
	"""

	if bpm <= 0:
		raise ValueError("BPM must be positive")

	if isinstance(target, chordflow.song.Section):
		indexed = [(section_index, target)]
	else:
		indexed = list(enumerate(target))

	seconds_per_beat = 60.0 / bpm
	offset = 0.0
	events: typing.List[PlaybackEvent] = []

	for s_idx, section in indexed:

		for _ in range(section.loop_count or 1):

			for c_idx, chord in enumerate(section.chords):

				events.append(PlaybackEvent(
					offset = offset,
					section_index = s_idx,
					chord_index = c_idx,
					chord = chord,
					duration = chordflow.constants.durations.token_for_beats(chord.duration_beats),
					drum_trigger = drums
				))

				offset += seconds_per_beat * chord_beats(chord)

	return CompiledSchedule(events=tuple(events), total_duration=offset)
