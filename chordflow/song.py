"""Song state - sections, their chords, and the editing operations on them.

Defines :class:`SectionType`, :class:`Section` (one structural block holding
its own chords and repeat count) and :class:`Song` (key, genre, tempo and the
ordered section list).

User-supplied numbers are clamped rather than rejected: loop counts to
``[MIN_LOOP_COUNT, MAX_LOOP_COUNT]`` and tempo to ``[MIN_TEMPO, MAX_TEMPO]``.
Indexes that do not exist are programmer errors and raise ``IndexError``.
"""

import dataclasses
import enum
import logging
import typing
import uuid

import chordflow.theory


logger = logging.getLogger(__name__)


MIN_LOOP_COUNT = 1
MAX_LOOP_COUNT = 8

MIN_TEMPO = 40
MAX_TEMPO = 240
DEFAULT_TEMPO = 120


class SectionType (enum.Enum):

	"""The structural role of a section."""

	INTRO = "Intro"
	VERSE = "Verse"
	PRE_CHORUS = "Pre-Chorus"
	CHORUS = "Chorus"
	BRIDGE = "Bridge"
	OUTRO = "Outro"


def clamp_loop_count (value: int) -> int:

	"""Clamp a repeat count into the allowed range."""

	return max(MIN_LOOP_COUNT, min(MAX_LOOP_COUNT, int(value)))


def clamp_tempo (bpm: float) -> float:

	"""Clamp a tempo into the allowed BPM range."""

	return max(MIN_TEMPO, min(MAX_TEMPO, bpm))


def new_section_id () -> str:

	"""Return a fresh opaque section identifier."""

	return uuid.uuid4().hex


@dataclasses.dataclass
class Section:

	"""
	A named block of the song with its own chord sequence.

	Attributes:
		type: The structural role (Verse, Chorus, ...).
		name: Free-text label, independent of ``type``.
		chords: The chords played, in order.
		loop_count: How many times the chord sequence repeats (1-8).
		id: Opaque unique identifier.

	``bars`` is derived from ``chords`` and always equals ``len(chords)``.
	"""

	type: SectionType
	name: str = ""
	chords: typing.List[chordflow.theory.ScaleDegreeChord] = dataclasses.field(default_factory=list)
	loop_count: int = MIN_LOOP_COUNT
	id: str = dataclasses.field(default_factory=new_section_id)

	def __post_init__ (self) -> None:

		if not self.name:
			self.name = self.type.value

		self.loop_count = clamp_loop_count(self.loop_count)

	@property
	def bars (self) -> int:

		"""Return the number of bars, one per chord."""

		return len(self.chords)


class Song:

	"""The editable song: key, genre, tempo and the ordered sections."""

	def __init__ (
		self,
		key_root: str = "C",
		scale_type: str = "major",
		genre: str = "pop",
		tempo: float = DEFAULT_TEMPO,
		sections: typing.Optional[typing.List[Section]] = None
	) -> None:

		self.key_root = key_root
		self.scale_type = scale_type
		self.genre = genre
		self.tempo = clamp_tempo(tempo)
		self.sections: typing.List[Section] = sections if sections is not None else []

	def set_key (self, root: str, scale_type: str) -> None:

		"""Change the key used by the next generation (existing chords are untouched)."""

		self.key_root = root
		self.scale_type = scale_type

	def set_genre (self, genre: str) -> None:

		"""Change the genre used by the next generation."""

		self.genre = genre

	def set_tempo (self, bpm: float) -> float:

		"""Set the tempo, clamped to the allowed range, and return the stored value."""

		clamped = clamp_tempo(bpm)

		if clamped != bpm:
			logger.info(f"Tempo {bpm} clamped to {clamped}")

		self.tempo = clamped

		return clamped

	def set_sections (self, sections: typing.List[Section]) -> None:

		"""Replace every section."""

		self.sections = sections

	def index_of (self, section: Section) -> int:

		"""Return the index of ``section`` (matched by id).

		Raises:
			ValueError: If the section is not part of this song.
		"""

		for index, candidate in enumerate(self.sections):
			if candidate.id == section.id:
				return index

		raise ValueError(f"Section {section.name!r} ({section.id}) is not part of this song")

	def add_section (self, section: typing.Optional[Section] = None) -> Section:

		"""Append a section (an empty Verse named "New Section" by default) and return it."""

		if section is None:
			section = Section(type=SectionType.VERSE, name="New Section")

		self.sections.append(section)

		return section

	def remove_section (self, index: int) -> Section:

		"""Remove and return the section at ``index``."""

		return self.sections.pop(index)

	def move_section (self, from_index: int, to_index: int) -> None:

		"""Move a section; a destination outside the list is ignored."""

		if to_index < 0 or to_index >= len(self.sections):
			return

		section = self.sections.pop(from_index)
		self.sections.insert(to_index, section)

	def update_section (
		self,
		index: int,
		name: typing.Optional[str] = None,
		type: typing.Optional[SectionType] = None,
		loop_count: typing.Optional[int] = None
	) -> Section:

		"""Update a section's label, type or repeat count (clamped to 1-8)."""

		section = self.sections[index]

		if name is not None:
			section.name = name

		if type is not None:
			section.type = type

		if loop_count is not None:
			section.loop_count = clamp_loop_count(loop_count)

		return section

	def add_chord (self, section_index: int, chord: typing.Optional[chordflow.theory.ScaleDegreeChord] = None) -> chordflow.theory.ScaleDegreeChord:

		"""Append a chord to a section and return it.

		With no chord given, the section's last chord is duplicated, or a C major
		tonic is added to an empty section.
		"""

		section = self.sections[section_index]

		if chord is None:
			if section.chords:
				chord = dataclasses.replace(section.chords[-1], pitch_classes=list(section.chords[-1].pitch_classes))
			else:
				chord = chordflow.theory.make_chord("C", "", 1, self.scale_type)

		section.chords.append(chord)

		return chord

	def remove_chord (self, section_index: int, chord_index: int) -> chordflow.theory.ScaleDegreeChord:

		"""Remove and return a chord."""

		return self.sections[section_index].chords.pop(chord_index)

	def update_chord (
		self,
		section_index: int,
		chord_index: int,
		root: typing.Optional[str] = None,
		quality: typing.Optional[str] = None,
		bass: typing.Optional[str] = None,
		duration_beats: typing.Optional[float] = None
	) -> chordflow.theory.ScaleDegreeChord:

		"""Edit a chord in place, re-deriving its symbol, notes and numeral."""

		chords = self.sections[section_index].chords
		chords[chord_index] = chordflow.theory.edit_chord(
			chords[chord_index],
			root = root,
			quality = quality,
			bass = bass,
			duration_beats = duration_beats
		)

		return chords[chord_index]

	def reset (self) -> None:

		"""Remove every section."""

		self.sections = []
