"""Song generation - pick a form, then fill each section type with a progression.

:func:`generate` turns a (key, scale, genre) request into an ordered list of
:class:`~chordflow.song.Section` objects.  Every distinct section type in the
chosen form gets one progression, so all choruses (for example) start out
identical; each section still receives its own copy of the chords, so later
edits to one never leak into another.

All randomness goes through a single ``rng`` argument.  Pass a seeded
``random.Random`` for repeatable songs::

    sections = chordflow.composer.generate("A", "minor", "rock", rng=random.Random(7))
"""

import copy
import logging
import random
import typing

import chordflow.genres
import chordflow.song
import chordflow.theory


logger = logging.getLogger(__name__)


SectionType = chordflow.song.SectionType


SONG_STRUCTURES: typing.List[typing.List[chordflow.song.SectionType]] = [
	[
		SectionType.INTRO, SectionType.VERSE, SectionType.CHORUS, SectionType.VERSE,
		SectionType.CHORUS, SectionType.BRIDGE, SectionType.CHORUS, SectionType.OUTRO,
	],
	[
		SectionType.INTRO, SectionType.VERSE, SectionType.PRE_CHORUS, SectionType.CHORUS,
		SectionType.VERSE, SectionType.PRE_CHORUS, SectionType.CHORUS, SectionType.BRIDGE,
		SectionType.CHORUS, SectionType.OUTRO,
	],
	# Short form
	[
		SectionType.VERSE, SectionType.CHORUS, SectionType.VERSE, SectionType.CHORUS,
		SectionType.OUTRO,
	],
]

SUBSTITUTION_PROBABILITY = 0.3


class ChoiceSource (typing.Protocol):

	"""The slice of ``random.Random`` the composer uses."""

	def choice (self, seq: typing.Sequence[typing.Any]) -> typing.Any:
		...

	def random (self) -> float:
		...


def _vary_quality (
	chord: chordflow.theory.ScaleDegreeChord,
	genre: chordflow.genres.Genre,
	rng: ChoiceSource
) -> str:

	"""Return the chord's quality, occasionally swapped for one from the genre palette."""

	quality = chord.quality

	if genre.quality_palette and rng.random() < SUBSTITUTION_PROBABILITY:
		alternative = rng.choice(genre.quality_palette)

		# An empty palette entry means "stay diatonic".
		if alternative:
			quality = alternative

	return quality


def build_progression (
	template: chordflow.genres.ProgressionTemplate,
	scale: typing.Sequence[chordflow.theory.ScaleDegreeChord],
	genre_name: str,
	rng: ChoiceSource
) -> typing.List[chordflow.theory.ScaleDegreeChord]:

	"""Map a progression's scale degrees onto concrete chords.

	Degrees that fall outside the diatonic set are skipped, so an empty
	``scale`` produces an empty progression.  The ``"complex"`` genre then
	forces seventh-chord qualities by degree, replacing any palette
	substitution.
	"""

	genre = chordflow.genres.get_genre(genre_name)
	chords: typing.List[chordflow.theory.ScaleDegreeChord] = []

	for degree in template.scale_degrees:

		if not 1 <= degree <= len(scale):
			continue

		base = scale[degree - 1]
		quality = _vary_quality(base, genre, rng)

		if genre_name == chordflow.genres.COMPLEX_GENRE and degree in chordflow.genres.COMPLEX_QUALITY_OVERRIDES:
			quality = chordflow.genres.COMPLEX_QUALITY_OVERRIDES[degree]

		if quality == base.quality:
			chords.append(copy.deepcopy(base))
		else:
			chords.append(chordflow.theory.edit_chord(base, quality=quality))

	return chords


def generate (
	key_root: str,
	scale_type: str,
	genre: str,
	rng: typing.Optional[ChoiceSource] = None
) -> typing.List[chordflow.song.Section]:

	"""Generate a complete song structure.

	Parameters:
		key_root: Tonic note name (e.g. ``"C"``, ``"F#"``, ``"Bb"``).
		scale_type: ``"major"`` or ``"minor"``.
		genre: ``"pop"``, ``"rock"``, ``"emotional"`` or ``"complex"``.
		rng: Source of randomness (anything with ``choice()`` and ``random()``).
			Defaults to a fresh unseeded ``random.Random``.

	Returns:
		Sections in playing order, each with ``loop_count == 1``.  If the key
		cannot be resolved every section is returned with no chords.

	Raises:
		ValueError: If ``genre`` is unknown.

	Example:
		```python
		sections = generate("C", "major", "pop", rng=random.Random(42))
		[s.type.value for s in sections]
		# e.g. ["Verse", "Chorus", "Verse", "Chorus", "Outro"]
		```
	"""

	if rng is None:
		rng = random.Random()

	genre_data = chordflow.genres.get_genre(genre)
	template = rng.choice(SONG_STRUCTURES)
	scale = chordflow.theory.scale_chords(key_root, scale_type)

	progressions: typing.Dict[chordflow.song.SectionType, typing.List[chordflow.theory.ScaleDegreeChord]] = {}

	for section_type in template:

		if section_type in progressions:
			continue

		progression = rng.choice(genre_data.progressions)
		progressions[section_type] = build_progression(progression, scale, genre, rng)

		logger.debug(f"{section_type.value}: {progression.display_name}")

	sections = [
		chordflow.song.Section(
			type = section_type,
			chords = copy.deepcopy(progressions[section_type]),
			loop_count = 1
		)
		for section_type in template
	]

	logger.info(
		f"Generated {len(sections)} sections in {key_root} {scale_type} ({genre_data.display_name}): "
		+ " ".join(section.type.value for section in sections)
	)

	return sections


def regenerate (song: chordflow.song.Song, rng: typing.Optional[ChoiceSource] = None) -> typing.List[chordflow.song.Section]:

	"""Replace a song's sections with a freshly generated structure for its key and genre."""

	sections = generate(song.key_root, song.scale_type, song.genre, rng=rng)
	song.set_sections(sections)

	return sections
