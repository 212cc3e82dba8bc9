"""Genre descriptors - progression templates and chord-quality palettes.

Each :class:`Genre` lists the scale-degree progressions the composer picks from
and the alternate quality tokens it may substitute for variety.  An empty
string in a palette means "keep the diatonic quality".
"""

import dataclasses
import typing


@dataclasses.dataclass(frozen=True)
class ProgressionTemplate:

	"""An ordered list of scale degrees, e.g. I-V-vi-IV = ``(1, 5, 6, 4)``."""

	scale_degrees: typing.Tuple[int, ...]
	display_name: str
	reference: str


@dataclasses.dataclass(frozen=True)
class Genre:

	"""A named collection of progressions plus a quality palette."""

	display_name: str
	description: str
	progressions: typing.Tuple[ProgressionTemplate, ...]
	quality_palette: typing.Tuple[str, ...]


# Qualities the composer forces on every chord of the "complex" genre, by degree.
COMPLEX_GENRE = "complex"

COMPLEX_QUALITY_OVERRIDES: typing.Dict[int, str] = {
	1: "maj7",
	2: "m7",
	3: "m7",
	4: "maj7",
	5: "7",
	6: "m7",
}


GENRES: typing.Dict[str, Genre] = {
	"pop": Genre(
		display_name = "Pop",
		description = "Classic pop chord progressions",
		progressions = (
			ProgressionTemplate((1, 5, 6, 4), "Canon (I-V-vi-IV)", "Pachelbel's Canon"),
			ProgressionTemplate((1, 6, 4, 5), "Fifties (I-vi-IV-V)", "Stand By Me"),
			ProgressionTemplate((6, 4, 1, 5), "Sensitive (vi-IV-I-V)", "Apologize"),
			ProgressionTemplate((1, 4, 5, 4), "Basic (I-IV-V-IV)", "Simple Pop"),
		),
		quality_palette = ("", "sus2", "add9"),
	),
	"rock": Genre(
		display_name = "Rock",
		description = "Power chords and rock progressions",
		progressions = (
			ProgressionTemplate((1, 6, 3, 7), "Minor Rock (i-VI-III-VII)", "Green Day Style"),
			ProgressionTemplate((1, 4, 1, 5), "Power Chord (I-IV-I-V)", "Classic Rock"),
			ProgressionTemplate((1, 7, 6, 7), "Descending (I-VII-vi-VII)", "Alternative"),
			ProgressionTemplate((6, 4, 1, 5), "Epic Rock (vi-IV-I-V)", "Epic Rock"),
		),
		quality_palette = ("", "5", "sus2"),
	),
	"emotional": Genre(
		display_name = "Ballad",
		description = "Expressive ballad harmony",
		progressions = (
			ProgressionTemplate((6, 5, 4, 5), "Sad Loop (vi-V-IV-V)", "Sad Ballad"),
			ProgressionTemplate((1, 3, 6, 4), "Golden (I-iii-vi-IV)", "Emotional Pop"),
			ProgressionTemplate((4, 1, 5, 6), "Hopeful (IV-I-V-vi)", "Hopeful"),
		),
		quality_palette = ("", "maj7", "sus2", "add9"),
	),
	COMPLEX_GENRE: Genre(
		display_name = "Jazz / R&B",
		description = "Extended jazz chords and ii-V-I movement",
		progressions = (
			ProgressionTemplate((2, 5, 1, 6), "Two-Five-One (ii-V-I-vi)", "Jazz Standard"),
			ProgressionTemplate((4, 5, 3, 6), "R&B (IV-V-iii-vi)", "Neo Soul"),
			ProgressionTemplate((1, 4, 2, 5), "Turnaround (I-IV-ii-V)", "Jazz Turnaround"),
		),
		quality_palette = ("maj7", "m7", "7", "sus4", "m9", "maj9", "13"),
	),
}


def get_genre (name: str) -> Genre:

	"""
	Return a genre descriptor by key (``"pop"``, ``"rock"``, ``"emotional"``, ``"complex"``).
	"""

	if name not in GENRES:
		raise ValueError(f"Unknown genre: {name!r}. Available: {sorted(GENRES)}")

	return GENRES[name]
