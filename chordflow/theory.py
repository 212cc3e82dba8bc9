"""Scale-degree chord table - diatonic chords, roman numerals and harmonic functions.

Everything here is pure: the same inputs always produce the same chords.
:class:`ScaleDegreeChord` is the record the composer, the song editor and the
playback engine all pass around.  Its ``symbol``, ``roman_numeral`` and
``pitch_classes`` are always derived from ``root``, ``quality``,
``scale_degree`` and ``bass_note`` - use :func:`edit_chord` rather than
assigning those fields directly.
"""

import dataclasses
import enum
import logging
import typing

import chordflow.chords
import chordflow.constants.durations
import chordflow.intervals


logger = logging.getLogger(__name__)


ROMAN_NUMERALS: typing.List[str] = ["I", "II", "III", "IV", "V", "VI", "VII"]


class HarmonicFunction (enum.Enum):

	"""The classical tonal role of a scale-degree chord."""

	TONIC = "Tonic"
	SUPERTONIC = "Supertonic"
	MEDIANT = "Mediant"
	SUBDOMINANT = "Subdominant"
	DOMINANT = "Dominant"
	SUBMEDIANT = "Submediant"
	LEADING_TONE = "Leading Tone"


# The minor table is deliberately the same as the major one (degree 7 stays
# "Leading Tone" even though natural minor has a subtonic there).
FUNCTION_BY_DEGREE: typing.Dict[int, HarmonicFunction] = {
	1: HarmonicFunction.TONIC,
	2: HarmonicFunction.SUPERTONIC,
	3: HarmonicFunction.MEDIANT,
	4: HarmonicFunction.SUBDOMINANT,
	5: HarmonicFunction.DOMINANT,
	6: HarmonicFunction.SUBMEDIANT,
	7: HarmonicFunction.LEADING_TONE,
}


@dataclasses.dataclass
class ScaleDegreeChord:

	"""
	A chord placed on a scale degree of the song's key.

	Attributes:
		root: Root note name (e.g. ``"A"``, ``"Bb"``).
		quality: Quality token (``""``, ``"m"``, ``"m7"``, ...).
		symbol: Display string, ``root + quality`` plus ``"/bass"`` for slash chords.
		scale_degree: The diatonic degree (1-7) this chord was built on.
		harmonic_function: Tonal role of ``scale_degree``.
		roman_numeral: Numeral derived from ``scale_degree`` and ``quality``.
		pitch_classes: Spelled chord tones, bass first.
		duration_beats: Length in beats (4 whole, 2 half, 1 quarter, 0.5 eighth).
		bass_note: Optional slash-chord bass.
	"""

	root: str
	quality: str
	symbol: str
	scale_degree: int
	harmonic_function: HarmonicFunction
	roman_numeral: str
	pitch_classes: typing.List[str]
	duration_beats: float = chordflow.constants.durations.WHOLE
	bass_note: typing.Optional[str] = None


def roman_numeral (degree: int, quality: str) -> str:

	"""Return the roman numeral label for a degree and quality token.

	Minor qualities (containing ``"m"`` but not ``"maj"``) are lower-cased,
	diminished adds ``"°"``, augmented adds ``"+"`` and any seventh adds a
	trailing ``"7"``.  Degrees outside 1-7 fall back to ``"I"``.

	Example:
		```python
		roman_numeral(2, "m7")   # → "ii7"
		roman_numeral(7, "dim")  # → "vii°"
		roman_numeral(5, "aug")  # → "V+"
		roman_numeral(4, "maj7") # → "IV7"
		```
	"""

	numeral = ROMAN_NUMERALS[degree - 1] if 1 <= degree <= 7 else "I"

	if "m" in quality and "maj" not in quality:
		numeral = numeral.lower()

	if "dim" in quality:
		numeral = numeral.lower() + "°"

	if "aug" in quality:
		numeral += "+"

	if "7" in quality:
		numeral += "7"

	return numeral


def harmonic_function (degree: int, scale_type: str = "major") -> HarmonicFunction:

	"""
	Return the harmonic function of a scale degree (``TONIC`` when out of range).
	"""

	return FUNCTION_BY_DEGREE.get(degree, HarmonicFunction.TONIC)


def make_chord (
	root: str,
	quality: str,
	degree: int,
	scale_type: str = "major",
	duration_beats: float = chordflow.constants.durations.WHOLE,
	bass: typing.Optional[str] = None
) -> ScaleDegreeChord:

	"""
	Build a chord with every derived field filled in.
	"""

	return ScaleDegreeChord(
		root = root,
		quality = quality,
		symbol = chordflow.chords.chord_symbol(root, quality, bass),
		scale_degree = degree,
		harmonic_function = harmonic_function(degree, scale_type),
		roman_numeral = roman_numeral(degree, quality),
		pitch_classes = chordflow.chords.chord_pitch_classes(root, quality, bass),
		duration_beats = duration_beats,
		bass_note = bass or None
	)


def scale_chords (root: str, scale_type: str = "major") -> typing.List[ScaleDegreeChord]:

	"""Return the seven diatonic triads of a key.

	Parameters:
		root: Tonic note name (e.g. ``"C"``, ``"F#"``, ``"Bb"``).
		scale_type: ``"major"`` or ``"minor"`` (natural minor).

	Returns:
		Seven chords (degree 1 first), each a whole note long, or an empty list
		if the root or scale type cannot be resolved.

	Example:
		```python
		[c.symbol for c in scale_chords("C")]
		# → ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]
		```
	"""

	try:
		notes = chordflow.intervals.scale_notes(root, scale_type)
	except ValueError as exc:
		logger.warning(f"Cannot build scale {root!r} {scale_type!r}: {exc}")
		return []

	return [
		make_chord(note, chordflow.intervals.diatonic_quality(degree, scale_type), degree, scale_type)
		for degree, note in enumerate(notes, start=1)
	]


def edit_chord (
	chord: ScaleDegreeChord,
	root: typing.Optional[str] = None,
	quality: typing.Optional[str] = None,
	bass: typing.Optional[str] = None,
	duration_beats: typing.Optional[float] = None
) -> ScaleDegreeChord:

	"""Return a copy of ``chord`` with new fields and re-derived notation.

	``scale_degree`` and ``harmonic_function`` are kept; ``symbol``,
	``pitch_classes`` and ``roman_numeral`` are recomputed.  Pass ``bass=""``
	to remove an existing slash bass.

	Raises:
		ValueError: If the new root, bass or quality is not recognised.

	Example:
		```python
		dm = scale_chords("C")[1]
		edit_chord(dm, quality="m7").symbol       # → "Dm7"
		edit_chord(dm, bass="F").pitch_classes    # → ["F", "A", "D"]
		```
	"""

	new_root = chord.root if root is None else root
	new_quality = chord.quality if quality is None else quality
	new_bass = chord.bass_note if bass is None else (bass or None)

	return dataclasses.replace(
		chord,
		root = new_root,
		quality = new_quality,
		symbol = chordflow.chords.chord_symbol(new_root, new_quality, new_bass),
		roman_numeral = roman_numeral(chord.scale_degree, new_quality),
		pitch_classes = chordflow.chords.chord_pitch_classes(new_root, new_quality, new_bass),
		duration_beats = chord.duration_beats if duration_beats is None else duration_beats,
		bass_note = new_bass
	)
