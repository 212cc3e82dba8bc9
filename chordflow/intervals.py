import typing

import chordflow.chords


SCALE_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"major": [0, 2, 4, 5, 7, 9, 11],
	"minor": [0, 2, 3, 5, 7, 8, 10],
}


# ---------------------------------------------------------------------------
# Diatonic triad quality tokens, one per scale degree (I-VII).
# ---------------------------------------------------------------------------

MAJOR_QUALITIES: typing.List[str] = [
	"", "m", "m", "", "", "m", "dim"
]

MINOR_QUALITIES: typing.List[str] = [
	"m", "dim", "", "m", "m", "", ""
]


DIATONIC_QUALITIES: typing.Dict[str, typing.List[str]] = {
	"major": MAJOR_QUALITIES,
	"minor": MINOR_QUALITIES,
}


def scale_notes (root: str, scale_type: str = "major") -> typing.List[str]:

	"""
	Return the seven spelled note names of a scale.

	Each degree uses the next letter name, so flat keys come out with flats
	and sharp keys with sharps.

	Parameters:
		root: Tonic note name (e.g. ``"F"``, ``"C#"``, ``"Eb"``).
		scale_type: ``"major"`` or ``"minor"`` (natural minor).

	Raises:
		ValueError: If the root or scale type is not recognised.

	Example:
		```python
		scale_notes("F")           # → ["F", "G", "A", "Bb", "C", "D", "E"]
		scale_notes("A", "minor")  # → ["A", "B", "C", "D", "E", "F", "G"]
		```
	"""

	if scale_type not in SCALE_INTERVALS:
		raise ValueError(f"Unknown scale type: {scale_type!r}. Available: {sorted(SCALE_INTERVALS)}")

	return [
		chordflow.chords.transpose(root, semitones, degree)
		for degree, semitones in enumerate(SCALE_INTERVALS[scale_type])
	]


def diatonic_quality (degree: int, scale_type: str = "major") -> str:

	"""
	Return the triad quality token for a 1-based scale degree.
	"""

	if scale_type not in DIATONIC_QUALITIES:
		raise ValueError(f"Unknown scale type: {scale_type!r}. Available: {sorted(DIATONIC_QUALITIES)}")

	if not 1 <= degree <= 7:
		raise ValueError(f"Scale degree must be 1-7, got {degree}")

	return DIATONIC_QUALITIES[scale_type][degree - 1]
