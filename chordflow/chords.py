"""Chord quality definitions and note spelling utilities.

This module provides pitch class mappings, the chord quality table and the
helpers that turn a root name plus a quality token into spelled note names.

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to pitch classes (0-11)
- `LETTERS`: The seven natural letter names in order, starting from C
- `CHORD_INTERVALS`: Maps quality tokens to `(semitones, letter steps)` pairs
- `QUALITY_NAMES`: Maps quality tokens to human-readable labels

Quality tokens are the short suffixes used in chord symbols: `""` (major),
`"m"`, `"dim"`, `"aug"`, `"5"`, `"sus2"`, `"sus4"`, `"add9"`, `"6"`, `"m6"`,
`"7"`, `"maj7"`, `"m7"`, `"m7b5"`, `"dim7"`, `"9"`, `"m9"`, `"maj9"`, `"13"`.
"""

import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

LETTERS: typing.List[str] = ["C", "D", "E", "F", "G", "A", "B"]

LETTER_PC: typing.Dict[str, int] = {
	"C": 0,
	"D": 2,
	"E": 4,
	"F": 5,
	"G": 7,
	"A": 9,
	"B": 11,
}


# Each chord tone is (semitones above the root, letter steps above the root).
# Letter steps keep the spelling diatonic: a minor third above E is G, not F##.
CHORD_INTERVALS: typing.Dict[str, typing.List[typing.Tuple[int, int]]] = {
	"": [(0, 0), (4, 2), (7, 4)],
	"m": [(0, 0), (3, 2), (7, 4)],
	"dim": [(0, 0), (3, 2), (6, 4)],
	"aug": [(0, 0), (4, 2), (8, 4)],
	"5": [(0, 0), (7, 4)],
	"sus2": [(0, 0), (2, 1), (7, 4)],
	"sus4": [(0, 0), (5, 3), (7, 4)],
	"add9": [(0, 0), (4, 2), (7, 4), (14, 1)],
	"6": [(0, 0), (4, 2), (7, 4), (9, 5)],
	"m6": [(0, 0), (3, 2), (7, 4), (9, 5)],
	"7": [(0, 0), (4, 2), (7, 4), (10, 6)],
	"maj7": [(0, 0), (4, 2), (7, 4), (11, 6)],
	"m7": [(0, 0), (3, 2), (7, 4), (10, 6)],
	"m7b5": [(0, 0), (3, 2), (6, 4), (10, 6)],
	"dim7": [(0, 0), (3, 2), (6, 4), (9, 6)],
	"9": [(0, 0), (4, 2), (7, 4), (10, 6), (14, 1)],
	"m9": [(0, 0), (3, 2), (7, 4), (10, 6), (14, 1)],
	"maj9": [(0, 0), (4, 2), (7, 4), (11, 6), (14, 1)],
	"13": [(0, 0), (4, 2), (7, 4), (10, 6), (14, 1), (21, 5)],
}

QUALITY_NAMES: typing.Dict[str, str] = {
	"": "Major",
	"m": "Minor",
	"dim": "Diminished",
	"aug": "Augmented",
	"5": "Power",
	"sus2": "Sus2",
	"sus4": "Sus4",
	"add9": "Add9",
	"6": "Major 6th",
	"m6": "Minor 6th",
	"7": "Dominant 7th",
	"maj7": "Major 7th",
	"m7": "Minor 7th",
	"m7b5": "Half Diminished",
	"dim7": "Diminished 7th",
	"9": "Dominant 9th",
	"m9": "Minor 9th",
	"maj9": "Major 9th",
	"13": "Dominant 13th",
}


def parse_note (name: str) -> typing.Tuple[str, int]:

	"""Split a note name into its letter and accidental offset.

	Accepts any number of ``#`` or ``b`` accidentals after a natural letter.

	Raises:
		ValueError: If the name is not a recognisable note.

	Example:
		```python
		parse_note("Bb")   # → ("B", -1)
		parse_note("F##")  # → ("F", 2)
		```
	"""

	if not name or name[0] not in LETTER_PC:
		raise ValueError(f"Unknown note name: {name!r}. Expected e.g. 'C', 'F#', 'Bb'.")

	accidentals = name[1:]

	if accidentals.strip("#") == "":
		return name[0], len(accidentals)

	if accidentals.strip("b") == "":
		return name[0], -len(accidentals)

	raise ValueError(f"Unknown note name: {name!r}. Expected e.g. 'C', 'F#', 'Bb'.")


def note_to_pc (name: str) -> int:

	"""Return the pitch class (0-11) of a spelled note name."""

	letter, offset = parse_note(name)

	return (LETTER_PC[letter] + offset) % 12


def spell (letter: str, pc: int) -> str:

	"""Spell pitch class ``pc`` using ``letter`` plus whatever accidentals it needs."""

	offset = (pc - LETTER_PC[letter]) % 12

	if offset > 6:
		offset -= 12

	if offset >= 0:
		return letter + "#" * offset

	return letter + "b" * -offset


def transpose (root: str, semitones: int, letter_steps: int) -> str:

	"""Return the note ``semitones`` above ``root``, spelled ``letter_steps`` letters higher."""

	letter, _ = parse_note(root)
	target_letter = LETTERS[(LETTERS.index(letter) + letter_steps) % 7]

	return spell(target_letter, note_to_pc(root) + semitones)


def chord_pitch_classes (root: str, quality: str, bass: typing.Optional[str] = None) -> typing.List[str]:

	"""Return the spelled note names of a chord.

	Parameters:
		root: Root note name (e.g. ``"D"``, ``"Bb"``).
		quality: Quality token (see module docstring).
		bass: Optional slash-chord bass note. When it is a chord tone the
			tones are rotated so it comes first; otherwise it is prepended.

	Raises:
		ValueError: If the root, bass or quality is not recognised.

	Example:
		```python
		chord_pitch_classes("A", "m7")        # → ["A", "C", "E", "G"]
		chord_pitch_classes("C", "", "E")     # → ["E", "G", "C"]
		chord_pitch_classes("C", "", "Bb")    # → ["Bb", "C", "E", "G"]
		```
	"""

	if quality not in CHORD_INTERVALS:
		raise ValueError(f"Unknown chord quality: {quality!r}")

	notes = [transpose(root, semitones, steps) for semitones, steps in CHORD_INTERVALS[quality]]

	if not bass:
		return notes

	bass_pc = note_to_pc(bass)

	for i, note in enumerate(notes):
		if note_to_pc(note) == bass_pc:
			return notes[i:] + notes[:i]

	return [bass] + notes


def chord_symbol (root: str, quality: str, bass: typing.Optional[str] = None) -> str:

	"""Return the display symbol, e.g. ``"Am7"`` or ``"C/E"``."""

	symbol = f"{root}{quality}"

	if bass:
		symbol += f"/{bass}"

	return symbol


def note_to_midi (name: str, octave: int = 4) -> int:

	"""Return the MIDI note number of ``name`` in ``octave`` (C4 = 60).

	Accidentals may cross the octave boundary: ``Cb4`` is 59 and ``B#4`` is 72.
	"""

	letter, offset = parse_note(name)

	return 12 * (octave + 1) + LETTER_PC[letter] + offset


def voice_upward (pitch_classes: typing.Sequence[str], octave: int = 4) -> typing.List[int]:

	"""Return MIDI notes for ``pitch_classes`` stacked upward from ``octave``.

	The first note is placed in the requested octave; every following note is
	raised by octaves until it sits above the previous one.

	Example:
		```python
		voice_upward(["B", "D", "F"])  # → [71, 74, 77]
		```
	"""

	voiced: typing.List[int] = []

	for name in pitch_classes:

		midi = note_to_midi(name, octave)

		while voiced and midi <= voiced[-1]:
			midi += 12

		voiced.append(midi)

	return voiced
