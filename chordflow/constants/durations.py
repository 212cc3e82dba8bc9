"""Beat-based durations and note-value tokens.

Chord lengths are stored in **beats**, where 1.0 = one quarter note.  Voices
are told how long to sound with a short note-value token (``"1n"`` = whole,
``"4n"`` = quarter, ``"32n"`` = thirty-second), which the transport converts
to seconds at the current tempo::

    import chordflow.constants.durations as dur

    dur.token_for_beats(dur.HALF)    # "2n"
    dur.TOKEN_BEATS["8n"]            # 0.5
"""

import typing


THIRTYSECOND = 0.125
SIXTEENTH = 0.25
EIGHTH = 0.5
QUARTER = 1.0
HALF = 2.0
WHOLE = 4.0


TOKEN_BEATS: typing.Dict[str, float] = {
	"1n": WHOLE,
	"2n": HALF,
	"4n": QUARTER,
	"8n": EIGHTH,
	"16n": SIXTEENTH,
	"32n": THIRTYSECOND,
}

# Only these four chord lengths have a token; anything else plays as a whole note.
BEATS_TOKEN: typing.Dict[float, str] = {
	WHOLE: "1n",
	HALF: "2n",
	QUARTER: "4n",
	EIGHTH: "8n",
}

DEFAULT_TOKEN = "1n"


def token_for_beats (beats: typing.Optional[float]) -> str:

	"""Return the note-value token for a chord length, defaulting to a whole note."""

	if beats is None:
		return DEFAULT_TOKEN

	return BEATS_TOKEN.get(beats, DEFAULT_TOKEN)
