"""Drum pattern generator - one bar of kick, snare and hi-hat onsets.

:func:`drum_pattern` is a pure function of tempo, pattern name, complexity and
a base time.  Each pattern has a fixed skeleton of hits at canonical beat
offsets; extra hits appear only once ``complexity / 100`` passes a
pattern-specific threshold.

The one intentional source of variation is the ``"funk"`` hi-hat velocity,
which is randomised on every call for a humanised feel.  Pass ``rng`` to make
it repeatable in tests; every other pattern ignores ``rng`` entirely.
"""

import dataclasses
import random
import typing

import chordflow.constants.velocity


PATTERNS: typing.Tuple[str, ...] = ("basic", "rock", "jazz", "funk")

KICK_PITCH = "C1"


@dataclasses.dataclass(frozen=True)
class DrumHit:

	"""
	A single percussion onset.

	Attributes:
		instrument: ``"kick"``, ``"snare"`` or ``"hihat"``.
		time: Absolute transport time in seconds.
		duration: Note-value token (``"8n"``, ``"16n"``, ``"32n"``).
		velocity: Normalised strength, 0.0-1.0.
		pitch: Pitch for tuned voices (the kick), otherwise ``None``.
	"""

	instrument: str
	time: float
	duration: str
	velocity: float = chordflow.constants.velocity.DEFAULT_VELOCITY
	pitch: typing.Optional[str] = None


def _kick (time: float, duration: str = "8n", velocity: float = chordflow.constants.velocity.DEFAULT_VELOCITY) -> DrumHit:

	return DrumHit("kick", time, duration, velocity, KICK_PITCH)


def _snare (time: float, duration: str = "8n", velocity: float = chordflow.constants.velocity.DEFAULT_VELOCITY) -> DrumHit:

	return DrumHit("snare", time, duration, velocity)


def _hihat (time: float, velocity: float = chordflow.constants.velocity.DEFAULT_VELOCITY) -> DrumHit:

	return DrumHit("hihat", time, "32n", velocity)


def _basic (beat: float, t: float, c: float, rng: random.Random) -> typing.List[DrumHit]:

	hits = [
		_kick(t),
		_kick(t + beat * 2),
		_snare(t + beat),
		_snare(t + beat * 3),
	]

	if c > 0.2:
		hits.extend(_hihat(t + beat * i) for i in range(4))

	return hits


def _rock (beat: float, t: float, c: float, rng: random.Random) -> typing.List[DrumHit]:

	hits = [_kick(t), _kick(t + beat * 2)]

	if c > 0.5:
		hits.append(_kick(t + beat * 2.5, "16n"))

	hits.extend([_snare(t + beat), _snare(t + beat * 3)])

	if c > 0.7:
		hits.append(_snare(t + beat * 3.75, "16n", 0.2))

	# Straight eighths; the off-beats only join in above 0.3.
	for i in range(8):
		if i % 2 == 0 or c > 0.3:
			hits.append(_hihat(t + beat * 0.5 * i, 1.0 if i % 2 == 0 else 0.5))

	return hits


def _jazz (beat: float, t: float, c: float, rng: random.Random) -> typing.List[DrumHit]:

	hits = [_kick(t, velocity=0.5), _hihat(t)]

	if c > 0.3:
		hits.append(_hihat(t + beat * 0.66))

	hits.extend([_hihat(t + beat), _hihat(t + beat * 2)])

	if c > 0.3:
		hits.append(_hihat(t + beat * 2.66))

	hits.extend([_hihat(t + beat * 3), _snare(t + beat * 3.66, velocity=0.3)])

	if c > 0.6:
		hits.append(_snare(t + beat * 1.66, velocity=0.2))

	return hits


def _funk (beat: float, t: float, c: float, rng: random.Random) -> typing.List[DrumHit]:

	hits = [_kick(t), _kick(t + beat * 2.5)]

	if c > 0.4:
		hits.append(_kick(t + beat * 3.5, "16n"))

	hits.extend([_snare(t + beat), _snare(t + beat * 3)])

	# Sixteenths, skipping the "and" of every beat.  Velocity is humanised.
	for i in range(16):
		if i % 4 == 0 or (c > 0.5 and i % 2 == 0) or c > 0.8:
			if i % 4 != 2:
				hits.append(_hihat(t + beat * 0.25 * i, rng.random() * 0.5 + 0.2))

	return hits


_GENERATORS: typing.Dict[str, typing.Callable[[float, float, float, random.Random], typing.List[DrumHit]]] = {
	"basic": _basic,
	"rock": _rock,
	"jazz": _jazz,
	"funk": _funk,
}


def drum_pattern (
	bpm: float,
	pattern: str = "basic",
	complexity: float = 50,
	base_time: float = 0.0,
	rng: typing.Optional[random.Random] = None
) -> typing.List[DrumHit]:

	"""Return one bar of drum hits starting at ``base_time``.

	Parameters:
		bpm: Tempo; one beat lasts ``60 / bpm`` seconds.
		pattern: ``"basic"``, ``"rock"``, ``"jazz"`` or ``"funk"``.  Unknown
			names fall back to ``"basic"``.
		complexity: 0-100 (clamped).  Higher values unlock extra hits.
		base_time: Transport time of the bar's first beat.
		rng: Randomness for the funk hi-hat velocities.

	Returns:
		Hits sorted by time (stable, so simultaneous hits keep their skeleton order).

	Example:
		```python
		hits = drum_pattern(120, "rock", complexity=80)
		[(h.instrument, h.time) for h in hits if h.instrument == "kick"]
		# → [("kick", 0.0), ("kick", 1.0), ("kick", 1.25)]
		```
	"""

	if bpm <= 0:
		raise ValueError("BPM must be positive")

	if rng is None:
		rng = random.Random()

	beat = 60.0 / bpm
	c = max(0.0, min(100.0, complexity)) / 100
	generator = _GENERATORS.get(pattern, _basic)

	return sorted(generator(beat, base_time, c, rng), key=lambda hit: hit.time)
