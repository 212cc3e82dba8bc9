"""Instrument voices - chords and percussion rendered as MIDI notes.

A voice is anything with a ``loaded`` flag, ``attack_release()`` and
``release_all()``.  The MIDI voices here arm their note-on and note-off
messages on the shared :class:`~chordflow.transport.Transport`, so stopping
and cancelling the transport also cancels notes that have not sounded yet.
``release_all()`` silences the ones that have.

When no MIDI port could be opened the voices report ``loaded == False``,
and playback carries on silently (degraded mode) rather than failing.
"""

import asyncio
import logging
import typing

import mido

import chordflow.chords
import chordflow.constants
import chordflow.constants.gm_drums
import chordflow.constants.velocity
import chordflow.midi_utils
import chordflow.transport


logger = logging.getLogger(__name__)


DEFAULT_LOAD_TIMEOUT = 5.0

# Seconds between strings when the chord voice strums.
GUITAR_STRUM = 0.05

INSTRUMENTS: typing.Tuple[str, ...] = ("piano", "guitar")


@typing.runtime_checkable
class Voice (typing.Protocol):

	"""
	Protocol for anything the playback session can trigger.
	"""

	@property
	def loaded (self) -> bool:
		...

	def attack_release (self, pitches: typing.Any, duration: str, time: float, velocity: float = 1.0) -> None:
		...

	def release_all (self) -> None:
		...


class MidiOutput:

	"""
	A MIDI output port shared by several voices, tracking which notes are sounding.

	Overlapping voicings can hold the same key more than once, so each
	(channel, note) keeps a count of outstanding note-ons.  Only the release
	that brings the count to zero sends note_off.
	"""

	def __init__ (self, port: typing.Optional[typing.Any] = None, name: typing.Optional[str] = None) -> None:

		"""
		Wrap an opened ``mido`` output port, or ``None`` for a silent output.
		"""

		self.port = port
		self.name = name
		self.active_notes: typing.Dict[typing.Tuple[int, int], int] = {}


	@classmethod
	def open (cls, device_name: typing.Optional[str] = None) -> "MidiOutput":

		"""
		Open a device by name (or auto-discover one); silent if none is available.
		"""

		name, port = chordflow.midi_utils.select_output_device(device_name)

		return cls(port=port, name=name)


	@property
	def loaded (self) -> bool:

		"""True when a real port is attached."""

		return self.port is not None


	def _send (self, message: mido.Message) -> None:

		if self.port is None:
			return

		try:
			self.port.send(message)
		except Exception:
			logger.exception("MIDI send failed (device may be disconnected)")


	def note_on (self, channel: int, note: int, velocity: int) -> None:

		"""
		Start (or retrigger) a note and count it as held.
		"""

		key = (channel, note)
		self.active_notes[key] = self.active_notes.get(key, 0) + 1
		self._send(mido.Message('note_on', channel=channel, note=note, velocity=velocity))


	def note_off (self, channel: int, note: int) -> None:

		"""
		Release one hold of a note; note_off is sent when the last hold ends.

		A no-op if the note is not sounding.
		"""

		key = (channel, note)
		count = self.active_notes.get(key, 0)

		if count == 0:
			return

		if count > 1:
			self.active_notes[key] = count - 1
			return

		self.silence(channel, note)


	def silence (self, channel: int, note: int) -> None:

		"""Send note_off now and forget every hold of the note (a no-op if it is not sounding)."""

		if self.active_notes.pop((channel, note), None) is None:
			return

		self._send(mido.Message('note_off', channel=channel, note=note, velocity=0))


	def release_channel (self, channel: int) -> None:

		"""
		Send note_off for every active note on a channel.
		"""

		for active_channel, note in sorted(self.active_notes):
			if active_channel == channel:
				self.silence(active_channel, note)


	def close (self) -> None:

		"""
		Silence every active note and close the port.
		"""

		for channel, note in sorted(self.active_notes):
			self.silence(channel, note)

		if self.port is not None:
			try:
				self.port.close()
			except Exception:
				logger.exception("Failed to close MIDI output")

			self.port = None


def _midi_velocity (base: int, velocity: float) -> int:

	"""Scale a normalised velocity onto ``base`` and keep it a valid non-zero MIDI value."""

	value = int(round(base * velocity))

	return max(1, min(chordflow.constants.velocity.MAX_MIDI_VELOCITY, value))


class MidiChordVoice:

	"""
	Plays a chord's pitch classes as a stacked voicing on one MIDI channel.

	With ``strum`` greater than zero, each note starts that many seconds after
	the previous one (the "guitar" instrument).
	"""

	def __init__ (
		self,
		output: MidiOutput,
		transport: chordflow.transport.Transport,
		channel: int = chordflow.constants.MIDI_CHORD_CHANNEL,
		octave: int = 4,
		strum: float = 0.0,
		velocity: int = chordflow.constants.velocity.CHORD_MIDI_VELOCITY
	) -> None:

		self.output = output
		self.transport = transport
		self.channel = channel
		self.octave = octave
		self.strum = strum
		self.velocity = velocity


	@property
	def loaded (self) -> bool:

		return self.output.loaded


	def attack_release (self, pitches: typing.Sequence[str], duration: str, time: float, velocity: float = 1.0) -> None:

		"""
		Arm note-on at ``time`` and note-off after ``duration`` for every chord tone.
		"""

		length = self.transport.seconds(duration)
		midi_velocity = _midi_velocity(self.velocity, velocity)

		for i, note in enumerate(chordflow.chords.voice_upward(pitches, self.octave)):

			onset = time + i * self.strum

			self.transport.schedule(lambda _t, n=note: self.output.note_on(self.channel, n, midi_velocity), onset)
			self.transport.schedule(lambda _t, n=note: self.output.note_off(self.channel, n), onset + length)


	def release_all (self) -> None:

		self.output.release_channel(self.channel)


class MidiDrumVoice:

	"""
	A one-shot percussion voice bound to a single General MIDI drum key.
	"""

	def __init__ (
		self,
		output: MidiOutput,
		transport: chordflow.transport.Transport,
		note: int,
		channel: int = chordflow.constants.MIDI_DRUM_CHANNEL
	) -> None:

		self.output = output
		self.transport = transport
		self.note = note
		self.channel = channel


	@property
	def loaded (self) -> bool:

		return self.output.loaded


	def attack_release (self, pitch: typing.Optional[str], duration: str, time: float, velocity: float = 1.0) -> None:

		"""
		Arm one hit; ``pitch`` is ignored because the drum key is fixed.
		"""

		midi_velocity = _midi_velocity(chordflow.constants.velocity.MAX_MIDI_VELOCITY, velocity)

		self.transport.schedule(lambda _t: self.output.note_on(self.channel, self.note, midi_velocity), time)
		self.transport.schedule(lambda _t: self.output.note_off(self.channel, self.note), time + self.transport.seconds(duration))


	def release_all (self) -> None:

		self.output.silence(self.channel, self.note)


def midi_voices (
	output: MidiOutput,
	transport: chordflow.transport.Transport,
	instrument: str = "piano"
) -> typing.Tuple[MidiChordVoice, typing.Dict[str, MidiDrumVoice]]:

	"""Build the chord voice and the kick / snare / hi-hat voices on one output.

	Parameters:
		output: The MIDI output shared by every voice.
		transport: The timeline voices arm their notes on.
		instrument: ``"piano"`` (block chords) or ``"guitar"`` (strummed).

	Raises:
		ValueError: If the instrument is unknown.
	"""

	if instrument not in INSTRUMENTS:
		raise ValueError(f"Unknown instrument: {instrument!r}. Available: {list(INSTRUMENTS)}")

	chord_voice = MidiChordVoice(
		output = output,
		transport = transport,
		strum = GUITAR_STRUM if instrument == "guitar" else 0.0
	)

	percussion = {
		name: MidiDrumVoice(output, transport, note)
		for name, note in chordflow.constants.gm_drums.GM_DRUM_MAP.items()
	}

	return chord_voice, percussion


async def wait_for_voices (voices: typing.Iterable[Voice], timeout: float = DEFAULT_LOAD_TIMEOUT, poll: float = 0.1) -> bool:

	"""Wait until every voice reports ``loaded``, giving up after ``timeout`` seconds.

	Returns:
		True if all voices loaded in time, False on timeout.  A timeout is
		logged but is not an error: playback proceeds with whatever is ready.
	"""

	pending = list(voices)

	async def _poll () -> None:
		while not all(voice.loaded for voice in pending):
			await asyncio.sleep(poll)

	try:
		await asyncio.wait_for(_poll(), timeout=timeout)
	except asyncio.TimeoutError:
		missing = sum(1 for voice in pending if not voice.loaded)
		logger.warning(f"{missing} of {len(pending)} voices not ready after {timeout:.1f}s - proceeding anyway")
		return False

	logger.info("All voices loaded")

	return True
