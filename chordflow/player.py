"""Playback session - arms compiled chord events on the transport and tracks position.

:class:`PlaybackSession` owns one song's playback lifecycle::

    IDLE → PRIMING → SCHEDULED → RUNNING → IDLE
                     (stop() passes through CANCELLING from any state)

Every ``play_*`` call first performs a full :meth:`PlaybackSession.stop`, so
at most one session's events are ever armed.  A session counter guards the
callbacks: anything armed by an earlier session is ignored if it somehow
fires, and a ``play_*`` call that is overtaken while warming up gives up
before arming anything.

Observers read :attr:`~PlaybackSession.position` and
:attr:`~PlaybackSession.is_playing`, or subscribe with
:meth:`~PlaybackSession.on` to ``"start"``, ``"position"`` and ``"stop"``.

Example:
	```python
	transport = chordflow.transport.ClockTransport()
	output = chordflow.voices.MidiOutput.open()
	chord_voice, percussion = chordflow.voices.midi_voices(output, transport)

	session = PlaybackSession(song, transport, chord_voice, percussion)
	session.on("position", lambda pos: print(pos.section_index, pos.chord_index))

	await session.play_all()
	await session.wait()
	```
"""

import asyncio
import dataclasses
import enum
import logging
import random
import typing

import chordflow.compiler
import chordflow.drums
import chordflow.event_emitter
import chordflow.song
import chordflow.transport
import chordflow.voices


logger = logging.getLogger(__name__)


class PlaybackState (enum.Enum):

	"""Lifecycle of a playback session."""

	IDLE = "idle"
	PRIMING = "priming"
	SCHEDULED = "scheduled"
	RUNNING = "running"
	CANCELLING = "cancelling"


@dataclasses.dataclass(frozen=True)
class PlaybackPosition:

	"""The chord currently sounding; both indexes are -1 when idle."""

	section_index: int = -1
	chord_index: int = -1

	@property
	def idle (self) -> bool:

		"""Return True when nothing is playing."""

		return self.section_index < 0


IDLE_POSITION = PlaybackPosition()


@dataclasses.dataclass
class PlaybackSettings:

	"""
	Options that shape what a play action arms.

	Attributes:
		drums: Accompany every chord with a drum pattern.
		drum_pattern: ``"basic"``, ``"rock"``, ``"jazz"`` or ``"funk"``.
		drum_complexity: 0-100 (clamped).
		load_timeout: Seconds to wait for voices on the first play.
	"""

	drums: bool = True
	drum_pattern: str = "basic"
	drum_complexity: float = 50
	load_timeout: float = chordflow.voices.DEFAULT_LOAD_TIMEOUT

	def __post_init__ (self) -> None:

		self.drum_complexity = max(0, min(100, self.drum_complexity))


class PlaybackSession:

	"""
	Plays a song's sections through injected voices on an injected transport.
	"""

	def __init__ (
		self,
		song: chordflow.song.Song,
		transport: chordflow.transport.Transport,
		chord_voice: chordflow.voices.Voice,
		percussion: typing.Optional[typing.Mapping[str, chordflow.voices.Voice]] = None,
		settings: typing.Optional[PlaybackSettings] = None,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""Create an idle session.

		Parameters:
			song: The song whose sections are played.
			transport: Timeline that events are armed on.
			chord_voice: Voice that sounds each chord's pitch classes.
			percussion: Voices keyed ``"kick"``, ``"snare"`` and ``"hihat"``.
				Missing voices simply stay silent.
			settings: Drum and warm-up options.
			rng: Randomness for drum humanisation.
		"""

		self.song = song
		self.transport = transport
		self.chord_voice = chord_voice
		self.percussion: typing.Dict[str, chordflow.voices.Voice] = dict(percussion or {})
		self.settings = settings if settings is not None else PlaybackSettings()
		self.events = chordflow.event_emitter.EventEmitter()

		self._rng = rng if rng is not None else random.Random()
		self._state = PlaybackState.IDLE
		self._position = IDLE_POSITION
		self._is_playing = False
		self._session = 0
		self._ready = False
		self._finished: typing.Optional[asyncio.Event] = None


	@property
	def state (self) -> PlaybackState:

		return self._state


	@property
	def position (self) -> PlaybackPosition:

		"""The (section, chord) currently sounding."""

		return self._position


	@property
	def is_playing (self) -> bool:

		return self._is_playing


	@property
	def voices (self) -> typing.List[chordflow.voices.Voice]:

		"""Every voice this session triggers."""

		return [self.chord_voice, *self.percussion.values()]


	def on (self, event_name: str, callback: typing.Callable[..., typing.Any]) -> None:

		"""
		Register an observer for ``"start"``, ``"position"`` or ``"stop"``.
		"""

		self.events.on(event_name, callback)


	async def play_section (self, section: typing.Union[int, chordflow.song.Section]) -> None:

		"""Play one section (by index or object), repeated ``loop_count`` times.

		Raises:
			IndexError: If the index is not a section of the song.
			ValueError: If the section object is not part of the song.
		"""

		if isinstance(section, chordflow.song.Section):
			index = self.song.index_of(section)
		else:
			index = section
			if not 0 <= index < len(self.song.sections):
				raise IndexError(f"Section index {index} out of range (song has {len(self.song.sections)} sections)")

		target = self.song.sections[index]

		def build (bpm: float, drums: bool) -> chordflow.compiler.CompiledSchedule:
			return chordflow.compiler.compile_events(target, bpm, drums=drums, section_index=index)

		await self._play(build, f"section {index} ({target.name})")


	async def play_all (self) -> None:

		"""
		Play every section of the song in order.
		"""

		def build (bpm: float, drums: bool) -> chordflow.compiler.CompiledSchedule:
			return chordflow.compiler.compile_events(self.song.sections, bpm, drums=drums)

		await self._play(build, "song")


	async def wait (self) -> None:

		"""
		Wait until the current playback stops (returns at once when idle).
		"""

		if self._finished is None or self._state is PlaybackState.IDLE:
			return

		await self._finished.wait()


	def stop (self) -> None:

		"""Stop playback immediately.  Safe to call in any state, any number of times.

		Stops the transport, cancels everything armed, releases all voices and
		resets the position to idle.
		"""

		was_active = self._state is not PlaybackState.IDLE

		self._state = PlaybackState.CANCELLING
		self._session += 1

		self.transport.stop()
		self.transport.cancel(0)

		for voice in self.voices:
			try:
				voice.release_all()
			except Exception:
				logger.exception("Failed to release voice")

		self._position = IDLE_POSITION
		self._is_playing = False
		self._state = PlaybackState.IDLE

		if self._finished is not None:
			self._finished.set()

		if was_active:
			logger.info("Playback stopped")
			self.events.emit("stop")


	async def _play (self, build: typing.Callable[[float, bool], chordflow.compiler.CompiledSchedule], label: str) -> None:

		"""Tear down, warm up, arm and start one playback session."""

		self.stop()

		session = self._session
		self._finished = asyncio.Event()
		self._state = PlaybackState.PRIMING

		await self._prime()

		if session != self._session:
			# Another play or stop happened while warming up.
			logger.debug(f"Playback of {label} superseded before it started")
			return

		self._state = PlaybackState.SCHEDULED

		bpm = chordflow.song.clamp_tempo(self.song.tempo)
		self.transport.set_bpm(bpm)

		schedule = build(bpm, self.settings.drums)

		for event in schedule.events:
			self.transport.schedule(self._event_callback(event, session, bpm), event.offset)

		self.transport.schedule(self._terminal_callback(session), schedule.total_duration)

		self._is_playing = True
		self.transport.start()
		self._state = PlaybackState.RUNNING

		logger.info(f"Playing {label}: {len(schedule.events)} chords over {schedule.total_duration:.2f}s")
		self.events.emit("start", label)


	async def _prime (self) -> None:

		"""Warm up the transport and wait for voices, once per session object.

		Failures are logged and playback continues without guaranteed sound.
		"""

		if self._ready:
			return

		try:
			await self.transport.prepare()
			await chordflow.voices.wait_for_voices(self.voices, timeout=self.settings.load_timeout)
		except Exception:
			logger.exception("Audio warm-up failed - continuing in degraded mode")

		self._ready = True


	def _event_callback (self, event: chordflow.compiler.PlaybackEvent, session: int, bpm: float) -> chordflow.transport.TransportCallback:

		"""Return the callback that sounds one chord event."""

		def fire (time: float) -> None:

			if session != self._session:
				return

			self._position = PlaybackPosition(event.section_index, event.chord_index)
			self.events.emit("position", self._position)

			self.chord_voice.attack_release(event.chord.pitch_classes, event.duration, time)

			if event.drum_trigger:
				self._play_drums(bpm, time)

		return fire


	def _terminal_callback (self, session: int) -> chordflow.transport.TransportCallback:

		"""Return the callback that ends the session after the last chord."""

		def finish (time: float) -> None:

			if session != self._session:
				return

			logger.info("Playback finished")
			self.stop()

		return finish


	def _play_drums (self, bpm: float, time: float) -> None:

		"""Arm one bar of the drum pattern starting at ``time``."""

		hits = chordflow.drums.drum_pattern(
			bpm,
			self.settings.drum_pattern,
			self.settings.drum_complexity,
			base_time = time,
			rng = self._rng
		)

		for hit in hits:
			voice = self.percussion.get(hit.instrument)

			if voice is not None:
				voice.attack_release(hit.pitch, hit.duration, hit.time, hit.velocity)
