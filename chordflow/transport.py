import asyncio
import heapq
import itertools
import logging
import time
import typing

import chordflow.constants.durations


logger = logging.getLogger(__name__)


TransportCallback = typing.Callable[[float], typing.Any]


class Transport:

	"""
	The shared timeline that every chord, drum hit and note-off is armed on.

	Callbacks are kept in an ordered queue keyed by their offset (seconds from
	the start of the transport) and fire from :meth:`advance_to`, the single
	tick entry point.  This base class never advances by itself: tests and
	offline renders drive it explicitly, while :class:`ClockTransport` drives
	it from the wall clock.

	Each callback receives the offset it was armed for, which voices use as
	the onset time.
	"""

	def __init__ (self, bpm: float = 120) -> None:

		"""
		Initialize a stopped transport at position zero.
		"""

		self._queue: typing.List[typing.Tuple[float, int, TransportCallback]] = []
		self._counter = itertools.count()
		self.position = 0.0
		self.running = False

		self.bpm: float = 0
		self.seconds_per_beat = 0.0
		self.set_bpm(bpm)


	def set_bpm (self, bpm: float) -> None:

		"""
		Set the tempo used to convert note-value tokens into seconds.
		"""

		if bpm <= 0:
			raise ValueError("BPM must be positive")

		self.bpm = bpm
		self.seconds_per_beat = 60.0 / bpm

		logger.info(f"BPM set to {self.bpm:.2f}")


	def seconds (self, duration: str) -> float:

		"""
		Return the length of a note-value token (``"4n"``, ``"1n"``, ...) in seconds.
		"""

		if duration not in chordflow.constants.durations.TOKEN_BEATS:
			raise ValueError(f"Unknown duration token: {duration!r}")

		return chordflow.constants.durations.TOKEN_BEATS[duration] * self.seconds_per_beat


	async def prepare (self) -> None:

		"""
		Warm up the timing backend.  The base transport needs nothing.
		"""

		return None


	def schedule (self, callback: TransportCallback, offset: float) -> None:

		"""
		Arm ``callback`` to fire at ``offset`` seconds on the timeline.
		"""

		if offset < 0:
			raise ValueError("Offset cannot be negative")

		heapq.heappush(self._queue, (offset, next(self._counter), callback))


	def cancel (self, after: float = 0.0) -> None:

		"""
		Drop every armed callback at or after ``after`` seconds.
		"""

		self._queue = [entry for entry in self._queue if entry[0] < after]
		heapq.heapify(self._queue)


	def start (self) -> None:

		"""
		Start the transport from its current position.
		"""

		self.running = True

		logger.debug(f"Transport started with {len(self._queue)} events armed")


	def stop (self) -> None:

		"""
		Stop the transport and rewind to zero.  Armed callbacks are kept; use :meth:`cancel`.
		"""

		self.running = False
		self.position = 0.0


	def now (self) -> float:

		"""
		Return the current transport time in seconds.
		"""

		return self.position


	@property
	def pending (self) -> int:

		"""Return how many callbacks are armed."""

		return len(self._queue)


	@property
	def next_offset (self) -> typing.Optional[float]:

		"""Return the offset of the earliest armed callback, or ``None``."""

		if not self._queue:
			return None

		return self._queue[0][0]


	def advance_to (self, position: float) -> int:

		"""Fire every callback due at or before ``position`` and return how many fired.

		Callbacks fire in non-decreasing offset order; equal offsets fire in the
		order they were armed.  A callback that arms another one at an offset
		already reached sees it fire within the same call.  If a callback stops
		the transport, the remaining callbacks stay where they are.

		A failing callback is logged and skipped so the timeline keeps moving.
		"""

		if not self.running:
			return 0

		fired = 0

		while self.running and self._queue and self._queue[0][0] <= position:

			offset, _, callback = heapq.heappop(self._queue)
			self.position = max(self.position, offset)

			try:
				callback(offset)
			except Exception:
				logger.exception(f"Transport callback at {offset:.3f}s failed")

			fired += 1

		if self.running:
			self.position = max(self.position, position)

		return fired


	def advance (self, seconds: float) -> int:

		"""
		Move the transport forward by ``seconds`` and fire what becomes due.
		"""

		return self.advance_to(self.position + seconds)


	def run_until_idle (self) -> int:

		"""
		Fire armed callbacks one offset at a time until the queue empties or the transport stops.
		"""

		fired = 0

		while self.running and self._queue:
			fired += self.advance_to(self._queue[0][0])

		return fired


class ClockTransport (Transport):

	"""
	A :class:`Transport` driven in real time by an asyncio task.

	The task sleeps until the next armed offset, then calls
	:meth:`advance_to` with the elapsed wall-clock time.  By default it uses
	a hybrid sleep+spin wait for the final sub-millisecond before each event
	to reduce timing jitter.
	"""

	def __init__ (self, bpm: float = 120, spin_wait: bool = True, idle_interval: float = 0.05) -> None:

		"""Initialize the realtime transport.

		Parameters:
			bpm: Initial tempo.
			spin_wait: When True, busy-wait the last millisecond before each
				event instead of relying on ``asyncio.sleep()`` alone.
			idle_interval: How long to sleep when nothing is armed.
		"""

		super().__init__(bpm)

		self.task: typing.Optional[asyncio.Task] = None
		self._start_time = 0.0
		self._run_id = 0
		self._spin_wait = spin_wait
		# Sleep to within this many seconds of the target, then spin.
		self._spin_threshold: float = 0.001
		self._idle_interval = idle_interval


	async def prepare (self) -> None:

		"""
		Make sure an event loop is running before the first start.
		"""

		asyncio.get_running_loop()


	def start (self) -> None:

		"""Start the clock task.  Must be called from within a running event loop."""

		if self.running:
			return

		super().start()

		self._run_id += 1
		self._start_time = time.perf_counter() - self.position
		self.task = asyncio.get_running_loop().create_task(self._run_loop(self._run_id))


	def stop (self) -> None:

		"""
		Stop the clock task.  Safe to call from inside a transport callback.
		"""

		was_running = self.running
		super().stop()
		self._run_id += 1

		task = self.task
		self.task = None

		if was_running and task is not None and not task.done():
			try:
				current = asyncio.current_task()
			except RuntimeError:
				current = None

			# The loop exits by itself when the stop comes from one of its own callbacks.
			if task is not current:
				task.cancel()


	def now (self) -> float:

		"""
		Return the elapsed wall-clock time since start while running.
		"""

		if self.running:
			return time.perf_counter() - self._start_time

		return self.position


	async def _run_loop (self, run_id: int) -> None:

		"""Advance the timeline from the wall clock until stopped."""

		while self.running and run_id == self._run_id:

			self.advance_to(time.perf_counter() - self._start_time)

			if not self.running or run_id != self._run_id:
				break

			next_offset = self.next_offset

			if next_offset is None:
				target_time = time.perf_counter() + self._idle_interval
			else:
				target_time = self._start_time + next_offset

			sleep_time = target_time - time.perf_counter()

			if sleep_time > 0:
				if self._spin_wait and sleep_time > self._spin_threshold:
					await asyncio.sleep(sleep_time - self._spin_threshold)
					while time.perf_counter() < target_time:
						pass
				else:
					await asyncio.sleep(sleep_time)
			else:
				# Yield so other tasks run even when events are back to back.
				await asyncio.sleep(0)
