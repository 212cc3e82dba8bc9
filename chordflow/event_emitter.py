import logging
import typing


logger = logging.getLogger(__name__)


CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	A simple synchronous event emitter for playback observers.

	Listeners run inside transport callbacks, so a failing listener is logged
	and skipped instead of interrupting playback.
	"""

	def __init__ (self) -> None:

		"""
		Initialize an empty event registry.
		"""

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.
		"""

		self._listeners.setdefault(event_name, []).append(callback)

	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if callback not in self._listeners.get(event_name, []):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call every listener for an event, in registration order.
		"""

		for callback in list(self._listeners.get(event_name, [])):

			try:
				callback(*args, **kwargs)
			except Exception:
				logger.exception(f"Listener for {event_name!r} failed")
