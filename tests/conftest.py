import typing

import mido
import pytest


class FakeMidiOut:

	"""Minimal MIDI output stub that records what it is sent."""

	def __init__ (self) -> None:

		self.sent: list[mido.Message] = []
		self.closed = False


	def send (self, message: mido.Message) -> None:

		"""Remember outgoing MIDI messages."""

		self.sent.append(message)


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


# Module-level reference so tests can inspect the most recently opened FakeMidiOut.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> list[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	fake = FakeMidiOut()
	_current_fake_output = fake
	return fake


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output for all tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


@pytest.fixture
def fake_output () -> typing.Callable[[], typing.Optional[FakeMidiOut]]:

	"""Return a getter for the fake output opened most recently."""

	return lambda: _current_fake_output


class RecordingVoice:

	"""A voice that records every trigger instead of making sound."""

	def __init__ (self, loaded: bool = True) -> None:

		self.loaded = loaded
		self.triggers: list[tuple] = []
		self.releases = 0


	def attack_release (self, pitches: typing.Any, duration: str, time: float, velocity: float = 1.0) -> None:

		"""Record one trigger."""

		self.triggers.append((pitches, duration, time, velocity))


	def release_all (self) -> None:

		"""Count releases."""

		self.releases += 1


@pytest.fixture
def chord_voice () -> RecordingVoice:

	"""A recording chord voice."""

	return RecordingVoice()


@pytest.fixture
def percussion () -> dict[str, RecordingVoice]:

	"""Recording kick, snare and hi-hat voices."""

	return {name: RecordingVoice() for name in ("kick", "snare", "hihat")}
