import argparse
import asyncio
import logging
import os
import random
import typing

import yaml

import chordflow.composer
import chordflow.player
import chordflow.song
import chordflow.transport
import chordflow.voices


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = 'chordflow.yaml'

DEFAULT_CONFIG: typing.Dict[str, typing.Dict[str, typing.Any]] = {
	'midi': {
		'device_name': None,
	},
	'song': {
		'key': 'C',
		'scale': 'major',
		'genre': 'pop',
		'tempo': chordflow.song.DEFAULT_TEMPO,
		'seed': None,
	},
	'playback': {
		'instrument': 'piano',
		'drums': True,
		'drum_pattern': 'basic',
		'drum_complexity': 50,
		'load_timeout': chordflow.voices.DEFAULT_LOAD_TIMEOUT,
	},
}


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> dict:

	"""
	Load configuration from a YAML file, filling any missing keys with defaults.
	"""

	config = {group: dict(values) for group, values in DEFAULT_CONFIG.items()}

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return config

	with open(config_path, 'r') as f:
		loaded = yaml.safe_load(f) or {}

	if not isinstance(loaded, dict):
		logger.warning(f"Config file {config_path} is not a mapping. Using defaults.")
		return config

	for group, values in loaded.items():
		if group not in config or not isinstance(values, dict):
			logger.warning(f"Ignoring unknown config section {group!r}")
			continue
		config[group].update(values)

	return config


def parse_args (argv: typing.Optional[typing.Sequence[str]] = None) -> argparse.Namespace:

	"""
	Parse command line options.  Anything given here overrides the config file.
	"""

	parser = argparse.ArgumentParser(prog='chordflow', description="Generate a chord progression song and play it over MIDI.")

	parser.add_argument('--config', default=DEFAULT_CONFIG_PATH, help="YAML config file (default: %(default)s)")
	parser.add_argument('--key', help="Tonic, e.g. C, F#, Bb")
	parser.add_argument('--scale', choices=['major', 'minor'])
	parser.add_argument('--genre', help="pop, rock, emotional or complex")
	parser.add_argument('--tempo', type=float, help="BPM (clamped to 40-240)")
	parser.add_argument('--seed', type=int, help="Seed for a repeatable song")
	parser.add_argument('--device', help="MIDI output device name")
	parser.add_argument('--instrument', choices=list(chordflow.voices.INSTRUMENTS))
	parser.add_argument('--no-drums', action='store_true', help="Play chords only")
	parser.add_argument('--pattern', help="Drum pattern: basic, rock, jazz or funk")
	parser.add_argument('--complexity', type=float, help="Drum complexity 0-100")
	parser.add_argument('--section', type=int, help="Play only this section (0-based index)")
	parser.add_argument('--dry-run', action='store_true', help="Print the song without playing it")

	return parser.parse_args(argv)


def apply_overrides (config: dict, args: argparse.Namespace) -> dict:

	"""
	Merge command line options into a loaded config.
	"""

	overrides = {
		('midi', 'device_name'): args.device,
		('song', 'key'): args.key,
		('song', 'scale'): args.scale,
		('song', 'genre'): args.genre,
		('song', 'tempo'): args.tempo,
		('song', 'seed'): args.seed,
		('playback', 'instrument'): args.instrument,
		('playback', 'drum_pattern'): args.pattern,
		('playback', 'drum_complexity'): args.complexity,
	}

	for (group, key), value in overrides.items():
		if value is not None:
			config[group][key] = value

	if args.no_drums:
		config['playback']['drums'] = False

	return config


def build_song (song_config: dict) -> chordflow.song.Song:

	"""
	Generate a song from the ``song`` config group.
	"""

	seed = song_config.get('seed')
	rng = random.Random(seed)

	song = chordflow.song.Song(
		key_root = song_config['key'],
		scale_type = song_config['scale'],
		genre = song_config['genre'],
		tempo = song_config['tempo']
	)

	chordflow.composer.regenerate(song, rng=rng)

	return song


def format_song (song: chordflow.song.Song) -> str:

	"""Render the song structure as plain text, one section per line."""

	lines = [f"{song.key_root} {song.scale_type}, {song.genre}, {song.tempo:g} BPM"]

	for index, section in enumerate(song.sections):
		chords = " ".join(chord.symbol for chord in section.chords) or "-"
		numerals = " ".join(chord.roman_numeral for chord in section.chords)
		lines.append(f"{index:>2}  {section.name:<11} x{section.loop_count}  {chords:<28} {numerals}")

	return "\n".join(lines)


async def play (song: chordflow.song.Song, config: dict, section: typing.Optional[int] = None) -> None:

	"""
	Open MIDI, play the song (or one section) and wait for it to finish.
	"""

	playback = config['playback']

	transport = chordflow.transport.ClockTransport(bpm=song.tempo)
	output = chordflow.voices.MidiOutput.open(config['midi'].get('device_name'))
	chord_voice, percussion = chordflow.voices.midi_voices(output, transport, playback['instrument'])

	settings = chordflow.player.PlaybackSettings(
		drums = playback['drums'],
		drum_pattern = playback['drum_pattern'],
		drum_complexity = playback['drum_complexity'],
		load_timeout = playback['load_timeout']
	)

	session = chordflow.player.PlaybackSession(song, transport, chord_voice, percussion, settings)
	session.on("position", lambda pos: logger.info(
		f"{song.sections[pos.section_index].name}: {song.sections[pos.section_index].chords[pos.chord_index].symbol}"
	))

	try:
		if section is None:
			await session.play_all()
		else:
			await session.play_section(section)

		await session.wait()

	finally:
		session.stop()
		output.close()


def main (argv: typing.Optional[typing.Sequence[str]] = None) -> None:

	"""
	Main entry point for the chordflow application.
	"""

	logging.basicConfig(level=logging.INFO)

	args = parse_args(argv)
	config = apply_overrides(load_config(args.config), args)

	logger.info("Chordflow starting...")

	song = build_song(config['song'])

	print(format_song(song))

	if args.dry_run:
		return

	try:
		asyncio.run(play(song, config, args.section))
	except KeyboardInterrupt:
		logger.info("Stopping...")


if __name__ == "__main__":
	main()
