
"""
Chordflow - a chord progression generator with a scheduled MIDI player.

Pick a key, a scale and a genre.  Chordflow lays out a song form (Intro,
Verse, Pre-Chorus, Chorus, Bridge, Outro), fills each section with a
progression drawn from the genre, and plays it back as MIDI chords with a
drum accompaniment while reporting which chord is sounding.

What it does:

- **Theory-aware chords.** Every chord knows its scale degree, roman
  numeral and harmonic function.  Notes are spelled with consecutive letter
  names, so F major has a Bb rather than an A#.
- **Genre palettes.** Pop, rock, ballad and jazz / R&B progressions, with
  occasional colour substitutions (sus2, add9, maj7 ...) for variety.
  Pass a seeded ``random.Random`` to make a song repeatable.
- **Editable songs.** Add, remove and reorder sections and chords, change
  loop counts, slash basses and chord lengths.
- **Scheduled playback.** Chords and drums are armed on one transport
  timeline.  Stop and restart at any moment without stray notes.
- **Pure MIDI.** No sound engine.  Route to a synth, a DAW or a General
  MIDI player.

Minimal example:

    ```python
    import asyncio
    import random

    import chordflow

    async def main ():
        song = chordflow.Song("A", "minor", "rock", tempo=100)
        song.set_sections(chordflow.generate("A", "minor", "rock", rng=random.Random(1)))

        transport = chordflow.ClockTransport()
        output = chordflow.voices.MidiOutput.open()
        chord_voice, percussion = chordflow.voices.midi_voices(output, transport)

        session = chordflow.PlaybackSession(song, transport, chord_voice, percussion)
        await session.play_all()
        await session.wait()
        output.close()

    asyncio.run(main())
    ```

Package-level exports: ``generate``, ``scale_chords``, ``Song``, ``Section``,
``SectionType``, ``PlaybackSession``, ``PlaybackSettings``, ``Transport``,
``ClockTransport``.
"""

import chordflow.composer
import chordflow.player
import chordflow.song
import chordflow.theory
import chordflow.transport
import chordflow.voices


generate = chordflow.composer.generate
scale_chords = chordflow.theory.scale_chords
Song = chordflow.song.Song
Section = chordflow.song.Section
SectionType = chordflow.song.SectionType
PlaybackSession = chordflow.player.PlaybackSession
PlaybackSettings = chordflow.player.PlaybackSettings
Transport = chordflow.transport.Transport
ClockTransport = chordflow.transport.ClockTransport
