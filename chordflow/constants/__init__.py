"""Constants for chordflow.

This package contains three sets of constants:

- ``chordflow.constants.durations`` - Beat lengths and the note-value tokens voices accept
- ``chordflow.constants.velocity`` - Normalised (0-1) and MIDI velocity constants
- ``chordflow.constants.gm_drums`` - General MIDI percussion notes used by the drum voices
"""

# MIDI channels are 0-indexed; channel 9 is the General MIDI percussion channel.

MIDI_CHORD_CHANNEL = 0
MIDI_DRUM_CHANNEL = 9
