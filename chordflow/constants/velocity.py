"""Velocity constants.

Voices accept a normalised velocity (0.0-1.0) and scale it to the MIDI range
(0-127) when sending.
"""

DEFAULT_VELOCITY = 1.0

# MIDI standard range
MIN_MIDI_VELOCITY = 0
MAX_MIDI_VELOCITY = 127

# Chords are sent a little softer than full scale so the drums sit on top.
CHORD_MIDI_VELOCITY = 90
