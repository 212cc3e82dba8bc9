"""General MIDI percussion notes for the three drum voices.

The drum pattern generator names its instruments ``"kick"``, ``"snare"`` and
``"hihat"``; ``GM_DRUM_MAP`` maps those names to the standard GM Level 1 keys
played on the percussion channel.
"""

import typing


KICK_1 = 36
SNARE_1 = 38
HI_HAT_CLOSED = 42


GM_DRUM_MAP: typing.Dict[str, int] = {
	"kick": KICK_1,
	"snare": SNARE_1,
	"hihat": HI_HAT_CLOSED,
}
