import logging
import typing

import mido

logger = logging.getLogger(__name__)

def select_output_device(device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:
    """
    Select and open a MIDI output port for playback.

    If `device_name` is provided, attempts to open that specific device.
    If `device_name` is None, auto-discovers available devices and opens the
    first one (logging the others so the user can pick one in the config).
    If nothing can be opened, logs the problem and returns (None, None) so the
    caller can carry on without sound.

    Returns:
        A tuple of (device_name, midi_out_object) or (None, None) on failure.
    """
    try:
        outputs = mido.get_output_names()
        logger.info(f"Available MIDI outputs: {outputs}")

        if not outputs:
            logger.error("No MIDI output devices found - playback will be silent.")
            return None, None

        if device_name is not None:
            if device_name not in outputs:
                logger.error(
                    f"MIDI output device '{device_name}' not found. "
                    f"Available devices: {outputs}"
                )
                return None, None
            selected_name = device_name
        else:
            selected_name = outputs[0]
            if len(outputs) > 1:
                logger.info(
                    f"Several MIDI outputs found - using '{selected_name}'. "
                    f"Set midi.device_name in the config to choose another."
                )

        midi_out = mido.open_output(selected_name)
        logger.info(f"Opened MIDI output: {selected_name}")
        return selected_name, midi_out

    except Exception as e:
        logger.error(f"Failed to open MIDI output: {e}")
        return None, None
