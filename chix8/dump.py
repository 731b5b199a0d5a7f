"""Plain-Python snapshots of a machine state."""

from typing import Any, Dict

import numpy as np

from chix8.state import EmulatorState
from chix8.stack import depth


def dump_state(state: EmulatorState) -> Dict[str, Any]:
    """Convert the register file, stack and status flags to Python values.

    Memory and display are left out; read them from the state directly.
    """
    stack_depth = depth(state.stack)
    return {
        "V": [int(v) for v in np.asarray(state.V)],
        "I": int(state.I),
        "pc": int(state.pc),
        "delay_timer": int(state.delay_timer),
        "sound_timer": int(state.sound_timer),
        "stack": [int(address) for address in np.asarray(state.stack.data)[:stack_depth]],
        "keypad": [bool(key) for key in np.asarray(state.keypad)],
        "waiting_for_key": bool(state.waiting_for_key),
        "key_register": int(state.key_register),
        "fault": int(state.fault),
    }


def format_state(state: EmulatorState) -> str:
    """Render a register table, four general registers per line."""
    dump = dump_state(state)
    lines = []
    for i in range(0, 16, 4):
        lines.append(" ".join(f"V{j:X}:{dump['V'][j]:02X}" for j in range(i, i + 4)))
    lines.append(f"I:{dump['I']:04X} PC:{dump['pc']:04X} DT:{dump['delay_timer']:02X} ST:{dump['sound_timer']:02X}")
    stack = " ".join(f"{address:03X}" for address in dump["stack"]) or "-"
    lines.append(f"Stack[{len(dump['stack'])}]: {stack}")
    if dump["waiting_for_key"]:
        lines.append(f"Waiting for key into V{dump['key_register']:X}")
    return "\n".join(lines)
