"""CHIP-8 display operations."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.display import draw_sprite
from chix8.registers import read_v, set_flag
from chix8.constants import MEMORY_MASK

# Largest sprite DXYN can ask for
MAX_SPRITE_ROWS = 16


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    sprite_x = read_v(state.V, instruction.x)
    sprite_y = read_v(state.V, instruction.y)

    addresses = (jnp.astype(state.I, jnp.int32) + jnp.arange(MAX_SPRITE_ROWS)) & MEMORY_MASK
    rows = state.memory[addresses]

    display, collision = draw_sprite(state.display, rows, sprite_x, sprite_y, instruction.n)
    return state.replace(
        display=display,
        V=set_flag(state.V, collision)
    )
