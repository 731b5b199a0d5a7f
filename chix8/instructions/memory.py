"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.registers import read_v, write_v, wrap_u16


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return state.replace(V=write_v(state.V, instruction.x, instruction.byte))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX. Wraps at 8 bits, VF is not touched."""
    total = read_v(state.V, instruction.x) + instruction.byte
    return state.replace(V=write_v(state.V, instruction.x, total))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=wrap_u16(instruction.addr))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    return state.replace(V=write_v(state.V, instruction.x, random_value & instruction.byte), rng=key)
