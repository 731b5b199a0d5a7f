"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.registers import read_v, write_v, wrap_u8, wrap_u16
from chix8.constants import (
    FONT_START, FONT_GLYPH_SIZE, MEMORY_MASK, NUM_REGISTERS, INSTRUCTION_SIZE
)
from chix8.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=write_v(state.V, instruction.x, state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=wrap_u8(state.V[instruction.x]))


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=wrap_u8(state.V[instruction.x]))


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I, wrapping at 16 bits. VF is not touched."""
    return state.replace(I=wrap_u16(jnp.astype(state.I, jnp.int32) + read_v(state.V, instruction.x)))


def pressed_key(keypad: jnp.ndarray) -> jnp.ndarray:
    """Lowest pressed key value, 0 if none is pressed."""
    return jnp.argmax(keypad)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With a key down the lowest pressed key lands in VX at once. Otherwise PC
    goes back onto this instruction and the machine is marked as waiting;
    ``emulator.step`` then resumes it.
    """
    def key_pressed_action(state):
        return state.replace(V=write_v(state.V, instruction.x, pressed_key(state.keypad)))

    def wait_action(state):
        return state.replace(
            pc=state.pc - INSTRUCTION_SIZE,
            waiting_for_key=jnp.ones((), dtype=jnp.bool_),
            key_register=wrap_u8(instruction.x)
        )

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX (low nibble)."""
    digit = read_v(state.V, instruction.x) & 0xF
    return state.replace(I=wrap_u16(FONT_START + digit * FONT_GLYPH_SIZE))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = read_v(state.V, instruction.x)

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(3)) & MEMORY_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def _register_window(state: EmulatorState, instruction: DecodedInstruction):
    """Mask of V0..VX and the (wrapped) addresses I..I+15."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & MEMORY_MASK
    return register_mask, indices


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    if state.increment_index_on_load_store:
        return wrap_u16(jnp.astype(state.I, jnp.int32) + instruction.x + 1)
    return state.I


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask, indices = _register_window(state, instruction)
    new_values = jnp.where(register_mask, state.V, state.memory[indices])
    return state.replace(
        memory=state.memory.at[indices].set(new_values),
        I=_advance_index(state, instruction)
    )


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask, indices = _register_window(state, instruction)
    return state.replace(
        V=jnp.where(register_mask, state.memory[indices], state.V),
        I=_advance_index(state, instruction)
    )


MISC_OPERATIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}

# Every low byte mapped to its branch; unassigned ones go to the trailing no_op
_BRANCHES = list(MISC_OPERATIONS.values()) + [no_op]
_BRANCH_INDEX = jnp.array(
    [list(MISC_OPERATIONS).index(byte) if byte in MISC_OPERATIONS else len(MISC_OPERATIONS)
     for byte in range(256)],
    dtype=jnp.int32
)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch FXNN instructions on their low byte."""
    return jax.lax.switch(_BRANCH_INDEX[instruction.byte], _BRANCHES, state, instruction)
