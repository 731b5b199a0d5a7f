"""Main CHIP-8 execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np

from chix8.state import EmulatorState
from chix8.decode import decode
from chix8.errors import ProgramTooLargeError, InvalidKeypadError
from chix8.constants import (
    PROGRAM_START, MAX_PROGRAM_SIZE, MEMORY_MASK, NUM_KEYS, INSTRUCTION_SIZE,
    FAULT_NONE, CPU_FREQUENCY, TIMER_FREQUENCY
)
from chix8.registers import write_v
from chix8.logging import scan_with_progress
from chix8.instructions.system import execute_system_instruction
from chix8.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_jump_with_offset_vx, execute_key_instruction
)
from chix8.instructions.alu import execute_alu_operation
from chix8.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chix8.instructions.display import execute_display
from chix8.instructions.misc import execute_misc_instruction, pressed_key


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    PC is expected to already point past ``instruction``, as left by ``fetch``.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.d,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset_vx if state.jump_uses_vx else execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_key_instruction,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def peek(state: EmulatorState) -> jnp.uint16:
    """Read the big-endian opcode at PC without advancing."""
    pc = jnp.astype(state.pc, jnp.int32)
    return _pack_u16(state.memory[pc & MEMORY_MASK], state.memory[(pc + 1) & MEMORY_MASK])


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = peek(state)
    return state.replace(pc=state.pc + INSTRUCTION_SIZE), instruction


def _run_cycle(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return execute(state, instruction)


def _resume_key_wait(state: EmulatorState) -> EmulatorState:
    """Poll the keypad for a pending FX0A; nothing else changes until a key is down."""
    def key_pressed_action(state):
        return state.replace(
            V=write_v(state.V, state.key_register, pressed_key(state.keypad)),
            waiting_for_key=jnp.zeros((), dtype=jnp.bool_),
            pc=state.pc + INSTRUCTION_SIZE
        )

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, lambda s: s, state)


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle.

    A faulted machine does not move. A machine waiting on FX0A only polls the
    keypad.
    """
    return jax.lax.cond(
        state.fault != FAULT_NONE,
        lambda s: s,
        lambda s: jax.lax.cond(s.waiting_for_key, _resume_key_wait, _run_cycle, s),
        state
    )


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def run_instruction(state, _):
    state = step(state)
    return state, state.display


@partial(jax.jit, static_argnums=(1, 2))
def run_instructions(state: EmulatorState, n: int, show_progress: bool = False) -> EmulatorState:
    """Run ``n`` steps inside a single ``jax.lax.scan``."""
    body = run_instruction
    if show_progress:
        body = scan_with_progress(n, desc=f"Running {n:,} instructions")(run_instruction)
    state, _ = jax.lax.scan(body, state, jnp.arange(n))
    return state


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, instructions_per_frame: int = CPU_FREQUENCY // TIMER_FREQUENCY) -> EmulatorState:
    """Run one 60 Hz frame: several steps followed by one timer tick."""
    state, _ = jax.lax.scan(run_instruction, state, length=instructions_per_frame)
    return tick_timers(state)


def load_program(state: EmulatorState, data) -> EmulatorState:
    """Load a raw program image into memory starting at 0x200.

    Args:
        state: Machine to load into, normally fresh from ``reset``
        data: bytes-like object, sequence of ints or uint8 array
    """
    program = np.frombuffer(bytes(data), dtype=np.uint8) if not isinstance(data, (np.ndarray, jnp.ndarray)) \
        else np.asarray(data, dtype=np.uint8)
    if program.size > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(
            f"Program is {program.size} bytes, at most {MAX_PROGRAM_SIZE} fit at 0x{PROGRAM_START:03X}"
        )
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + program.size].set(jnp.asarray(program))
    return state.replace(memory=new_memory)


def set_keys(state: EmulatorState, keys) -> EmulatorState:
    """Replace the 16-key input snapshot."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise InvalidKeypadError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return state.replace(keypad=keypad)
