"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chix8.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, FAULT_NONE
)


@dataclass(frozen=True)
class StackState:
    """Bounded call stack of return addresses."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Complete CHIP-8 machine: memory, registers, stack, display and keypad.

    The static fields select compatibility quirks. They are part of the tree
    structure, so a jitted step is compiled once per quirk combination.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    waiting_for_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    fault: jnp.ndarray = field(default_factory=lambda: jnp.astype(FAULT_NONE, jnp.uint8))
    increment_index_on_load_store: bool = field(pytree_node=False, default=False)
    shift_uses_vy: bool = field(pytree_node=False, default=False)
    logic_resets_vf: bool = field(pytree_node=False, default=False)
    jump_uses_vx: bool = field(pytree_node=False, default=False)


def load_font(memory: jnp.ndarray) -> jnp.ndarray:
    """Write the 80-byte hex font at FONT_START."""
    return memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA)


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), **quirks) -> EmulatorState:
    """Create initial machine state with font data loaded.

    Args:
        rng: Random key consumed by CXNN
        **quirks: Any of the static quirk fields of EmulatorState
    """
    state = EmulatorState(rng, **quirks)
    return state.replace(memory=load_font(state.memory))


def reset(state: EmulatorState) -> EmulatorState:
    """Return a fresh machine that keeps the quirks and rng of ``state``."""
    fresh = EmulatorState(
        state.rng,
        increment_index_on_load_store=state.increment_index_on_load_store,
        shift_uses_vy=state.shift_uses_vy,
        logic_resets_vf=state.logic_resets_vf,
        jump_uses_vx=state.jump_uses_vx,
    )
    return fresh.replace(memory=load_font(fresh.memory))
