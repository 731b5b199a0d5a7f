"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chix8 import create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def legacy_state():
    """Provide a fresh state with the COSMAC VIP quirks enabled."""
    return create_state(
        increment_index_on_load_store=True,
        shift_uses_vy=True,
        logic_resets_vf=True,
    )


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **values):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=3, VF=1)``."""
    V = state.V
    for name, value in values.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def program_state(*opcodes, state=None):
    """Helper to load a sequence of 16-bit opcodes at 0x200."""
    data = b"".join(opcode.to_bytes(2, "big") for opcode in opcodes)
    return load_program(state if state is not None else create_state(), data)
