"""Tests for register wrapping and the bounded call stack."""

import jax.numpy as jnp
import pytest

from chix8 import StackState, STACK_SIZE
from chix8.registers import wrap_u8, wrap_u16, write_v, set_flag
from chix8.stack import push, pop, depth


class TestWrapping:

    @pytest.mark.parametrize("value", [0, 1, 255, 256, 300, 511, -1, -256, -300])
    def test_u8_is_mod_256(self, value):
        assert wrap_u8(value) == value % 256
        assert wrap_u8(value).dtype == jnp.uint8

    @pytest.mark.parametrize("value", [0, 0xFFFF, 0x10000, 0x12345, -1, -2])
    def test_u16_is_mod_65536(self, value):
        assert wrap_u16(value) == value % 65536
        assert wrap_u16(value).dtype == jnp.uint16

    def test_write_v_wraps(self, fresh_state):
        V = write_v(fresh_state.V, 3, 260)
        assert V[3] == 4
        V = write_v(V, 3, -5)
        assert V[3] == 251

    def test_set_flag_only_touches_vf(self, fresh_state):
        V = write_v(fresh_state.V, 0, 9)
        V = set_flag(V, True)
        assert V[15] == 1
        assert V[0] == 9


class TestStack:

    def test_push_pop(self):
        stack, overflow = push(StackState(), jnp.astype(0x202, jnp.uint16))
        assert not overflow
        assert depth(stack) == 1

        stack, address, underflow = pop(stack)
        assert not underflow
        assert address == 0x202
        assert depth(stack) == 0

    def test_push_full_stack_overflows(self):
        stack = StackState()
        for i in range(STACK_SIZE):
            stack, overflow = push(stack, jnp.astype(0x200 + 2 * i, jnp.uint16))
            assert not overflow

        full, overflow = push(stack, jnp.astype(0x400, jnp.uint16))

        assert overflow
        assert depth(full) == STACK_SIZE
        assert jnp.array_equal(full.data, stack.data)

    def test_pop_empty_stack_underflows(self):
        stack, address, underflow = pop(StackState())
        assert underflow
        assert address == 0
        assert depth(stack) == 0

    def test_lifo_order(self):
        stack = StackState()
        for address in (0x210, 0x320, 0x430):
            stack, _ = push(stack, jnp.astype(address, jnp.uint16))

        popped = []
        for _ in range(3):
            stack, address, _ = pop(stack)
            popped.append(int(address))
        assert popped == [0x430, 0x320, 0x210]
