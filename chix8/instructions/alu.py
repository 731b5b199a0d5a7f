"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, flag)``. The dispatcher writes
``result`` to VX first and the flag to VF last, so the flag wins when X is F.
Operations that leave VF alone return ``NO_FLAG``.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.registers import read_v, write_v, set_flag

NO_FLAG = -1


def _no_flag():
    return jnp.full((), NO_FLAG, dtype=jnp.int32)


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, _no_flag()


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _no_flag()


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _no_flag()


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _no_flag()


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = vx + vy
    carry = jnp.astype(result > 255, jnp.int32)
    return result & 0xFF, carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = VX > VY."""
    not_borrow = jnp.astype(vx > vy, jnp.int32)
    return (vx - vy) & 0xFF, not_borrow


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = VY > VX."""
    not_borrow = jnp.astype(vy > vx, jnp.int32)
    return (vy - vx) & 0xFF, not_borrow


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


def alu_undefined(vx, vy):
    """8XY8-8XYD, 8XYF - Unassigned, no-op."""
    return vx, _no_flag()


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = read_v(state.V, instruction.x)
    vy = read_v(state.V, instruction.y)

    def _logic(op):
        if not state.logic_resets_vf:
            return op
        return lambda vx, vy: (op(vx, vy)[0], jnp.zeros((), dtype=jnp.int32))

    def _shift(op):
        if not state.shift_uses_vy:
            return op
        return lambda vx, vy: op(vy, vy)

    result, flag = jax.lax.switch(
        instruction.n,
        [
            alu_set, _logic(alu_or), _logic(alu_and), _logic(alu_xor),
            alu_add, alu_sub_xy, _shift(alu_shift_right), alu_sub_yx,
            alu_undefined, alu_undefined, alu_undefined, alu_undefined,
            alu_undefined, alu_undefined, _shift(alu_shift_left), alu_undefined,
        ],
        vx, vy
    )

    new_V = write_v(state.V, instruction.x, result)
    new_V = jnp.where(flag == NO_FLAG, new_V, set_flag(new_V, flag))
    return state.replace(V=new_V)
