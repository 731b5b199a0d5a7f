"""CHIP-8 register file helpers.

Every write goes through one of these helpers so a register can never hold a
value outside its declared width. Out-of-range and negative inputs wrap
modulo 2**8 or 2**16, they are never saturated.
"""

import jax.numpy as jnp

from chix8.constants import BYTE_MASK, WORD_MASK, FLAG_REGISTER


def wrap_u8(value) -> jnp.ndarray:
    """Reduce ``value`` modulo 256 as a uint8 scalar."""
    return jnp.astype(jnp.asarray(value, dtype=jnp.int32) & BYTE_MASK, jnp.uint8)


def wrap_u16(value) -> jnp.ndarray:
    """Reduce ``value`` modulo 65536 as a uint16 scalar."""
    return jnp.astype(jnp.asarray(value, dtype=jnp.int32) & WORD_MASK, jnp.uint16)


def read_v(V: jnp.ndarray, index) -> jnp.ndarray:
    """Read VX widened to int32 so arithmetic on it does not wrap early."""
    return jnp.astype(V[index], jnp.int32)


def write_v(V: jnp.ndarray, index, value) -> jnp.ndarray:
    """VX := value mod 256."""
    return V.at[index].set(wrap_u8(value))


def set_flag(V: jnp.ndarray, flag) -> jnp.ndarray:
    """VF := flag.

    Flag-setting instructions call this after their data write so the flag
    survives when VX is VF.
    """
    return V.at[FLAG_REGISTER].set(wrap_u8(flag))
