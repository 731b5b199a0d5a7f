"""CHIP-8 instruction decoding."""

import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction split into nibbles and immediates."""
    raw: int
    d: int     # Bits 12-15, instruction family
    c: int     # Bits 8-11, usually VX
    b: int     # Bits 4-7, usually VY
    a: int     # Bits 0-3, 4-bit immediate
    byte: int  # Low byte (kk)
    addr: int  # Low 12 bits (nnn)

    @property
    def x(self):
        return self.c

    @property
    def y(self):
        return self.b

    @property
    def n(self):
        return self.a


def decode(instruction: int) -> DecodedInstruction:
    """Decode a 16-bit instruction into components.

    Total over every 16-bit value; whether the result names a defined
    instruction is decided at dispatch.
    """
    instruction = jnp.asarray(instruction, dtype=jnp.int32) & 0xFFFF
    return DecodedInstruction(
        raw=instruction,
        d=(instruction & 0xF000) >> 12,
        c=(instruction & 0x0F00) >> 8,
        b=(instruction & 0x00F0) >> 4,
        a=instruction & 0x000F,
        byte=instruction & 0x00FF,
        addr=instruction & 0x0FFF
    )
