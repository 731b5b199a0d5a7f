"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.registers import read_v, wrap_u16
from chix8.stack import push
from chix8.constants import FAULT_STACK_OVERFLOW, INSTRUCTION_SIZE
from chix8.instructions.system import raise_fault


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=wrap_u16(instruction.addr))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    stack, overflow = push(state.stack, state.pc)
    return jax.lax.cond(
        overflow,
        lambda s: raise_fault(s, FAULT_STACK_OVERFLOW),
        lambda s: execute_jump(s.replace(stack=stack), instruction),
        state
    )


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + INSTRUCTION_SIZE),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: read_v(state.V, inst.x) == inst.byte
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: read_v(state.V, inst.x) != inst.byte
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    return state.replace(pc=wrap_u16(instruction.addr + read_v(state.V, 0)))


def execute_jump_with_offset_vx(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BXNN - Jump to address XNN + VX (jump_uses_vx quirk)."""
    return state.replace(pc=wrap_u16(instruction.addr + read_v(state.V, instruction.x)))


def _key_pressed(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    return state.keypad[state.V[instruction.x] & 0xF]


execute_skip_if_key = make_skip_instruction(_key_pressed)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~_key_pressed(state, inst)
)


def execute_key_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key VX pressed/not pressed; other EXxx are ignored."""
    is_0x9E = instruction.byte == 0x9E
    is_0xA1 = instruction.byte == 0xA1

    switch_index = is_0x9E * 0 + is_0xA1 * 1 + (~(is_0x9E | is_0xA1)) * 2

    return jax.lax.switch(
        switch_index,
        [
            execute_skip_if_key,
            execute_skip_if_not_key,
            lambda state, instruction: state,
        ],
        state, instruction
    )
