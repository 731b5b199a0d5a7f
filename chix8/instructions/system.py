"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.display import clear
from chix8.stack import pop
from chix8.constants import FAULT_STACK_UNDERFLOW, INSTRUCTION_SIZE


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def raise_fault(state: EmulatorState, code: int) -> EmulatorState:
    """Record a fault and move PC back onto the faulting instruction."""
    return state.replace(
        fault=jnp.astype(code, jnp.uint8),
        pc=state.pc - INSTRUCTION_SIZE
    )


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=clear(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, underflow = pop(state.stack)
    return jax.lax.cond(
        underflow,
        lambda s: raise_fault(s, FAULT_STACK_UNDERFLOW),
        lambda s: s.replace(stack=stack, pc=address),
        state
    )


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions; any other 0NNN is SYS and ignored."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            no_op,
            state, instruction
        ),
        state, instruction
    )
