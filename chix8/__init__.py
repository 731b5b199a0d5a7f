"""CHIP-8 interpreter core."""

from chix8.state import EmulatorState, StackState, create_state, reset
from chix8.emulator import (
    execute, fetch, peek, step, tick_timers, run_instructions, run_frame, load_program, set_keys
)
from chix8.decode import DecodedInstruction, decode
from chix8.constants import *
from chix8.errors import (
    Chip8Error, MachineFault, StackOverflowError, StackUnderflowError,
    ProgramTooLargeError, InvalidKeypadError
)
from chix8.dump import dump_state, format_state
from chix8.rendering import display_to_rgb, create_color_scheme
from chix8.machine import Machine

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "reset",
    "fetch",
    "peek",
    "execute",
    "step",
    "tick_timers",
    "run_instructions",
    "run_frame",
    "load_program",
    "set_keys",
    "DecodedInstruction",
    "decode",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "CPU_FREQUENCY",
    "TIMER_FREQUENCY",
    "Chip8Error",
    "MachineFault",
    "StackOverflowError",
    "StackUnderflowError",
    "ProgramTooLargeError",
    "InvalidKeypadError",
    "dump_state",
    "format_state",
    "display_to_rgb",
    "create_color_scheme",
    "Machine",
]
