"""Mutable driver-facing wrapper around the functional CHIP-8 core."""

from typing import Optional, Sequence

import jax
import numpy as np

from chix8.state import EmulatorState, create_state, reset
from chix8.emulator import step, tick_timers, run_frame, load_program, set_keys, peek
from chix8.display import lit_pixels, is_set
from chix8.dump import dump_state, format_state
from chix8.errors import FAULT_ERRORS, InvalidKeypadError
from chix8.logging import MachineLogger
from chix8.constants import (
    CPU_FREQUENCY, TIMER_FREQUENCY, FAULT_NONE, NUM_KEYS, PROGRAM_START
)

_step = jax.jit(step)
_tick_timers = jax.jit(tick_timers)


class Machine:
    """One CHIP-8 machine owned by a driver.

    Wraps an ``EmulatorState`` and swaps it for the result of each jitted
    ``step`` or ``tick``. The driver supplies pacing: call ``step`` at about
    ``CPU_FREQUENCY`` Hz and ``tick`` at ``TIMER_FREQUENCY`` Hz, or call
    ``run_frame`` once per 60 Hz frame.

    Faults are raised as ``MachineFault`` subclasses. The machine stays
    faulted, and further steps keep raising, until ``reset`` is called.
    """

    def __init__(
        self,
        seed: int = 0,
        increment_index_on_load_store: bool = False,
        shift_uses_vy: bool = False,
        logic_resets_vf: bool = False,
        jump_uses_vx: bool = False,
        instructions_per_frame: int = CPU_FREQUENCY // TIMER_FREQUENCY,
        log_level: str = "WARNING",
        logger: Optional[MachineLogger] = None,
    ):
        """Create a machine with font loaded and no program.

        Args:
            seed: Seed for the CXNN random generator
            increment_index_on_load_store: FX55/FX65 advance I by X + 1
            shift_uses_vy: 8XY6/8XYE shift VY into VX
            logic_resets_vf: 8XY1/8XY2/8XY3 clear VF
            jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0
            instructions_per_frame: Steps run by ``run_frame`` before its timer tick
            log_level: Level for the default logger
            logger: Logger to use instead of the default one
        """
        self.logger = logger or MachineLogger(log_level=log_level)
        self.instructions_per_frame = instructions_per_frame
        self.state: EmulatorState = create_state(
            jax.random.PRNGKey(seed),
            increment_index_on_load_store=increment_index_on_load_store,
            shift_uses_vy=shift_uses_vy,
            logic_resets_vf=logic_resets_vf,
            jump_uses_vx=jump_uses_vx,
        )
        self.logger.log_configuration({
            "seed": seed,
            "increment_index_on_load_store": increment_index_on_load_store,
            "shift_uses_vy": shift_uses_vy,
            "logic_resets_vf": logic_resets_vf,
            "jump_uses_vx": jump_uses_vx,
            "instructions_per_frame": instructions_per_frame,
        })

    def reset(self):
        """Zero registers, timers and stack, clear memory and display, reload the font."""
        self.state = reset(self.state)
        self.logger.info("Machine reset")

    def load(self, program: bytes):
        """Reset the machine and load ``program`` at 0x200."""
        self.reset()
        self.state = load_program(self.state, program)
        self.logger.log_program_loaded(len(program), PROGRAM_START)

    def set_keys(self, keys: Sequence[bool]):
        """Replace the whole 16-key snapshot."""
        self.state = set_keys(self.state, keys)

    def press(self, key: int):
        self._set_key(key, True)

    def release(self, key: int):
        self._set_key(key, False)

    def _set_key(self, key: int, pressed: bool):
        if not 0 <= key < NUM_KEYS:
            raise InvalidKeypadError(f"Key must be in 0x0-0xF, got {key}")
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(pressed))

    def step(self) -> bool:
        """Run one instruction.

        Returns:
            False while the machine is waiting for a key, True otherwise

        Raises:
            MachineFault: The instruction overflowed or underflowed the stack
        """
        self._raise_on_fault()
        self.state = _step(self.state)
        self._raise_on_fault()
        return not self.awaiting_key

    def tick(self):
        """Advance both timers by one 60 Hz tick."""
        self.state = _tick_timers(self.state)

    def run_frame(self):
        """Run one frame of instructions followed by a timer tick."""
        self._raise_on_fault()
        self.state = run_frame(self.state, self.instructions_per_frame)
        self._raise_on_fault()

    def _raise_on_fault(self):
        fault = int(self.state.fault)
        if fault == FAULT_NONE:
            return
        error = FAULT_ERRORS[fault](int(self.state.pc), int(peek(self.state)))
        self.logger.log_fault(error, format_state(self.state))
        raise error

    @property
    def awaiting_key(self) -> bool:
        return bool(self.state.waiting_for_key)

    @property
    def faulted(self) -> bool:
        return int(self.state.fault) != FAULT_NONE

    @property
    def display(self) -> np.ndarray:
        """Read-only copy of the display, indexed [y, x]."""
        pixels = np.array(self.state.display)
        pixels.setflags(write=False)
        return pixels

    def pixel(self, x: int, y: int) -> bool:
        return bool(is_set(self.state.display, x, y))

    def lit_pixels(self):
        return lit_pixels(self.state.display)

    def dump(self) -> dict:
        """Registers, stack and status as plain Python values."""
        self.logger.log_state(format_state(self.state))
        return dump_state(self.state)
