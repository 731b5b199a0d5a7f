"""Exceptions raised by the chix8 driver layer."""

from chix8.constants import FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW


class Chip8Error(Exception):
    """Base class for all chix8 errors."""


class MachineFault(Chip8Error):
    """The machine stopped on an instruction it could not complete.

    Attributes:
        pc: Address of the faulting instruction
        opcode: Raw 16-bit opcode found at ``pc``
    """

    reason = "machine fault"

    def __init__(self, pc: int, opcode: int):
        self.pc = pc
        self.opcode = opcode
        super().__init__(f"{self.reason} at 0x{pc:03X} (opcode 0x{opcode:04X})")


class StackOverflowError(MachineFault):
    """CALL with a full call stack."""

    reason = "stack overflow"


class StackUnderflowError(MachineFault):
    """RET with an empty call stack."""

    reason = "stack underflow"


class ProgramTooLargeError(Chip8Error, ValueError):
    """Program image does not fit between 0x200 and the end of memory."""


class InvalidKeypadError(Chip8Error, ValueError):
    """Key snapshot does not hold exactly 16 entries."""


FAULT_ERRORS = {
    FAULT_STACK_OVERFLOW: StackOverflowError,
    FAULT_STACK_UNDERFLOW: StackUnderflowError,
}
