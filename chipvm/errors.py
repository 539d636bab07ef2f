"""Exceptions raised by the CHIP-8 machine."""


class Chip8Error(Exception):
    """Base class for every error the machine reports to its host."""


class UnknownOpcodeError(Chip8Error):
    """Opcode outside the CHIP-8 instruction set."""

    def __init__(self, opcode: int, address: int | None = None):
        self.opcode = opcode
        self.address = address
        where = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Unknown opcode 0x{opcode:04X}{where}")


class StackOverflowError(Chip8Error):
    """CALL with a full return stack."""


class StackUnderflowError(Chip8Error):
    """RET with an empty return stack."""


class MemoryAccessError(Chip8Error, IndexError):
    """Memory access past the end of RAM."""


class ProgramTooLargeError(MemoryAccessError):
    """Program does not fit between the program start address and the end of RAM."""


class KeyIndexError(Chip8Error, ValueError):
    """Key index outside 0x0-0xF."""
