"""CHIP-8 virtual machine package."""

from chipvm.state import MachineState, StackState, create_state
from chipvm.emulator import execute, dispatch, fetch, step, tick_timers, load_program, load_rom
from chipvm.decode import DecodedInstruction, Op, decode
from chipvm.config import MachineConfig
from chipvm.machine import Machine
from chipvm.errors import (
    Chip8Error, UnknownOpcodeError, StackOverflowError, StackUnderflowError,
    MemoryAccessError, ProgramTooLargeError, KeyIndexError,
)
from chipvm.constants import *
from chipvm.rendering import display_to_rgb, display_to_text, create_color_scheme

__all__ = [
    "Machine",
    "MachineConfig",
    "MachineState",
    "StackState",
    "create_state",
    "fetch",
    "step",
    "dispatch",
    "execute",
    "tick_timers",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "Chip8Error",
    "UnknownOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAccessError",
    "ProgramTooLargeError",
    "KeyIndexError",
    "PROGRAM_START",
    "FONT_START",
    "RAM_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "display_to_text",
    "create_color_scheme",
]
