"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction
from chipvm.stack import pop


def no_op(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """0000 - No operation."""
    return state


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)
