"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction, Op
from chipvm.constants import ADDRESS_MASK, NUM_KEYS
from chipvm.errors import KeyIndexError
from chipvm.stack import push


def execute_jump(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """BNNN - Jump to address NNN + V0, wrapped to the 12-bit address space."""
    jump_address = (instruction.nnn + jnp.astype(state.V[0], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def _pressed_key(state: MachineState, instruction: DecodedInstruction) -> jnp.ndarray:
    key_index = int(state.V[instruction.x])
    if key_index >= NUM_KEYS:
        raise KeyIndexError(f"V{instruction.x:X} holds 0x{key_index:02X}, not a key index")
    return state.keypad[key_index]


execute_skip_if_key = make_skip_instruction(
    lambda state, inst: _pressed_key(state, inst) ^ (inst.op == Op.SKNP)
)
