"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction


def execute_set(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.nn))


def execute_add(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """7XNN - Add NN to VX, wrapping, VF untouched."""
    return state.replace(V=state.V.at[instruction.x].add(instruction.nn))


def execute_set_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    random_byte = jnp.astype(random_value, jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(random_byte & instruction.nn), rng=key)
