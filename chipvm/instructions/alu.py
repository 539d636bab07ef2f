"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp
from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction, Op
from chipvm.constants import FLAG_REGISTER


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY0 - Set: VX = VY."""
    return vy


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = vx.astype(jnp.int32) + vy.astype(jnp.int32)
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = (vx.astype(jnp.int32) - vy.astype(jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), no_borrow


def alu_shift_right(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    shifted_bit = vx & 1
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    result = (vy.astype(jnp.int32) - vx.astype(jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), no_borrow


def alu_shift_left(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out of the top."""
    shifted_bit = (vx & 0x80) >> 7
    result = (vx.astype(jnp.int32) << 1) & 0xFF
    return jnp.astype(result, jnp.uint8), shifted_bit


BITWISE_OPERATIONS = {
    Op.LD_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
}

FLAG_OPERATIONS = {
    Op.ADD_REG: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}


def execute_bitwise_operation(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """8XY0-8XY3 - Register move and bitwise operations, VF untouched."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    result = BITWISE_OPERATIONS[instruction.op](vx, vy)
    return state.replace(V=state.V.at[instruction.x].set(result))


def execute_flag_operation(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """8XY4-8XYE - Arithmetic and shifts reporting through VF.

    VF is written after VX, so the flag wins when X is F.
    """
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    result, vf = FLAG_OPERATIONS[instruction.op](vx, vy)
    new_V = state.V.at[instruction.x].set(result)
    new_V = new_V.at[FLAG_REGISTER].set(vf)
    return state.replace(V=new_V)
