"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER, RAM_SIZE
from chipvm.errors import MemoryAccessError

# Bit masks for the eight pixels of a sprite row, most significant bit first.
_PIXEL_SHIFTS = jnp.arange(SPRITE_WIDTH - 1, -1, -1, dtype=jnp.uint8)


def sprite_mask(sprite_bytes: jnp.ndarray, x: int, y: int) -> jnp.ndarray:
    """Place sprite rows on an empty screen at (x, y), wrapping at the edges."""
    bits = ((sprite_bytes[:, None] >> _PIXEL_SHIFTS[None, :]) & 1).astype(jnp.bool_)
    canvas = jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_)
    canvas = canvas.at[:bits.shape[0], :SPRITE_WIDTH].set(bits)
    return jnp.roll(canvas, (y % SCREEN_HEIGHT, x % SCREEN_WIDTH), axis=(0, 1))


def execute_display(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Pixels are XORed onto the screen and wrap around both edges. VF is set to 1
    when at least one lit pixel is turned off, 0 otherwise.
    """
    start = int(state.I)
    end = start + instruction.n
    if end > RAM_SIZE:
        raise MemoryAccessError(
            f"Sprite read 0x{start:03X}-0x{end - 1:03X} is past the end of RAM"
        )

    sprite = sprite_mask(
        state.memory[start:end],
        int(state.V[instruction.x]),
        int(state.V[instruction.y]),
    )
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
