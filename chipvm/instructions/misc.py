"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FONT_START, GLYPH_SIZE, RAM_SIZE, NO_KEY_WAIT
from chipvm.errors import MemoryAccessError


def _check_range(state: MachineState, length: int, what: str) -> int:
    start = int(state.I)
    if start + length > RAM_SIZE:
        raise MemoryAccessError(
            f"{what} at 0x{start:03X} needs {length} bytes, past the end of RAM"
        )
    return start


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX1E - Add VX to I register, wrapping at 16 bits."""
    new_i = state.I + jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def resolve_key_wait(state: MachineState, register: int) -> MachineState:
    """Complete or continue a key wait for ``register``.

    The lowest pressed key index wins. While no key is down the machine stays
    in the awaiting-key state with ``pc`` on the waiting instruction.
    """
    if not bool(jnp.any(state.keypad)):
        return state.replace(waiting_key=register)
    pressed_key = jnp.argmax(state.keypad)
    return state.replace(
        V=state.V.at[register].set(jnp.astype(pressed_key, jnp.uint8)),
        waiting_key=NO_KEY_WAIT,
    )


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX0A - Wait for key press."""
    state = resolve_key_wait(state, instruction.x)
    if state.waiting_key != NO_KEY_WAIT:
        state = state.replace(pc=state.pc - 2)
    return state


def execute_font_character(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX (low nibble)."""
    digit = jnp.astype(state.V[instruction.x] & 0xF, jnp.uint16)
    font_address = FONT_START + digit * GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    start = _check_range(state, 3, "BCD store")
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[start:start + 3].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I. I is unchanged."""
    count = instruction.x + 1
    start = _check_range(state, count, "Register store")
    new_memory = state.memory.at[start:start + count].set(state.V[:count])
    return state.replace(memory=new_memory)


def execute_load_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I. I is unchanged."""
    count = instruction.x + 1
    start = _check_range(state, count, "Register load")
    new_V = state.V.at[:count].set(state.memory[start:start + count])
    return state.replace(V=new_V)
