"""Main CHIP-8 execution engine."""

import jax.numpy as jnp
from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction, Op, decode
from chipvm.constants import PROGRAM_START, RAM_SIZE, NO_KEY_WAIT
from chipvm.errors import MemoryAccessError, ProgramTooLargeError
from chipvm.instructions.system import no_op, execute_clear_screen, execute_return
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipvm.instructions.alu import execute_bitwise_operation, execute_flag_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
    resolve_key_wait,
)

HANDLERS = {
    Op.NOP: no_op,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LD_REG: execute_bitwise_operation,
    Op.OR: execute_bitwise_operation,
    Op.AND: execute_bitwise_operation,
    Op.XOR: execute_bitwise_operation,
    Op.ADD_REG: execute_flag_operation,
    Op.SUB: execute_flag_operation,
    Op.SHR: execute_flag_operation,
    Op.SUBN: execute_flag_operation,
    Op.SHL: execute_flag_operation,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_KEY: execute_wait_for_key,
    Op.LD_DT: execute_set_delay_timer,
    Op.LD_ST: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.BCD: execute_bcd_conversion,
    Op.LD_MEM_V: execute_store_registers,
    Op.LD_V_MEM: execute_load_registers,
}

_missing = set(Op) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No handler for {sorted(op.name for op in _missing)}")


def dispatch(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """Run the handler for an already decoded instruction."""
    return HANDLERS[instruction.op](state, instruction)


def execute(state: MachineState, instruction: int) -> MachineState:
    """Execute single CHIP-8 instruction."""
    return dispatch(state, decode(instruction))


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: MachineState) -> tuple[MachineState, jnp.uint16]:
    """Fetch next instruction from memory and advance pc past it."""
    pc = int(state.pc)
    if pc + 1 >= RAM_SIZE:
        raise MemoryAccessError(f"Instruction fetch at 0x{pc:03X} is past the end of RAM")
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def _still_waiting(state: MachineState) -> bool:
    """True while the word at pc is the FX0A that started the pending key wait."""
    if state.waiting_key == NO_KEY_WAIT:
        return False
    _, instruction = fetch(state)
    return int(instruction) == (0xF00A | (state.waiting_key << 8))


def step(state: MachineState) -> tuple[MachineState, DecodedInstruction | None]:
    """Advance the machine by one tick.

    Returns the new state and the decoded instruction that ran, or None when the
    tick only polled the keypad for a pending key wait. A wait is dropped when
    the instruction at pc no longer is the waiting FX0A, and that instruction
    runs instead.
    """
    if _still_waiting(state):
        state = resolve_key_wait(state, state.waiting_key)
        if state.waiting_key == NO_KEY_WAIT:
            state = state.replace(pc=state.pc + 2)
        return state, None
    state = state.replace(waiting_key=NO_KEY_WAIT)

    address = int(state.pc)
    state, instruction = fetch(state)
    decoded = decode(instruction, address)
    return dispatch(state, decoded), decoded


def tick_timers(state: MachineState) -> MachineState:
    """Decrement delay and sound timers, floored at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, 0).astype(jnp.uint8),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, 0).astype(jnp.uint8),
    )


def load_program(state: MachineState, data: bytes) -> MachineState:
    """Copy program bytes into memory starting at 0x200."""
    if PROGRAM_START + len(data) > RAM_SIZE:
        raise ProgramTooLargeError(
            f"Program of {len(data)} bytes does not fit in "
            f"{RAM_SIZE - PROGRAM_START} bytes of program memory"
        )
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
