"""Tests for fetch, step and timers."""

import pytest
import jax.numpy as jnp
from chipvm import (
    execute, fetch, step, tick_timers, load_program, create_state,
    MemoryAccessError, ProgramTooLargeError, UnknownOpcodeError,
    PROGRAM_START, RAM_SIZE, Op,
)
from conftest import program_words


def test_no_op(fresh_state):
    """0000 - Nothing changes."""
    state = execute(fresh_state, 0x0000)
    assert state.pc == fresh_state.pc
    assert (state.V == fresh_state.V).all()


def test_fetch_is_big_endian(fresh_state):
    state = load_program(fresh_state, bytes([0x12, 0x34]))

    state, instruction = fetch(state)

    assert instruction == 0x1234
    assert state.pc == PROGRAM_START + 2


def test_fetch_past_ram(fresh_state):
    state = fresh_state.replace(pc=jnp.astype(RAM_SIZE - 1, jnp.uint16))

    with pytest.raises(MemoryAccessError):
        fetch(state)


def test_step_advances_before_execute(fresh_state):
    """A jump is not double-advanced."""
    state = load_program(fresh_state, program_words(0x1300))

    state, decoded = step(state)

    assert decoded.op == Op.JP
    assert state.pc == 0x300


def test_step_unknown_opcode_reports_address(fresh_state):
    state = load_program(fresh_state, program_words(0x6001, 0x5121))
    state, _ = step(state)

    with pytest.raises(UnknownOpcodeError) as excinfo:
        step(state)

    assert excinfo.value.opcode == 0x5121
    assert excinfo.value.address == 0x202


def test_call_pushes_address_after_call(fresh_state):
    state = load_program(fresh_state, program_words(0x2206, 0x0000, 0x0000, 0x00EE))

    state, _ = step(state)
    assert state.pc == 0x206
    assert state.stack.data[0] == 0x202

    state, _ = step(state)
    assert state.pc == 0x202


class TestTimers:

    def test_tick_timers_decrements(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.astype(3, jnp.uint8), sound_timer=jnp.astype(1, jnp.uint8)
        )

        state = tick_timers(state)

        assert state.delay_timer == 2
        assert state.sound_timer == 0

    def test_tick_timers_floor_at_zero(self, fresh_state):
        state = tick_timers(tick_timers(fresh_state))

        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert state.delay_timer.dtype == jnp.uint8


class TestLoadProgram:

    def test_load_program(self, fresh_state):
        state = load_program(fresh_state, b"\xAA\xBB\xCC")

        assert [int(b) for b in state.memory[PROGRAM_START:PROGRAM_START + 3]] == [0xAA, 0xBB, 0xCC]
        assert state.memory[PROGRAM_START + 3] == 0

    def test_load_program_fills_memory(self, fresh_state):
        data = bytes(RAM_SIZE - PROGRAM_START)
        state = load_program(fresh_state, data)
        assert state.memory.shape == (RAM_SIZE,)

    def test_load_program_too_large(self, fresh_state):
        with pytest.raises(ProgramTooLargeError):
            load_program(fresh_state, bytes(RAM_SIZE - PROGRAM_START + 1))

    def test_too_large_is_memory_access_error(self):
        assert issubclass(ProgramTooLargeError, MemoryAccessError)
        assert issubclass(MemoryAccessError, IndexError)
