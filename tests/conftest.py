"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, Machine, MachineConfig, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def machine():
    """Provide a fresh machine with logging kept quiet."""
    return Machine(MachineConfig(log_level="ERROR", use_colors=False))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set V registers by name, e.g. ``set_registers(state, V1=0x10)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def program_words(*words):
    """Encode 16-bit instruction words as big-endian program bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def pc_after(instruction_count):
    return PROGRAM_START + 2 * instruction_count
