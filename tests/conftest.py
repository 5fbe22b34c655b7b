"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipax import create_state, ExtensionMode, Chip8Machine
from chipax.logging import MachineLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state in modern mode."""
    return create_state(mode=ExtensionMode.MODERN)


@pytest.fixture
def legacy_state():
    """Provide a fresh state in legacy mode."""
    return create_state(mode=ExtensionMode.LEGACY)


@pytest.fixture
def extended_state():
    """Provide a fresh state in extended mode."""
    return create_state(mode=ExtensionMode.EXTENDED)


@pytest.fixture
def quiet_logger():
    return MachineLogger(log_level="CRITICAL")


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. ``set_registers(state, V0=1, VF=2)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def assemble(*opcodes):
    """Encode 16-bit opcodes as big-endian ROM bytes."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


def make_machine(*opcodes, mode=ExtensionMode.MODERN, logger=None, **kwargs):
    """Machine running the given opcodes from 0x200."""
    return Chip8Machine(assemble(*opcodes), mode=mode, seed=0,
                        logger=logger or MachineLogger(log_level="CRITICAL"), **kwargs)
