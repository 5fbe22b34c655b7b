"""Main CHIP-8 emulator execution engine."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, load_rom_bytes
from chipax.decode import decode
from chipax.errors import RomUnreadableError
from chipax.memory_access import wrap_addresses
from chipax.instructions.system import execute_system_instruction
from chipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipax.instructions.alu import execute_alu_operation
from chipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipax.instructions.display import execute_display
from chipax.instructions.misc import execute_misc_instruction

DRAW_OPCODE = 0xD


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    PC must already point past ``instruction``; skips and retries are
    expressed relative to that post-fetch value.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def peek(state: EmulatorState) -> jnp.uint16:
    """Instruction at PC, without advancing."""
    addresses = (jnp.astype(state.pc, jnp.int32) + jnp.arange(2)) % state.memory.shape[0]
    return _pack_u16(state.memory[addresses[0]], state.memory[addresses[1]])


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC by 2."""
    state, addresses = wrap_addresses(state, state.pc, 2, 2)
    instruction = _pack_u16(state.memory[addresses[0]], state.memory[addresses[1]])
    next_pc = jnp.astype((addresses[0] + 2) & 0xFFFF, jnp.uint16)
    return state.replace(pc=next_pc), instruction


def step(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch, decode and execute one instruction."""
    state, instruction = fetch(state)
    return execute(state, instruction), instruction


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise RomUnreadableError(filename, e.strerror or str(e)) from e
    return load_rom_bytes(state, rom_data)
