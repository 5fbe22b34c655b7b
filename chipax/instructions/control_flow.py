"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.memory_access import record_fault, wrap_address
from chipax.modes import RuntimeFault
from chipax.stack import push
from chipax.instructions.dispatch import build_table, lookup


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    stack, overflow = push(state.stack, state.pc)
    state = record_fault(state.replace(stack=stack), RuntimeFault.STACK_OVERFLOW, overflow)
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
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
    lambda state, inst: (state.V[inst.x] == state.V[inst.y]) & (inst.n == 0)
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: (state.V[inst.x] != state.V[inst.y]) & (inst.n == 0)
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    target = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    state, address = wrap_address(state, target)
    return state.replace(pc=jnp.astype(address, jnp.uint16))


execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: state.keypad[state.V[inst.x] & 0xF]
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: ~state.keypad[state.V[inst.x] & 0xF]
)


KEY_SKIP_TABLE = build_table(256, {0x9E: 0, 0xA1: 1}, default=2)


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    return jax.lax.switch(
        lookup(KEY_SKIP_TABLE, instruction.nn),
        [execute_skip_if_key_pressed, execute_skip_if_key_not_pressed, lambda s, i: s],
        state, instruction
    )
