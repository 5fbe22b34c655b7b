"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.constants import FONT_START, FONT_GLYPH_SIZE, NUM_REGISTERS
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.memory_access import wrap_addresses
from chipax.modes import KeyWaitPhase
from chipax.instructions.dispatch import build_table, lookup
from chipax.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register. VF is left alone."""
    return state.replace(I=jnp.astype(state.I + jnp.astype(state.V[instruction.x], jnp.uint16), jnp.uint16))


def _retry(state: EmulatorState) -> EmulatorState:
    return state.replace(pc=state.pc - 2)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for a key to be pressed and released, then store it in VX.

    The wait is a retry: PC is moved back so the same opcode runs again on the
    next step, while timers and frames keep advancing. Progress is tracked in
    ``key_wait_phase`` / ``key_wait_key`` on the state.
    """
    def waiting_for_press(state):
        pressed = jnp.any(state.keypad)
        phase = jnp.where(pressed, int(KeyWaitPhase.WAITING_FOR_RELEASE), int(KeyWaitPhase.WAITING_FOR_PRESS))
        key = jnp.where(pressed, jnp.argmax(state.keypad), state.key_wait_key)
        return _retry(state.replace(
            key_wait_phase=jnp.astype(phase, jnp.uint8),
            key_wait_key=jnp.astype(key, jnp.uint8),
        ))

    def waiting_for_release(state):
        def released(state):
            return state.replace(
                V=state.V.at[instruction.x].set(state.key_wait_key),
                key_wait_phase=jnp.zeros((), dtype=jnp.uint8),
                key_wait_key=jnp.zeros((), dtype=jnp.uint8),
            )
        return jax.lax.cond(state.keypad[state.key_wait_key], _retry, released, state)

    return jax.lax.cond(
        state.key_wait_phase == int(KeyWaitPhase.WAITING_FOR_RELEASE),
        waiting_for_release,
        waiting_for_press,
        state
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    state, indices = wrap_addresses(state, state.I, 3, 3)
    return state.replace(memory=state.memory.at[indices].set(digits))


def _register_window(state: EmulatorState, instruction: DecodedInstruction):
    """Addresses I..I+15 and a mask selecting V0..VX."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    state, addresses = wrap_addresses(state, state.I, instruction.x + 1, NUM_REGISTERS)
    return state, addresses, register_mask


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Legacy FX55/FX65 leave I pointing past the last register transferred."""
    if state.mode.is_legacy:
        return state.replace(I=jnp.astype(state.I + instruction.x + 1, jnp.uint16))
    return state


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    state, addresses, register_mask = _register_window(state, instruction)
    new_memory_values = jnp.where(register_mask, state.V, state.memory[addresses])
    state = state.replace(memory=state.memory.at[addresses].set(new_memory_values))
    return _advance_index(state, instruction)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    state, addresses, register_mask = _register_window(state, instruction)
    state = state.replace(V=jnp.where(register_mask, state.memory[addresses], state.V))
    return _advance_index(state, instruction)


MISC_TABLE = build_table(
    256,
    {0x07: 0, 0x0A: 1, 0x15: 2, 0x18: 3, 0x1E: 4, 0x29: 5, 0x33: 6, 0x55: 7, 0x65: 8},
    default=9,
)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch FXNN instructions on NN."""
    return jax.lax.switch(
        lookup(MISC_TABLE, instruction.nn),
        [
            execute_get_delay_timer,
            execute_wait_for_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            execute_bcd_conversion,
            execute_store_registers,
            execute_load_registers,
            no_op,
        ],
        state, instruction
    )
