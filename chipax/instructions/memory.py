"""Register loads: 6XNN, 7XNN, ANNN and CXNN."""

import jax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction


def _write_vx(state: EmulatorState, instruction: DecodedInstruction, value) -> EmulatorState:
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(value & 0xFF, jnp.uint8)))


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - VX = NN."""
    return _write_vx(state, instruction, instruction.nn)


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - VX += NN modulo 256. VF is never touched, even on overflow."""
    total = jnp.astype(state.V[instruction.x], jnp.int32) + instruction.nn
    return _write_vx(state, instruction, total)


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - VX = random byte & NN, advancing the machine's key."""
    rng, draw_key = jax.random.split(state.rng)
    byte = jax.random.randint(draw_key, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    return _write_vx(state.replace(rng=rng), instruction, byte & instruction.nn)
