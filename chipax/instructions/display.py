"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipax.constants import FLAG_REGISTER
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.memory_access import wrap_addresses

SPRITE_WIDTH = 8
MAX_SPRITE_HEIGHT = 15


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Only the start coordinate wraps; pixels past the right or bottom edge are
    clipped. VF is set when any lit pixel is turned off.
    """
    width, height = state.display.shape
    xx, yy = jnp.meshgrid(jnp.arange(width), jnp.arange(height), indexing='ij')

    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % width
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % height

    state, rows = wrap_addresses(state, state.I, instruction.n, MAX_SPRITE_HEIGHT)

    in_sprite = (xx >= sprite_x) & (xx < sprite_x + SPRITE_WIDTH) & \
                (yy >= sprite_y) & (yy < sprite_y + instruction.n)

    row_offset = jnp.clip(yy - sprite_y, 0, MAX_SPRITE_HEIGHT - 1)
    col_offset = jnp.clip(xx - sprite_x, 0, SPRITE_WIDTH - 1)
    sprite_bytes = state.memory[rows[row_offset]]
    sprite = (((sprite_bytes >> (7 - col_offset)) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        display_dirty=state.display_dirty | jnp.any(sprite),
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
