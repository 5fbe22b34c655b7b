"""CHIP-8 ALU operations (8xxx).

Every operation computes its flag from the operands captured before VX is
written, and VF is written after VX so that it wins when X is F.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.constants import FLAG_REGISTER
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.instructions.dispatch import build_table, lookup


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, jnp.zeros((), dtype=jnp.uint8)


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, jnp.zeros((), dtype=jnp.uint8)


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, jnp.zeros((), dtype=jnp.uint8)


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, jnp.zeros((), dtype=jnp.uint8)


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = jnp.astype((jnp.astype(vx, jnp.int32) - vy) & 0xFF, jnp.uint8)
    return result, no_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = jnp.astype(vx & 1, jnp.uint8)
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    result = jnp.astype((jnp.astype(vy, jnp.int32) - vx) & 0xFF, jnp.uint8)
    return result, no_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = jnp.astype((vx & 0x80) >> 7, jnp.uint8)
    result = jnp.astype((jnp.astype(vx, jnp.int32) << 1) & 0xFF, jnp.uint8)
    return result, shifted_bit


def _from_vy(operation):
    """Legacy shifts read VY and write the result into VX."""
    return lambda vx, vy: operation(vy, vy)


def _register_write(operation, sets_flag: bool):
    def branch(V: jnp.ndarray, x, y) -> jnp.ndarray:
        result, flag = operation(V[x], V[y])
        V = V.at[x].set(result)
        if sets_flag:
            V = V.at[FLAG_REGISTER].set(flag)
        return V
    return branch


def _alu_branches(legacy: bool) -> list:
    """Branches in table order: 0,1,2,3,4,5,6,7,E."""
    shift = _from_vy if legacy else (lambda operation: operation)
    return [
        _register_write(alu_set, sets_flag=False),
        _register_write(alu_or, sets_flag=legacy),
        _register_write(alu_and, sets_flag=legacy),
        _register_write(alu_xor, sets_flag=legacy),
        _register_write(alu_add, sets_flag=True),
        _register_write(alu_sub_xy, sets_flag=True),
        _register_write(shift(alu_shift_right), sets_flag=True),
        _register_write(alu_sub_yx, sets_flag=True),
        _register_write(shift(alu_shift_left), sets_flag=True),
        lambda V, x, y: V,
    ]


ALU_TABLE = build_table(16, {0x0: 0, 0x1: 1, 0x2: 2, 0x3: 3, 0x4: 4, 0x5: 5, 0x6: 6, 0x7: 7, 0xE: 8}, default=9)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    new_V = jax.lax.switch(
        lookup(ALU_TABLE, instruction.n),
        _alu_branches(state.mode.is_legacy),
        state.V, instruction.x, instruction.y
    )
    return state.replace(V=new_V)
