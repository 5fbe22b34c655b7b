"""CHIP-8 stack operations.

Both operations saturate instead of running off the end of the stack and
report whether they had to.
"""

import jax.numpy as jnp
from chipax.constants import ADDRESS_MASK, STACK_SIZE
from chipax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack, dropping the oldest entry when full."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    full = stack.pointer >= STACK_SIZE
    shifted = jnp.roll(stack.data, -1).at[STACK_SIZE - 1].set(masked_address)
    appended = stack.data.at[jnp.minimum(stack.pointer, STACK_SIZE - 1)].set(masked_address)
    new_data = jnp.where(full, shifted, appended)
    new_pointer = jnp.where(full, stack.pointer, stack.pointer + 1)
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8)), full


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack. Popping an empty stack leaves it unchanged."""
    empty = stack.pointer == 0
    new_pointer = jnp.where(empty, stack.pointer, stack.pointer - 1)
    popped_address = stack.data[new_pointer]
    new_data = jnp.where(empty, stack.data, stack.data.at[new_pointer].set(0))
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8)), popped_address, empty
