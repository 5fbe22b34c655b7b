"""Address wrapping and fault bookkeeping for memory accesses."""

import jax.numpy as jnp

from chipax.constants import MEMORY_SIZE
from chipax.modes import RuntimeFault
from chipax.state import EmulatorState


def record_fault(state: EmulatorState, fault: RuntimeFault, occurred: jnp.ndarray) -> EmulatorState:
    """Increment the counter for ``fault`` when ``occurred`` is true."""
    counter = getattr(state.faults, fault.value)
    new_counter = counter + jnp.astype(occurred, counter.dtype)
    return state.replace(faults=state.faults.replace(**{fault.value: new_counter}))


def wrap_addresses(state: EmulatorState, base: jnp.ndarray, count: int | jnp.ndarray,
                   span: int) -> tuple[EmulatorState, jnp.ndarray]:
    """Return ``span`` addresses starting at ``base`` wrapped into memory.

    Only the first ``count`` addresses are considered live; the access is
    recorded as out of range if any live address lies past the end of memory.
    """
    offsets = jnp.arange(span, dtype=jnp.int32)
    addresses = jnp.astype(base, jnp.int32) + offsets
    live = offsets < count
    out_of_range = jnp.any(live & (addresses >= MEMORY_SIZE))
    state = record_fault(state, RuntimeFault.OUT_OF_RANGE_MEMORY_ACCESS, out_of_range)
    return state, addresses % MEMORY_SIZE


def wrap_address(state: EmulatorState, address: jnp.ndarray) -> tuple[EmulatorState, jnp.ndarray]:
    """Wrap a single address into memory, recording a fault if it was out of range."""
    state, addresses = wrap_addresses(state, address, 1, 1)
    return state, addresses[0]
