"""Flat lookup tables mapping an opcode subfield to a branch index."""

import numpy as np
import jax.numpy as jnp


def build_table(size: int, entries: dict[int, int], default: int) -> np.ndarray:
    """Build a ``size``-entry table with ``entries`` filled in and ``default`` elsewhere."""
    table = np.full(size, default, dtype=np.int32)
    for key, branch in entries.items():
        table[key] = branch
    return table


def lookup(table: np.ndarray, key) -> jnp.ndarray:
    """Branch index for ``key``; usable on Python ints and traced values."""
    return jnp.asarray(table)[key]
