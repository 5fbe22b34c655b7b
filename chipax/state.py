"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, MAX_ROM_SIZE, STACK_SIZE,
    NUM_REGISTERS, NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT
)
from chipax.errors import RomTooLargeError
from chipax.modes import ExtensionMode, RuntimeFault


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


@dataclass(frozen=True)
class FaultCounters:
    """Number of times each recoverable runtime fault occurred."""
    stack_overflow: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint32))
    stack_underflow: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint32))
    memory_out_of_range: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint32))

    def as_dict(self) -> dict[RuntimeFault, int]:
        return {fault: int(getattr(self, fault.value)) for fault in RuntimeFault}


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed as ``display[x, y]``. ``mode`` is static, so a
    jitted frame is compiled once per quirk mode.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    display_dirty: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    key_wait_phase: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    key_wait_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    faults: FaultCounters = FaultCounters()
    mode: ExtensionMode = field(pytree_node=False, default=ExtensionMode.MODERN)

    @property
    def width(self) -> int:
        return self.display.shape[0]

    @property
    def height(self) -> int:
        return self.display.shape[1]


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    mode: ExtensionMode = ExtensionMode.MODERN,
    width: int | None = None,
    height: int | None = None,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    default_width, default_height = mode.default_resolution
    display = jnp.zeros((width or default_width, height or default_height), dtype=jnp.bool_)
    state = EmulatorState(rng, display=display, mode=mode)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def load_rom_bytes(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy a ROM image into memory starting at 0x200."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom_data), MAX_ROM_SIZE)
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)
