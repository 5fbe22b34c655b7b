"""Quirk modes and other small enumerations shared across the emulator."""

import enum

from chipax.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, EXTENDED_SCREEN_WIDTH, EXTENDED_SCREEN_HEIGHT
)


class ExtensionMode(enum.Enum):
    """Behavioural variant selected once per machine.

    LEGACY follows the original COSMAC VIP interpreter: logic ops reset VF,
    shifts read VY, FX55/FX65 advance I, and only one sprite is drawn per frame.
    MODERN and EXTENDED share the CHIP-48/SCHIP interpretation of those opcodes.
    """
    LEGACY = "legacy"
    MODERN = "modern"
    EXTENDED = "extended"

    @classmethod
    def parse(cls, value: "str | ExtensionMode") -> "ExtensionMode":
        """Accept either a member or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown extension mode '{value}'. Available: {choices}") from None

    @property
    def is_legacy(self) -> bool:
        return self is ExtensionMode.LEGACY

    @property
    def default_resolution(self) -> tuple[int, int]:
        if self is ExtensionMode.EXTENDED:
            return EXTENDED_SCREEN_WIDTH, EXTENDED_SCREEN_HEIGHT
        return SCREEN_WIDTH, SCREEN_HEIGHT


class RunState(enum.Enum):
    """Host-controlled run state of a machine."""
    RUNNING = "running"
    PAUSED = "paused"
    QUIT = "quit"


class KeyWaitPhase(enum.IntEnum):
    """Sub-state of the blocking FX0A key read."""
    IDLE = 0
    WAITING_FOR_PRESS = 1
    WAITING_FOR_RELEASE = 2


class RuntimeFault(enum.Enum):
    """Conditions recovered from deterministically instead of halting."""
    STACK_OVERFLOW = "stack_overflow"
    STACK_UNDERFLOW = "stack_underflow"
    OUT_OF_RANGE_MEMORY_ACCESS = "memory_out_of_range"
