"""Emulator configuration."""

import dataclasses
from typing import Optional

from chipax.constants import (
    DEFAULT_INSTRUCTIONS_PER_SECOND, FRAME_RATE, SQUARE_WAVE_FREQUENCY, AUDIO_VOLUME
)
from chipax.errors import ConfigError
from chipax.modes import ExtensionMode
from chipax.rendering import COLOR_SCHEMES

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclasses.dataclass
class EmulatorConfig:
    """Settings shared by the command line and the desktop host.

    Attributes:
        mode: Quirk mode of the machine
        scale: Window pixels per CHIP-8 pixel
        color_scheme: Name of an entry in ``COLOR_SCHEMES``
        pixel_outlines: Draw background-colored outlines around lit pixels
        instructions_per_second: Emulated CPU speed
        square_wave_frequency: Beep pitch in Hz
        volume: Beep amplitude (0-32767)
        seed: Random seed for CXNN, None to seed from the clock
        log_level: Console log level
        trace: Log every executed instruction
    """
    mode: ExtensionMode = ExtensionMode.MODERN
    scale: int = 10
    color_scheme: str = "white"
    pixel_outlines: bool = True
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    square_wave_frequency: int = SQUARE_WAVE_FREQUENCY
    volume: int = AUDIO_VOLUME
    seed: Optional[int] = None
    log_level: str = "INFO"
    trace: bool = False

    def __post_init__(self):
        try:
            self.mode = ExtensionMode.parse(self.mode)
        except ValueError as e:
            raise ConfigError(str(e)) from None
        self.log_level = self.log_level.upper()
        self.validate()

    def validate(self):
        if self.scale < 1:
            raise ConfigError(f"scale must be >= 1, got {self.scale}")
        if self.instructions_per_second < FRAME_RATE:
            raise ConfigError(
                f"instructions_per_second must be >= {FRAME_RATE}, got {self.instructions_per_second}"
            )
        if self.square_wave_frequency <= 0:
            raise ConfigError(f"square_wave_frequency must be > 0, got {self.square_wave_frequency}")
        if not 0 <= self.volume <= 32767:
            raise ConfigError(f"volume must be in 0..32767, got {self.volume}")
        if self.color_scheme not in COLOR_SCHEMES:
            raise ConfigError(
                f"Unknown color scheme '{self.color_scheme}'. Available: {list(COLOR_SCHEMES)}"
            )
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level '{self.log_level}'. Available: {list(LOG_LEVELS)}")

    @property
    def instructions_per_frame(self) -> int:
        """Instructions per 60 Hz tick (700/s gives 11)."""
        return self.instructions_per_second // FRAME_RATE
