"""Exceptions raised by the emulator."""


class Chip8Error(Exception):
    """Base class for all emulator errors."""


class ConstructionError(Chip8Error):
    """A machine could not be created from the given ROM."""


class RomTooLargeError(ConstructionError):
    """ROM does not fit between the program start and the end of memory."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, maximum is {limit} bytes")
        self.size = size
        self.limit = limit


class RomUnreadableError(ConstructionError):
    """ROM file is missing or could not be read."""

    def __init__(self, path, reason: str):
        super().__init__(f"Could not read ROM '{path}': {reason}")
        self.path = path


class ConfigError(Chip8Error):
    """Invalid emulator configuration value."""
