"""CHIP-8 emulator package."""

from chipax.state import EmulatorState, create_state, load_rom_bytes
from chipax.emulator import execute, load_rom, fetch, step
from chipax.decode import DecodedInstruction, decode
from chipax.constants import *
from chipax.modes import ExtensionMode, RunState, KeyWaitPhase, RuntimeFault
from chipax.errors import Chip8Error, ConstructionError, RomTooLargeError, RomUnreadableError
from chipax.frame import FrameInfo, FramePacer, run_frame, run_frames
from chipax.machine import Chip8Machine, MachineSnapshot

__all__ = [
    "EmulatorState",
    "create_state",
    "load_rom_bytes",
    "fetch",
    "execute",
    "step",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "ExtensionMode",
    "RunState",
    "KeyWaitPhase",
    "RuntimeFault",
    "Chip8Error",
    "ConstructionError",
    "RomTooLargeError",
    "RomUnreadableError",
    "FrameInfo",
    "FramePacer",
    "run_frame",
    "run_frames",
    "Chip8Machine",
    "MachineSnapshot",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
