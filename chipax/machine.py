"""Host-facing CHIP-8 machine: construction, ticking, input and introspection."""

import time
from typing import Optional

import chex
import jax
import jax.numpy as jnp
import numpy as np

from chipax.constants import NUM_KEYS, STACK_SIZE
from chipax.decode import DecodedInstruction, decode
from chipax.disassemble import describe, trace_line
from chipax.emulator import peek, step, DRAW_OPCODE
from chipax.errors import RomUnreadableError
from chipax.frame import FrameInfo, run_frame, run_frames, decrement_timers
from chipax.logging import MachineLogger
from chipax.modes import ExtensionMode, RunState, KeyWaitPhase, RuntimeFault
from chipax.state import EmulatorState, create_state, load_rom_bytes

_jit_step = jax.jit(step)


@chex.dataclass(frozen=True)
class MachineSnapshot:
    """Plain-Python view of the machine for debuggers and overlays."""
    pc: int
    I: int
    V: tuple
    stack: tuple
    delay_timer: int
    sound_timer: int
    instruction: DecodedInstruction
    description: str
    key_wait_phase: KeyWaitPhase
    run_state: RunState


class Chip8Machine:
    """One CHIP-8 machine bound to one ROM image.

    The quirk mode is fixed for the lifetime of the machine. The emulator state
    itself is an immutable pytree held in ``state``; every operation here
    replaces it. Calls must be serialized by the host.
    """

    def __init__(
        self,
        rom_data: bytes,
        mode: ExtensionMode | str = ExtensionMode.MODERN,
        seed: Optional[int] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        logger: Optional[MachineLogger] = None,
        trace: bool = False,
        source: str = "<bytes>",
    ):
        """Create a machine.

        Args:
            rom_data: Raw ROM image, loaded verbatim at 0x200
            mode: Quirk mode (member or name)
            seed: Seed for CXNN random numbers; taken from the clock when None
            width: Display width, defaults to the mode's resolution
            height: Display height, defaults to the mode's resolution
            logger: Logger for lifecycle events and faults
            trace: Log every executed instruction at DEBUG level
            source: Name of the ROM used in log messages

        Raises:
            RomTooLargeError: ROM does not fit in memory
        """
        self.mode = ExtensionMode.parse(mode)
        self.rom_data = bytes(rom_data)
        self.width = width
        self.height = height
        self.trace = trace
        self.source = source
        self.logger = logger or MachineLogger(log_level="WARNING")
        if seed is None:
            seed = time.time_ns() & 0xFFFFFFFF
        self._rng = jax.random.PRNGKey(seed)
        self.run_state = RunState.RUNNING
        self._build()
        self.logger.log_rom_loaded(self.source, len(self.rom_data), self.mode,
                                   self.state.width, self.state.height)

    @classmethod
    def from_file(cls, path, **kwargs) -> "Chip8Machine":
        """Create a machine from a ROM file on disk.

        Raises:
            RomUnreadableError: file is missing or cannot be read
            RomTooLargeError: ROM does not fit in memory
        """
        try:
            with open(path, 'rb') as f:
                rom_data = f.read()
        except OSError as e:
            raise RomUnreadableError(path, e.strerror or str(e)) from e
        kwargs.setdefault("source", str(path))
        return cls(rom_data, **kwargs)

    def _build(self):
        self._rng, key = jax.random.split(self._rng)
        state = create_state(key, self.mode, self.width, self.height)
        self.state: EmulatorState = load_rom_bytes(state, self.rom_data)
        self._reported_faults = self.state.faults.as_dict()

    def tick_frame(self, instructions_per_frame: int) -> FrameInfo:
        """Run one 60 Hz frame unless paused or quit."""
        if instructions_per_frame < 0:
            raise ValueError(f"instructions_per_frame must be >= 0, got {instructions_per_frame}")
        if self.run_state is not RunState.RUNNING:
            return FrameInfo(display_dirty=False, instructions_executed=0, sound_active=self.sound_active())

        if self.trace and self.logger.is_enabled_for("DEBUG"):
            info = self._tick_traced(instructions_per_frame)
        else:
            self.state, info = run_frame(self.state, instructions_per_frame)
        self._report_faults()
        return FrameInfo(
            display_dirty=bool(info.display_dirty),
            instructions_executed=int(info.instructions_executed),
            sound_active=bool(info.sound_active),
        )

    def _tick_traced(self, instructions_per_frame: int) -> FrameInfo:
        """Instruction-at-a-time frame that logs each instruction before it runs."""
        executed = 0
        while executed < instructions_per_frame:
            address = int(self.state.pc)
            opcode = int(peek(self.state))
            self.logger.log_trace(trace_line(address, opcode, self.state))
            self.state, _ = _jit_step(self.state)
            executed += 1
            if self.mode.is_legacy and (opcode >> 12) == DRAW_OPCODE:
                break
        state = decrement_timers(self.state)
        dirty = bool(state.display_dirty)
        self.state = state.replace(display_dirty=jnp.zeros((), dtype=jnp.bool_))
        return FrameInfo(display_dirty=dirty, instructions_executed=executed,
                         sound_active=self.sound_active())

    def run_headless(self, num_frames: int, instructions_per_frame: int, progress: bool = False) -> int:
        """Run ``num_frames`` frames in one compiled loop; returns frames that drew."""
        if self.run_state is not RunState.RUNNING or num_frames <= 0:
            return 0
        self.state, infos = run_frames(self.state, num_frames, instructions_per_frame, progress)
        self._report_faults()
        return int(jnp.sum(infos.display_dirty))

    def _report_faults(self):
        totals = self.state.faults.as_dict()
        new_faults = {fault: totals[fault] - self._reported_faults[fault] for fault in RuntimeFault}
        if any(count > 0 for count in new_faults.values()):
            self.logger.log_faults(new_faults, totals, int(self.state.pc))
        self._reported_faults = totals

    def set_key(self, index: int, pressed: bool):
        """Record a key as pressed or released."""
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {index}")
        self.state = self.state.replace(keypad=self.state.keypad.at[index].set(bool(pressed)))

    def release_all_keys(self):
        self.state = self.state.replace(keypad=jnp.zeros_like(self.state.keypad))

    def get_display(self) -> np.ndarray:
        """Read-only ``(width, height)`` boolean snapshot of the display."""
        display = np.array(self.state.display, dtype=np.bool_)
        display.setflags(write=False)
        return display

    def sound_active(self) -> bool:
        return bool(self.state.sound_timer > 0)

    @property
    def faults(self) -> dict[RuntimeFault, int]:
        return self.state.faults.as_dict()

    def pause(self):
        if self.run_state is RunState.RUNNING:
            self._set_run_state(RunState.PAUSED)

    def resume(self):
        if self.run_state is RunState.PAUSED:
            self._set_run_state(RunState.RUNNING)

    def toggle_pause(self):
        if self.run_state is RunState.PAUSED:
            self.resume()
        else:
            self.pause()

    def quit(self):
        self._set_run_state(RunState.QUIT)

    def _set_run_state(self, run_state: RunState):
        self.run_state = run_state
        self.logger.log_run_state(run_state)

    def reset(self):
        """Rebuild the machine from the same ROM, discarding all state."""
        self._build()
        self.run_state = RunState.RUNNING
        self.logger.log_reset()

    def inspect(self) -> MachineSnapshot:
        """Snapshot registers, stack and the instruction at PC."""
        state = self.state
        opcode = int(peek(state))
        depth = min(int(state.stack.pointer), STACK_SIZE)
        return MachineSnapshot(
            pc=int(state.pc),
            I=int(state.I),
            V=tuple(int(v) for v in state.V),
            stack=tuple(int(a) for a in state.stack.data[:depth]),
            delay_timer=int(state.delay_timer),
            sound_timer=int(state.sound_timer),
            instruction=decode(opcode),
            description=describe(opcode, state),
            key_wait_phase=KeyWaitPhase(int(state.key_wait_phase)),
            run_state=self.run_state,
        )
