"""60 Hz frame pacing: instruction batches, timers and wall-clock budget."""

import time
from functools import partial
from typing import Callable

import jax
import jax.lax
import jax.numpy as jnp
from flax.struct import dataclass

from chipax.constants import FRAME_RATE
from chipax.emulator import step, DRAW_OPCODE
from chipax.logging import scan_with_progress
from chipax.state import EmulatorState


@dataclass
class FrameInfo:
    """What happened during one frame."""
    display_dirty: jnp.ndarray
    instructions_executed: jnp.ndarray
    sound_active: jnp.ndarray


def decrement_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def _run_frame(state: EmulatorState, instructions_per_frame) -> tuple[EmulatorState, FrameInfo]:
    stop_after_draw = state.mode.is_legacy

    def keep_going(carry):
        _, executed, drew = carry
        return (executed < instructions_per_frame) & ~drew

    def run_instruction(carry):
        state, executed, _ = carry
        state, instruction = step(state)
        drew = ((instruction >> 12) == DRAW_OPCODE) & stop_after_draw
        return state, executed + 1, drew

    state, executed, _ = jax.lax.while_loop(
        keep_going,
        run_instruction,
        (state, jnp.zeros((), dtype=jnp.int32), jnp.zeros((), dtype=jnp.bool_))
    )
    state = decrement_timers(state)
    info = FrameInfo(
        display_dirty=state.display_dirty,
        instructions_executed=executed,
        sound_active=state.sound_timer > 0,
    )
    return state.replace(display_dirty=jnp.zeros((), dtype=jnp.bool_)), info


@jax.jit
def run_frame(state: EmulatorState, instructions_per_frame: int) -> tuple[EmulatorState, FrameInfo]:
    """Run one 60 Hz tick.

    Executes up to ``instructions_per_frame`` instructions (LEGACY mode stops
    right after the first sprite draw), then decrements the timers once and
    hands the display dirty flag to the caller, clearing it on the state.
    """
    return _run_frame(state, instructions_per_frame)


@partial(jax.jit, static_argnums=(1, 3))
def run_frames(state: EmulatorState, num_frames: int, instructions_per_frame: int,
               progress: bool = False) -> tuple[EmulatorState, FrameInfo]:
    """Run ``num_frames`` ticks back to back. Returns per-frame infos stacked."""
    def frame(state, _):
        return _run_frame(state, instructions_per_frame)

    if progress:
        frame = scan_with_progress(num_frames, desc=f"Running {num_frames:,} frames")(frame)

    return jax.lax.scan(frame, state, jnp.arange(num_frames))


class FramePacer:
    """Sleeps away whatever is left of each 1/60 s frame budget.

    Clock and sleep functions are injectable so pacing can be tested without
    waiting on real time.
    """

    def __init__(
        self,
        frame_rate: int = FRAME_RATE,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.frame_budget = 1.0 / frame_rate
        self._clock = clock
        self._sleep = sleep
        self._frame_start = None
        self.overruns = 0

    def start_frame(self):
        self._frame_start = self._clock()

    def sleep_remainder(self) -> float:
        """Sleep until the frame budget is used up; returns the time slept."""
        if self._frame_start is None:
            return 0.0
        remaining = self.frame_budget - (self._clock() - self._frame_start)
        self._frame_start = None
        if remaining <= 0:
            self.overruns += 1
            return 0.0
        self._sleep(remaining)
        return remaining
