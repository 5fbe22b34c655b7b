"""Console logging for the emulator.

``ConsoleLogger`` is a small levelled, coloured console logger.
``MachineLogger`` adds messages for machine lifecycle events, runtime faults
and instruction traces. ``scan_with_progress`` drives a tqdm bar from inside
a jitted ``lax.scan`` through ``io_callback``.
"""

import time
import sys
from typing import Optional, Callable

import jax
import jax.numpy as jnp
from jax.experimental import io_callback

from tqdm import tqdm

from chipax.modes import RuntimeFault

LEVEL_ORDER = {"DEBUG": 0, "INFO": 1, "WARNING": 2, "ERROR": 3, "CRITICAL": 4}

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET_COLOR = "\033[0m"


class ConsoleLogger:
    """Console logger with levels, optional colors and elapsed-time stamps.

    Colors are only used when the stream is a terminal.
    """

    def __init__(
        self,
        name: str = "Chipax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVEL_ORDER:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVEL_ORDER)}")
        self.stream = stream or sys.stdout
        self.use_colors = use_colors and getattr(self.stream, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def is_enabled_for(self, level: str) -> bool:
        return LEVEL_ORDER.get(level.upper(), 1) >= LEVEL_ORDER[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        timestamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{LEVEL_COLORS[level]}{level_str}{RESET_COLOR}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        level = level.upper()
        if self.is_enabled_for(level):
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class MachineLogger(ConsoleLogger):
    """Logger for machine lifecycle events, runtime faults and traces."""

    FAULT_MESSAGES = {
        RuntimeFault.STACK_OVERFLOW: "Stack overflow, oldest return address dropped",
        RuntimeFault.STACK_UNDERFLOW: "Return with empty stack, PC left unchanged",
        RuntimeFault.OUT_OF_RANGE_MEMORY_ACCESS: "Memory access past 0xFFF wrapped around",
    }

    def __init__(self, name: str = "Machine", **kwargs):
        super().__init__(name, **kwargs)

    def log_rom_loaded(self, source: str, size: int, mode, width: int, height: int):
        self.info(f"Loaded {source} ({size} bytes) in {mode.value} mode, display {width}x{height}")

    def log_run_state(self, run_state):
        self.info(f"Machine {run_state.value}")

    def log_reset(self):
        self.info("Machine reset")

    def log_faults(self, new_faults: dict, totals: dict, pc: int):
        """Report faults that occurred since the last report."""
        for fault, count in new_faults.items():
            if count <= 0:
                continue
            self.warning(
                f"{self.FAULT_MESSAGES[fault]} (x{count} this frame, "
                f"{totals[fault]} total, PC=0x{pc:03X})"
            )

    def log_trace(self, line: str):
        self.debug(line)


def scan_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Decorate a ``lax.scan`` body so that a tqdm bar follows its progress.

    The scanned ``xs`` must be ``jnp.arange(n)`` (or a tuple starting with it)
    so that the body can read its own iteration number.
    """
    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    print_rate = max(1, min(print_rate, n))
    desc = desc or f"Running ({n:,} frames)"
    bars = {}

    def _open():
        bars[0] = tqdm(total=n, desc=desc, unit="frame", **tqdm_kwargs)

    def _advance(steps):
        if 0 in bars:
            bars[0].update(int(steps))

    def _close():
        if 0 in bars:
            bars.pop(0).close()

    def _on_iteration(iter_num):
        jax.lax.cond(iter_num == 0, lambda: io_callback(_open, None, ordered=True), lambda: None)
        done = iter_num + 1
        report = (done % print_rate == 0) | (done == n)
        steps = jnp.where(done % print_rate == 0, print_rate, done % print_rate)
        jax.lax.cond(report, lambda: io_callback(_advance, None, steps, ordered=True), lambda: None)
        jax.lax.cond(done == n, lambda: io_callback(_close, None, ordered=True), lambda: None)

    def decorator(body):
        def wrapped(carry, x):
            iter_num = x[0] if isinstance(x, tuple) else x
            result = body(carry, x)
            _on_iteration(iter_num)
            return result
        return wrapped

    return decorator
