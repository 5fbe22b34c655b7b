"""Tests for console and machine logging."""

import io

import pytest
from chipax import create_state, run_frames, RuntimeFault, ExtensionMode
from chipax.logging import ConsoleLogger, MachineLogger


def make_logger(level="INFO", cls=ConsoleLogger):
    stream = io.StringIO()
    return cls(log_level=level, stream=stream, show_timestamps=False), stream


class TestConsoleLogger:

    def test_format(self):
        logger, stream = make_logger()
        logger.info("hello")
        assert stream.getvalue() == "[    INFO][Chipax] hello\n"

    def test_level_filtering(self):
        logger, stream = make_logger("WARNING")
        logger.debug("a")
        logger.info("b")
        logger.warning("c")
        logger.error("d")
        assert stream.getvalue().splitlines() == ["[ WARNING][Chipax] c", "[   ERROR][Chipax] d"]

    def test_no_colors_on_non_terminal(self):
        logger, _ = make_logger()
        assert not logger.use_colors

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            ConsoleLogger(log_level="verbose")

    def test_is_enabled_for(self):
        logger, _ = make_logger("info")
        assert logger.is_enabled_for("error")
        assert not logger.is_enabled_for("DEBUG")


class TestMachineLogger:

    def test_only_new_faults_reported(self):
        logger, stream = make_logger("WARNING", MachineLogger)
        new = {RuntimeFault.STACK_OVERFLOW: 2, RuntimeFault.STACK_UNDERFLOW: 0,
               RuntimeFault.OUT_OF_RANGE_MEMORY_ACCESS: 0}
        totals = {RuntimeFault.STACK_OVERFLOW: 5, RuntimeFault.STACK_UNDERFLOW: 1,
                  RuntimeFault.OUT_OF_RANGE_MEMORY_ACCESS: 0}

        logger.log_faults(new, totals, 0x2A4)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert "Stack overflow" in lines[0]
        assert "x2 this frame, 5 total, PC=0x2A4" in lines[0]

    def test_rom_loaded(self):
        logger, stream = make_logger(cls=MachineLogger)
        logger.log_rom_loaded("pong.ch8", 246, ExtensionMode.LEGACY, 64, 32)
        assert "Loaded pong.ch8 (246 bytes) in legacy mode, display 64x32" in stream.getvalue()


def test_run_frames_with_progress_bar():
    state = create_state()
    state = state.replace(memory=state.memory.at[0x200].set(0x12).at[0x201].set(0x00))

    state, infos = run_frames(state, 8, 4, True)

    assert infos.instructions_executed.shape == (8,)
    assert int(infos.instructions_executed.sum()) == 32
