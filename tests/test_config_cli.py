"""Tests for configuration and the command line entry point."""

import pytest
from PIL import Image

from chipax.cli import build_parser, config_from_args, main
from chipax.config import EmulatorConfig
from chipax.errors import ConfigError
from chipax.modes import ExtensionMode
from conftest import assemble


class TestEmulatorConfig:

    def test_defaults(self):
        config = EmulatorConfig()

        assert config.mode is ExtensionMode.MODERN
        assert config.instructions_per_second == 700
        assert config.instructions_per_frame == 11
        assert config.square_wave_frequency == 1244
        assert config.volume == 3000
        assert config.pixel_outlines

    def test_mode_and_level_are_normalized(self):
        config = EmulatorConfig(mode="Legacy", log_level="debug")
        assert config.mode is ExtensionMode.LEGACY
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("kwargs", [
        dict(mode="superchip"),
        dict(scale=0),
        dict(instructions_per_second=30),
        dict(square_wave_frequency=0),
        dict(volume=40000),
        dict(color_scheme="sepia"),
        dict(log_level="LOUD"),
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            EmulatorConfig(**kwargs)


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args(["game.ch8"])
        config = config_from_args(args)

        assert args.rom == "game.ch8"
        assert not args.headless
        assert config.mode is ExtensionMode.MODERN
        assert config.instructions_per_frame == 11

    def test_options(self):
        args = build_parser().parse_args([
            "game.ch8", "--mode", "legacy", "--ips", "1200", "--no-outlines",
            "--log-level", "debug", "--trace", "--seed", "7",
        ])
        config = config_from_args(args)

        assert config.mode is ExtensionMode.LEGACY
        assert config.instructions_per_frame == 20
        assert not config.pixel_outlines
        assert config.log_level == "DEBUG"
        assert config.trace
        assert config.seed == 7


class TestMain:

    @pytest.fixture
    def rom_path(self, tmp_path):
        path = tmp_path / "draw.ch8"
        path.write_bytes(assemble(0xA000, 0xD005, 0x1204))
        return path

    def test_headless_screenshot(self, rom_path, tmp_path):
        screenshot = tmp_path / "out.png"

        code = main([str(rom_path), "--headless", "--frames", "3", "--scale", "2",
                     "--no-outlines", "--screenshot", str(screenshot), "--log-level", "ERROR"])

        assert code == 0
        with Image.open(screenshot) as image:
            assert image.size == (128, 64)
            assert image.getpixel((0, 0)) == (255, 255, 255)

    def test_headless_trace(self, rom_path, capsys):
        code = main([str(rom_path), "--headless", "--frames", "1", "--trace", "--log-level", "DEBUG"])

        assert code == 0
        assert "Address: 0x0202, Opcode: 0xD005" in capsys.readouterr().out

    def test_missing_rom(self, tmp_path):
        assert main([str(tmp_path / "none.ch8"), "--headless", "--log-level", "CRITICAL"]) == 1

    def test_invalid_config_exits(self, rom_path):
        with pytest.raises(SystemExit) as excinfo:
            main([str(rom_path), "--headless", "--scale", "0"])
        assert excinfo.value.code == 2
