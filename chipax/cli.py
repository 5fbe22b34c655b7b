"""Command line entry point: ``chipax ROM [options]``."""

import argparse
import sys

from chipax.config import EmulatorConfig, LOG_LEVELS
from chipax.errors import ConfigError, ConstructionError
from chipax.logging import MachineLogger
from chipax.machine import Chip8Machine
from chipax.modes import ExtensionMode
from chipax.rendering import COLOR_SCHEMES, save_screenshot


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chipax",
        description="Run a CHIP-8 ROM.",
    )
    parser.add_argument("rom", help="Path to a raw CHIP-8 ROM image")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ExtensionMode],
        default=ExtensionMode.MODERN.value,
        help="Quirk mode (default: %(default)s)",
    )
    parser.add_argument(
        "--scale", type=int, default=10, help="Window pixels per CHIP-8 pixel (default: %(default)s)"
    )
    parser.add_argument(
        "--ips",
        type=int,
        default=EmulatorConfig.instructions_per_second,
        help="Instructions per second (default: %(default)s)",
    )
    parser.add_argument(
        "--colors", choices=list(COLOR_SCHEMES), default="white", help="Color scheme (default: %(default)s)"
    )
    parser.add_argument("--no-outlines", action="store_true", help="Do not outline lit pixels")
    parser.add_argument(
        "--tone", type=int, default=EmulatorConfig.square_wave_frequency, help="Beep frequency in Hz"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for CXNN")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="INFO", type=str.upper)
    parser.add_argument("--trace", action="store_true", help="Log every instruction (needs --log-level DEBUG)")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument(
        "--frames", type=int, default=600, help="Frames to run in headless mode (default: %(default)s)"
    )
    parser.add_argument("--screenshot", default=None, help="Write the final display to this image file")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar in headless mode")
    return parser


def config_from_args(args: argparse.Namespace) -> EmulatorConfig:
    return EmulatorConfig(
        mode=args.mode,
        scale=args.scale,
        color_scheme=args.colors,
        pixel_outlines=not args.no_outlines,
        instructions_per_second=args.ips,
        square_wave_frequency=args.tone,
        seed=args.seed,
        log_level=args.log_level,
        trace=args.trace,
    )


def run_headless(machine: Chip8Machine, config: EmulatorConfig, frames: int,
                 screenshot: str = None, progress: bool = False) -> int:
    if config.trace:
        drawn = sum(machine.tick_frame(config.instructions_per_frame).display_dirty for _ in range(frames))
    else:
        drawn = machine.run_headless(frames, config.instructions_per_frame, progress)
    machine.logger.info(f"Ran {frames} frames, display changed in {drawn}")
    if screenshot:
        save_screenshot(machine.get_display(), screenshot, scale=config.scale,
                        color_scheme=config.color_scheme, pixel_outlines=config.pixel_outlines)
        machine.logger.info(f"Saved display to {screenshot}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        parser.error(str(e))

    logger = MachineLogger(log_level=config.log_level)
    try:
        machine = Chip8Machine.from_file(
            args.rom, mode=config.mode, seed=config.seed, logger=logger, trace=config.trace
        )
    except ConstructionError as e:
        logger.error(str(e))
        return 1

    if args.headless:
        return run_headless(machine, config, args.frames, args.screenshot, args.progress)

    from chipax.frontend.pygame_host import PygameHost
    PygameHost(machine, config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
