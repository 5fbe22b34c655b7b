"""CHIP-8 rendering utilities for visualization."""

import numpy as np
from typing import Tuple

from PIL import Image

COLOR_SCHEMES = {
    "violet": ((179, 102, 184), (45, 25, 61)),
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
}


def chip8_display_to_rgb(
    display: np.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
    pixel_outlines: bool = False,
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (width, height) representing the display
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)
        pixel_outlines: Outline each lit pixel with the off color (needs scale > 2)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.array(display, dtype=np.bool_)

    # (width, height) -> (height, width)
    pixels = pixels.T
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

        if pixel_outlines and scale > 2:
            border = np.zeros((scale, scale), dtype=np.bool_)
            border[0, :] = border[-1, :] = border[:, 0] = border[:, -1] = True
            outline = np.tile(border, (height, width)) & np.repeat(np.repeat(pixels, scale, axis=0), scale, axis=1)
            rgb_frame[outline] = off_color

    return rgb_frame


def create_color_scheme(
    scheme: str = "white",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name, one of ``COLOR_SCHEMES``

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def save_screenshot(display: np.ndarray, path: str, scale: int = 8, color_scheme: str = "white",
                    pixel_outlines: bool = False) -> np.ndarray:
    """Render ``display`` and write it to ``path`` as an image."""
    on_color, off_color = create_color_scheme(color_scheme)
    frame = chip8_display_to_rgb(display, scale=scale, on_color=on_color, off_color=off_color,
                                 pixel_outlines=pixel_outlines)
    Image.fromarray(frame).save(path)
    return frame
