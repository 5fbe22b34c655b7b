"""Pygame window, keyboard and beeper wrapped around a Chip8Machine."""

import numpy as np
import pygame

from chipax.config import EmulatorConfig
from chipax.constants import AUDIO_SAMPLE_RATE
from chipax.frame import FramePacer
from chipax.machine import Chip8Machine
from chipax.modes import RunState
from chipax.rendering import chip8_display_to_rgb, create_color_scheme

# COSMAC VIP hex keypad laid out on the left of a QWERTY keyboard:
# 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def square_wave(frequency: int, volume: int, sample_rate: int = AUDIO_SAMPLE_RATE) -> np.ndarray:
    """One second of a mono 16-bit square wave."""
    half_period = max(1, sample_rate // frequency // 2)
    samples = np.arange(sample_rate)
    return np.where((samples // half_period) % 2 == 1, volume, -volume).astype(np.int16)


class PygameHost:
    """Runs a machine in a window at 60 frames per second."""

    def __init__(self, machine: Chip8Machine, config: EmulatorConfig):
        self.machine = machine
        self.config = config
        self.on_color, self.off_color = create_color_scheme(config.color_scheme)
        self.pacer = FramePacer()
        self.screen = None
        self.beep = None
        self._beeping = False
        self._needs_redraw = True

    def open(self):
        pygame.init()
        width, height = self.machine.state.width, self.machine.state.height
        self.screen = pygame.display.set_mode((width * self.config.scale, height * self.config.scale))
        pygame.display.set_caption("CHIP-8")
        try:
            pygame.mixer.init(frequency=AUDIO_SAMPLE_RATE, size=-16, channels=1)
            wave = square_wave(self.config.square_wave_frequency, self.config.volume)
            self.beep = pygame.sndarray.make_sound(wave)
        except pygame.error as e:
            self.machine.logger.warning(f"Audio disabled: {e}")
            self.beep = None

    def close(self):
        if self.beep is not None:
            self.beep.stop()
        pygame.quit()

    def handle_event(self, event):
        """Translate one pygame event into machine calls."""
        if event.type == pygame.QUIT:
            self.machine.quit()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.machine.quit()
            elif event.key == pygame.K_SPACE:
                self.machine.toggle_pause()
                self._needs_redraw = True
            elif event.key == pygame.K_F5:
                self.machine.reset()
                self._needs_redraw = True
            elif event.key in KEY_MAP:
                self.machine.set_key(KEY_MAP[event.key], True)
        elif event.type == pygame.KEYUP:
            if event.key in KEY_MAP:
                self.machine.set_key(KEY_MAP[event.key], False)

    def update_audio(self):
        if self.beep is None:
            return
        should_beep = self.machine.sound_active() and self.machine.run_state is RunState.RUNNING
        if should_beep and not self._beeping:
            self.beep.play(loops=-1)
        elif not should_beep and self._beeping:
            self.beep.stop()
        self._beeping = should_beep

    def draw(self):
        frame = chip8_display_to_rgb(
            self.machine.get_display(),
            scale=self.config.scale,
            on_color=self.on_color,
            off_color=self.off_color,
            pixel_outlines=self.config.pixel_outlines,
        )
        pygame.surfarray.blit_array(self.screen, frame.transpose(1, 0, 2))
        pygame.display.flip()
        self._needs_redraw = False

    def run(self):
        """Main loop; returns when the machine quits."""
        self.open()
        try:
            while self.machine.run_state is not RunState.QUIT:
                self.pacer.start_frame()
                for event in pygame.event.get():
                    self.handle_event(event)
                info = self.machine.tick_frame(self.config.instructions_per_frame)
                self.update_audio()
                if info.display_dirty or self._needs_redraw:
                    self.draw()
                self.pacer.sleep_remainder()
        finally:
            self.close()
