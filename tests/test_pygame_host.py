"""Tests for the pygame host that do not open a window."""

import numpy as np
import pygame

from chipax.config import EmulatorConfig
from chipax.frontend.pygame_host import KEY_MAP, PygameHost, square_wave
from chipax.modes import RunState
from conftest import make_machine


def key_event(event_type, key):
    return pygame.event.Event(event_type, key=key)


def test_key_map_covers_keypad():
    assert sorted(KEY_MAP.values()) == list(range(16))
    assert KEY_MAP[pygame.K_x] == 0x0
    assert KEY_MAP[pygame.K_v] == 0xF


def test_square_wave():
    wave = square_wave(1000, 3000, sample_rate=8000)

    assert wave.dtype == np.int16
    assert len(wave) == 8000
    assert set(np.unique(wave)) == {-3000, 3000}
    assert list(wave[:8]) == [-3000] * 4 + [3000] * 4


class TestEvents:

    def test_keys_are_forwarded(self):
        machine = make_machine(0x1200)
        host = PygameHost(machine, EmulatorConfig())

        host.handle_event(key_event(pygame.KEYDOWN, pygame.K_q))
        assert bool(machine.state.keypad[0x4])

        host.handle_event(key_event(pygame.KEYUP, pygame.K_q))
        assert not bool(machine.state.keypad[0x4])

    def test_pause_reset_quit(self):
        machine = make_machine(0x7001, 0x1200)
        host = PygameHost(machine, EmulatorConfig())
        machine.tick_frame(11)

        host.handle_event(key_event(pygame.KEYDOWN, pygame.K_SPACE))
        assert machine.run_state is RunState.PAUSED

        host.handle_event(key_event(pygame.KEYDOWN, pygame.K_F5))
        assert machine.run_state is RunState.RUNNING
        assert machine.inspect().V[0] == 0

        host.handle_event(key_event(pygame.KEYDOWN, pygame.K_ESCAPE))
        assert machine.run_state is RunState.QUIT

    def test_window_close_quits(self):
        machine = make_machine(0x1200)
        PygameHost(machine, EmulatorConfig()).handle_event(pygame.event.Event(pygame.QUIT))
        assert machine.run_state is RunState.QUIT
