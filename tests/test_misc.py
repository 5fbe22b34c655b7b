"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chipax import execute, create_state, ExtensionMode
from conftest import set_registers


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        state = execute(fresh_state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48

    def test_timers_not_decremented_by_instructions(self, fresh_state):
        state = execute(fresh_state, 0x6005)
        state = execute(state, 0xF015)
        for _ in range(5):
            state = execute(state, 0x6100)
        assert state.delay_timer == 5


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value, digits", [
        (234, (2, 3, 4)),
        (156, (1, 5, 6)),
        (0, (0, 0, 0)),
        (255, (2, 5, 5)),
        (7, (0, 0, 7)),
    ])
    def test_bcd(self, fresh_state, value, digits):
        state = set_registers(fresh_state, V4=value)
        state = execute(state, 0xA300)
        state = execute(state, 0xF433)

        assert tuple(int(d) for d in state.memory[0x300:0x303]) == digits
        assert state.I == 0x300

    def test_bcd_past_end_wraps(self, fresh_state):
        state = set_registers(fresh_state, V0=123)
        state = execute(state, 0xAFFE)
        state = execute(state, 0xF033)

        assert state.memory[0xFFE] == 1
        assert state.memory[0xFFF] == 2
        assert state.memory[0x000] == 3
        assert state.faults.memory_out_of_range == 1


class TestIndex:
    """FX1E and FX29."""

    def test_add_to_index(self, fresh_state):
        state = set_registers(fresh_state, V2=0x10, VF=0x07)
        state = execute(state, 0xA100)
        state = execute(state, 0xF21E)

        assert state.I == 0x110
        assert state.V[15] == 0x07  # No flag effect

    def test_add_to_index_beyond_12_bits(self, fresh_state):
        state = set_registers(fresh_state, V2=0x02)
        state = execute(state, 0xAFFF)
        state = execute(state, 0xF21E)

        assert state.I == 0x1001
        assert state.V[15] == 0

    @pytest.mark.parametrize("digit", [0x0, 0x5, 0xA, 0xF])
    def test_font_character(self, fresh_state, digit):
        state = set_registers(fresh_state, V0=digit)
        state = execute(state, 0xF029)
        assert state.I == digit * 5


class TestRegisterTransfer:
    """FX55 / FX65."""

    def _store_and_reload(self, mode):
        state = create_state(mode=mode)
        state = set_registers(state, V0=0x11, V1=0x22, V2=0x33, V3=0x44)
        state = execute(state, 0xA300)
        state = execute(state, 0xF255)
        stored = state
        state = set_registers(state, V0=0, V1=0, V2=0, V3=0)
        state = execute(state, 0xA300)
        state = execute(state, 0xF265)
        return stored, state

    @pytest.mark.parametrize("mode", list(ExtensionMode))
    def test_round_trip(self, mode):
        stored, loaded = self._store_and_reload(mode)

        assert [int(b) for b in stored.memory[0x300:0x304]] == [0x11, 0x22, 0x33, 0x00]
        assert [int(v) for v in loaded.V[:4]] == [0x11, 0x22, 0x33, 0x00]

    def test_legacy_advances_index(self):
        stored, loaded = self._store_and_reload(ExtensionMode.LEGACY)
        assert stored.I == 0x303
        assert loaded.I == 0x303

    @pytest.mark.parametrize("mode", [ExtensionMode.MODERN, ExtensionMode.EXTENDED])
    def test_modern_keeps_index(self, mode):
        stored, loaded = self._store_and_reload(mode)
        assert stored.I == 0x300
        assert loaded.I == 0x300

    def test_store_all_registers(self, fresh_state):
        state = fresh_state.replace(V=fresh_state.V + 1)
        state = execute(state, 0xA400)
        state = execute(state, 0xFF55)
        assert [int(b) for b in state.memory[0x400:0x410]] == [1] * 16
        assert state.memory[0x410] == 0


class TestUnknown:
    @pytest.mark.parametrize("opcode", [0xF0FF, 0xF000, 0xF1A0])
    def test_unknown_misc_is_noop(self, fresh_state, opcode):
        state = set_registers(fresh_state, V0=0x12, V1=0x34)
        state = state.replace(delay_timer=state.delay_timer + 9)

        new_state = execute(state, opcode)

        assert (new_state.V == state.V).all()
        assert new_state.I == state.I
        assert new_state.pc == state.pc
