"""Tests for the blocking key read (FX0A)."""

from chipax import execute, KeyWaitPhase, create_state
from conftest import set_registers


def _run(state, opcode=0xF30A):
    """Execute FX0A the way the fetch loop does: PC already advanced."""
    return execute(state.replace(pc=state.pc + 2), opcode)


def _press(state, key, pressed=True):
    return state.replace(keypad=state.keypad.at[key].set(pressed))


def test_no_key_retries_without_touching_registers(fresh_state):
    state = set_registers(fresh_state, V3=0x99)
    for _ in range(5):
        state = _run(state)
        assert state.pc == 0x200
        assert state.V[3] == 0x99
    assert state.key_wait_phase == KeyWaitPhase.WAITING_FOR_PRESS


def test_value_written_only_after_release(fresh_state):
    state = set_registers(fresh_state, V3=0x99)
    state = _run(state)

    state = _press(state, 0x7)
    state = _run(state)
    assert state.pc == 0x200
    assert state.V[3] == 0x99
    assert state.key_wait_phase == KeyWaitPhase.WAITING_FOR_RELEASE
    assert state.key_wait_key == 0x7

    state = _run(state)  # still held
    assert state.pc == 0x200
    assert state.V[3] == 0x99

    state = _press(state, 0x7, False)
    state = _run(state)
    assert state.V[3] == 0x7
    assert state.pc == 0x202
    assert state.key_wait_phase == KeyWaitPhase.IDLE


def test_key_already_down_when_wait_starts(fresh_state):
    state = _press(fresh_state, 0xC)
    state = _run(state)
    assert state.key_wait_phase == KeyWaitPhase.WAITING_FOR_RELEASE
    assert state.pc == 0x200

    state = _run(_press(state, 0xC, False))
    assert state.V[3] == 0xC
    assert state.pc == 0x202


def test_other_key_release_does_not_complete(fresh_state):
    state = _run(_press(fresh_state, 0x2))
    state = _press(state, 0x5)
    state = _press(state, 0x5, False)
    state = _run(state)

    assert state.key_wait_phase == KeyWaitPhase.WAITING_FOR_RELEASE
    assert state.key_wait_key == 0x2
    assert state.pc == 0x200


def test_wait_state_belongs_to_each_machine():
    waiting = _run(_press(create_state(), 0x4))
    other = create_state()

    assert waiting.key_wait_phase == KeyWaitPhase.WAITING_FOR_RELEASE
    assert other.key_wait_phase == KeyWaitPhase.IDLE
    other = _run(other)
    assert other.key_wait_phase == KeyWaitPhase.WAITING_FOR_PRESS
