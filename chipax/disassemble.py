"""Human-readable descriptions of CHIP-8 instructions for tracing and debugging."""

from typing import Optional

from chipax.decode import decode
from chipax.state import EmulatorState

ALU_DESCRIPTIONS = {
    0x0: "Set V{x:X} = V{y:X}{vy}",
    0x1: "Set V{x:X}{vx} |= V{y:X}{vy}",
    0x2: "Set V{x:X}{vx} &= V{y:X}{vy}",
    0x3: "Set V{x:X}{vx} ^= V{y:X}{vy}",
    0x4: "Set V{x:X}{vx} += V{y:X}{vy}, VF = carry",
    0x5: "Set V{x:X}{vx} -= V{y:X}{vy}, VF = 1 if no borrow",
    0x6: "Set V{x:X}{vx} >>= 1, VF = shifted off bit",
    0x7: "Set V{x:X}{vx} = V{y:X}{vy} - V{x:X}, VF = 1 if no borrow",
    0xE: "Set V{x:X}{vx} <<= 1, VF = shifted off bit",
}

MISC_DESCRIPTIONS = {
    0x07: "Set V{x:X} to delay timer{delay}",
    0x0A: "Await key press and release, store in V{x:X}",
    0x15: "Set delay timer to V{x:X}{vx}",
    0x18: "Set sound timer to V{x:X}{vx}",
    0x1E: "I{i} += V{x:X}{vx}",
    0x29: "Set I to font glyph for V{x:X}{vx}",
    0x33: "Store BCD of V{x:X}{vx} at I{i}",
    0x55: "Store V0-V{x:X} in memory starting at I{i}",
    0x65: "Load V0-V{x:X} from memory starting at I{i}",
}


def _values(instruction, state: Optional[EmulatorState]) -> dict:
    """Live operand values, formatted as suffixes, or blanks without a state."""
    if state is None:
        return {"vx": "", "vy": "", "v0": "", "i": "", "delay": "", "key": ""}
    vx = int(state.V[instruction.x])
    return {
        "vx": f" (0x{vx:02X})",
        "vy": f" (0x{int(state.V[instruction.y]):02X})",
        "v0": f" (0x{int(state.V[0]):02X})",
        "i": f" (0x{int(state.I):04X})",
        "delay": f" (0x{int(state.delay_timer):02X})",
        "key": f", key pressed: {int(state.keypad[vx & 0xF])}",
    }


def describe(opcode: int, state: Optional[EmulatorState] = None) -> str:
    """Describe ``opcode`` in words, with register values when ``state`` is given."""
    opcode = int(opcode)
    instruction = decode(opcode)
    fields = dict(x=instruction.x, y=instruction.y, n=instruction.n,
                  nn=instruction.nn, nnn=instruction.nnn, **_values(instruction, state))

    family = instruction.opcode
    if family == 0x0:
        if opcode == 0x00E0:
            return "Clear screen"
        if opcode == 0x00EE:
            return "Return from subroutine"
        return "Unimplemented opcode"
    if family == 0x1:
        return "Jump to address 0x{nnn:04X}".format(**fields)
    if family == 0x2:
        return "Call subroutine at 0x{nnn:04X}".format(**fields)
    if family == 0x3:
        return "Skip next instruction if V{x:X}{vx} == 0x{nn:02X}".format(**fields)
    if family == 0x4:
        return "Skip next instruction if V{x:X}{vx} != 0x{nn:02X}".format(**fields)
    if family == 0x5 and instruction.n == 0:
        return "Skip next instruction if V{x:X}{vx} == V{y:X}{vy}".format(**fields)
    if family == 0x6:
        return "Set register V{x:X} = 0x{nn:02X}".format(**fields)
    if family == 0x7:
        return "Set register V{x:X}{vx} += 0x{nn:02X}".format(**fields)
    if family == 0x8 and instruction.n in ALU_DESCRIPTIONS:
        return ALU_DESCRIPTIONS[instruction.n].format(**fields)
    if family == 0x9 and instruction.n == 0:
        return "Skip next instruction if V{x:X}{vx} != V{y:X}{vy}".format(**fields)
    if family == 0xA:
        return "Set index register I = 0x{nnn:04X}".format(**fields)
    if family == 0xB:
        return "Set PC to V0{v0} + 0x{nnn:04X}".format(**fields)
    if family == 0xC:
        return "Set V{x:X} to random byte & 0x{nn:02X}".format(**fields)
    if family == 0xD:
        return "Draw {n}-row sprite from I{i} at (V{x:X}{vx}, V{y:X}{vy})".format(**fields)
    if family == 0xE and instruction.nn == 0x9E:
        return "Skip next instruction if key V{x:X}{vx} is pressed{key}".format(**fields)
    if family == 0xE and instruction.nn == 0xA1:
        return "Skip next instruction if key V{x:X}{vx} is not pressed{key}".format(**fields)
    if family == 0xF and instruction.nn in MISC_DESCRIPTIONS:
        return MISC_DESCRIPTIONS[instruction.nn].format(**fields)
    return "Unimplemented opcode"


def trace_line(address: int, opcode: int, state: Optional[EmulatorState] = None) -> str:
    """Format one instruction trace line."""
    return f"Address: 0x{int(address):04X}, Opcode: 0x{int(opcode):04X}, Desc: {describe(opcode, state)}"
