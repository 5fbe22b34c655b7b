"""Opcode field extraction."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """The nibble and byte fields of one 16-bit opcode.

    Fields are Python ints when decoding a literal and JAX scalars when
    decoding inside a traced frame.
    """
    raw: int
    opcode: int  # family, top nibble
    x: int       # register index, bits 8-11
    y: int       # register index, bits 4-7
    n: int       # low nibble
    nn: int      # low byte
    nnn: int     # address, low 12 bits


def decode(instruction: int) -> DecodedInstruction:
    """Split ``instruction`` into its fields. Pure: depends on nothing but the opcode."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction >> 12) & 0xF,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0xF,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )
