"""CHIP-8 instruction decoding."""

from enum import IntEnum

from chex import dataclass

from chipvm.errors import UnknownOpcodeError


class Op(IntEnum):
    """Every instruction the machine understands."""
    NOP = 0
    CLS = 1
    RET = 2
    JP = 3
    CALL = 4
    SE_IMM = 5
    SNE_IMM = 6
    SE_REG = 7
    LD_IMM = 8
    ADD_IMM = 9
    LD_REG = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD_REG = 14
    SUB = 15
    SHR = 16
    SUBN = 17
    SHL = 18
    SNE_REG = 19
    LD_I = 20
    JP_V0 = 21
    RND = 22
    DRW = 23
    SKP = 24
    SKNP = 25
    LD_VX_DT = 26
    LD_KEY = 27
    LD_DT = 28
    LD_ST = 29
    ADD_I = 30
    LD_F = 31
    BCD = 32
    LD_MEM_V = 33
    LD_V_MEM = 34


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


# Opcode classes fully identified by their first nibble.
_BY_CLASS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_IMM,
    0x4: Op.SNE_IMM,
    0x6: Op.LD_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM = {
    0x0000: Op.NOP,
    0x00E0: Op.CLS,
    0x00EE: Op.RET,
}

# 8XYN, keyed by N
_ALU = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# EXNN, keyed by NN
_KEY = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

# FXNN, keyed by NN
_MISC = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_KEY,
    0x15: Op.LD_DT,
    0x18: Op.LD_ST,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.BCD,
    0x55: Op.LD_MEM_V,
    0x65: Op.LD_V_MEM,
}


def classify(instruction: int) -> Op | None:
    """Return the ``Op`` for a 16-bit instruction, or None if it is not defined."""
    opcode = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF

    if opcode in _BY_CLASS:
        return _BY_CLASS[opcode]
    if opcode == 0x0:
        return _SYSTEM.get(instruction)
    if opcode == 0x5:
        return Op.SE_REG if n == 0 else None
    if opcode == 0x9:
        return Op.SNE_REG if n == 0 else None
    if opcode == 0x8:
        return _ALU.get(n)
    if opcode == 0xE:
        return _KEY.get(nn)
    return _MISC.get(nn)


def decode(instruction: int, address: int | None = None) -> DecodedInstruction:
    """Decode 16-bit instruction into its tag and operands.

    Raises:
        UnknownOpcodeError: if the instruction is outside the CHIP-8 set.
    """
    instruction = int(instruction) & 0xFFFF
    op = classify(instruction)
    if op is None:
        raise UnknownOpcodeError(instruction, address)

    return DecodedInstruction(
        raw=instruction,
        op=op,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
