'''
tokens del lexer ARM (condiciones, registros, opcodes, puntuación)
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

# ---- Códigos de condición ----

class Cond(Enum):
    """Sufijo de condición. HS/CS y LO/CC son la misma condición con dos nombres."""
    EQ = "EQ"
    NE = "NE"
    CS = "CS"
    HS = "HS"
    CC = "CC"
    LO = "LO"
    MI = "MI"
    PL = "PL"
    VS = "VS"
    VC = "VC"
    HI = "HI"
    LS = "LS"
    GE = "GE"
    LT = "LT"
    GT = "GT"
    LE = "LE"
    AL = "AL"
    NV = "NV"

    def canonical(self) -> "Cond":
        """Devuelve el nombre canónico (HS -> CS, LO -> CC)."""
        return _COND_ALIASES.get(self, self)

_COND_ALIASES: Dict[Cond, Cond] = {Cond.HS: Cond.CS, Cond.LO: Cond.CC}

# ---- Registros ----

class Reg(Enum):
    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    R8 = 8
    R9 = 9
    R10 = 10
    R11 = 11
    R12 = 12
    R13 = 13
    R14 = 14
    R15 = 15

    @property
    def num(self) -> int:
        return self.value

# ---- Opcodes, una clase por forma de operandos ----

class MoveOp(Enum):
    MOV = "MOV"
    MVN = "MVN"

class AdrOp(Enum):
    ADR = "ADR"

class ArithOp(Enum):
    ADD = "ADD"
    ADC = "ADC"
    SUB = "SUB"
    SBC = "SBC"
    RSB = "RSB"
    RSC = "RSC"
    AND = "AND"
    EOR = "EOR"
    BIC = "BIC"
    ORR = "ORR"

class ShiftOp(Enum):
    LSL = "LSL"
    LSR = "LSR"
    ASR = "ASR"
    ROR = "ROR"

class RrxOp(Enum):
    RRX = "RRX"

class CompareOp(Enum):
    CMP = "CMP"
    CMN = "CMN"
    TST = "TST"
    TEQ = "TEQ"

class MemOp(Enum):
    LDR = "LDR"
    STR = "STR"

class MultiMemOp(Enum):
    LDM = "LDM"
    STM = "STM"

class BranchOp(Enum):
    BL = "BL"

Opcode = Union[MoveOp, AdrOp, ArithOp, ShiftOp, RrxOp, CompareOp, MemOp, MultiMemOp, BranchOp]

# ---- Variantes de token ----
# Valores inmutables comparados por igualdad estructural; no llevan posición.

@dataclass(frozen=True)
class TokCond:
    cond: Cond

    def __str__(self) -> str:
        return self.cond.value

@dataclass(frozen=True)
class TokReg:
    reg: Reg

    def __str__(self) -> str:
        return self.reg.name

@dataclass(frozen=True)
class TokInstr:
    """Opcode; la clase de instrucción la determina el tipo del enum."""
    op: Opcode

    def __str__(self) -> str:
        return self.op.value

@dataclass(frozen=True)
class TokS:
    """Sufijo 'S' (actualizar flags)."""

    def __str__(self) -> str:
        return "S"

@dataclass(frozen=True)
class TokComma:
    def __str__(self) -> str:
        return ","

@dataclass(frozen=True)
class TokLiteral:
    value: int

    def __str__(self) -> str:
        return f"#{self.value}"

@dataclass(frozen=True)
class TokNewLine:
    def __str__(self) -> str:
        return "<newline>"

@dataclass(frozen=True)
class TokEOF:
    def __str__(self) -> str:
        return "<eof>"

@dataclass(frozen=True)
class TokError:
    """Lexema que el lexer no supo reconocer."""
    text: str

    def __str__(self) -> str:
        return f"<error {self.text!r}>"

Token = Union[TokCond, TokReg, TokInstr, TokS, TokComma, TokLiteral, TokNewLine, TokEOF, TokError]

COMMA = TokComma()
S = TokS()
NEWLINE = TokNewLine()
EOF = TokEOF()

def render_tokens(tokens) -> str:
    """Une los tokens de una línea separados por espacios."""
    return " ".join(str(t) for t in tokens)
