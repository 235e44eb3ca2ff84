'''
dataclases de AST (una instrucción por clase de opcode, operandos)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .tokens import (
    Cond, Reg, MoveOp, AdrOp, ArithOp, ShiftOp, RrxOp, CompareOp, MemOp, MultiMemOp, BranchOp,
)

# ---- Operandos ----

@dataclass(frozen=True)
class Imm:
    """Literal inmediato (#n)."""
    value: int

@dataclass(frozen=True)
class Shift:
    """Desplazamiento aplicado al segundo operando: 'LSL #2', 'ROR R3' o 'RRX'."""
    op: Union[ShiftOp, RrxOp]
    amount: Optional[Union[Reg, Imm]] = None

@dataclass(frozen=True)
class FlexOperand:
    """Segundo operando flexible: inmediato, o registro con desplazamiento opcional."""
    base: Union[Reg, Imm]
    shift: Optional[Shift] = None

# ---- Instrucciones ----
# Todas llevan condición opcional; set_flags solo en las clases que aceptan 'S'.

@dataclass(frozen=True)
class MoveInstr:
    """Clase 1: MOV/MVN{S}{cond} Rd, Rn."""
    opcode: MoveOp
    set_flags: bool
    cond: Optional[Cond]
    rd: Reg
    rn: Reg

@dataclass(frozen=True)
class AdrInstr:
    """Clase 2: ADR{cond} Rd, #imm."""
    opcode: AdrOp
    cond: Optional[Cond]
    rd: Reg
    address: Imm

@dataclass(frozen=True)
class ArithInstr:
    """Clase 3: ADD..ORR{S}{cond} Rd, Rn, op2."""
    opcode: ArithOp
    set_flags: bool
    cond: Optional[Cond]
    rd: Reg
    rn: Reg
    op2: FlexOperand

@dataclass(frozen=True)
class ShiftInstr:
    opcode: ShiftOp
    set_flags: bool
    cond: Optional[Cond]
    rd: Reg
    rm: Reg
    amount: Union[Reg, Imm]

@dataclass(frozen=True)
class RrxInstr:
    opcode: RrxOp
    set_flags: bool
    cond: Optional[Cond]
    rd: Reg
    rm: Reg

@dataclass(frozen=True)
class CompareInstr:
    """Clase 6: CMP/CMN/TST/TEQ{cond} Rn, op2 (siempre actualizan flags)."""
    opcode: CompareOp
    cond: Optional[Cond]
    rn: Reg
    op2: FlexOperand

@dataclass(frozen=True)
class MemInstr:
    """Clase 7: LDR/STR{cond} Rd, Rn{, #offset}."""
    opcode: MemOp
    cond: Optional[Cond]
    rd: Reg
    rn: Reg
    offset: Optional[Imm] = None

@dataclass(frozen=True)
class MultiMemInstr:
    opcode: MultiMemOp
    cond: Optional[Cond]
    rn: Reg
    regs: Tuple[Reg, ...]

@dataclass(frozen=True)
class BranchLinkInstr:
    opcode: BranchOp
    cond: Optional[Cond]
    target: Imm

Instruction = Union[
    MoveInstr, AdrInstr, ArithInstr, ShiftInstr, RrxInstr,
    CompareInstr, MemInstr, MultiMemInstr, BranchLinkInstr,
]
