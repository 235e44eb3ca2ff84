'''
tabla formal de clases de opcode ARM (clase -> opcodes, sufijo S)
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Type

from .tokens import (
    Opcode, MoveOp, AdrOp, ArithOp, ShiftOp, RrxOp, CompareOp, MemOp, MultiMemOp, BranchOp,
)

@dataclass(frozen=True)
class ClassSpec:
    """Especificación de una clase de instrucción.

    - number: número de clase (1..9), fija la forma de los operandos
    - opcodes: enum con los mnemónicos de la clase
    - allows_s: si acepta el sufijo S (actualizar flags)
    """
    number: int
    opcodes: Type[Enum]
    allows_s: bool

# Clases disjuntas: cada opcode pertenece a exactamente una
CLASSES: Dict[int, ClassSpec] = {}

def _add(spec: ClassSpec) -> None:
    CLASSES[spec.number] = spec

_add(ClassSpec(1, MoveOp,     allows_s=True))
_add(ClassSpec(2, AdrOp,      allows_s=False))
_add(ClassSpec(3, ArithOp,    allows_s=True))
_add(ClassSpec(4, ShiftOp,    allows_s=True))
_add(ClassSpec(5, RrxOp,      allows_s=True))
_add(ClassSpec(6, CompareOp,  allows_s=False))
_add(ClassSpec(7, MemOp,      allows_s=False))
_add(ClassSpec(8, MultiMemOp, allows_s=False))
_add(ClassSpec(9, BranchOp,   allows_s=False))

def opcode_class(op: Opcode) -> int:
    """Devuelve el número de clase de un opcode."""
    for cs in CLASSES.values():
        if isinstance(op, cs.opcodes):
            return cs.number
    raise KeyError(f"Opcode sin clase: {op!r}")
