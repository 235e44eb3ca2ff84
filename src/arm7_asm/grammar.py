'''
gramática de instrucciones ARM sobre los combinadores
'''

from __future__ import annotations
from typing import Dict, List

from .ast import (
    Imm, Shift, FlexOperand, Instruction,
    MoveInstr, AdrInstr, ArithInstr, ShiftInstr, RrxInstr,
    CompareInstr, MemInstr, MultiMemInstr, BranchLinkInstr,
)
from .combinators import (
    Parser, and_then, any_of, bind_p, choice, create_parser_forwarded_to_ref,
    keep_right, lookahead, map_p, opt, or_else, p_token, replace, return_p, satisfy,
    sep_by1, set_label,
)
from .isa import CLASSES, opcode_class
from .tokens import (
    COMMA, S, Cond, Reg, Token, TokCond, TokInstr, TokLiteral, TokNewLine, TokReg,
)

# ---- Listas de tokens ----

COND_TOKENS: List[Token] = [TokCond(c) for c in Cond]
REG_TOKENS: List[Token] = [TokReg(r) for r in Reg]

def opcode_tokens(klass: int) -> List[Token]:
    return [TokInstr(op) for op in CLASSES[klass].opcodes]

# ---- Campos ----

p_reg = map_p(lambda t: t.reg, set_label(any_of(REG_TOKENS), "Register"))

# HS/LO se normalizan a CS/CC: el AST solo ve la condición semántica
p_cond = map_p(lambda t: t.cond.canonical(), set_label(any_of(COND_TOKENS), "Conditional Code"))

p_comma = set_label(p_token(COMMA), "Comma")

p_s = replace(set_label(p_token(S), "S Type"), True)

p_literal = map_p(
    lambda t: Imm(t.value),
    satisfy(lambda t: isinstance(t, TokLiteral), "Literal"),
)

def p_opcode(klass: int) -> Parser:
    """Opcode de la clase dada, desenvuelto a su enum."""
    return map_p(lambda t: t.op, set_label(any_of(opcode_tokens(klass)), f"Type {klass} Opcode"))

p_reg_comma = map_p(lambda pair: pair[0], set_label(and_then(p_reg, p_comma), "Reg followed by Comma"))

# El lexer puede omitir la coma entre operandos: 'R0, R1' y 'R0 R1' son válidos
p_operand_reg = set_label(or_else(p_reg_comma, p_reg), "Reg followed by Comma")

def _sep_then(p: Parser) -> Parser:
    return keep_right(opt(p_comma), p)

p_shift = or_else(
    map_p(lambda pair: Shift(pair[0], pair[1]), and_then(p_opcode(4), or_else(p_reg, p_literal))),
    map_p(lambda op: Shift(op), p_opcode(5)),
)

p_op2 = set_label(
    or_else(
        map_p(FlexOperand, p_literal),
        map_p(lambda pair: FlexOperand(pair[0], pair[1]), and_then(p_reg, opt(_sep_then(p_shift)))),
    ),
    "Operand 2",
)

def p_prefix(klass: int) -> Parser:
    """OPCODE{S}{cond} -> ((op, s), cond); sin S en las clases que no lo admiten."""
    if CLASSES[klass].allows_s:
        return and_then(and_then(p_opcode(klass), opt(p_s)), opt(p_cond))
    return and_then(and_then(p_opcode(klass), return_p(None)), opt(p_cond))

def _shape(klass: int, body: Parser) -> Parser:
    return set_label(and_then(p_prefix(klass), body), f"Instruction Type {klass}")

# ---- Formas de instrucción ----
# Cada forma produce (((op, s), cond), operandos) y se transforma a su nodo.

def _type1(t) -> MoveInstr:
    ((op, s), cond), (rd, rn) = t
    return MoveInstr(op, bool(s), cond, rd, rn)

instr_type1 = map_p(_type1, _shape(1, and_then(p_operand_reg, p_reg)))

def _type2(t) -> AdrInstr:
    ((op, _), cond), (rd, imm) = t
    return AdrInstr(op, cond, rd, imm)

instr_type2 = map_p(_type2, _shape(2, and_then(p_operand_reg, p_literal)))

def _type3(t) -> ArithInstr:
    ((op, s), cond), ((rd, rn), op2) = t
    return ArithInstr(op, bool(s), cond, rd, rn, op2)

instr_type3 = map_p(_type3, _shape(3, and_then(and_then(p_operand_reg, p_operand_reg), p_op2)))

def _type4(t) -> ShiftInstr:
    ((op, s), cond), ((rd, rm), amount) = t
    return ShiftInstr(op, bool(s), cond, rd, rm, amount)

instr_type4 = map_p(_type4, _shape(4, and_then(and_then(p_operand_reg, p_operand_reg), or_else(p_reg, p_literal))))

def _type5(t) -> RrxInstr:
    ((op, s), cond), (rd, rm) = t
    return RrxInstr(op, bool(s), cond, rd, rm)

instr_type5 = map_p(_type5, _shape(5, and_then(p_operand_reg, p_reg)))

def _type6(t) -> CompareInstr:
    ((op, _), cond), (rn, op2) = t
    return CompareInstr(op, cond, rn, op2)

instr_type6 = map_p(_type6, _shape(6, and_then(p_operand_reg, p_op2)))

def _type7(t) -> MemInstr:
    ((op, _), cond), ((rd, rn), offset) = t
    return MemInstr(op, cond, rd, rn, offset)

instr_type7 = map_p(_type7, _shape(7, and_then(and_then(p_operand_reg, p_reg), opt(_sep_then(p_literal)))))

def _type8(t) -> MultiMemInstr:
    ((op, _), cond), (rn, regs) = t
    return MultiMemInstr(op, cond, rn, tuple(regs))

instr_type8 = map_p(_type8, _shape(8, and_then(p_operand_reg, sep_by1(p_reg, opt(p_comma)))))

def _type9(t) -> BranchLinkInstr:
    ((op, _), cond), target = t
    return BranchLinkInstr(op, cond, target)

instr_type9 = map_p(_type9, _shape(9, p_literal))

# clase de opcode -> forma; añadir una clase es añadir una entrada aquí
INSTRUCTION_SHAPES: Dict[int, Parser] = {
    1: instr_type1,
    2: instr_type2,
    3: instr_type3,
    4: instr_type4,
    5: instr_type5,
    6: instr_type6,
    7: instr_type7,
    8: instr_type8,
    9: instr_type9,
}

# ---- Punto de entrada ----

p_any_opcode = map_p(lambda t: t.op, satisfy(lambda t: isinstance(t, TokInstr), "Opcode"))

def _route(op) -> Parser[Instruction]:
    """Las clases de opcode son disjuntas: el primer token decide la forma.
    Sin opcode al inicio se prueban todas las formas en orden."""
    if op is not None:
        shape = INSTRUCTION_SHAPES.get(opcode_class(op))
        if shape is not None:
            return shape
    return all_shapes

all_shapes = choice(list(INSTRUCTION_SHAPES.values()))

parse_instr, parse_instr_ref = create_parser_forwarded_to_ref("Instruction")
parse_instr_ref.set(bind_p(opt(lookahead(p_any_opcode)), _route))

p_end_of_line = satisfy(lambda t: isinstance(t, TokNewLine), "End of Line")

def line_parser(p: Parser[Instruction]) -> Parser[Instruction]:
    """p seguido de fin de línea; conserva la etiqueta de los fallos de p."""
    return Parser(bind_p(p, lambda ins: replace(p_end_of_line, ins)).parse_fn, p.label)

instruction_line = line_parser(parse_instr)
