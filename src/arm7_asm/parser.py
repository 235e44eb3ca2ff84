# src/arm7_asm/parser.py
from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Tuple

from .ast import Instruction
from .combinators import Failure, Outcome, run_input
from .diagnostics import Diagnostic, from_failure
from .grammar import instruction_line
from .stream import InputState, Pos, split_lines
from .tokens import Token

logger = logging.getLogger(__name__)

def parse_line(lines: Tuple[Tuple[Token, ...], ...], line_no: int) -> Outcome:
    """Parsea la línea line_no de forma independiente al resto."""
    return run_input(instruction_line, InputState(lines, Pos(line_no, 0)))

def parse_tokens(tokens: Iterable[Token], *, filename: Optional[str] = None) -> Tuple[List[Instruction], List[Diagnostic]]:
    """
    Devuelve (instructions, diagnostics).

    Reglas:
      - Las líneas se separan por TokNewLine; las líneas vacías se ignoran.
      - Cada línea es una instrucción completa; tokens sobrantes son error.
      - Un fallo produce un único diagnóstico para su línea y el resto
        de líneas se sigue parseando.
    """
    nodes: List[Instruction] = []
    diags: List[Diagnostic] = []

    lines = split_lines(tokens)
    for line_no, line in enumerate(lines):
        if not line:
            continue
        result = parse_line(lines, line_no)
        if isinstance(result, Failure):
            logger.debug("line %d failed at token %d: %s",
                         line_no, result.position.token_no, result.message)
            diags.append(from_failure(result, file=filename))
            continue
        logger.debug("line %d parsed: %r", line_no, result.value)
        nodes.append(result.value)

    return nodes, diags
