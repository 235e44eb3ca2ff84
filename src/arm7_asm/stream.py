'''
flujo de tokens por líneas y posición (línea, token)
'''

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Tuple

from .tokens import Token, TokEOF, TokNewLine, EOF, NEWLINE

Line = Tuple[Token, ...]

@dataclass(frozen=True)
class Pos:
    """Posición del cursor, ambos índices desde 0."""
    line_no: int = 0
    token_no: int = 0

    def next_token(self) -> "Pos":
        return replace(self, token_no=self.token_no + 1)

    def next_line(self) -> "Pos":
        return Pos(self.line_no + 1, 0)

@dataclass(frozen=True)
class InputState:
    """Líneas de tokens más el cursor. Nunca se muta: avanzar crea otro estado."""
    lines: Tuple[Line, ...]
    pos: Pos = Pos()

def split_lines(tokens: Iterable[Token]) -> Tuple[Line, ...]:
    """Parte la lista de tokens en líneas por TokNewLine.

    El separador no se guarda dentro de la línea. Una lista vacía no tiene
    líneas, un separador final no abre una línea vacía y un TokEOF final
    se descarta.
    """
    toks = list(tokens)
    if toks and isinstance(toks[-1], TokEOF):
        toks.pop()
    if not toks:
        return ()
    out: List[Line] = []
    cur: List[Token] = []
    for tok in toks:
        if isinstance(tok, TokNewLine):
            out.append(tuple(cur))
            cur = []
        else:
            cur.append(tok)
    if cur or not isinstance(toks[-1], TokNewLine):
        out.append(tuple(cur))
    return tuple(out)

def from_tokens(tokens: Iterable[Token]) -> InputState:
    return InputState(split_lines(tokens))

def current_line(state: InputState) -> Line:
    """Línea actual; pasado el final devuelve (TokEOF,)."""
    n = state.pos.line_no
    if n < len(state.lines):
        return state.lines[n]
    return (EOF,)

def next_token(state: InputState) -> Tuple[InputState, Optional[Token]]:
    """Devuelve (nuevo_estado, token o None).

    Tres casos:
      1) línea >= número de líneas -> mismo estado y None (fin de entrada)
      2) token dentro de la línea  -> ese token, avanza token_no
      3) token al final de línea   -> TokNewLine sintético, pasa a la siguiente línea
    """
    pos = state.pos
    if pos.line_no >= len(state.lines):
        return state, None
    line = state.lines[pos.line_no]
    if pos.token_no < len(line):
        return replace(state, pos=pos.next_token()), line[pos.token_no]
    return replace(state, pos=pos.next_line()), NEWLINE

def iter_tokens(state: InputState) -> Iterator[Token]:
    while True:
        state, tok = next_token(state)
        if tok is None:
            return
        yield tok

def read_all_tokens(state: InputState) -> List[Token]:
    """Lee el flujo completo, incluidos los TokNewLine sintéticos."""
    return list(iter_tokens(state))
