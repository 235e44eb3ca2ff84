'''
clase Diagnostic y render de fallos del parser (línea/token, caret)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

from .combinators import Failure
from .tokens import TokError, render_tokens

# El parser solo produce errores: un fallo por línea
Severity = Literal["error"]

_SEV_TO_LABEL = {
    "error": "ERROR",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    La ubicación es (archivo, línea, token), con línea y token desde 1 para
    el usuario; hint lleva la regla de la gramática que falló.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None
    detail: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
            if self.col is not None:
                loc += f":{self.col}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        if self.detail:
            core += "\n" + self.detail
        return loc + core

def error(message: str, *, line: int | None = None, col: int | None = None,
          file: str | None = None, hint: str | None = None,
          detail: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, col, hint, file, detail)

def render_failure(failure: Failure) -> str:
    """Mensaje con la línea de tokens y un caret bajo el token que falló.

    Ejemplo:
        Line:0 - TokenNo:1 Error parsing 'Instruction Type 1'
        MOV , R1
            ^Unexpected ','
    """
    pos = failure.position
    before = render_tokens(pos.current_line[:pos.token_no])
    # columna del caret: tokens previos más el separador
    caret_col = len(before) + 1 if before else 0
    return (
        f"Line:{pos.line_no} - TokenNo:{pos.token_no} Error parsing '{failure.label}'\n"
        f"{render_tokens(pos.current_line)}\n"
        f"{' ' * caret_col}^{failure.message}"
    )

def from_failure(failure: Failure, *, file: str | None = None) -> Diagnostic:
    """Convierte un Failure en un Diagnostic de error (línea y token desde 1)."""
    pos = failure.position
    hint = failure.label
    bad = [t for t in pos.current_line if isinstance(t, TokError)]
    if bad:
        hint += "; lexema no reconocido: " + ", ".join(repr(t.text) for t in bad)
    return error(failure.message, line=pos.line_no + 1, col=pos.token_no + 1,
                 file=file, hint=hint, detail=render_failure(failure))
