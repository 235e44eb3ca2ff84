'''
combinadores de parsers monádicos sobre el flujo de tokens
'''

from __future__ import annotations
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

from .stream import InputState, Line, current_line, from_tokens, next_token
from .tokens import Token, TokNewLine

T = TypeVar("T")
U = TypeVar("U")

# ---- Resultado de un parser ----

@dataclass(frozen=True)
class ParserPosition:
    """Foto de la posición al fallar: la línea actual y sus índices."""
    current_line: Line
    line_no: int
    token_no: int

    @classmethod
    def from_state(cls, state: InputState) -> "ParserPosition":
        return cls(current_line(state), state.pos.line_no, state.pos.token_no)

@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    remaining: InputState

    def __bool__(self) -> bool:
        return True

@dataclass(frozen=True)
class Failure:
    label: str
    message: str
    position: ParserPosition

    def __bool__(self) -> bool:
        return False

Outcome = Union[Success, Failure]

class ForwardRefError(RuntimeError):
    """Error de construcción de la gramática (referencia adelantada sin fijar o fijada dos veces)."""

# ---- Parser ----

@dataclass(frozen=True)
class Parser(Generic[T]):
    """Función InputState -> Outcome más una etiqueta para diagnósticos."""
    parse_fn: Callable[[InputState], Outcome]
    label: str = "Unknown"

def run_input(parser: Parser[T], state: InputState) -> Outcome:
    return parser.parse_fn(state)

def run(parser: Parser[T], tokens: Iterable[Token]) -> Outcome:
    """Ejecuta un parser sobre una lista de tokens (partida en líneas)."""
    return run_input(parser, from_tokens(tokens))

def set_label(parser: Parser[T], new_label: str) -> Parser[T]:
    """Mismo parser; si falla, la etiqueta pasa a ser new_label (mensaje y posición intactos)."""
    def inner(state: InputState) -> Outcome:
        result = parser.parse_fn(state)
        if isinstance(result, Failure):
            return Failure(new_label, result.message, result.position)
        return result
    return Parser(inner, new_label)

# ---- Primitivas ----

def satisfy(predicate: Callable[[Token], bool], label: str) -> Parser[Token]:
    """Consume un token si cumple predicate. Al fallar nunca avanza el cursor."""
    def inner(state: InputState) -> Outcome:
        remaining, tok = next_token(state)
        if tok is None:
            return Failure(label, "No more input", ParserPosition.from_state(state))
        if predicate(tok):
            return Success(tok, remaining)
        # una instrucción no cruza líneas: el fin de línea cuenta como fin de entrada
        if isinstance(tok, TokNewLine):
            err = "No more input"
        else:
            err = f"Unexpected '{tok}'"
        return Failure(label, err, ParserPosition.from_state(state))
    return Parser(inner, label)

def p_token(token: Token) -> Parser[Token]:
    return satisfy(lambda tok: tok == token, str(token))

def return_p(x: T) -> Parser[T]:
    """Éxito con x sin consumir nada."""
    return Parser(lambda state: Success(x, state), "Success")

def bind_p(p: Parser[T], f: Callable[[T], Parser[U]]) -> Parser[U]:
    """Ejecuta p y pasa su valor a f para obtener el siguiente parser.

    Un fallo de p se propaga tal cual (etiqueta, mensaje y posición).
    """
    def inner(state: InputState) -> Outcome:
        res1 = p.parse_fn(state)
        if isinstance(res1, Failure):
            return res1
        p2 = f(res1.value)
        return p2.parse_fn(res1.remaining)
    return Parser(inner, p.label)

def map_p(f: Callable[[T], U], p: Parser[T]) -> Parser[U]:
    return Parser(bind_p(p, lambda x: return_p(f(x))).parse_fn, p.label)

def apply_p(fp: Parser[Callable[[T], U]], xp: Parser[T]) -> Parser[U]:
    return bind_p(fp, lambda f: bind_p(xp, lambda x: return_p(f(x))))

def lift2(f: Callable[[T, U], Any], xp: Parser[T], yp: Parser[U]) -> Parser[Any]:
    return apply_p(apply_p(return_p(lambda x: lambda y: f(x, y)), xp), yp)

def sequence(parsers: Iterable[Parser[T]]) -> Parser[List[T]]:
    """Lista de parsers -> parser de lista, en orden."""
    def cons(head: T, tail: List[T]) -> List[T]:
        return [head] + tail
    result: Parser[List[T]] = return_p([])
    for p in reversed(list(parsers)):
        result = lift2(cons, p, result)
    return result

# ---- Secuencia y alternativa ----

def and_then(p1: Parser[T], p2: Parser[U]) -> Parser[Tuple[T, U]]:
    label = f"{p1.label} andThen {p2.label}"
    paired = bind_p(p1, lambda r1: bind_p(p2, lambda r2: return_p((r1, r2))))
    return set_label(paired, label)

def or_else(p1: Parser[T], p2: Parser[T]) -> Parser[T]:
    """Prueba p1; si falla, prueba p2 desde la MISMA entrada original."""
    def inner(state: InputState) -> Outcome:
        result1 = p1.parse_fn(state)
        if isinstance(result1, Success):
            return result1
        return p2.parse_fn(state)
    return Parser(inner, p1.label)

def choice(parsers: Iterable[Parser[T]]) -> Parser[T]:
    ps = list(parsers)
    if not ps:
        raise ValueError("choice necesita al menos un parser")
    return reduce(or_else, ps)

def any_of(tokens: Iterable[Token]) -> Parser[Token]:
    toks = list(tokens)
    label = "anyOf [" + ", ".join(str(t) for t in toks) + "]"
    return set_label(choice([p_token(t) for t in toks]), label)

def opt(p: Parser[T]) -> Parser[Optional[T]]:
    """Valor de p o None; nunca falla."""
    return Parser(or_else(p, return_p(None)).parse_fn, p.label)

def keep_left(p1: Parser[T], p2: Parser[Any]) -> Parser[T]:
    """p1 .>> p2"""
    return map_p(lambda pair: pair[0], and_then(p1, p2))

def keep_right(p1: Parser[Any], p2: Parser[U]) -> Parser[U]:
    """p1 >>. p2"""
    return map_p(lambda pair: pair[1], and_then(p1, p2))

def between(p1: Parser[Any], p2: Parser[T], p3: Parser[Any]) -> Parser[T]:
    return keep_left(keep_right(p1, p2), p3)

def replace(p: Parser[Any], x: T) -> Parser[T]:
    """p >>% x"""
    return map_p(lambda _: x, p)

def lookahead(p: Parser[T]) -> Parser[T]:
    """Valor de p sin consumir: el éxito devuelve la entrada original."""
    def inner(state: InputState) -> Outcome:
        result = p.parse_fn(state)
        if isinstance(result, Failure):
            return result
        return Success(result.value, state)
    return Parser(inner, p.label)

# ---- Repetición ----

def many(p: Parser[T]) -> Parser[List[T]]:
    """Cero o más apariciones de p; se detiene en el primer fallo sin consumirlo."""
    def inner(state: InputState) -> Outcome:
        values: List[T] = []
        while True:
            res = p.parse_fn(state)
            if isinstance(res, Failure):
                return Success(values, state)
            values.append(res.value)
            if res.remaining == state:
                # p no consumió nada: seguir iterando no terminaría
                return Success(values, state)
            state = res.remaining
    return Parser(inner, f"many {p.label}")

def many1(p: Parser[T]) -> Parser[List[T]]:
    return lift2(lambda head, tail: [head] + tail, p, many(p))

def sep_by1(p: Parser[T], sep: Parser[Any]) -> Parser[List[T]]:
    return lift2(lambda head, tail: [head] + tail, p, many(keep_right(sep, p)))

# ---- Referencias adelantadas (gramáticas recursivas) ----

class ParserRef(Generic[T]):
    """Celda de escritura única con el parser real detrás de una referencia adelantada."""

    def __init__(self) -> None:
        self._parser: Optional[Parser[T]] = None

    @property
    def is_set(self) -> bool:
        return self._parser is not None

    @property
    def parser(self) -> Parser[T]:
        if self._parser is None:
            raise ForwardRefError("unfixed forwarded parser")
        return self._parser

    def set(self, parser: Parser[T]) -> None:
        if self._parser is not None:
            raise ForwardRefError("forwarded parser already fixed")
        self._parser = parser

def create_parser_forwarded_to_ref(label: str = "Unknown") -> Tuple[Parser[T], ParserRef[T]]:
    """Devuelve (parser, celda). El parser delega en lo que se instale en la celda."""
    ref: ParserRef[T] = ParserRef()

    def inner(state: InputState) -> Outcome:
        return ref.parser.parse_fn(state)
    return Parser(inner, label), ref
