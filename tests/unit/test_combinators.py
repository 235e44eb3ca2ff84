import pytest
import dataclasses

from arm7_asm.combinators import (
    Failure, Parser, ForwardRefError, Success, and_then, any_of, apply_p, between, bind_p,
    choice, create_parser_forwarded_to_ref, keep_left, keep_right, lift2, lookahead, many,
    many1, map_p, opt, or_else, p_token, replace, return_p, run, run_input,
    satisfy, sep_by1, sequence, set_label,
)
from arm7_asm.stream import Pos, from_tokens
from arm7_asm.tokens import COMMA, EOF, Reg, TokLiteral, TokReg

R0, R1, R2, R3 = (TokReg(r) for r in (Reg.R0, Reg.R1, Reg.R2, Reg.R3))

def test_satisfy_success_advances():
    res = run(p_token(R0), [R0, R1])
    assert isinstance(res, Success) and res
    assert res.value == R0
    assert res.remaining.pos == Pos(0, 1)

def test_satisfy_failure_does_not_consume():
    res = run(p_token(R1), [R0])
    assert isinstance(res, Failure) and not res
    assert res.label == "R1"
    assert res.message == "Unexpected 'R0'"
    assert (res.position.line_no, res.position.token_no) == (0, 0)
    assert res.position.current_line == (R0,)

def test_no_more_input():
    res = run(p_token(R0), [])
    assert res.message == "No more input"
    assert (res.position.line_no, res.position.token_no) == (0, 0)
    assert res.position.current_line == (EOF,)

def test_end_of_line_reports_no_more_input():
    res = run(and_then(p_token(R0), p_token(COMMA)), [R0])
    assert res.message == "No more input"
    assert res.position.token_no == 1

def test_failure_position_inside_sequence():
    # el fallo apunta al token que no encajó, no al inicio de la secuencia
    res = run(and_then(and_then(p_token(R0), p_token(COMMA)), p_token(R1)), [R0, COMMA, R2])
    assert res.position.token_no == 2
    assert res.message == "Unexpected 'R2'"

def test_and_then_pairs_and_labels():
    p = and_then(p_token(R0), p_token(R1))
    assert p.label == "R0 andThen R1"
    res = run(p, [R0, R1])
    assert res.value == (R0, R1)
    assert run(p, [R0, R2]).label == "R0 andThen R1"

def test_or_else_backtracks_to_original_input():
    p1 = and_then(p_token(R0), p_token(R1))
    p2 = and_then(p_token(R0), p_token(R2))
    res = run(or_else(p1, p2), [R0, R2])
    assert res.value == (R0, R2)
    assert res.remaining.pos == Pos(0, 2)

def test_or_else_reports_last_branch():
    p1 = and_then(p_token(R0), p_token(R1))
    p2 = p_token(R3)
    p = or_else(p1, p2)
    assert p.label == p1.label
    res = run(p, [R0, R2])
    assert res.label == "R3"
    assert res.position.token_no == 0

def test_choice():
    p = choice([p_token(R0), p_token(R1), p_token(R2)])
    assert run(p, [R1]).value == R1
    assert not run(p, [R3])
    with pytest.raises(ValueError):
        choice([])

def test_any_of_label():
    p = any_of([R0, R1])
    assert p.label == "anyOf [R0, R1]"
    assert run(p, [R2]).label == "anyOf [R0, R1]"

def test_return_consumes_nothing():
    res = run(return_p(42), [R0])
    assert res.value == 42
    assert res.remaining.pos == Pos(0, 0)

def test_left_identity():
    f = lambda tok: and_then(return_p(tok), p_token(R1))
    state = from_tokens([R1, R1])
    assert run_input(bind_p(return_p(R1), f), state) == run_input(f(R1), state)

@pytest.mark.parametrize("tokens", [[R0, R1], [R1], []])
def test_map_identity(tokens):
    p = and_then(p_token(R0), p_token(R1))
    assert run(map_p(lambda x: x, p), tokens) == run(p, tokens)

def test_bind_propagates_failure_untouched():
    inner = p_token(R1)
    p = bind_p(p_token(R0), lambda _: inner)
    assert run(p, [R0, R2]) == run_input(inner, run(p_token(R0), [R0, R2]).remaining)

def test_set_label():
    p = and_then(p_token(R0), p_token(R1))
    relabelled = set_label(p, "Pareja")
    ok = [R0, R1]
    assert run(relabelled, ok) == run(p, ok)
    bad = run(p, [R0, R2])
    res = run(relabelled, [R0, R2])
    assert res.label == "Pareja"
    assert res.message == bad.message
    assert res.position == bad.position

def test_apply_and_lift2():
    add = lambda a, b: (a.reg.num, b.reg.num)
    assert run(lift2(add, p_token(R1), p_token(R2)), [R1, R2]).value == (1, 2)
    fp = return_p(lambda tok: tok.reg.name)
    assert run(apply_p(fp, p_token(R3)), [R3]).value == "R3"

def test_sequence():
    assert run(sequence([]), [R0]).value == []
    res = run(sequence([p_token(R0), p_token(COMMA), p_token(R1)]), [R0, COMMA, R1])
    assert res.value == [R0, COMMA, R1]
    assert not run(sequence([p_token(R0), p_token(R1)]), [R0, R0])

def test_opt():
    res = run(opt(p_token(R0)), [R1])
    assert res and res.value is None
    assert res.remaining.pos == Pos(0, 0)
    assert run(opt(p_token(R0)), [R0]).value == R0
    # el fallo parcial de p tampoco consume
    res = run(opt(and_then(p_token(R0), p_token(R1))), [R0, R2])
    assert res.value is None and res.remaining.pos == Pos(0, 0)

def test_keep_and_between():
    assert run(keep_left(p_token(R0), p_token(COMMA)), [R0, COMMA]).value == R0
    assert run(keep_right(p_token(COMMA), p_token(R1)), [COMMA, R1]).value == R1
    res = run(between(p_token(COMMA), p_token(R2), p_token(COMMA)), [COMMA, R2, COMMA])
    assert res.value == R2 and res.remaining.pos == Pos(0, 3)
    assert run(replace(p_token(R0), "cero"), [R0]).value == "cero"

def test_many_and_sep_by1():
    reg = satisfy(lambda t: isinstance(t, TokReg), "Register")
    assert run(many(reg), [COMMA]).value == []
    assert run(many(reg), [R0, R1, COMMA]).value == [R0, R1]
    assert not run(many1(reg), [COMMA])
    res = run(sep_by1(reg, p_token(COMMA)), [R0, COMMA, R1, COMMA])
    assert res.value == [R0, R1]
    # la coma final no se consume
    assert res.remaining.pos == Pos(0, 3)

def test_many_stops_on_empty_success():
    assert run(many(return_p(1)), [R0]).value == [1]

def test_forward_ref_unfixed_is_fatal():
    p, ref = create_parser_forwarded_to_ref()
    assert not ref.is_set
    with pytest.raises(ForwardRefError):
        run(p, [R0])

def test_forward_ref_recursion():
    # lista de literales: lit [, lista]
    lits, ref = create_parser_forwarded_to_ref("Literales")
    lit = satisfy(lambda t: isinstance(t, TokLiteral), "Literal")
    ref.set(lift2(lambda h, t: [h] + (t or []), lit, opt(keep_right(p_token(COMMA), lits))))
    res = run(lits, [TokLiteral(1), COMMA, TokLiteral(2), COMMA, TokLiteral(3)])
    assert [t.value for t in res.value] == [1, 2, 3]
    with pytest.raises(ForwardRefError):
        ref.set(lit)

def test_lookahead_does_not_consume():
    res = run(lookahead(p_token(R0)), [R0, R1])
    assert res.value == R0
    assert res.remaining.pos == Pos(0, 0)
    res = run(lookahead(and_then(p_token(R0), p_token(R2))), [R0, R1])
    assert isinstance(res, Failure)
    assert res.position.token_no == 1

def test_parser_is_function_plus_label():
    assert [f.name for f in dataclasses.fields(Parser)] == ["parse_fn", "label"]
    assert p_token(R0).label == "R0"
