from enum import Enum

import pytest

from simulator.machines import Symbol, add_one, add_one_binary, add_one_decomposed
from simulator.tape import Direction, Tape
from simulator.turing_machine import (
    DECOMPOSED, TRIPLE, Move, Program, TuringMachine, Write, WriteMove,
    lookup, normalize_entry, run, step,
)

B, I, O = Symbol.B, Symbol.I, Symbol.O
L, R = Direction.LEFT, Direction.RIGHT


class Q(Enum):
    A = "A"
    C = "C"
    H = "H"


def test_add_one_triple_model():
    program = add_one()
    result = program.run(Tape.of([I, I, I], I, []))
    assert result.as_tuple() == ([], B, [I, O, O, O, O])


def test_add_one_binary_triple_model():
    result = add_one_binary().run(Tape.of([], B, [I, I, I, I]))
    assert result.as_tuple() == ([], B, [I, O, O, O, O])


def test_add_one_decomposed_model():
    program = add_one_decomposed()
    result = run(program.table, program.initial_state, Tape.of([], B, [I, I, I, I]))
    assert result == Tape.of([], B, [I, O, O, O, O])


def test_no_matching_entry_halts_immediately():
    tape = Tape.of([I], O, [I])
    program = Program(Q.A, [((Q.A, I), (Q.H, I, R))])
    assert program.run(tape) is tape
    assert run([], Q.A, tape) is tape


def test_runs_are_deterministic():
    program = add_one_decomposed()
    tape = Tape.of([], B, [I, O, I])
    assert program.run(tape) == program.run(tape)


def test_first_matching_entry_wins():
    table = [
        ((Q.A, B), (Q.H, I, R)),
        ((Q.A, B), (Q.H, O, L)),
    ]
    assert run(table, Q.A, Tape.of(head=B)).as_tuple() == ([I], B, [])
    assert lookup(table, Q.A, B) == (Q.H, WriteMove(I, R))


def test_write_move_writes_at_old_position_then_moves():
    tape = Tape.of(head=B)
    assert WriteMove(I, R).apply(tape).as_tuple() == ([I], B, [])
    assert WriteMove(I, L).apply(tape).as_tuple() == ([], B, [I])


def test_write_move_expands_to_write_then_move():
    assert WriteMove(O, L).expand() == (Write(O), Move(L))


def test_move_leaves_head_symbol_behind():
    tape = Tape.of([O], I, [])
    assert Move(L).apply(tape).as_tuple() == ([], O, [I])
    assert Move(R).apply(tape).as_tuple() == ([I, O], B, [])


def test_write_does_not_move():
    tape = Tape.of([O], I, [O])
    assert Write(B).apply(tape).as_tuple() == ([O], B, [O])


def test_step_returns_none_when_halted():
    program = add_one()
    assert step(program.table, program.states[-1], Tape.of(head=B)) is None
    next_state, tape = step(program.table, program.initial_state, Tape.of(head=B))
    assert next_state.name == "H"
    assert tape.as_tuple() == ([], B, [I])


@pytest.mark.parametrize("factory, tape, expected_steps", [
    (add_one, Tape.of([I, I, I], I, []), 5),
    (add_one_binary, Tape.of([], B, [I, I, I, I]), 11),
    (add_one_decomposed, Tape.of([], B, [I, I, I, I]), 16),
])
def test_on_step_sees_every_transition(factory, tape, expected_steps):
    program = factory()
    seen = []
    final = program.run(tape, on_step=lambda n, state, t: seen.append((n, state, t)))
    assert [n for n, _, _ in seen] == list(range(1, expected_steps + 1))
    assert seen[-1][1].name == "H"
    assert seen[-1][2] == final


def test_on_step_return_value_is_ignored():
    program = add_one()
    tape = Tape.of([I], I, [])
    assert program.run(tape, on_step=lambda *a: Tape.of(head=O)) == program.run(tape)


def test_action_models():
    assert add_one().action_model == TRIPLE
    assert add_one_decomposed().action_model == DECOMPOSED
    assert Program(Q.A, []).action_model == DECOMPOSED


def test_mixed_models_are_rejected():
    with pytest.raises(ValueError):
        Program(Q.A, [
            ((Q.A, B), (Q.C, I, R)),
            ((Q.C, B), (Q.H, Move(L))),
        ])


def test_require_model():
    program = add_one()
    assert program.require_model(TRIPLE) is program
    with pytest.raises(ValueError):
        program.require_model(DECOMPOSED)
    with pytest.raises(ValueError):
        program.require_model("sideways")
    Program(Q.A, []).require_model(TRIPLE)


def test_normalize_entry_rejects_unknown_action():
    with pytest.raises(TypeError):
        normalize_entry(((Q.A, B), (Q.H, "jump")))


def test_states_in_order_of_appearance():
    assert [q.name for q in add_one_binary().states] == ["INIT", "MR", "ML", "H"]


def test_program_table_is_immutable_tuple():
    program = add_one()
    assert isinstance(program.table, tuple)
    with pytest.raises(AttributeError):
        program.table = ()


# === TuringMachine driver ===
def test_driver_runs_to_halt():
    machine = TuringMachine(add_one(), Tape.of([I, I, I], I, []))
    assert machine.run() == 5
    assert machine.halted
    assert machine.tape.as_tuple() == ([], B, [I, O, O, O, O])


def test_driver_stops_at_step_budget():
    machine = TuringMachine(add_one(), Tape.of([I, I, I], I, []))
    assert machine.run(max_steps=2) == 2
    assert not machine.halted
    assert machine.tape.as_tuple() == ([I], I, [O, O])


def test_driver_reports_halt_when_budget_is_exact():
    machine = TuringMachine(add_one(), Tape.of([I, I, I], I, []))
    machine.run(max_steps=5)
    assert machine.halted


def test_driver_bounds_a_machine_that_never_halts():
    forever = Program(Q.A, [((Q.A, B), (Q.A, B, R))])
    machine = TuringMachine(forever, Tape.of(head=B))
    assert machine.run(max_steps=100) == 100
    assert not machine.halted
    assert machine.tape == Tape.of(head=B)


def test_driver_reset():
    machine = TuringMachine(add_one(), Tape.of([I], I, []))
    machine.run()
    machine.reset()
    assert machine.steps == 0
    assert not machine.halted
    assert machine.tape == Tape.of([I], I, [])
    assert machine.step()
