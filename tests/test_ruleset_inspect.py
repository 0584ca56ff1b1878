from rich.console import Console

from simulator.machines import Symbol, add_one, add_one_decomposed
from simulator.tape import Tape
from tools.ruleset_inspect import pretty_print_program, render_tape, symbols_of, transition_table

B, I, O = Symbol.B, Symbol.I, Symbol.O


def _render(renderable):
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_symbols_blank_first():
    assert symbols_of(add_one()) == [B, I, O]


def test_transition_table_shape():
    program = add_one_decomposed()
    table = transition_table(program)
    assert len(table.columns) == 1 + 3
    assert table.row_count == len(program.states)


def test_transition_table_marks_missing_entries_as_halt():
    text = _render(transition_table(add_one()))
    assert "M (start)" in text
    assert "M, O, L" in text
    assert "HALT" in text


def test_render_tape_pads_with_blanks():
    assert render_tape(Tape.of([I], O, []), window=1).plain == "B I O B"
    assert render_tape(Tape.of(head=B), window=0).plain == "B"


def test_pretty_print_program():
    console = Console(record=True, width=120, color_system=None)
    pretty_print_program(add_one_decomposed(), name="add_one_decomposed", out=console)
    text = console.export_text()
    assert "add_one_decomposed" in text
    assert "action model: decomposed" in text
    assert "((FIN, O) => (H, Move(L)))" in text
