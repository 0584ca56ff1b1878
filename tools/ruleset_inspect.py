import argparse

from rich.console import Console
from rich.table import Table
from rich.text import Text

from simulator.machines import EXAMPLES, get_example
from simulator.turing_machine import lookup
from tools.program_parser import action_text, format_program, load_program

console = Console()


def symbols_of(program):
    """The program's whole alphabet, blank first."""
    if not program.table:
        return []
    (_, symbol), _ = program.table[0]
    alphabet = type(symbol)
    blank = alphabet.blank()
    return [blank] + [s for s in alphabet if s != blank]


def transition_table(program, title=None):
    """State x symbol grid. Cells without an entry halt the machine."""
    symbols = symbols_of(program)
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("State", justify="center")
    for symbol in symbols:
        table.add_column(symbol.name, justify="center")

    for state in program.states:
        label = f"{state.name} (start)" if state == program.initial_state else state.name
        row = [label]
        for symbol in symbols:
            effect = lookup(program.table, state, symbol)
            if effect is None:
                row.append("[red]HALT[/red]")
            else:
                next_state, action = effect
                row.append(f"{next_state.name}, {action_text(action)}")
        table.add_row(*row)
    return table


def render_tape(tape, window=10):
    """The stored cells plus `window` blanks either side, head highlighted."""
    offset, cells = tape.cells()
    text = Text()
    pad = [tape.blank] * window
    for pos, symbol in enumerate(pad + cells + pad, start=offset - window):
        style = "bold reverse" if pos == 0 else ("dim" if symbol == tape.blank else "")
        text.append(symbol.name, style=style)
        text.append(" ")
    text.rstrip()
    return text


def pretty_print_program(program, name=None, out=None):
    out = out or console
    out.print(transition_table(program, title=f"=== {name} ===" if name else None))
    out.print(f"[dim]action model: {program.action_model}[/dim]")
    out.print("\n=== Program Text ===")
    out.print(format_program(program), markup=False, highlight=False)


def main():
    parser = argparse.ArgumentParser(description="Turing Machine Program Inspector")
    parser.add_argument("--example", choices=list(EXAMPLES), help="Built-in example machine")
    parser.add_argument("--program", help="Path to a program file")
    args = parser.parse_args()

    if args.program:
        pretty_print_program(load_program(args.program).program, name=args.program)
    elif args.example:
        program, tape = get_example(args.example)
        pretty_print_program(program, name=args.example)
        console.print("\n=== Default Input ===")
        console.print(render_tape(tape))
    else:
        raise ValueError("You must specify either --example or --program.")


if __name__ == "__main__":
    main()
