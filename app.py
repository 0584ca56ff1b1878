# app.py

import argparse
import sys

from rich.console import Console
from rich.prompt import Prompt, IntPrompt, Confirm
from rich.table import Table

from config.config_loader import DEFAULT_CONFIG_PATH, load_config, save_config, validate_config
from logger.logger import JSONLogger
from simulator.machines import EXAMPLES, get_example
from tools.program_parser import ProgramSyntaxError, format_tape, load_program, parse_tape
from tools.ruleset_inspect import pretty_print_program, render_tape
from tools.simulate_tape import TraceRecorder, result_entry, simulate

console = Console()

# === Utilities ===
def load_runtime_config(path=None):
    try:
        return load_config(path)
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

def resolve_machine(config, example=None, program_path=None, tape_text=None):
    """Return (name, program, tape) for an example or a program file."""
    if program_path:
        parsed = load_program(program_path)
        tape = parse_tape(tape_text or "([], B, [])", parsed.symbols)
        name, program = program_path, parsed.program
    else:
        name = example or config["machine"]
        program, tape = get_example(name)
        if tape_text:
            tape = parse_tape(tape_text, type(tape.head()))
    if config["action_model"] != "auto":
        program.require_model(config["action_model"])
    return name, program, tape

def run_machine(config, name, program, tape):
    logger = JSONLogger(config["output_directory"], config["log_file_prefix"])
    window = config["tape_window"]

    console.print(f"\n[bold]{name}[/bold] ([dim]{program.action_model}[/dim])")
    console.print(render_tape(tape, window))

    recorder = TraceRecorder(name, logger, config["log_frequency"]) if config["trace"] else None

    def on_step(steps, state, current):
        if recorder is not None:
            recorder(steps, state, current)
        if config["trace_to_console"] and steps % config["log_frequency"] == 0:
            console.print(render_tape(current, window), f"[dim]{steps:>6} {state.name}[/dim]")

    result = simulate(program, tape, max_steps=config["max_steps"] or None, trace=on_step)
    if recorder is not None:
        recorder.flush()

    entry = result_entry(name, result)
    logger.log(entry)

    console.print(render_tape(result.final_tape, window))
    if result.halted:
        console.print(f"[green]Halted in state {result.final_state.name} after {result.steps:,} steps.[/green]")
    else:
        console.print(f"[yellow]Stopped after {result.steps:,} steps without halting.[/yellow]")
    console.print(format_tape(result.final_tape), markup=False, highlight=False)
    return result

def show_examples():
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Index", justify="center")
    table.add_column("Machine", justify="center")
    table.add_column("Model", justify="center")
    table.add_column("Default Input", justify="center")
    for idx, name in enumerate(EXAMPLES):
        program, tape = get_example(name)
        table.add_row(str(idx), name, program.action_model, format_tape(tape))
    console.print(table)

def show_main_menu():
    console.print("\n[bold cyan]Turing Machine Interpreter[/bold cyan]")
    console.print("[1] Run Example Machine")
    console.print("[2] Run Program File")
    console.print("[3] Inspect Machine")
    console.print("[4] Edit Config")
    console.print("[5] Exit")

def choose_example(config):
    show_examples()
    names = list(EXAMPLES)
    default = names.index(config["machine"]) if config["machine"] in names else 0
    idx_choice = IntPrompt.ask("\nChoose a machine by Index", default=default)
    if idx_choice < 0 or idx_choice >= len(names):
        console.print("[red]Invalid choice.[/red]")
        return None
    return names[idx_choice]

def handle_run_example(config):
    name = choose_example(config)
    if name is None:
        return
    tape_text = Prompt.ask("Input tape (blank for default)", default="")
    try:
        run_machine(config, *resolve_machine(config, example=name, tape_text=tape_text or None))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")

def handle_run_program(config):
    path = Prompt.ask("Program file", default="programs/add_one.tm")
    tape_text = Prompt.ask("Input tape", default="([], B, [])")
    try:
        run_machine(config, *resolve_machine(config, program_path=path, tape_text=tape_text))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")

def handle_inspect(config):
    name = choose_example(config)
    if name is None:
        return
    program, _ = get_example(name)
    pretty_print_program(program, name=name, out=console)

def handle_edit_config(config, path):
    console.print("\n[bold]Edit Configuration[/bold]")

    machine = Prompt.ask("Default machine", choices=list(EXAMPLES), default=config["machine"])
    action_model = Prompt.ask("Action model", choices=["auto", "triple", "decomposed"], default=config["action_model"])
    max_steps = IntPrompt.ask("Max Steps (0 = no limit)", default=config["max_steps"])
    trace = Confirm.ask("Log every step?", default=config["trace"])
    trace_to_console = Confirm.ask("Print every step?", default=config["trace_to_console"])
    log_frequency = IntPrompt.ask("Log Frequency", default=config["log_frequency"])
    tape_window = IntPrompt.ask("Tape Window", default=config["tape_window"])

    config.update({
        "machine": machine,
        "action_model": action_model,
        "max_steps": max_steps,
        "trace": trace,
        "trace_to_console": trace_to_console,
        "log_frequency": log_frequency,
        "tape_window": tape_window
    })

    try:
        save_config(config, path)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return
    console.print("[green]Configuration updated successfully.[/green]")


def interactive_main(config_path):
    config = load_runtime_config(config_path)

    while True:
        show_main_menu()
        choice = Prompt.ask("\nChoose an option", choices=["1", "2", "3", "4", "5"], default="5")

        if choice == "1":
            handle_run_example(config)
        elif choice == "2":
            handle_run_program(config)
        elif choice == "3":
            handle_inspect(config)
        elif choice == "4":
            handle_edit_config(config, config_path or DEFAULT_CONFIG_PATH)
            config = load_runtime_config(config_path)
        elif choice == "5":
            console.print("[bold green]Goodbye![/bold green]")
            break

# === CLI Mode for Automation ===
def cli_main(args):
    config = load_runtime_config(args.config)
    if args.max_steps is not None:
        config["max_steps"] = args.max_steps
    if args.trace:
        config["trace"] = True
        config["trace_to_console"] = True
    if args.model:
        config["action_model"] = args.model
    try:
        validate_config(config)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if args.list:
        show_examples()
        return 0

    try:
        name, program, tape = resolve_machine(config, args.example, args.program, args.tape)
    except (FileNotFoundError, ProgramSyntaxError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if args.inspect:
        pretty_print_program(program, name=name, out=console)
        return 0

    result = run_machine(config, name, program, tape)
    return 0 if result.halted else 2

def main(argv=None):
    parser = argparse.ArgumentParser(description="Single-tape Turing Machine Interpreter")
    parser.add_argument("--example", choices=list(EXAMPLES), help="Run a built-in example machine")
    parser.add_argument("--program", help="Run a program file")
    parser.add_argument("--tape", help="Input tape, e.g. '([I, I, I], I, [])'")
    parser.add_argument("--max-steps", type=int, help="Stop after this many steps (0 = no limit)")
    parser.add_argument("--model", choices=["auto", "triple", "decomposed"], help="Required action model")
    parser.add_argument("--trace", action="store_true", help="Print and log every intermediate tape")
    parser.add_argument("--inspect", action="store_true", help="Print the transition table instead of running")
    parser.add_argument("--list", action="store_true", help="List the built-in example machines")
    parser.add_argument("--config", help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    args = parser.parse_args(argv)

    if args.example or args.program or args.list:
        return cli_main(args)
    interactive_main(args.config)
    return 0

if __name__ == "__main__":
    sys.exit(main())
