# tools/simulate_tape.py

import argparse
from datetime import datetime
from typing import NamedTuple

from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from logger.logger import JSONLogger
from simulator.machines import EXAMPLES, get_example
from simulator.turing_machine import TuringMachine
from tools.program_parser import format_tape, load_program, parse_tape


class RunResult(NamedTuple):
    final_tape: object
    final_state: object
    steps: int
    halted: bool


class TraceRecorder:
    """on_step callback that buffers tape snapshots and flushes them to a JSONLogger."""

    def __init__(self, name, logger=None, log_frequency=1, buffer_size=1000):
        self.name = name
        self.logger = logger
        self.log_frequency = max(1, log_frequency)
        self.buffer_size = buffer_size
        self.entries = []

    def __call__(self, steps, state, tape):
        if steps % self.log_frequency:
            return
        self.entries.append({
            "machine": self.name,
            "step": steps,
            "state": state.name,
            "tape": format_tape(tape),
        })
        if self.logger is not None and len(self.entries) >= self.buffer_size:
            self.flush()

    def flush(self):
        if self.logger is not None and self.entries:
            self.logger.log_trace(self.entries)
            self.entries = []


# === Single Run ===
def simulate(program, tape, max_steps=None, trace=None):
    """Run program on tape. With max_steps the run stops early and reports halted=False."""
    machine = TuringMachine(program, tape)
    machine.run(max_steps=max_steps, on_step=trace)
    return RunResult(machine.tape, machine.state, machine.steps, machine.halted)


def result_entry(name, result):
    offset, cells = result.final_tape.cells()
    return {
        "machine": name,
        "steps_taken": result.steps,
        "halted": result.halted,
        "final_state": result.final_state.name,
        "final_tape": format_tape(result.final_tape),
        "window_offset": offset,
        "window": "".join(s.name for s in cells),
        "timestamp": datetime.now().isoformat(),
    }


# === Batch Runner ===
def simulate_jobs(jobs, logger=None, max_steps=None, trace=False, log_frequency=1):
    """Run (name, program, tape) jobs in order, logging one summary entry per job."""
    entries = []
    with Progress(
            SpinnerColumn(),
            BarColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            TextColumn("{task.completed}/{task.total} Machines"),
            TimeElapsedColumn(),
            transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Simulating...", total=len(jobs))
        for name, program, tape in jobs:
            recorder = TraceRecorder(name, logger, log_frequency) if trace else None
            result = simulate(program, tape, max_steps=max_steps, trace=recorder)
            if recorder is not None:
                recorder.flush()
            entries.append(result_entry(name, result))
            progress.update(task, advance=1)

    if logger is not None:
        logger.log_summary(entries)
    return entries


def example_jobs(names=None):
    jobs = []
    for name in names or EXAMPLES:
        program, tape = get_example(name)
        jobs.append((name, program, tape))
    return jobs


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Run Turing machine programs and log the results as JSON lines.")
    parser.add_argument("--program", help="Path to a program file")
    parser.add_argument("--tape", help="Input tape, e.g. '([I, I], I, [])'")
    parser.add_argument("--example", action="append", help="Built-in example machine (repeatable)")
    parser.add_argument("--max_steps", type=int, default=0, help="Stop after this many steps (0 = no limit)")
    parser.add_argument("--trace", action="store_true", help="Log every intermediate tape")
    parser.add_argument("--output", default="logs/", help="Output directory for logs")
    args = parser.parse_args()

    if args.program:
        parsed = load_program(args.program)
        if args.tape:
            tape = parse_tape(args.tape, parsed.symbols)
        else:
            tape = parse_tape("([], B, [])", parsed.symbols)
        jobs = [(args.program, parsed.program, tape)]
    else:
        jobs = example_jobs(args.example)

    logger = JSONLogger(output_directory=args.output, log_file_prefix="tm_")
    for entry in simulate_jobs(jobs, logger, max_steps=args.max_steps or None, trace=args.trace):
        print(f"[INFO] {entry['machine']}: {entry['final_tape']} after {entry['steps_taken']:,} steps")


if __name__ == "__main__":
    main()
