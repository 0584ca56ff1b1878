from dataclasses import dataclass
from enum import Enum

from simulator.tape import Direction, Tape

TRIPLE = "triple"
DECOMPOSED = "decomposed"
ACTION_MODELS = (TRIPLE, DECOMPOSED)


class Alphabet(Enum):
    """Base class for tape alphabets. The member named B is the blank."""

    @classmethod
    def blank(cls):
        return cls["B"]


# === Actions ===
@dataclass(frozen=True)
class Move:
    direction: Direction

    def apply(self, tape):
        return tape.shift(self.direction, tape.head())

    def __repr__(self):
        return f"Move({self.direction.to_string()})"


@dataclass(frozen=True)
class Write:
    symbol: object

    def apply(self, tape):
        return tape.write(self.symbol)

    def __repr__(self):
        return f"Write({self.symbol.name})"


@dataclass(frozen=True)
class WriteMove:
    """The combined (symbol, direction) action: write at the head, then move."""

    symbol: object
    direction: Direction

    def expand(self):
        return Write(self.symbol), Move(self.direction)

    def apply(self, tape):
        for action in self.expand():
            tape = action.apply(tape)
        return tape

    def __repr__(self):
        return f"({self.symbol.name}, {self.direction.to_string()})"


def normalize_entry(entry):
    """Accept ((q, s), (q', action)) or ((q, s), (q', s', d)) entries."""
    key, effect = entry
    state, symbol = key
    if len(effect) == 3:
        next_state, write, direction = effect
        return (state, symbol), (next_state, WriteMove(write, direction))
    next_state, action = effect
    if not isinstance(action, (Move, Write, WriteMove)):
        raise TypeError(f"unsupported action {action!r} for ({state}, {symbol})")
    return (state, symbol), (next_state, action)


def normalize_table(table):
    return tuple(normalize_entry(entry) for entry in table)


def action_model(table):
    """Return TRIPLE or DECOMPOSED for a normalized table; mixed tables are rejected."""
    kinds = {isinstance(action, WriteMove) for _, (_, action) in table}
    if len(kinds) > 1:
        raise ValueError("transition table mixes (symbol, direction) triples with Move/Write actions")
    return TRIPLE if kinds == {True} else DECOMPOSED


# === Evaluation ===
def lookup(table, state, symbol):
    """First entry whose key equals (state, symbol), or None. Duplicate keys: first wins."""
    for (key_state, key_symbol), effect in table:
        if key_state == state and key_symbol == symbol:
            return effect
    return None


def step(table, state, tape):
    """Apply one transition. Returns (next_state, tape), or None when halted."""
    effect = lookup(table, state, tape.head())
    if effect is None:
        return None
    next_state, action = effect
    return next_state, action.apply(tape)


def run(table, state, tape, on_step=None):
    """Apply transitions until no entry matches; return the final tape.

    There is no step limit. on_step(steps, state, tape) is called after
    every transition and its return value is ignored.
    """
    table = normalize_table(table)
    steps = 0
    while True:
        result = step(table, state, tape)
        if result is None:
            return tape
        state, tape = result
        steps += 1
        if on_step is not None:
            on_step(steps, state, tape)


@dataclass(frozen=True)
class Program:
    initial_state: object
    table: tuple

    def __post_init__(self):
        object.__setattr__(self, "table", normalize_table(self.table))
        action_model(self.table)

    @property
    def action_model(self):
        return action_model(self.table)

    def require_model(self, model):
        if model not in ACTION_MODELS:
            raise ValueError(f"unknown action model '{model}'")
        if self.table and self.action_model != model:
            raise ValueError(f"program uses {self.action_model} actions, expected {model}")
        return self

    @property
    def states(self):
        seen = [self.initial_state]
        for (state, _), (next_state, _) in self.table:
            for q in (state, next_state):
                if q not in seen:
                    seen.append(q)
        return seen

    def run(self, tape, on_step=None):
        return run(self.table, self.initial_state, tape, on_step=on_step)


class TuringMachine:
    """Stateful driver around a Program, one transition per step() call."""

    def __init__(self, program, tape):
        self.program = program
        self.initial_tape = tape
        self.reset()

    def reset(self):
        self.state = self.program.initial_state
        self.tape = self.initial_tape
        self.steps = 0
        self.halted = False

    def step(self):
        if self.halted:
            return False
        result = step(self.program.table, self.state, self.tape)
        if result is None:
            self.halted = True
            return False
        self.state, self.tape = result
        self.steps += 1
        return True

    def run(self, max_steps=None, on_step=None):
        """Run until halted, or until max_steps transitions when a limit is given."""
        while not self.halted:
            if max_steps is not None and self.steps >= max_steps:
                # Out of budget; still report a halt if nothing matches here.
                self.halted = lookup(self.program.table, self.state, self.tape.head()) is None
                break
            if self.step() and on_step is not None:
                on_step(self.steps, self.state, self.tape)
        return self.steps
