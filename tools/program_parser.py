"""
program_parser.py — reader and writer for the textual machine language.

    <program> ::= (<Q>, [<entry>, ...])
    <entry>   ::= ((<Q>, <S>) => <action>)
    <action>  ::= (<Q>, <S>, <D>) | (<Q>, Move(<D>)) | (<Q>, Write(<S>))
    <tape>    ::= ([<S>, ...], <S>, [<S>, ...])
    <D>       ::= L | R

States and symbols are names made of letters, digits and underscores, starting
with a letter or digit (so 0 and 1 work as symbols). B is the blank symbol and
is always part of the alphabet. mro, name, value and blank are reserved.
'#' starts a comment that runs to the end of the line.
Tape sides are written nearest-to-head-first.
"""

from enum import Enum
from pathlib import Path
from typing import NamedTuple

from simulator.tape import Direction, Tape
from simulator.turing_machine import Alphabet, Move, Program, Write, WriteMove

BLANK_NAME = "B"
# Names the Enum machinery or Alphabet already claims.
RESERVED_NAMES = frozenset({"mro", "name", "value", "blank"})
PUNCTUATION = "()[],"


class ProgramSyntaxError(ValueError):
    def __init__(self, message, line=None, column=None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class Token(NamedTuple):
    text: str
    line: int
    column: int


class ParsedProgram(NamedTuple):
    program: Program
    states: type
    symbols: type


# ── Tokenizer ─────────────────────────────────────────────────────────────────

def tokenize(src):
    tokens = []
    line, col = 1, 1
    i, n = 0, len(src)
    while i < n:
        c = src[i]
        if c == "\n":
            i += 1
            line, col = line + 1, 1
            continue
        if c in " \t\r":
            i += 1
            col += 1
            continue
        if c == "#":
            while i < n and src[i] != "\n":
                i += 1
            continue
        if src[i:i+2] == "=>":
            tokens.append(Token("=>", line, col))
            i += 2
            col += 2
            continue
        if c in PUNCTUATION:
            tokens.append(Token(c, line, col))
            i += 1
            col += 1
            continue
        if c.isalnum():
            j = i
            while j < n and (src[j].isalnum() or src[j] == "_"):
                j += 1
            tokens.append(Token(src[i:j], line, col))
            col += j - i
            i = j
            continue
        raise ProgramSyntaxError(f"unexpected character {c!r}", line, col)
    return tokens


# ── Parser ────────────────────────────────────────────────────────────────────

class _Parser:
    def __init__(self, src):
        self.tokens = tokenize(src)
        self.pos = 0

    def peek(self, offset=0):
        idx = self.pos + offset
        return self.tokens[idx] if idx < len(self.tokens) else None

    def _error(self, message):
        tok = self.peek()
        if tok is None:
            last = self.tokens[-1] if self.tokens else Token("", 1, 1)
            raise ProgramSyntaxError(f"{message}, got end of input", last.line, last.column)
        raise ProgramSyntaxError(f"{message}, got {tok.text!r}", tok.line, tok.column)

    def expect(self, text):
        tok = self.peek()
        if tok is None or tok.text != text:
            self._error(f"expected {text!r}")
        self.pos += 1
        return tok

    def name(self):
        tok = self.peek()
        if tok is None or not tok.text[0].isalnum():
            self._error("expected a name")
        if tok.text in RESERVED_NAMES:
            raise ProgramSyntaxError(f"reserved name {tok.text!r}", tok.line, tok.column)
        self.pos += 1
        return tok

    def direction(self):
        tok = self.name()
        try:
            return Direction.from_string(tok.text)
        except ValueError:
            raise ProgramSyntaxError(f"expected L or R, got {tok.text!r}", tok.line, tok.column) from None

    def at(self, text):
        tok = self.peek()
        return tok is not None and tok.text == text

    def end(self):
        if self.peek() is not None:
            self._error("expected end of input")

    def symbol_list(self):
        self.expect("[")
        items = []
        if not self.at("]"):
            items.append(self.name())
            while self.at(","):
                self.pos += 1
                items.append(self.name())
        self.expect("]")
        return items

    def action(self):
        """Returns (next_state, kind, args) with names still as tokens."""
        self.expect("(")
        next_state = self.name()
        self.expect(",")
        nxt, after = self.peek(), self.peek(1)
        if nxt is not None and nxt.text in ("Move", "Write") and after is not None and after.text == "(":
            self.pos += 2
            arg = self.direction() if nxt.text == "Move" else self.name()
            self.expect(")")
            self.expect(")")
            return next_state, nxt.text, arg
        write = self.name()
        self.expect(",")
        move = self.direction()
        self.expect(")")
        return next_state, "triple", (write, move)

    def entry(self):
        self.expect("(")
        self.expect("(")
        state = self.name()
        self.expect(",")
        symbol = self.name()
        self.expect(")")
        self.expect("=>")
        effect = self.action()
        self.expect(")")
        return state, symbol, effect

    def program(self):
        self.expect("(")
        initial = self.name()
        self.expect(",")
        self.expect("[")
        entries = []
        if not self.at("]"):
            entries.append(self.entry())
            while self.at(","):
                self.pos += 1
                entries.append(self.entry())
        self.expect("]")
        self.expect(")")
        self.end()
        return initial, entries

    def tape(self):
        self.expect("(")
        left = self.symbol_list()
        self.expect(",")
        head = self.name()
        self.expect(",")
        right = self.symbol_list()
        self.expect(")")
        self.end()
        return left, head, right


def _ordered(names):
    seen = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen


def parse_program(src):
    """Parse program text into a ParsedProgram with freshly built enums."""
    initial, entries = _Parser(src).program()

    state_names = [initial.text]
    symbol_names = [BLANK_NAME]
    for state, symbol, (next_state, kind, arg) in entries:
        state_names += [state.text, next_state.text]
        symbol_names.append(symbol.text)
        if kind == "Write":
            symbol_names.append(arg.text)
        elif kind == "triple":
            symbol_names.append(arg[0].text)

    states = Enum("State", [(n, n) for n in _ordered(state_names)])
    symbols = Alphabet("Symbol", [(n, n) for n in _ordered(symbol_names)])

    table = []
    for state, symbol, (next_state, kind, arg) in entries:
        if kind == "Move":
            action = Move(arg)
        elif kind == "Write":
            action = Write(symbols[arg.text])
        else:
            action = WriteMove(symbols[arg[0].text], arg[1])
        table.append(((states[state.text], symbols[symbol.text]), (states[next_state.text], action)))

    try:
        program = Program(states[initial.text], table)
    except ValueError as e:
        raise ProgramSyntaxError(str(e), initial.line, initial.column) from None
    return ParsedProgram(program, states, symbols)


def parse_tape(src, symbols):
    """Parse tape text against an existing alphabet."""
    left, head, right = _Parser(src).tape()

    def resolve(tok):
        try:
            return symbols[tok.text]
        except KeyError:
            raise ProgramSyntaxError(f"unknown symbol {tok.text!r}", tok.line, tok.column) from None

    return Tape.of(
        [resolve(t) for t in left],
        resolve(head),
        [resolve(t) for t in right],
        blank=symbols.blank(),
    )


def load_program(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Program file not found at: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return parse_program(f.read())


# ── Writer ────────────────────────────────────────────────────────────────────

def action_text(action):
    if isinstance(action, Move):
        return f"Move({action.direction.to_string()})"
    if isinstance(action, Write):
        return f"Write({action.symbol.name})"
    return f"{action.symbol.name}, {action.direction.to_string()}"


def format_program(program):
    lines = [f"({program.initial_state.name}, ["]
    for i, ((state, symbol), (next_state, action)) in enumerate(program.table):
        sep = "," if i < len(program.table) - 1 else ""
        lines.append(f"    (({state.name}, {symbol.name}) => ({next_state.name}, {action_text(action)})){sep}")
    lines.append("])")
    return "\n".join(lines)


def _side_text(cells):
    return "[" + ", ".join(s.name for s in cells) + "]"


def format_tape(tape):
    left, head, right = tape.as_tuple()
    return f"({_side_text(left)}, {head.name}, {_side_text(right)})"
