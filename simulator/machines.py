from enum import Enum

from simulator.tape import Direction, Tape
from simulator.turing_machine import Alphabet, Move, Program, Write

L = Direction.LEFT
R = Direction.RIGHT


class Symbol(Alphabet):
    B = "B"
    I = "I"
    O = "O"


class AddOneState(Enum):
    M = "M"
    H = "H"


class BinaryState(Enum):
    INIT = "INIT"
    MR = "MR"
    ML = "ML"
    H = "H"


class DecomposedState(Enum):
    INIT = "INIT"
    MR = "MR"
    W = "W"
    ML = "ML"
    FIN = "FIN"
    H = "H"


def add_one():
    """Turn each I left of the head into O, then write I in the first blank."""
    M, H = AddOneState.M, AddOneState.H
    B, I, O = Symbol.B, Symbol.I, Symbol.O
    return Program(M, [
        ((M, I), (M, O, L)),
        ((M, O), (H, I, L)),
        ((M, B), (H, I, L)),
    ])


def add_one_binary():
    """Walk right past the number, then flip every digit on the way back and
    write I in front. Increments inputs made only of I."""
    INIT, MR, ML, H = BinaryState.INIT, BinaryState.MR, BinaryState.ML, BinaryState.H
    B, I, O = Symbol.B, Symbol.I, Symbol.O
    return Program(INIT, [
        ((INIT, B), (MR, B, R)),
        ((MR, I), (MR, I, R)),
        ((MR, O), (MR, O, R)),
        ((MR, B), (ML, B, L)),
        ((ML, I), (ML, O, L)),
        ((ML, O), (ML, I, L)),
        ((ML, B), (H, I, L)),
    ])


def add_one_decomposed():
    """add_one_binary written with separate Move and Write actions."""
    S = DecomposedState
    B, I, O = Symbol.B, Symbol.I, Symbol.O
    return Program(S.INIT, [
        ((S.INIT, B), (S.MR, Move(R))),
        ((S.MR, I), (S.MR, Move(R))),
        ((S.MR, O), (S.MR, Move(R))),
        ((S.MR, B), (S.W, Move(L))),
        ((S.W, I), (S.ML, Write(O))),
        ((S.W, O), (S.ML, Write(I))),
        ((S.W, B), (S.FIN, Write(I))),
        ((S.ML, I), (S.W, Move(L))),
        ((S.ML, O), (S.W, Move(L))),
        ((S.FIN, I), (S.H, Move(L))),
        ((S.FIN, O), (S.H, Move(L))),
    ])


# name -> (factory, default input tape as (left, head, right))
EXAMPLES = {
    "add_one": (add_one, (["I", "I", "I"], "I", [])),
    "add_one_binary": (add_one_binary, ([], "B", ["I", "I", "I", "I"])),
    "add_one_decomposed": (add_one_decomposed, ([], "B", ["I", "I", "I", "I"])),
}


def get_example(name):
    if name not in EXAMPLES:
        raise ValueError(f"Unknown example machine '{name}'. Choose from: {', '.join(EXAMPLES)}")
    factory, (left, head, right) = EXAMPLES[name]
    tape = Tape.of([Symbol[s] for s in left], Symbol[head], [Symbol[s] for s in right])
    return factory(), tape
