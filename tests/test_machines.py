import pytest

from simulator.machines import EXAMPLES, Symbol, get_example
from simulator.turing_machine import DECOMPOSED, TRIPLE

B, I, O = Symbol.B, Symbol.I, Symbol.O


def test_blank_is_b():
    assert Symbol.blank() is B


@pytest.mark.parametrize("name, model", [
    ("add_one", TRIPLE),
    ("add_one_binary", TRIPLE),
    ("add_one_decomposed", DECOMPOSED),
])
def test_examples_produce_the_same_increment(name, model):
    program, tape = get_example(name)
    assert program.action_model == model
    assert program.run(tape).as_tuple() == ([], B, [I, O, O, O, O])


def test_example_default_tapes():
    assert get_example("add_one")[1].as_tuple() == ([I, I, I], I, [])
    assert get_example("add_one_decomposed")[1].as_tuple() == ([], B, [I, I, I, I])


def test_unknown_example():
    with pytest.raises(ValueError, match="Unknown example"):
        get_example("add_two")


def test_registry_names():
    assert list(EXAMPLES) == ["add_one", "add_one_binary", "add_one_decomposed"]
