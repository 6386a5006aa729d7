import pytest

from machine_helpers import rule
from simulator.transition_table import TransitionTable


@pytest.fixture
def ab_mapping():
    return {
        "s1": {"a": rule("s2", "b", "R")},
        "s2": {"b": rule("sAccept", "b", "R")},
    }


@pytest.fixture
def ab_table(ab_mapping):
    return TransitionTable.from_mapping(ab_mapping)
