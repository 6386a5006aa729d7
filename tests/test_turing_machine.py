import pytest

from machine_helpers import ANBN_STATES, RULESET_DIR, STATES, rule
from simulator.errors import Stall, StepLimitReached, UnknownState
from simulator.ruleset_io import load_ruleset
from simulator.transition_table import TransitionTable
from simulator.turing_machine import Tape, TuringMachine, Verdict


def make_machine(mapping, tape, strict=False, start_state="s1"):
    table = TransitionTable.from_mapping(mapping)
    return TuringMachine(table, STATES, "sAccept", "sReject", tape=tape, start_state=start_state, strict=strict)


def test_accepts_ab(ab_table):
    """s1 rewrites 'a' to 'b', s2 accepts on 'b': input 'ab' ends accepted with tape 'bb'."""
    machine = TuringMachine(ab_table, STATES, "sAccept", "sReject", tape="ab", start_state="s1")
    verdict = machine.run()

    assert verdict is Verdict.ACCEPTED
    assert str(machine.tape) == "bb"
    assert machine.head == 2
    assert machine.steps == 2


def test_step_is_deterministic(ab_table):
    """Two machines in the same configuration move to the same configuration."""
    first = TuringMachine(ab_table, STATES, "sAccept", "sReject", tape="ab")
    second = TuringMachine(ab_table, STATES, "sAccept", "sReject", tape="ab")
    while not first.is_halted():
        assert first.snapshot() == second.snapshot()
        first.step()
        second.step()
    assert first.snapshot() == second.snapshot()


def test_reset_restores_initial_configuration(ab_table):
    machine = TuringMachine(ab_table, STATES, "sAccept", "sReject", tape="ab")
    initial = machine.snapshot()
    machine.run()
    machine.reset()
    assert machine.snapshot() == initial
    assert machine.steps == 0


def test_left_at_position_zero_keeps_head():
    """A left move at the first cell writes the symbol but leaves the head at 0."""
    machine = make_machine({"s1": {"a": rule("s2", "c", "L")}}, "ab")
    machine.step()
    assert machine.snapshot() == ("s2", "cb", 0)


def test_left_loop_at_boundary_never_halts():
    """s1 reading 'a' stays in s1 and moves left: the head never moves and the run needs a cap."""
    machine = make_machine({"s1": {"a": rule("s1", "a", "L")}}, "a")

    with pytest.raises(StepLimitReached) as excinfo:
        machine.run(max_steps=500)

    assert excinfo.value.steps == 500
    assert machine.snapshot() == ("s1", "a", 0)
    assert machine.verdict is None


def test_right_past_end_then_right_rejects():
    """Once off the right end, a right-moving rule rejects immediately."""
    machine = make_machine({
        "s1": {"a": rule("s2", "a", "R")},
        "s2": {"_": rule("s1", "_", "R")},
    }, "a")

    machine.step()
    assert machine.head == 1, "the head may step past the last cell"
    machine.step()
    assert machine.state == "sReject"
    assert machine.verdict is Verdict.REJECTED
    assert str(machine.tape) == "a", "the tape never grows"


def test_right_past_end_then_left_backs_up_without_writing():
    """Off the right end, a left-moving rule backs up one cell and changes state, writing nothing."""
    machine = make_machine({
        "s1": {"a": rule("s2", "a", "R")},
        "s2": {"_": rule("sAccept", "z", "L")},
    }, "a")

    machine.step()
    machine.step()
    assert machine.snapshot() == ("sAccept", "a", 0)
    assert len(machine.tape) == 1


def test_empty_input_reads_blank():
    machine = make_machine({"s1": {"_": rule("sAccept", "_", "L")}}, "")
    assert machine.run() is Verdict.ACCEPTED
    assert machine.head == -1
    assert str(machine.tape) == ""


def test_head_left_of_empty_tape_moves_back_without_writing():
    machine = make_machine({
        "s1": {"_": rule("s2", "_", "L")},
        "s2": {"_": rule("sAccept", "q", "R")},
    }, "")

    machine.step()
    assert machine.head == -1
    machine.step()
    assert machine.snapshot() == ("sAccept", "", 0)


def test_stall_is_a_no_op():
    """Without a rule for the symbol under the head nothing changes, and the cap is reached."""
    machine = make_machine({"s1": {"b": rule("sAccept", "b", "R")}}, "a")

    assert machine.step() is None
    assert machine.snapshot() == ("s1", "a", 0)

    with pytest.raises(StepLimitReached):
        machine.run(max_steps=100)
    assert machine.verdict is None
    assert machine.stalls == 100
    assert machine.steps == 100


def test_strict_mode_raises_stall():
    machine = make_machine({"s1": {"b": rule("sAccept", "b", "R")}}, "a", strict=True)
    with pytest.raises(Stall) as excinfo:
        machine.run(max_steps=100)
    assert (excinfo.value.state, excinfo.value.symbol, excinfo.value.head) == ("s1", "a", 0)


def test_undeclared_next_state_raises_when_reached():
    machine = make_machine({"s1": {"a": rule("s7", "a", "R")}}, "a")
    with pytest.raises(UnknownState) as excinfo:
        machine.step()
    assert excinfo.value.state == "s7"


def test_strict_mode_checks_next_states_up_front():
    with pytest.raises(UnknownState):
        make_machine({"s1": {"a": rule("s7", "a", "R")}}, "a", strict=True)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_state": "s9"},
        {"accept_state": "yes"},
        {"reject_state": "no"},
    ],
)
def test_terminal_and_start_states_must_be_declared(ab_table, kwargs):
    arguments = {"start_state": "s1", "accept_state": "sAccept", "reject_state": "sReject"}
    arguments.update(kwargs)
    with pytest.raises(UnknownState):
        TuringMachine(ab_table, STATES, tape="ab", **arguments)


def test_start_state_defaults_to_first_declared(ab_table):
    machine = TuringMachine(ab_table, ["s2", "s1", "sAccept", "sReject"], "sAccept", "sReject", tape="b")
    assert machine.state == "s2"
    assert machine.run() is Verdict.ACCEPTED


def test_terminal_start_state_returns_immediately(ab_table):
    machine = TuringMachine(ab_table, STATES, "sAccept", "sReject", tape="ab", start_state="sReject")
    assert machine.run() is Verdict.REJECTED
    assert machine.steps == 0
    assert machine.step() is None, "terminal states process no rules"


def test_accept_checked_first_when_states_coincide(ab_table):
    machine = TuringMachine(ab_table, STATES, "sAccept", "sAccept", tape="ab")
    assert machine.run() is Verdict.ACCEPTED


def test_observer_sees_every_step(ab_table):
    seen = []
    machine = TuringMachine(ab_table, STATES, "sAccept", "sReject", tape="ab")
    machine.run(observer=lambda m, r: seen.append((m.state, r.next_state)))
    assert seen == [("s2", "s2"), ("sAccept", "sAccept")]


@pytest.mark.parametrize(
    "word, expected",
    [
        ("", Verdict.ACCEPTED),
        ("ab", Verdict.ACCEPTED),
        ("aabb", Verdict.ACCEPTED),
        ("aaabbb", Verdict.ACCEPTED),
        ("a", Verdict.REJECTED),
        ("b", Verdict.REJECTED),
        ("aab", Verdict.REJECTED),
        ("abb", Verdict.REJECTED),
        ("abab", Verdict.REJECTED),
        ("ba", Verdict.REJECTED),
    ],
)
def test_anbn_ruleset(word, expected):
    table = load_ruleset(RULESET_DIR / "anbn.json", states=ANBN_STATES, strict=True)
    machine = TuringMachine(table, ANBN_STATES, "qAccept", "qReject", tape=word)
    assert machine.run(max_steps=10_000) is expected, f"unexpected verdict for {word!r}"


def test_anbn_marks_every_cell():
    table = load_ruleset(RULESET_DIR / "anbn.json")
    machine = TuringMachine(table, ANBN_STATES, "qAccept", "qReject", tape="aabb")
    machine.run(max_steps=10_000)
    assert str(machine.tape) == "xxyy"
    assert machine.is_completed()
    assert not machine.is_completed(markers=("x",))


def test_tape_reads_blank_outside_and_never_grows():
    tape = Tape("ab")
    assert tape[0] == "a"
    assert tape[2] == "_"
    assert tape[-1] == "_"
    with pytest.raises(IndexError):
        tape[2] = "c"
    assert len(tape) == 2


def test_tape_rejects_multi_character_cells():
    with pytest.raises(ValueError):
        Tape(["a", "bc"])


def test_render_marks_the_head(ab_table):
    machine = TuringMachine(ab_table, STATES, "sAccept", "sReject", tape="ab")
    machine.step()
    tape_line, head_line, status = machine.render(window=2).splitlines()
    assert tape_line.startswith("b b")
    assert head_line == "  ^"
    assert status == "State: s2, Head: 1, Steps: 1"
