from enum import Enum

from simulator.errors import Stall, StepLimitReached, UnknownState
from simulator.transition_table import BLANK, Direction

DEFAULT_MARKERS = ("x", "y", "z")


class Verdict(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Tape:
    """Fixed-length tape. Reads outside the written cells are blank; it never grows."""

    def __init__(self, symbols=""):
        cells = list(symbols)
        for cell in cells:
            if not isinstance(cell, str) or len(cell) != 1:
                raise ValueError(f"Tape cells must be single characters, got {cell!r}")
        self.cells = cells

    def __len__(self):
        return len(self.cells)

    def __getitem__(self, position):
        if 0 <= position < len(self.cells):
            return self.cells[position]
        return BLANK

    def __setitem__(self, position, symbol):
        if not 0 <= position < len(self.cells):
            raise IndexError(f"Position {position} is off the tape (length {len(self.cells)})")
        self.cells[position] = symbol

    def __str__(self):
        return "".join(self.cells)

    def in_bounds(self, position):
        return 0 <= position < len(self.cells)

    def is_completed(self, markers=DEFAULT_MARKERS):
        """True when every cell holds blank or one of the marker symbols."""
        allowed = set(markers) | {BLANK}
        return all(cell in allowed for cell in self.cells)


class TuringMachine:
    """Single-tape deterministic Turing machine.

    ``run`` has no halting guarantee unless ``max_steps`` is given: a ruleset
    with no path to the accept or reject state, or one that stalls, keeps the
    loop going forever.
    """

    def __init__(self, table, states, accept_state, reject_state, tape="", start_state=None, strict=False):
        self.table = table
        self.states = list(states)
        if not self.states:
            raise ValueError("At least one state must be declared")
        self.accept_state = accept_state
        self.reject_state = reject_state
        self.start_state = start_state if start_state is not None else self.states[0]
        self.strict = strict
        self.initial_tape = str(tape) if isinstance(tape, Tape) else tape

        declared = set(self.states)
        for role, name in (("start", self.start_state), ("accept", accept_state), ("reject", reject_state)):
            if name not in declared:
                raise UnknownState(name, f"The {role} state {name!r} is not a declared state")
        if strict:
            table.check_states(declared)
        self._declared = declared

        self.reset()

    def reset(self):
        self.tape = Tape(self.initial_tape)
        self.head = 0
        self.state = self.start_state
        self.steps = 0
        self.stalls = 0

    def current_symbol(self):
        return self.tape[self.head]

    def is_halted(self):
        return self.state == self.accept_state or self.state == self.reject_state

    @property
    def verdict(self):
        if self.state == self.accept_state:
            return Verdict.ACCEPTED
        if self.state == self.reject_state:
            return Verdict.REJECTED
        return None

    def _enter(self, next_state):
        if next_state not in self._declared:
            raise UnknownState(next_state, f"Rule leads from {self.state!r} to undeclared state {next_state!r}")
        self.state = next_state

    def step(self):
        """Apply one rule. Returns it, or None for a stall or a halted machine."""
        if self.is_halted():
            return None

        symbol = self.current_symbol()
        rule = self.table.lookup(self.state, symbol)
        self.steps += 1

        if rule is None:
            if self.strict:
                raise Stall(self.state, symbol, self.head)
            self.stalls += 1
            return None

        if self.head >= len(self.tape):
            # Off the right end: nothing to write into.
            if rule.direction is Direction.RIGHT:
                self.state = self.reject_state
            else:
                self.head -= 1
                self._enter(rule.next_state)
            return rule

        if self.head < 0:
            # Left of an empty tape: nothing to write, and no growth leftwards.
            if rule.direction is Direction.RIGHT:
                self.head += 1
            self._enter(rule.next_state)
            return rule

        self.tape[self.head] = rule.replacement_symbol
        if rule.direction is Direction.LEFT:
            if self.head != 0:
                self.head -= 1
        else:
            self.head += 1
        self._enter(rule.next_state)
        return rule

    def run(self, max_steps=None, observer=None):
        while not self.is_halted():
            if max_steps is not None and self.steps >= max_steps:
                raise StepLimitReached(self.steps, self.state)
            rule = self.step()
            if observer is not None:
                observer(self, rule)
        return self.verdict

    def snapshot(self):
        return self.state, str(self.tape), self.head

    def is_completed(self, markers=DEFAULT_MARKERS):
        return self.tape.is_completed(markers)

    def render(self, window=10):
        """Tape window around the head, with a caret line and the state below."""
        start = max(0, min(self.head, len(self.tape)) - window)
        end = max(len(self.tape), self.head + 1) + window
        end = min(end, start + 2 * window + 1)

        tape_str = ""
        head_str = ""
        for pos in range(start, end):
            tape_str += f"{self.tape[pos]} "
            head_str += "^ " if pos == self.head else "  "
        status = f"State: {self.state}, Head: {self.head}, Steps: {self.steps}"
        return "\n".join([tape_str.rstrip(), head_str.rstrip(), status])
