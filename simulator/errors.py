class TuringMachineError(Exception):
    pass


class MalformedRuleset(TuringMachineError, ValueError):
    """The ruleset cannot be shaped into a state -> symbol -> rule table."""


class UnknownState(TuringMachineError):
    """A state name is used that is not in the declared state set."""

    def __init__(self, state, message=None):
        self.state = state
        super().__init__(message or f"Unknown state: {state!r}")


class Stall(TuringMachineError):
    """No rule matches the current (state, symbol) pair (strict mode only)."""

    def __init__(self, state, symbol, head):
        self.state = state
        self.symbol = symbol
        self.head = head
        super().__init__(f"No rule for state {state!r} reading {symbol!r} at position {head}")


class StepLimitReached(TuringMachineError):
    def __init__(self, steps, state):
        self.steps = steps
        self.state = state
        super().__init__(f"No verdict after {steps:,} steps (stopped in state {state!r})")
