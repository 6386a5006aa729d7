from dataclasses import dataclass
from enum import Enum

from simulator.errors import MalformedRuleset, UnknownState

BLANK = "_"
RULE_FIELDS = ("next_state", "replacement_symbol", "direction")


class Direction(Enum):
    LEFT = "L"
    RIGHT = "R"

    @classmethod
    def parse(cls, text):
        """Parse a wire direction, 'L' or 'R' in either case."""
        if isinstance(text, str):
            for direction in cls:
                if text.upper() == direction.value:
                    return direction
        raise MalformedRuleset(f"Direction must be 'L' or 'R', got {text!r}")


@dataclass(frozen=True)
class Rule:
    next_state: str
    replacement_symbol: str
    direction: Direction

    def __post_init__(self):
        if not isinstance(self.replacement_symbol, str) or len(self.replacement_symbol) != 1:
            raise MalformedRuleset(
                f"Replacement symbol must be exactly one character, got {self.replacement_symbol!r}"
            )

    def to_dict(self):
        return {
            "next_state": self.next_state,
            "replacement_symbol": self.replacement_symbol,
            "direction": self.direction.value,
        }


def _parse_rule(state, symbol, entry):
    where = f"rule {state!r}/{symbol!r}"
    if not isinstance(entry, dict):
        raise MalformedRuleset(f"{where}: expected an object, got {type(entry).__name__}")
    missing = [field for field in RULE_FIELDS if field not in entry]
    if missing:
        raise MalformedRuleset(f"{where}: missing field(s) {', '.join(missing)}")

    next_state = entry["next_state"]
    if not isinstance(next_state, str) or not next_state:
        raise MalformedRuleset(f"{where}: next_state must be a non-empty string, got {next_state!r}")

    try:
        return Rule(next_state, entry["replacement_symbol"], Direction.parse(entry["direction"]))
    except MalformedRuleset as error:
        raise MalformedRuleset(f"{where}: {error}") from error


class TransitionTable:
    """Immutable (state, symbol) -> Rule lookup built from a ruleset mapping.

    The wire shape is two levels deep: the outer key is the state name, the
    inner key a single-character symbol, and each leaf an object with
    ``next_state``, ``replacement_symbol`` and ``direction``.
    """

    def __init__(self, rules):
        self._rules = {state: dict(by_symbol) for state, by_symbol in rules.items()}

    @classmethod
    def from_mapping(cls, data, states=None, strict=False):
        if strict and states is None:
            raise ValueError("Strict mode needs the declared states to check next states against")
        if not isinstance(data, dict):
            raise MalformedRuleset(f"Ruleset must be an object keyed by state, got {type(data).__name__}")

        rules = {}
        for state, by_symbol in data.items():
            if not isinstance(state, str) or not state:
                raise MalformedRuleset(f"State names must be non-empty strings, got {state!r}")
            if not isinstance(by_symbol, dict):
                raise MalformedRuleset(
                    f"Rules for state {state!r} must be an object keyed by symbol, got {type(by_symbol).__name__}"
                )
            rules[state] = {}
            for symbol, entry in by_symbol.items():
                if not isinstance(symbol, str) or len(symbol) != 1:
                    raise MalformedRuleset(f"Symbols must be single characters, got {symbol!r} in state {state!r}")
                rules[state][symbol] = _parse_rule(state, symbol, entry)

        table = cls(rules)
        if strict:
            table.check_states(states)
        return table

    def to_mapping(self):
        return {
            state: {symbol: rule.to_dict() for symbol, rule in by_symbol.items()}
            for state, by_symbol in self._rules.items()
        }

    def lookup(self, state, symbol):
        """Return the rule for (state, symbol), or None when there is none."""
        return self._rules.get(state, {}).get(symbol)

    def transitions(self):
        """Legal (state, next_state) edges; self-loops are not listed."""
        edges = set()
        for state, _, rule in self:
            if state != rule.next_state:
                edges.add((state, rule.next_state))
        return edges

    def states(self):
        return set(self._rules)

    def referenced_states(self):
        return {rule.next_state for _, _, rule in self}

    def symbols(self):
        found = set()
        for _, symbol, rule in self:
            found.add(symbol)
            found.add(rule.replacement_symbol)
        return found

    def unknown_states(self, states):
        declared = set(states)
        return sorted(self.referenced_states() - declared)

    def check_states(self, states):
        unknown = self.unknown_states(states)
        if unknown:
            raise UnknownState(unknown[0], f"Ruleset refers to undeclared state(s): {', '.join(unknown)}")

    def __iter__(self):
        for state, by_symbol in self._rules.items():
            for symbol, rule in by_symbol.items():
                yield state, symbol, rule

    def __len__(self):
        return sum(len(by_symbol) for by_symbol in self._rules.values())

    def __eq__(self, other):
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return self._rules == other._rules

    def __repr__(self):
        return f"TransitionTable({len(self)} rules, {len(self._rules)} states)"
