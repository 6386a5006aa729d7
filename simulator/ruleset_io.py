import json
from pathlib import Path

from simulator.errors import MalformedRuleset
from simulator.transition_table import TransitionTable


def decode_ruleset(stream, states=None, strict=False):
    """Decode a JSON ruleset from a text stream into a TransitionTable."""
    try:
        data = json.load(stream)
    except json.JSONDecodeError as error:
        raise MalformedRuleset(f"Invalid JSON format: {error}") from error
    return TransitionTable.from_mapping(data, states=states, strict=strict)


def load_ruleset(path, states=None, strict=False):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ruleset file not found at: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return decode_ruleset(f, states=states, strict=strict)


def save_ruleset(table, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(table.to_mapping(), f, indent=2)
    return str(path)
