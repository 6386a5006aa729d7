import argparse

from simulator.errors import MalformedRuleset
from simulator.ruleset_io import load_ruleset


def format_action(rule):
    """Compact cell notation: written symbol, direction, next state (e.g. 'bR s2')."""
    if rule is None:
        return "-"
    return f"{rule.replacement_symbol}{rule.direction.value} {rule.next_state}"


def table_rows(table):
    """Return (symbols, rows) with one row of actions per state that has rules."""
    symbols = sorted({symbol for _, symbol, _ in table})
    rows = []
    for state in sorted(table.states()):
        rows.append([state] + [format_action(table.lookup(state, symbol)) for symbol in symbols])
    return symbols, rows


def pretty_print_ruleset(table, states=None):
    """Print the ruleset as a state x symbol table, in plain text and LaTeX."""
    symbols, rows = table_rows(table)

    # === Terminal Human-Readable Table ===
    print("\n=== Transition Table ===")
    print("\t".join(["State"] + symbols))
    for row in rows:
        print("\t".join(row))

    # === LaTeX Table Output ===
    print("\n=== LaTeX Table ===")
    print(r"\begin{array}{c|" + "c" * len(symbols) + "}")
    print("State/Symbol & " + " & ".join([f"\\text{{{s}}}" for s in symbols]) + r" \\ \hline")
    for row in rows:
        print(" & ".join(f"\\text{{{cell}}}" for cell in row) + r" \\")
    print(r"\end{array}")

    print("\n=== Transitions ===")
    for source, target in sorted(table.transitions()):
        print(f"{source} -> {target}")

    if states is not None:
        unknown = table.unknown_states(states)
        if unknown:
            print(f"\n[WARNING] Undeclared next state(s): {', '.join(unknown)}")
        else:
            print("\n[INFO] All next states are declared.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Turing Machine Ruleset Inspector")
    parser.add_argument("--ruleset", default="rulesets/ruleset.json", help="Ruleset JSON file")
    parser.add_argument("--states", help="Comma separated declared states to check next states against")
    args = parser.parse_args(argv)

    try:
        table = load_ruleset(args.ruleset)
    except (FileNotFoundError, MalformedRuleset) as error:
        print(f"[ERROR] {error}")
        return 1

    print(f"[INFO] Ruleset {args.ruleset}")
    print(f"  States with rules: {len(table.states())}")
    print(f"  Rules: {len(table)}")

    states = [s.strip() for s in args.states.split(",") if s.strip()] if args.states else None
    pretty_print_ruleset(table, states)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
