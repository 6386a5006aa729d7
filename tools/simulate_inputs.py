# tools/simulate_inputs.py

import argparse
import os
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn
from rich.markup import escape
from rich.table import Table

from simulator.errors import MalformedRuleset, UnknownState
from simulator.evaluator import ERROR, NO_VERDICT, evaluate_inputs
from simulator.ruleset_io import load_ruleset

console = Console()

VERDICT_COLORS = {
    "accepted": "green",
    "rejected": "red",
    NO_VERDICT: "yellow",
    ERROR: "red",
}

# === Utility Loaders ===
def load_inputs(inputs_file):
    """One input string per line; a line holding only '_' stands for the empty string."""
    with open(inputs_file, "r", encoding="utf-8") as f:
        lines = [line.rstrip("\n") for line in f]
    return ["" if line == "_" else line for line in lines if line]

def console_message(msg):
    console.print(f"[{Path(os.getcwd()).name}] {msg}", markup=False)

def results_table(results):
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Input")
    table.add_column("Verdict", justify="center")
    table.add_column("Steps", justify="right")
    table.add_column("Final Tape")

    for entry in results:
        color = VERDICT_COLORS.get(entry["verdict"], "white")
        table.add_row(
            escape(repr(entry["input"])),
            f"[{color}]{entry['verdict'].upper()}[/{color}]",
            f"{entry['steps']:,}",
            escape(entry["tape"] or "_"),
        )
    return table

# === Main Simulation Runner ===
def simulate_inputs(ruleset_path, inputs, states, accept_state, reject_state,
                    start_state=None, max_steps=10000, strict=False):
    table = load_ruleset(ruleset_path, states=states, strict=strict)
    console_message(f"Loaded {len(table):,} rules. {len(inputs):,} inputs pending.")

    with Progress(
            SpinnerColumn(),
            BarColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            TextColumn("{task.completed}/{task.total} Inputs"),
            TimeElapsedColumn(),
            console=console
    ) as progress:
        task = progress.add_task("[cyan]Simulating...", total=len(inputs))
        results = evaluate_inputs(
            table, inputs, states, accept_state, reject_state,
            start_state=start_state, max_steps=max_steps, strict=strict,
            on_result=lambda entry: progress.update(task, advance=1),
        )

    console.print(results_table(results))
    accepted = sum(1 for entry in results if entry["verdict"] == "accepted")
    console_message(f"[SUCCESS] {accepted:,} of {len(results):,} inputs accepted.")
    return results


# === CLI ===
def main(argv=None):
    parser = argparse.ArgumentParser(description="Run one Turing machine ruleset against many input strings.")
    parser.add_argument("--ruleset", required=True, help="Ruleset JSON file")
    parser.add_argument("--inputs", required=True, help="Text file with one input string per line ('_' for empty)")
    parser.add_argument("--states", required=True, help="Comma separated states, e.g. s1,s2,sAccept,sReject")
    parser.add_argument("--accept", required=True, help="Accept state")
    parser.add_argument("--reject", required=True, help="Reject state")
    parser.add_argument("--start", help="Start state (default: first declared state)")
    parser.add_argument("--max_steps", type=int, default=10000, help="Maximum steps per input before giving up")
    parser.add_argument("--strict", action="store_true", help="Raise on undeclared next states and count stalls as failures")
    args = parser.parse_args(argv)

    states = [s.strip() for s in args.states.split(",") if s.strip()]
    try:
        simulate_inputs(
            args.ruleset,
            load_inputs(args.inputs),
            states,
            args.accept,
            args.reject,
            start_state=args.start,
            max_steps=args.max_steps,
            strict=args.strict
        )
    except (FileNotFoundError, MalformedRuleset, UnknownState) as error:
        console_message(f"[ERROR] {error}")
        return 1
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
