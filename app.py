# app.py

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, Confirm

from config.config_loader import DEFAULT_CONFIG, load_config, validate_config
from logger.logger import TraceLogger
from simulator.errors import MalformedRuleset, Stall, StepLimitReached, UnknownState
from simulator.ruleset_io import load_ruleset
from simulator.turing_machine import TuringMachine, Verdict

console = Console()

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_NO_VERDICT = 2
EXIT_SETUP_ERROR = 3

# === Utilities ===
def load_runtime_config(path="config/runtime_config.json"):
    config_path = Path(path)
    if not config_path.exists():
        console.print(f"[yellow]Warning: {config_path} not found, using default configuration.[/yellow]")
        return DEFAULT_CONFIG.copy()
    return load_config(str(config_path))

def parse_states(text):
    return [name.strip() for name in text.split(",") if name.strip()]

def build_machine(table, input_string, config):
    return TuringMachine(
        table,
        config["states"],
        config["accept_state"],
        config["reject_state"],
        tape=input_string,
        start_state=config["start_state"],
        strict=config["strict_stall"],
    )

def run_machine(machine, config, show_tape=False):
    """Run to a verdict, tracing if configured. Returns the matching exit code."""
    trace = TraceLogger(config["output_directory"], config["log_file_prefix"]) if config["trace_enabled"] else None

    def observer(m, rule):
        if trace is not None:
            trace.log_step(m, rule)
        if show_tape:
            console.print(m.render(), markup=False)

    try:
        verdict = machine.run(max_steps=config["max_steps"], observer=observer)
    except StepLimitReached as error:
        console.print(f"[yellow]{escape(str(error))}[/yellow]")
        if machine.stalls:
            console.print(f"[yellow]{machine.stalls:,} step(s) found no matching rule.[/yellow]")
        verdict = None
    except Stall as error:
        console.print(f"[red]Stalled: {escape(str(error))}[/red]")
        verdict = None
    except UnknownState as error:
        console.print(f"[red]Error: {escape(str(error))}[/red]")
        return EXIT_SETUP_ERROR
    finally:
        if trace is not None:
            trace.log_verdict(machine, machine.verdict, config["completion_markers"])
            console.print(f"[cyan]Trace written to {trace.current_log}[/cyan]")

    if verdict is None:
        return EXIT_NO_VERDICT

    console.print(f"Final tape: [bold]{escape(str(machine.tape))}[/bold] (head at {machine.head}, {machine.steps:,} steps)")
    if verdict is Verdict.ACCEPTED:
        console.print("[bold green]String Accepted ✅[/bold green]")
        return EXIT_ACCEPTED
    console.print("[bold red]String Rejected ❌[/bold red]")
    return EXIT_REJECTED


def interactive_main(config):
    console.print("\n[bold cyan]Turing Machine Simulator[/bold cyan]")

    ruleset_path = Prompt.ask("Ruleset file", default=config["ruleset_path"])
    console.print(f"Loading rule set from {ruleset_path}...")
    try:
        table = load_ruleset(ruleset_path)
    except (FileNotFoundError, MalformedRuleset) as error:
        console.print(f"[red]Error: {escape(str(error))}[/red]")
        return EXIT_SETUP_ERROR
    console.print("[green]Ruleset loaded completely[/green]")

    exit_code = EXIT_SETUP_ERROR
    while True:
        input_string = Prompt.ask("Enter input string to test", default="")
        states = parse_states(Prompt.ask(
            "Enter States (eg 's1,s2,s3,sAccept,sReject')", default=",".join(config["states"])))
        accept_state = Prompt.ask("Which is the accept state?", default=config["accept_state"])
        reject_state = Prompt.ask("Which is the reject state?", default=config["reject_state"])

        run_config = dict(config, states=states, accept_state=accept_state, reject_state=reject_state)
        if run_config["start_state"] not in states:
            run_config["start_state"] = None

        try:
            validate_config(run_config)
            if run_config["strict_states"]:
                table.check_states(states)
            machine = build_machine(table, input_string, run_config)
            exit_code = run_machine(machine, run_config)
        except (ValueError, UnknownState) as error:
            console.print(f"[red]Error: {escape(str(error))}[/red]")
            exit_code = EXIT_SETUP_ERROR

        if not Confirm.ask("Test another string?", default=False):
            console.print("[bold green]Goodbye![/bold green]")
            return exit_code

# === CLI Mode for Automation ===
def cli_main(args, config):
    overrides = {}
    if args.ruleset:
        overrides["ruleset_path"] = args.ruleset
    if args.states:
        overrides["states"] = parse_states(args.states)
    if args.start:
        overrides["start_state"] = args.start
    if args.accept:
        overrides["accept_state"] = args.accept
    if args.reject:
        overrides["reject_state"] = args.reject
    if args.max_steps is not None:
        overrides["max_steps"] = args.max_steps or None
    if args.strict:
        overrides["strict_stall"] = True
        overrides["strict_states"] = True
    if args.trace:
        overrides["trace_enabled"] = True
    config = dict(config, **overrides)
    if "states" in overrides and config["start_state"] not in config["states"] and not args.start:
        config["start_state"] = None

    try:
        validate_config(config)
        table = load_ruleset(
            config["ruleset_path"], states=config["states"], strict=config["strict_states"])
        machine = build_machine(table, args.input, config)
    except (FileNotFoundError, ValueError, TypeError, UnknownState) as error:
        console.print(f"[red]Error: {escape(str(error))}[/red]")
        return EXIT_SETUP_ERROR

    return run_machine(machine, config, show_tape=args.show_tape)

def main(argv=None):
    parser = argparse.ArgumentParser(description="Single-tape Turing Machine Simulator")
    parser.add_argument("--config", default="config/runtime_config.json", help="Runtime config JSON file")
    parser.add_argument("--ruleset", help="Ruleset JSON file")
    parser.add_argument("--input", help="Input string to run (omit for interactive mode)")
    parser.add_argument("--states", help="Comma separated states, e.g. s1,s2,sAccept,sReject")
    parser.add_argument("--start", help="Start state (default: first declared state)")
    parser.add_argument("--accept", help="Accept state")
    parser.add_argument("--reject", help="Reject state")
    parser.add_argument("--max-steps", type=int, help="Step budget, 0 for unbounded")
    parser.add_argument("--strict", action="store_true", help="Raise on stalls and undeclared next states")
    parser.add_argument("--trace", action="store_true", help="Write a JSON lines step trace")
    parser.add_argument("--show-tape", action="store_true", help="Print the tape after every step")
    args = parser.parse_args(argv)

    try:
        config = load_runtime_config(args.config)
    except (ValueError, TypeError) as error:
        console.print(f"[red]Invalid configuration: {escape(str(error))}[/red]")
        return EXIT_SETUP_ERROR

    if args.input is not None:
        return cli_main(args, config)
    return interactive_main(config)

if __name__ == "__main__":
    sys.exit(main())
