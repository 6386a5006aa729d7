import json
import os
from datetime import datetime, timezone


class TraceLogger:
    """JSON-lines trace of a single run, one file per run."""

    def __init__(self, output_directory="logs/", log_file_prefix="trace_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.started = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.started}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def log(self, entry: dict):
        """Log a single entry to the trace file."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")

    def log_batch(self, entries: list):
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log_step(self, machine, rule):
        """Record the configuration after a step. A None rule is a stall."""
        self.log({
            "event": "step",
            "step": machine.steps,
            "state": machine.state,
            "head": machine.head,
            "tape": str(machine.tape),
            "stall": rule is None,
            "written": None if rule is None else rule.replacement_symbol,
            "direction": None if rule is None else rule.direction.value,
        })

    def log_verdict(self, machine, verdict, markers=("x", "y", "z")):
        self.log({
            "event": "verdict",
            "verdict": None if verdict is None else verdict.value,
            "steps": machine.steps,
            "stalls": machine.stalls,
            "state": machine.state,
            "head": machine.head,
            "tape": str(machine.tape),
            "completed": machine.is_completed(markers),
        })
