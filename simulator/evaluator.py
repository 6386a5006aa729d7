from simulator.errors import Stall, StepLimitReached, UnknownState
from simulator.turing_machine import TuringMachine

NO_VERDICT = "no verdict"
ERROR = "error"


def evaluate_input(table, input_string, states, accept_state, reject_state,
                   start_state=None, max_steps=10000, strict=False):
    machine = TuringMachine(
        table, states, accept_state, reject_state,
        tape=input_string, start_state=start_state, strict=strict,
    )
    error = None
    try:
        verdict = machine.run(max_steps=max_steps).value
    except (StepLimitReached, Stall):
        verdict = NO_VERDICT
    except UnknownState as exc:
        verdict = ERROR
        error = str(exc)

    return {
        "input": input_string,
        "verdict": verdict,
        "error": error,
        "steps": machine.steps,
        "stalls": machine.stalls,
        "state": machine.state,
        "head": machine.head,
        "tape": str(machine.tape),
    }


def evaluate_inputs(table, inputs, states, accept_state, reject_state,
                    start_state=None, max_steps=10000, strict=False, on_result=None):
    """
    Run every input string on a fresh machine sharing one transition table.
    on_result: optional callback invoked with each result dict as it completes
    """
    results = []
    for input_string in inputs:
        entry = evaluate_input(
            table, input_string, states, accept_state, reject_state,
            start_state=start_state, max_steps=max_steps, strict=strict,
        )
        results.append(entry)
        if on_result is not None:
            on_result(entry)
    return results
