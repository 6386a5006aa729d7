import json
import os
from datetime import datetime

DEFAULT_CONFIG = {
    "ruleset_path": "rulesets/ruleset.json",
    "states": ["s1", "s2", "sAccept", "sReject"],
    "start_state": None,
    "accept_state": "sAccept",
    "reject_state": "sReject",
    "max_steps": 1_000_000,
    "strict_stall": False,
    "strict_states": False,
    "completion_markers": ["x", "y", "z"],
    "trace_enabled": False,
    "output_directory": "logs/",
    "log_file_prefix": "trace_"
}

# Expected types for validation
CONFIG_SCHEMA = {
    "ruleset_path": str,
    "states": list,
    "start_state": (str, type(None)),
    "accept_state": str,
    "reject_state": str,
    "max_steps": (int, type(None)),
    "strict_stall": bool,
    "strict_states": bool,
    "completion_markers": list,
    "trace_enabled": bool,
    "output_directory": str,
    "log_file_prefix": str
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        if not isinstance(config[key], expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    # bool is an int subclass
    max_steps = config["max_steps"]
    if isinstance(max_steps, bool) or (max_steps is not None and max_steps <= 0):
        raise ValueError(f"max_steps must be a positive integer or null, got {max_steps!r}.")

    states = config["states"]
    if not states or not all(isinstance(s, str) and s for s in states):
        raise ValueError("states must be a non-empty list of state names.")
    for key in ["accept_state", "reject_state", "start_state"]:
        if config[key] is not None and config[key] not in states:
            raise ValueError(f"Config key '{key}' names '{config[key]}', which is not in states {states}.")

    if not all(isinstance(m, str) and len(m) == 1 for m in config["completion_markers"]):
        raise ValueError("completion_markers must be single characters.")

def load_config(path="config/runtime_config.json"):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    validate_config(config)

    if config["trace_enabled"]:
        os.makedirs(config["output_directory"], exist_ok=True)

    print(f"[{datetime.now()}] Loaded config:")
    for key, value in config.items():
        print(f"  {key}: {value}")

    return config

def save_config(config, path="config/runtime_config.json"):
    validate_config(config)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
