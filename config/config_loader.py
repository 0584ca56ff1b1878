import json
import os
from datetime import datetime

from simulator.machines import EXAMPLES
from simulator.turing_machine import ACTION_MODELS

DEFAULT_CONFIG_PATH = "config/runtime_config.json"

DEFAULT_CONFIG = {
    "machine": "add_one_decomposed",
    "action_model": "auto",
    "max_steps": 0,
    "trace": False,
    "trace_to_console": False,
    "log_frequency": 1,
    "tape_window": 10,
    "output_directory": "logs/",
    "log_file_prefix": "tm_"
}

# Expected types for validation
CONFIG_SCHEMA = {
    "machine": str,
    "action_model": str,
    "max_steps": int,
    "trace": bool,
    "trace_to_console": bool,
    "log_frequency": int,
    "tape_window": int,
    "output_directory": str,
    "log_file_prefix": str
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass; keep the two apart
        if not isinstance(config[key], expected_type) or (expected_type is int and isinstance(config[key], bool)):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    if config["action_model"] not in ("auto",) + ACTION_MODELS:
        raise ValueError(f"action_model must be 'auto' or one of {ACTION_MODELS}, got '{config['action_model']}'.")
    if config["machine"] not in EXAMPLES:
        raise ValueError(f"Unknown machine '{config['machine']}'. Choose from: {', '.join(EXAMPLES)}")
    for key in ("max_steps", "log_frequency", "tape_window"):
        if config[key] < 0:
            raise ValueError(f"Config key '{key}' must not be negative.")
    if config["log_frequency"] == 0:
        raise ValueError("log_frequency must be at least 1.")

def load_config(path=None, verbose=False):
    """Merge a JSON config file over DEFAULT_CONFIG.

    An explicit path must exist; when no path is given and the default file is
    absent, the defaults are used as-is.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
        user_config = {}
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                user_config = json.load(f)
    else:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found at: {path}")
        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    # Validate schema
    validate_config(config)

    # Validate output directory
    os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config

def save_config(config, path=DEFAULT_CONFIG_PATH):
    validate_config(config)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
