import copy
import json
import os
import sys

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".s3client")

DEFAULT_CONFIG = {
    "general": {
        "colors": True,
        "verbose": False,
        "history": True,
        "cat_warn_size": 1024 * 1024,
    }
}


def load_config(config_path=None):
    """Load config from file, merge with defaults."""
    if config_path is None:
        config_path = os.path.join(CONFIG_DIR, "config.json")

    config = copy.deepcopy(DEFAULT_CONFIG)

    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                user_config = json.load(f)
            # Merge user config over defaults
            for section, values in user_config.items():
                if section in config and isinstance(config[section], dict) and isinstance(values, dict):
                    config[section].update(values)
                else:
                    config[section] = values
            if config["general"].get("verbose"):
                print(f"[Loaded config from {config_path}]", file=sys.stderr)
        except (json.JSONDecodeError, OSError, AttributeError) as e:
            print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)

    return config


def get_setting(config, name):
    """Read a value of the general section, falling back to the default."""
    return config.get("general", {}).get(name, DEFAULT_CONFIG["general"][name])


def history_path():
    return os.path.join(CONFIG_DIR, "history")
