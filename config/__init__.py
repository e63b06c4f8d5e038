import copy
import yaml
from pathlib import Path

from core.errors import ConfigurationError

# --- Core Configuration Loading ---

CONFIG_DIR = Path(__file__).parent
DEFAULTS_FILENAME = 'defaults.yaml'

def load_yaml_config(filename):
    """Loads a YAML file from the config directory."""
    with open(CONFIG_DIR / filename, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}

DEFAULTS = load_yaml_config(DEFAULTS_FILENAME)

# --- Expose the default sections for easy access ---
SITE_INDEX = DEFAULTS.get('SITE_INDEX', {})
FIX_ANCHORS = DEFAULTS.get('FIX_ANCHORS', {})
LICENSE = DEFAULTS.get('LICENSE', {})

# --- REPORTING ---
REPORT_DIR = Path(DEFAULTS.get('REPORT_DIR', './html/'))
SITE_INDEX_REPORT_FILENAME = "site_index_report.html"
FIX_ANCHORS_REPORT_FILENAME = "fix_anchors_report.html"

def load_settings(path=None) -> dict:
    """
    Returns the default settings, with the sections of the given YAML file
    merged over them key by key.
    """
    settings = copy.deepcopy(DEFAULTS)
    if path is None:
        return settings

    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            overrides = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Could not read config file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file '{path}': {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Config file '{path}' must contain a mapping")

    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(settings.get(key), dict):
            settings[key].update(value)
        else:
            settings[key] = value
    return settings
