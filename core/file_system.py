import codecs
import locale
import shutil
from pathlib import Path
from typing import Iterable, Optional

import config
from .errors import ConfigurationError, LicenseError, TaskError

def resolve_encoding(encoding: Optional[str]) -> str:
    """
    Returns the canonical name of the configured encoding. Without one, the
    platform default is used and a warning is printed.
    """
    if encoding is None:
        default_encoding = codecs.lookup(locale.getpreferredencoding(False)).name
        print(f"  -> WARNING: No encoding set, using platform default '{default_encoding}'.")
        return default_encoding
    try:
        return codecs.lookup(encoding).name
    except LookupError as e:
        raise ConfigurationError(f"Unknown encoding '{encoding}'") from e

def read_text(path: Path, encoding: str) -> str:
    """Reads a file without translating line terminators."""
    with open(path, 'r', encoding=encoding, newline='') as f:
        return f.read()

def write_text(path: Path, content: str, encoding: str):
    """Writes a file without translating line terminators, creating its directory first."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding=encoding, newline='') as f:
        f.write(content)

# --- PROJECT LAYOUT ---

def is_project_folder(directory: Path, markers: Optional[Iterable[str]] = None) -> bool:
    """Checks whether the directory contains any of the files that mark a project."""
    if markers is None:
        markers = config.LICENSE.get('project_markers', [])
    return any((directory / marker).is_file() for marker in markers)

def is_git_root(directory: Path) -> bool:
    return (directory / '.git').is_dir()

def find_license_file(base_dir: Path, filename: str, max_parent_count: int = 0,
                      markers: Optional[Iterable[str]] = None) -> Path:
    """
    Locates the license file, starting in `base_dir` and moving up at most
    `max_parent_count` parent directories. The search never leaves the project:
    it stops at a git root, and at any parent that is neither a project folder
    nor a git root.
    """
    directory = Path(base_dir).absolute().resolve()

    candidate = (directory / filename).resolve()
    if candidate != directory and directory not in candidate.parents:
        raise LicenseError(f"Invalid license filename '{filename}': it points outside the project.")
    if candidate.is_file():
        print(f"  -> Found license file: {candidate}")
        return candidate

    for _ in range(max_parent_count):
        if is_git_root(directory):
            raise LicenseError("Could not find the license file before leaving the git project.")

        directory = directory.parent
        if not is_project_folder(directory, markers) and not is_git_root(directory):
            raise LicenseError("Could not find the license file before leaving the project.")

        candidate = (directory / filename).resolve()
        if candidate.is_file():
            print(f"  -> Found license file: {candidate}")
            return candidate

    raise LicenseError(f"Could not find license file '{filename}'; searched up to '{directory}'.")

def copy_license_file(license_file: Path, target_dir: Path) -> Path:
    """Copies the license file into the target directory, creating it if needed."""
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        return Path(shutil.copy2(license_file, target_dir / license_file.name))
    except OSError as e:
        raise TaskError(f"Could not copy '{license_file}' to '{target_dir}': {e}") from e

# --- PROPERTIES ---

def read_properties(properties_file: Path) -> dict:
    properties = {}
    if not properties_file.is_file():
        return properties
    with open(properties_file, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            name, _, value = line.partition('=')
            properties[name.strip()] = value.strip()
    return properties

def set_property(properties_file: Path, name: str, value: str):
    """
    Records NAME=VALUE in a simple properties file. A property that already
    exists with a different value is an error.
    """
    try:
        properties = read_properties(properties_file)
        existing_value = properties.get(name)
        if existing_value is not None and existing_value != value:
            raise TaskError(f"Property '{name}' is already set to '{existing_value}'.")
        properties[name] = value

        properties_file.parent.mkdir(parents=True, exist_ok=True)
        with open(properties_file, 'w', encoding='utf-8') as f:
            for key, val in properties.items():
                f.write(f"{key}={val}\n")
    except OSError as e:
        raise TaskError(f"Could not update properties file '{properties_file}': {e}") from e
