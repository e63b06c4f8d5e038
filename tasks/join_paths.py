# tasks/join_paths.py

import os
from pathlib import Path

from core.errors import TaskError
from core.file_system import set_property

def run_join_paths(paths, property_name=None, properties_file=None):
    """
    Joins paths with the platform's path separator, for tools that expect a
    single search-path argument. The result is printed and, if a property name
    is given, recorded in the properties file.
    """
    if property_name and not properties_file:
        raise TaskError(f"No properties file given for property '{property_name}'.")

    result = os.pathsep.join(str(path) for path in paths)
    print(result)

    if property_name:
        set_property(Path(properties_file), property_name, result)
        print(f"  -> Set property '{property_name}' in '{properties_file}'.")
    return result
