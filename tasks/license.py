# tasks/license.py

from pathlib import Path

from core.file_system import copy_license_file, find_license_file

def run_license(base_dir=".", filename="LICENSE.txt", max_parent_count=0, target_dir="build/META-INF",
                markers=None, skip=False):
    """
    Locates the project's license file and copies it into the build directory,
    so it is shipped with the built artifacts.
    """
    if skip:
        print("Adding the license file is skipped.")
        return None

    print(f"🚀 Looking for '{filename}' from '{base_dir}'...")
    license_file = find_license_file(Path(base_dir), filename, max_parent_count, markers)

    copied = copy_license_file(license_file, Path(target_dir))
    print(f"✅ Added license file '{license_file}' as '{copied}'.")
    return copied
