import os
import sys


def resource_path(relative_path: str) -> str:
    """ Get absolute path to a bundled resource, works for dev and for PyInstaller """
    if os.path.isabs(relative_path):
        return relative_path

    # Packaged resources (model files) live under MEIPASS when frozen
    base_path = getattr(sys, "_MEIPASS", None) or os.path.abspath(".")
    return os.path.join(base_path, relative_path)
