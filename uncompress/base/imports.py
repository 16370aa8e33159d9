"""
uncompress.base.imports - supporting functions for dynamic imports

(c) 2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import sys
from importlib import import_module
from pathlib import Path
from importlib.resources import files


def import_all(module_name):
    """Import all plugin modules in a package directory."""
    module = sys.modules[module_name]
    vars(module).update({
        Path(_file.name).stem: import_module(
            '.' + Path(_file.name).stem,
            module.__package__
        )
        for _file in files(module_name).iterdir()
        if (
            _file.name.endswith('.py')
            and not _file.name.startswith('_')
            and not _file.name.startswith('.')
        )
    })
