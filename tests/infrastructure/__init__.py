"""
Shared test helpers.

Modules:
- file_utils: creating template files on disk
"""

from .file_utils import write, write_template

__all__ = ["write", "write_template"]
