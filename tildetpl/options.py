"""
Engine options.

Controls how unresolved constructs are reported and how the default
filesystem reader locates included files. Options can be built in code
or loaded from a YAML mapping:

    unknown_include: error      # error | warning | none
    unset_variable: none        # error | warning | none
    include_method: template    # template | cwd | path
    include_path: ./partials
    encoding: utf-8
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from ruamel.yaml import YAML

_yaml = YAML(typ="safe")


class ErrorLevel(enum.Enum):
    """How a missing construct is reported."""
    ERROR = "error"
    WARNING = "warning"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> "ErrorLevel":
        if isinstance(value, ErrorLevel):
            return value
        # YAML booleans: true -> error, false -> none
        if isinstance(value, bool):
            return cls.ERROR if value else cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid error level {value!r}; expected one of: "
                f"{', '.join(level.value for level in cls)}"
            ) from None


class IncludeMethod(enum.Enum):
    """
    Base directory for relative include paths of the filesystem reader.

    TEMPLATE resolves against the directory of the template file; a template
    parsed from a string then has no base and every include is not found.
    CWD resolves against the current working directory.
    PATH resolves against EngineOptions.include_path.
    """
    TEMPLATE = "template"
    CWD = "cwd"
    PATH = "path"


@dataclass(frozen=True)
class EngineOptions:
    """Immutable engine settings."""
    unknown_include: ErrorLevel = ErrorLevel.ERROR
    unset_variable: ErrorLevel = ErrorLevel.NONE
    include_method: IncludeMethod = IncludeMethod.TEMPLATE
    include_path: Optional[Path] = None
    encoding: str = "utf-8"

    def __post_init__(self):
        if self.include_method is IncludeMethod.PATH and self.include_path is None:
            raise ValueError("include_method 'path' requires include_path")

    def with_changes(self, **changes: Any) -> "EngineOptions":
        """Returns a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base_dir: Optional[Path] = None) -> "EngineOptions":
        """
        Builds options from a plain mapping.

        Args:
            data: Mapping with option names as keys
            base_dir: Directory relative include_path values are resolved against

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {"unknown_include", "unset_variable", "include_method", "include_path", "encoding"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown engine option(s): {', '.join(sorted(unknown))}")

        kwargs: dict = {}
        if "unknown_include" in data:
            kwargs["unknown_include"] = ErrorLevel.parse(data["unknown_include"])
        if "unset_variable" in data:
            kwargs["unset_variable"] = ErrorLevel.parse(data["unset_variable"])
        if "include_method" in data:
            try:
                kwargs["include_method"] = IncludeMethod(str(data["include_method"]).strip().lower())
            except ValueError:
                raise ValueError(
                    f"Invalid include_method {data['include_method']!r}; "
                    f"expected one of: {', '.join(m.value for m in IncludeMethod)}"
                ) from None
        if data.get("include_path") is not None:
            include_path = Path(str(data["include_path"]))
            if base_dir is not None and not include_path.is_absolute():
                include_path = base_dir / include_path
            kwargs["include_path"] = include_path
        if "encoding" in data:
            kwargs["encoding"] = str(data["encoding"])

        return cls(**kwargs)


def load_options(path: Path) -> EngineOptions:
    """
    Loads options from a YAML file.

    A missing file yields default options. A relative include_path is
    resolved against the directory of the file.
    """
    path = Path(path)
    if not path.is_file():
        return EngineOptions()
    raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"YAML must be a mapping: {path}")
    return EngineOptions.from_dict(raw, base_dir=path.parent)


DEFAULT_OPTIONS = EngineOptions()


__all__ = [
    "ErrorLevel",
    "IncludeMethod",
    "EngineOptions",
    "DEFAULT_OPTIONS",
    "load_options",
]
