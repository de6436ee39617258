"""
Core configuration management for AnchorFlow

A configuration file is plain text with one ``key=value`` pair per line.
Values may reference environment variables or earlier keys (``$HOME``,
``${outDirectory}``) and a leading ``~``. Lines containing ``module load``
request environment modules for the analysis jobs instead of being stored.
"""

import logging
import os
import re
from collections import abc
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import yaml

from ..exceptions import MissingFileError
from .options import (DEFAULT_ASSEMBLY, NUMERIC_OPTIONS, OPTIONS,
                      YES_NO_OPTIONS, default_for)

logger = logging.getLogger(__name__)

MODULE_DIRECTIVE = "module load"

_UNESCAPED_EQUALS = re.compile(r"(?<!\\)=")
_VARIABLE = re.compile(
    r"\\\$|\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))"
)
_MODULE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.+/-]*$")


@dataclass(frozen=True, eq=False)
class Config(abc.Mapping):
    """Resolved configuration of a run, immutable once loaded"""

    entries: Mapping[str, str] = field(default_factory=dict)
    modules: Tuple[str, ...] = ()
    source: Optional[Path] = None

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        object.__setattr__(self, "modules", tuple(self.modules))
        if self.source is not None:
            object.__setattr__(self, "source", Path(self.source))

    def __getitem__(self, key: str) -> str:
        if key in self.entries:
            return self.entries[key]
        if key in OPTIONS:
            return default_for(key)
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        yield from OPTIONS
        for key in self.entries:
            if key not in OPTIONS:
                yield key

    def __len__(self) -> int:
        return len(OPTIONS) + len(self.unknown_keys())

    def is_set(self, key: str) -> bool:
        """True when the option holds a non-empty value"""
        return bool(self.get(key, ""))

    def unknown_keys(self) -> List[str]:
        return [key for key in self.entries if key not in OPTIONS]

    @property
    def anchor(self) -> str:
        return self["anchor"]

    @property
    def out_directory(self) -> str:
        return self["outDirectory"]

    @property
    def assembly(self) -> str:
        """Genome assembly, falling back to hg19 when left empty"""
        return self["assembly"] or DEFAULT_ASSEMBLY

    @property
    def tracks(self) -> str:
        return self["tracks"]

    def replace(self, **updates: str) -> "Config":
        """Return a copy with some values overridden"""
        entries = dict(self.entries)
        entries.update(updates)
        return Config(entries=entries, modules=self.modules, source=self.source)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": str(self.source) if self.source else None,
            "modules": list(self.modules),
            "options": {key: self[key] for key in OPTIONS},
            "extra": {key: self.entries[key] for key in self.unknown_keys()},
        }


def expand_value(
    value: str,
    variables: Mapping[str, str],
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Expand ``$NAME``/``${NAME}`` references and a leading ``~``

    Names are looked up in previously loaded options first and then in the
    environment. Unknown names expand to an empty string, as in a shell.
    ``\\$`` keeps a literal dollar sign.
    """
    if environ is None:
        environ = os.environ

    def _lookup(match: "re.Match") -> str:
        if match.group(0) == "\\$":
            return "$"
        name = match.group("braced") or match.group("bare")
        if name in variables:
            return variables[name]
        if name in environ:
            return environ[name]
        logger.warning(f"Undefined variable ${name} expands to an empty string")
        return ""

    expanded = _VARIABLE.sub(_lookup, value)
    if expanded.startswith("~"):
        expanded = os.path.expanduser(expanded)
    return expanded


def parse_module_directive(line: str) -> List[str]:
    """Extract the module names of a ``module load`` line"""
    prefix, _, remainder = line.partition(MODULE_DIRECTIVE)
    if prefix.strip():
        logger.warning(f"Ignoring module directive with leading command: {line!r}")
        return []

    names = []
    for name in remainder.split():
        if _MODULE_NAME.match(name):
            names.append(name)
        else:
            logger.warning(f"Rejected module name {name!r} in line: {line!r}")
    return names


def split_assignment(line: str) -> Optional[Tuple[str, str]]:
    """Split ``key=value`` on the first unescaped ``=``, unescaping the key only"""
    match = _UNESCAPED_EQUALS.search(line)
    if match is None:
        return None
    key = line[: match.start()].replace("\\=", "=")
    value = line[match.end():]
    return key, value


def load_config(
    config_file: Union[str, Path], environ: Optional[Mapping[str, str]] = None
) -> Config:
    """Load configuration from a key=value file"""
    config_path = Path(config_file)

    if not config_path.is_file():
        raise MissingFileError(config_path, "Configuration file")

    logger.info(f"Loading configuration from {config_path}")

    values: Dict[str, str] = {}
    modules: List[str] = []

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise MissingFileError(
            config_path, "Configuration file", reason="is not readable"
        ) from e

    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if MODULE_DIRECTIVE in line:
            modules.extend(parse_module_directive(stripped))
            continue

        assignment = split_assignment(line)
        if assignment is None:
            logger.debug(f"Skipping line {line_number}: {line!r}")
            continue

        key, raw_value = assignment
        if key in values:
            logger.debug(f"Option {key} redefined on line {line_number}")
        values[key] = expand_value(raw_value, values, environ)

    config = Config(entries=values, modules=tuple(modules), source=config_path)

    unknown = config.unknown_keys()
    if unknown:
        logger.debug(f"Unrecognised options kept as-is: {unknown}")

    return config


def save_config(config: Config, output_file: Union[str, Path]) -> None:
    """Save a snapshot of the resolved configuration to YAML"""
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Configuration saved to {output_path}")


def validate_config(config: Config) -> List[str]:
    """Return non-fatal issues found in option values"""
    issues = []

    for key in NUMERIC_OPTIONS:
        value = config[key]
        if not value:
            continue
        try:
            float(value)
        except ValueError:
            issues.append(f"{key} should be numeric, got {value!r}")

    for key in YES_NO_OPTIONS:
        value = config[key]
        if value and value not in ("y", "n"):
            issues.append(f"{key} should be 'y' or 'n', got {value!r}")

    return issues
