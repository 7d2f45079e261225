"""
grammar_conventions/config.py
═════════════════════════════

Check configuration records and the JSON loader that produces them.

A configuration file lists the checks to run, each with its options::

    {
      "checks": [
        {"name": "HeaderCheck", "headerFile": "LICENSE-header.txt"},
        {"name": "OptionsSpaceCheck", "withSpacesAroundEqual": false},
        {"name": "TokensOrderCheck", "severity": "warning"},
        {"name": "OptionsIndentationCheck", "tokens": ["OPTIONS"]}
      ]
    }

``name``, ``severity`` and ``tokens`` (alias ``kinds``) are reserved; all
other keys are handed to the check as options.  A relative ``headerFile``
is resolved against the directory of the configuration file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from grammar_conventions.diagnostics import Severity
from grammar_conventions.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

_RESERVED_KEYS = frozenset({"name", "severity", "tokens", "kinds"})
_PATH_OPTIONS = frozenset({"headerFile"})


@dataclass
class CheckConfig:
    """Configuration of one check instance."""
    name: str
    options: Dict[str, Any] = field(default_factory=dict)
    kinds: Tuple[str, ...] = ()
    severity: Severity = Severity.ERROR

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def get_bool(self, key: str, default: bool) -> bool:
        """Read a boolean option; accepts JSON booleans and "true"/"false"."""
        value = self.options.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise InvalidConfiguration(
            f"option {key!r} of {self.name} must be a boolean, got {value!r}"
        )


def _split_kinds(raw: Any, check: str) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(part.strip() for part in raw.split(",") if part.strip())
    if isinstance(raw, (list, tuple)) and all(isinstance(k, str) for k in raw):
        return tuple(raw)
    raise InvalidConfiguration(
        f"'tokens' of {check} must be a list of node-kind names, got {raw!r}"
    )


def check_config_from_dict(
    data: Mapping[str, Any],
    base_dir: Optional[Path] = None,
) -> CheckConfig:
    """Build a ``CheckConfig`` from one entry of the ``checks`` list."""
    if not isinstance(data, Mapping):
        raise InvalidConfiguration(f"check entry must be an object, got {data!r}")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise InvalidConfiguration(f"check entry without a name: {dict(data)!r}")

    try:
        severity = Severity.parse(data.get("severity", Severity.ERROR))
    except ValueError as exc:
        raise InvalidConfiguration(f"{name}: {exc}") from None

    raw_kinds = data.get("tokens", data.get("kinds"))
    options = {k: v for k, v in data.items() if k not in _RESERVED_KEYS}
    for key in _PATH_OPTIONS & options.keys():
        value = options[key]
        if base_dir is not None and isinstance(value, str) and value:
            path = Path(value).expanduser()
            if not path.is_absolute():
                options[key] = str(base_dir / path)

    return CheckConfig(
        name=name,
        options=options,
        kinds=_split_kinds(raw_kinds, name),
        severity=severity,
    )


def config_from_dict(
    data: Mapping[str, Any],
    base_dir: Optional[Path] = None,
) -> List[CheckConfig]:
    if not isinstance(data, Mapping) or not isinstance(data.get("checks"), list):
        raise InvalidConfiguration(
            "configuration must be an object with a 'checks' list",
        )
    return [check_config_from_dict(entry, base_dir) for entry in data["checks"]]


def load_config(path: Union[str, Path]) -> List[CheckConfig]:
    """Read a JSON configuration file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except OSError as exc:
        raise InvalidConfiguration(f"cannot read configuration {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidConfiguration(
            f"configuration {path} is not valid JSON: {exc}",
        ) from exc

    configs = config_from_dict(data, base_dir=path.resolve().parent)
    logger.info("loaded %d check(s) from %s", len(configs), path)
    return configs


__all__ = [
    "CheckConfig",
    "check_config_from_dict",
    "config_from_dict",
    "load_config",
]
