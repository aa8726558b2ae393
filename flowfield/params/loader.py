"""
YAML reading and writing for EngineConfig.

A config file mirrors ``EngineConfig.to_dict()``: one mapping per parameter
group, any group or key may be omitted.

    grid:
      rows: 64
      cols: 48
    integration:
      variant: priority

Single values can also be overridden with dotted ``group.key=value``
assignments (the CLI ``--set`` option); the value is read as a YAML scalar,
so ``grid.rows=64`` gives an int and ``flow.centered=false`` a bool.
"""

from pathlib import Path
from typing import Any

import yaml

from flowfield.params.schema import EngineConfig, ValidationError


def parse_config(text: str, source: str = "<string>") -> EngineConfig:
    """Build a config from YAML text.

    Raises:
        ValidationError: If the document is not a mapping of groups, or a
            value fails validation
        yaml.YAMLError: If the YAML is malformed
    """
    data = yaml.safe_load(text)
    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise ValidationError(
            f"{source}: top level must be a mapping of parameter groups, "
            f"got {type(data).__name__}"
        )
    return EngineConfig.from_dict(data)


def load_config(path: str | Path) -> EngineConfig:
    """Read a config file. An empty file gives the defaults.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: See parse_config
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    return parse_config(path.read_text(), source=str(path))


def save_config(config: EngineConfig, path: str | Path) -> None:
    """Write a config so that load_config(path) == config."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False))


def parse_assignment(assignment: str) -> dict[str, dict[str, Any]]:
    """Turn ``"group.key=value"`` into ``{"group": {"key": value}}``.

    Raises:
        ValidationError: If the assignment is not of that form
    """
    name, sep, raw = assignment.partition("=")
    group, dot, key = name.strip().partition(".")
    if not sep or not dot or not group or not key or "." in key:
        raise ValidationError(
            f"override must look like group.key=value, got {assignment!r}"
        )
    return {group: {key: yaml.safe_load(raw) if raw.strip() else None}}


def load_config_with_overrides(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    assignments: list[str] | None = None,
) -> EngineConfig:
    """Defaults or a config file, then group overrides, then assignments.

    Example:
        config = load_config_with_overrides(
            "arena.yaml",
            overrides={"grid": {"rows": 64}},
            assignments=["integration.variant=priority"],
        )
    """
    config = load_config(path) if path is not None else EngineConfig()

    updates: dict[str, dict[str, Any]] = {}
    for group, values in (overrides or {}).items():
        updates.setdefault(group, {}).update(values)
    for assignment in assignments or ():
        for group, values in parse_assignment(assignment).items():
            updates.setdefault(group, {}).update(values)

    return config.with_updates(**updates) if updates else config


def merge_configs(base: EngineConfig, override: EngineConfig) -> EngineConfig:
    """Layer ``override`` on ``base``.

    A value in ``override`` wins only where it differs from the default, so
    an override built from a partial file leaves the rest of ``base`` alone.
    """
    defaults = EngineConfig().to_dict()
    changed = {
        group: {k: v for k, v in values.items() if v != defaults[group][k]}
        for group, values in override.to_dict().items()
    }
    return base.with_updates(**{g: v for g, v in changed.items() if v})
