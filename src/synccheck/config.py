"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from synccheck.index import DEFAULT_CHUNK_DEPTH, MAX_CHUNK_DEPTH, WalkerConfig

CONFIG_FILE_NAME = "synccheck.toml"

_KNOWN_KEYS: dict[str, tuple[str, ...]] = {
    "index": ("depth", "exclude"),
    "audit": ("log_path",),
}


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """Snapshot settings shared by every index build."""

    depth: int
    exclude: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class AuditConfig:
    """Audit log destination; None disables audit logging."""

    log_path: Path | None


@dataclass(slots=True, frozen=True)
class SyncCheckConfig:
    """Fully merged configuration."""

    index: IndexConfig
    audit: AuditConfig

    def walker_config(self) -> WalkerConfig:
        """Return the walker settings for this configuration."""
        return WalkerConfig(exclude=self.index.exclude, depth=self.index.depth)

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "index": {
                "depth": self.index.depth,
                "exclude": list(self.index.exclude),
            },
            "audit": {
                "log_path": str(self.audit.log_path) if self.audit.log_path else None,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    depth: int | None = None
    exclude: tuple[str, ...] = ()
    audit_log: Path | None = None


def default_config() -> SyncCheckConfig:
    """Build the built-in default configuration."""
    return SyncCheckConfig(
        index=IndexConfig(depth=DEFAULT_CHUNK_DEPTH, exclude=()),
        audit=AuditConfig(log_path=None),
    )


def load_config_file(config_path: Path | None) -> tuple[dict[str, object], Path | None]:
    """Load an explicit config file, or synccheck.toml from the working directory.

    Returns the parsed table and the directory relative paths resolve against.
    An explicit path that does not exist raises FileNotFoundError.
    """
    if config_path is None:
        candidate = Path.cwd() / CONFIG_FILE_NAME
        if not candidate.exists():
            return {}, None
        config_path = candidate
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    return payload, config_path.resolve().parent


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    for field in value:
        if field not in _KNOWN_KEYS[key]:
            raise ValueError(f"Config field '{key}.{field}' is not supported.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise ValueError(
                f"Config field '{section}.{field}' must contain only non-empty strings."
            )
        output.append(item)
    return tuple(output)


def merge_config(
    base: SyncCheckConfig,
    file_payload: dict[str, object],
    overrides: CliOverrides,
    base_dir: Path | None = None,
) -> SyncCheckConfig:
    """Merge defaults, config file, then CLI overrides."""
    for section in file_payload:
        if section not in _KNOWN_KEYS:
            raise ValueError(f"Config section '{section}' is not supported.")
    index_payload = _get_table(file_payload, "index")
    audit_payload = _get_table(file_payload, "audit")

    depth = _optional_depth(index_payload.get("depth"), "index.depth", base.index.depth)
    exclude = base.index.exclude
    if "exclude" in index_payload:
        exclude = _tuple_of_strings(index_payload["exclude"], "index", "exclude")

    log_path = base.audit.log_path
    if "log_path" in audit_payload:
        raw_log_path = audit_payload["log_path"]
        if not isinstance(raw_log_path, str) or not raw_log_path:
            raise ValueError("Config field 'audit.log_path' must be a non-empty string.")
        log_path = Path(raw_log_path)
        if base_dir is not None and not log_path.is_absolute():
            log_path = base_dir / log_path

    merged = SyncCheckConfig(
        index=IndexConfig(depth=depth, exclude=exclude),
        audit=AuditConfig(log_path=log_path),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: SyncCheckConfig, overrides: CliOverrides) -> SyncCheckConfig:
    """Apply command-line overrides at highest precedence.

    Excluded names from the command line extend the configured list.
    """
    depth = _optional_depth(overrides.depth, "overrides.depth", config.index.depth)
    exclude = tuple(dict.fromkeys(config.index.exclude + overrides.exclude))
    log_path = overrides.audit_log or config.audit.log_path
    return SyncCheckConfig(
        index=IndexConfig(depth=depth, exclude=exclude),
        audit=AuditConfig(log_path=log_path.resolve() if log_path is not None else None),
    )


def load_effective_config(
    config_path: Path | None = None, overrides: CliOverrides | None = None
) -> SyncCheckConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    payload, base_dir = load_config_file(config_path)
    return merge_config(default_config(), payload, overrides or CliOverrides(), base_dir=base_dir)


def _optional_depth(value: object, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Config field '{name}' must be a non-negative integer.")
    if value > MAX_CHUNK_DEPTH:
        raise ValueError(f"Config field '{name}' must be <= {MAX_CHUNK_DEPTH}.")
    return value
