# heldcli/config.py
#
# Startup configuration: JSON file (config/held.json) merged with
# command-line overrides.

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

DEFAULT_CONFIG_PATH = Path("config/held.json")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class HeldConfig:
    uri: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_ms: int = 10000
    deref_timeout_ms: int = 30000
    verbose: bool = False
    exact: bool = False
    location_types: Tuple[str, ...] = ()
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @property
    def timeout_s(self) -> Optional[float]:
        return self.timeout_ms / 1000.0 if self.timeout_ms > 0 else None

    @property
    def deref_timeout_s(self) -> Optional[float]:
        return self.deref_timeout_ms / 1000.0 if self.deref_timeout_ms > 0 else None


def parse_header(raw: str) -> Tuple[str, str]:
    """'name:value' -> (name, value). A header without ':' gets an empty value."""
    name, _, value = raw.partition(":")
    name = name.strip()
    if not name:
        raise ConfigError(f"Invalid header (expected name:value): {raw!r}")
    return name, value.strip()


def _as_bool(raw: Any, key: str) -> bool:
    if isinstance(raw, bool):
        return raw
    raise ConfigError(f"config.{key} must be true/false")


def _as_ms(raw: Any, key: str, default: int) -> int:
    if raw is None:
        return default
    try:
        v = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"config.{key} must be an integer") from None
    return max(0, v)


def load_config(path: Optional[Path] = None) -> HeldConfig:
    """Load HeldConfig from JSON.

    The default path is optional (missing file -> defaults); an explicitly
    given path must exist.
    """
    explicit = path is not None
    p = Path(path) if explicit else DEFAULT_CONFIG_PATH
    if not p.exists():
        if explicit:
            raise ConfigError(f"Config not found: {p}")
        return HeldConfig()

    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must contain a JSON object: {p}")

    headers_raw = raw.get("headers") or {}
    if not isinstance(headers_raw, dict):
        raise ConfigError("config.headers must be an object")
    headers = {str(k): str(v) for k, v in headers_raw.items()}

    types_raw = raw.get("location_types") or []
    if not isinstance(types_raw, list):
        raise ConfigError("config.location_types must be a list")

    log_file = raw.get("log_file")
    if log_file is not None and not isinstance(log_file, str):
        raise ConfigError("config.log_file must be a string")

    return HeldConfig(
        uri=(raw.get("uri") or "").strip(),
        headers=headers,
        timeout_ms=_as_ms(raw.get("timeout_ms"), "timeout_ms", 10000),
        deref_timeout_ms=_as_ms(raw.get("deref_timeout_ms"), "deref_timeout_ms", 30000),
        verbose=_as_bool(raw.get("verbose", False), "verbose"),
        exact=_as_bool(raw.get("exact", False), "exact"),
        location_types=tuple(str(t) for t in types_raw),
        log_level=str(raw.get("log_level") or "WARNING"),
        log_file=log_file or None,
    )


def apply_overrides(cfg: HeldConfig, *, uri=None, headers=(), log_level=None) -> HeldConfig:
    merged = dict(cfg.headers)
    for h in headers or ():
        name, value = parse_header(h)
        merged[name] = value
    cfg = replace(cfg, headers=merged)
    if uri:
        cfg = replace(cfg, uri=uri.strip())
    if log_level:
        cfg = replace(cfg, log_level=log_level)
    return cfg
