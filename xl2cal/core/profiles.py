from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from .errors import ConfigError


load_dotenv(override=False)


@dataclass
class Profile:
    """A reusable column layout with export defaults.

    Attributes:
        name: Profile key.
        display_name: Human readable name.
        columns: Role name -> zero-based column index.
        sheet: Optional sheet name or index to read.
        defaults: Export defaults (year, prefix, duration, timezone, calendars).
        meta: Arbitrary metadata.
    """

    name: str
    display_name: str
    columns: Dict[str, int]
    sheet: str | int | None = None
    defaults: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] | None = None


def _is_frozen() -> bool:
    return getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS")


def _project_root() -> Path:
    env = os.getenv("XL2CAL_ROOT")
    if env:
        return Path(env)
    # When frozen (PyInstaller onefile), resources are under sys._MEIPASS
    if _is_frozen():
        return Path(getattr(sys, "_MEIPASS"))  # type: ignore[arg-type]
    # In source layout, this file is under <root>/xl2cal/core
    return Path(__file__).resolve().parents[2]


def _app_dir_writable_base() -> Path:
    """Writable base for runtime files (work/logs/out).

    - Frozen: alongside the executable
    - Source: repository root
    """
    if _is_frozen():
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


def _config_dir() -> Path:
    return _project_root() / "xl2cal" / "config"


def _work_dir() -> Path:
    return _app_dir_writable_base() / "xl2cal" / "work"


def ensure_work_dirs() -> dict[str, Path]:
    base = _work_dir()
    out = base / "out"
    logs = base / "logs"
    for p in (out, logs):
        p.mkdir(parents=True, exist_ok=True)
    return {"out": out, "logs": logs}


def env_default(name: str, default: str | None = None) -> str | None:
    """Read an ``XL2CAL_*`` setting from the environment (or .env)."""
    value = os.getenv(f"XL2CAL_{name.upper()}")
    if value is None or not value.strip():
        return default
    return value.strip()


def _parse_columns(key: str, raw: Any) -> Dict[str, int]:
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"profile {key}: columns must be a non-empty mapping")
    columns: Dict[str, int] = {}
    for role, index in raw.items():
        try:
            columns[str(role)] = int(index)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"profile {key}: column for {role} must be an integer") from e
    return columns


def load_profiles(path: str | Path | None = None) -> dict[str, Profile]:
    """Load profiles from config/profiles.yaml.

    Returns a dict of profile-key -> Profile.
    """
    cfg_path = Path(path) if path else _config_dir() / "profiles.yaml"
    if not cfg_path.exists():
        raise ConfigError(f"profiles.yaml not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError("profiles.yaml must contain a mapping")
    profiles_raw = data.get("profiles", {})
    if not profiles_raw:
        raise ConfigError("no profiles defined in profiles.yaml")
    profiles: dict[str, Profile] = {}
    for key, p in profiles_raw.items():
        if not isinstance(p, dict):
            raise ConfigError(f"profile {key} must be a mapping")
        profiles[key] = Profile(
            name=key,
            display_name=p.get("display_name", key),
            columns=_parse_columns(key, p.get("columns")),
            sheet=p.get("sheet"),
            defaults=dict(p.get("defaults") or {}),
            meta=p.get("meta", {}),
        )
    return profiles


def get_profile(name: str, path: str | Path | None = None) -> Profile:
    profiles = load_profiles(path)
    try:
        return profiles[name]
    except KeyError as e:
        known = ", ".join(sorted(profiles))
        raise ConfigError(f"unknown profile '{name}' (known: {known})") from e
