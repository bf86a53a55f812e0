from __future__ import annotations

import os
import re
from importlib import metadata
from pathlib import Path
from typing import TypedDict


class VersionInfo(TypedDict):
    version: str
    channel: str


_DISTRIBUTION = "capset"
_NIGHTLY_KEYWORDS = ("nightly", "dev", "alpha", "beta", "rc")


def _find_pyproject_version() -> str:
    try:
        root = Path(__file__).resolve().parent.parent
        pyproject_path = root / "pyproject.toml"
        if not pyproject_path.exists():
            return ""
        raw = pyproject_path.read_text(encoding="utf-8")
        match = re.search(r'^version\s*=\s*"(.*?)"', raw, flags=re.MULTILINE)
        if match:
            return match.group(1).strip()
    except OSError:
        pass
    return ""


def _find_installed_version() -> str:
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return ""


def _resolve_channel(version: str) -> str:
    env_channel = os.environ.get("CAPSET_CHANNEL", "").strip()
    if env_channel:
        return env_channel
    lowered = str(version or "").lower()
    if any(k in lowered for k in _NIGHTLY_KEYWORDS):
        return "nightly"
    return "stable"


def get_version_info() -> VersionInfo:
    # A source checkout wins over installed metadata (editable installs lag behind).
    version = _find_pyproject_version() or _find_installed_version() or "0.0.0"
    return {
        "version": version,
        "channel": _resolve_channel(version),
    }
