"""
Export options and results.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

from ...utils import parse_bool


def _pick(payload: dict[str, Any], *names: str) -> Any:
    for name in names:
        if name in payload:
            return payload[name]
    return None


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _opt_str_list(value: Any) -> Optional[list[str]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError("relative_paths must be a list of strings")
    return [str(v) for v in value if v is not None]


@dataclass
class ExportOptions:
    source_path: str
    dest_path: str
    as_zip: bool = False
    only_captioned: bool = False
    # Explicit selection; overrides the tree walk when set.
    relative_paths: Optional[list[str]] = None
    trigger_word: Optional[str] = None
    sequential_naming: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ExportOptions":
        """Build options from a request body (snake_case or camelCase keys)."""
        return cls(
            source_path=str(_pick(payload, "source_path", "sourcePath") or ""),
            dest_path=str(_pick(payload, "dest_path", "destPath") or ""),
            as_zip=parse_bool(_pick(payload, "as_zip", "asZip"), False),
            only_captioned=parse_bool(_pick(payload, "only_captioned", "onlyCaptioned"), False),
            relative_paths=_opt_str_list(_pick(payload, "relative_paths", "relativePaths")),
            trigger_word=_opt_str(_pick(payload, "trigger_word", "triggerWord")),
            sequential_naming=parse_bool(_pick(payload, "sequential_naming", "sequentialNaming"), False),
        )


@dataclass
class ExportByRatingOptions:
    source_path: str
    dest_path: str
    trigger_word: Optional[str] = None
    sequential_naming: bool = False
    # Bucket folders become entry prefixes inside one archive.
    as_zip: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ExportByRatingOptions":
        return cls(
            source_path=str(_pick(payload, "source_path", "sourcePath") or ""),
            dest_path=str(_pick(payload, "dest_path", "destPath") or ""),
            trigger_word=_opt_str(_pick(payload, "trigger_word", "triggerWord")),
            sequential_naming=parse_bool(_pick(payload, "sequential_naming", "sequentialNaming"), False),
            as_zip=parse_bool(_pick(payload, "as_zip", "asZip"), False),
        )


@dataclass
class ExportResult:
    success: bool
    exported_count: int
    skipped_count: int
    error: Optional[str]
    output_path: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
