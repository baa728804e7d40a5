"""
Configuration - OCR service credentials, column layout and env knobs

Two sources, as elsewhere in the app:
- environment variables (LOGSCAN_*), read through the _env_* helpers
- versioned JSON files under user_inputs/, loaded best-effort

OCR credentials are the exception to best-effort: a missing or malformed
endpoint/key raises ConfigurationError as soon as the config is built.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional
from urllib.parse import urlparse


_APP_ROOT = Path(__file__).resolve().parents[1]  # LogScan_App_Files/
_REPO_ROOT = _APP_ROOT.parent  # repo root (holds user_inputs/)
USER_INPUTS_DIR = _REPO_ROOT / "user_inputs"
DEFAULT_CREDENTIALS_PATH = USER_INPUTS_DIR / "azure_credentials.json"
DEFAULT_COLUMN_LAYOUT_PATH = USER_INPUTS_DIR / "column_layout.json"

ENDPOINT_ENV_KEYS = ("LOGSCAN_AZURE_ENDPOINT", "AZURE_COMPUTER_VISION_ENDPOINT")
KEY_ENV_KEYS = ("LOGSCAN_AZURE_KEY", "AZURE_COMPUTER_VISION_KEY")
ALLOWED_ENDPOINT_HOSTS = ("api.cognitive.microsoft.com", "cognitiveservices.azure.com")


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or malformed."""


def _env_int(key: str, default: int) -> int:
    try:
        return int(float(str(os.environ.get(key, str(default)) or str(default)).strip()))
    except (ValueError, OverflowError):
        return int(default)


def _env_float(key: str, default: float) -> float:
    try:
        return float(str(os.environ.get(key, str(default)) or str(default)).strip())
    except ValueError:
        return float(default)


def _env_first(keys) -> str:
    for key in keys:
        val = (os.environ.get(key) or "").strip()
        if val:
            return val
    return ""


def ocr_poll_interval() -> float:
    return max(0.0, _env_float("LOGSCAN_OCR_POLL_INTERVAL_SEC", 1.0))


def ocr_max_poll_attempts() -> int:
    return max(1, _env_int("LOGSCAN_OCR_MAX_POLL_ATTEMPTS", 30))


def ocr_request_timeout() -> float:
    return max(1.0, _env_float("LOGSCAN_OCR_TIMEOUT_SEC", 30.0))


def row_tolerance() -> float:
    return max(0.0, _env_float("LOGSCAN_ROW_TOLERANCE", 20.0))


def max_image_dim() -> int:
    return max(64, _env_int("LOGSCAN_MAX_IMAGE_DIM", 4200))


# =============================================================================
# OCR service credentials
# =============================================================================

@dataclass(frozen=True)
class OcrServiceConfig:
    """Azure Computer Vision endpoint + subscription key."""
    endpoint: str
    key: str

    def __post_init__(self) -> None:
        endpoint = str(self.endpoint or "").strip().rstrip("/")
        key = str(self.key or "").strip()
        if not endpoint:
            raise ConfigurationError("Missing Azure Computer Vision endpoint")
        if not key:
            raise ConfigurationError("Missing Azure Computer Vision key")

        parsed = urlparse(endpoint)
        host = (parsed.hostname or "").lower()
        if parsed.scheme != "https" or not host:
            raise ConfigurationError(f"Invalid Azure Computer Vision endpoint format: {endpoint}")
        if not any(host == h or host.endswith("." + h) for h in ALLOWED_ENDPOINT_HOSTS):
            raise ConfigurationError(f"Invalid Azure Computer Vision endpoint format: {endpoint}")

        # frozen dataclass: store the cleaned values
        object.__setattr__(self, "endpoint", endpoint)
        object.__setattr__(self, "key", key)

    def describe(self) -> dict[str, Any]:
        """Masked summary safe to print."""
        return {
            "endpoint": self.endpoint[:30] + ("..." if len(self.endpoint) > 30 else ""),
            "key": self.key[:4] + "..." if len(self.key) > 4 else "***",
            "key_length": len(self.key),
        }


def load_ocr_config(credentials_path: Optional[Path] = DEFAULT_CREDENTIALS_PATH) -> OcrServiceConfig:
    """
    Resolve OCR credentials.

    A credentials JSON file ({"endpoint": ..., "key": ...}) wins over the
    environment; values missing from the file fall back to env vars.

    Raises:
        ConfigurationError: credentials missing/invalid or file unreadable
    """
    endpoint = ""
    key = ""
    if credentials_path is not None:
        p = Path(credentials_path)
        if p.exists():
            try:
                data = json.loads(p.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigurationError(f"Could not read credentials file {p}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"Credentials file {p} must hold a JSON object")
            endpoint = str(data.get("endpoint") or "").strip()
            key = str(data.get("key") or "").strip()

    endpoint = endpoint or _env_first(ENDPOINT_ENV_KEYS)
    key = key or _env_first(KEY_ENV_KEYS)
    return OcrServiceConfig(endpoint=endpoint, key=key)


# =============================================================================
# Column layout
# =============================================================================

FIELD_KINDS = ("date", "aircraft", "route", "times")


@dataclass(frozen=True)
class ColumnBand:
    """Horizontal band [min_x, max_x) of a logbook page holding one kind of field."""
    field_kind: str
    min_x: Optional[float] = None  # None = unbounded
    max_x: Optional[float] = None

    def contains(self, x: float) -> bool:
        if self.min_x is not None and x < self.min_x:
            return False
        if self.max_x is not None and x >= self.max_x:
            return False
        return True


# Tuned to a standard pilot logbook photographed at phone resolution.
DEFAULT_COLUMN_LAYOUT: tuple[ColumnBand, ...] = (
    ColumnBand("date", None, 200),
    ColumnBand("aircraft", 200, 500),
    ColumnBand("route", 500, 700),
    ColumnBand("times", 700, None),
)


def _band_from_dict(raw: Any) -> Optional[ColumnBand]:
    if not isinstance(raw, dict):
        return None
    kind = str(raw.get("field_kind") or "").strip().lower()
    if kind not in FIELD_KINDS:
        return None
    try:
        min_x = None if raw.get("min_x") is None else float(raw["min_x"])
        max_x = None if raw.get("max_x") is None else float(raw["max_x"])
    except (TypeError, ValueError):
        return None
    if min_x is not None and max_x is not None and max_x <= min_x:
        return None
    return ColumnBand(kind, min_x, max_x)


def column_layout_from_config(cfg: Any) -> tuple[ColumnBand, ...]:
    """
    Build a layout from a schema v1 dict ({"version": 1, "bands": [...]}).

    Returns the default layout when cfg is not a valid v1 layout.
    """
    if not isinstance(cfg, dict):
        return DEFAULT_COLUMN_LAYOUT
    try:
        if int(cfg.get("version") or 0) != 1:
            return DEFAULT_COLUMN_LAYOUT
    except (TypeError, ValueError):
        return DEFAULT_COLUMN_LAYOUT
    raw_bands = cfg.get("bands")
    if not isinstance(raw_bands, list) or not raw_bands:
        return DEFAULT_COLUMN_LAYOUT
    bands: List[ColumnBand] = []
    for raw in raw_bands:
        band = _band_from_dict(raw)
        if band is None:
            return DEFAULT_COLUMN_LAYOUT
        bands.append(band)
    return tuple(bands)


def column_layout_to_config(layout) -> dict[str, Any]:
    return {
        "version": 1,
        "bands": [
            {"field_kind": b.field_kind, "min_x": b.min_x, "max_x": b.max_x}
            for b in layout
        ],
    }


def load_column_layout(path: Optional[Path] = None) -> tuple[ColumnBand, ...]:
    """
    Best-effort load of the column layout JSON (schema v1).

    Path resolution: explicit path, then LOGSCAN_COLUMN_LAYOUT, then
    user_inputs/column_layout.json. Missing/invalid -> default layout.
    """
    if path is None:
        env_path = (os.environ.get("LOGSCAN_COLUMN_LAYOUT") or "").strip()
        path = Path(env_path) if env_path else DEFAULT_COLUMN_LAYOUT_PATH
    try:
        p = Path(path)
        if not p.exists():
            return DEFAULT_COLUMN_LAYOUT
        data = json.loads(p.read_text(encoding="utf-8", errors="ignore"))
    except (OSError, json.JSONDecodeError):
        return DEFAULT_COLUMN_LAYOUT
    return column_layout_from_config(data)
