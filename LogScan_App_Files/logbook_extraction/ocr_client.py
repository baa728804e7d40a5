"""
OCR Client - Azure Computer Vision Read API (v3.2)

Submits an image, polls the returned Operation-Location at a fixed interval for
a bounded number of attempts and converts the result into an OcrResponse.

The client never raises for service problems: rejected submissions, failed or
unfinished operations, transport errors and malformed payloads all come back as
OcrResponse.error so the caller can report them and retry. Only bad
configuration raises (ConfigurationError, when the config is built).
"""

import http.client
import json
import time
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib import error, request

from PIL import Image, ImageOps, UnidentifiedImageError

from . import config as cfg
from .config import OcrServiceConfig
from .models import DEFAULT_CONFIDENCE, OcrLine, OcrPage, OcrResponse, OcrWord


READ_ANALYZE_PATH = "/vision/v3.2/read/analyze"
PENDING_STATUSES = ("notStarted", "running")
JPEG_QUALITY = 80


# =============================================================================
# Image preparation
# =============================================================================

def prepare_image_bytes(image_bytes: bytes, max_dim: Optional[int] = None,
                        quality: int = JPEG_QUALITY) -> bytes:
    """
    Re-encode a photo for upload.

    Applies EXIF orientation, flattens transparency onto white, downscales so
    the longest side is at most max_dim and saves as JPEG. Bytes Pillow cannot
    read are returned unchanged (the service will report the problem).
    """
    if max_dim is None:
        max_dim = cfg.max_image_dim()
    try:
        img = Image.open(BytesIO(image_bytes))
        img = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError):
        return image_bytes

    has_alpha = img.mode in ("LA", "RGBA") or (
        img.mode == "P" and "transparency" in img.info
    )
    if has_alpha:
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        background = Image.new("RGBA", img.size, (255, 255, 255, 255))
        background.alpha_composite(img)
        img = background
    if img.mode != "RGB":
        img = img.convert("RGB")

    if max(img.size) > max_dim:
        img.thumbnail((max_dim, max_dim))

    buf = BytesIO()
    img.save(buf, format="JPEG", quality=int(quality))
    return buf.getvalue()


def load_image_bytes(path: Path, prepare: bool = True) -> bytes:
    data = Path(path).read_bytes()
    return prepare_image_bytes(data) if prepare else data


# =============================================================================
# Result conversion
# =============================================================================

def _bbox(raw: Any) -> List[float]:
    if not isinstance(raw, list):
        return []
    out: List[float] = []
    for v in raw:
        try:
            out.append(float(v))
        except (TypeError, ValueError):
            return []
    return out


def _line_confidence(raw_line: Dict[str, Any]) -> float:
    style = (raw_line.get("appearance") or {}).get("style") or {}
    conf = style.get("confidence")
    return float(conf) if conf else DEFAULT_CONFIDENCE


def parse_read_result(payload: Dict[str, Any]) -> OcrResponse:
    """
    Convert a Read API result document into an OcrResponse.

    Accepts the full poll response ({"status", "analyzeResult"}) or the bare
    analyzeResult. Missing boxes, confidences and lines are tolerated.
    """
    if not isinstance(payload, dict):
        return OcrResponse.failure("Malformed OCR result: expected a JSON object")

    status = str(payload.get("status") or "succeeded")
    if status != "succeeded":
        return OcrResponse.failure(f"OCR processing failed with status: {status}", status=status)
    analyze = payload.get("analyzeResult", payload)
    read_results = (analyze or {}).get("readResults") or []

    pages: List[OcrPage] = []
    text_lines: List[str] = []
    for idx, raw_page in enumerate(read_results, start=1):
        if not isinstance(raw_page, dict):
            continue
        lines: List[OcrLine] = []
        for raw_line in raw_page.get("lines") or []:
            if not isinstance(raw_line, dict):
                continue
            text = str(raw_line.get("text") or "")
            words = [
                OcrWord(
                    text=str(w.get("text") or ""),
                    bounding_box=_bbox(w.get("boundingBox")),
                    confidence=w.get("confidence"),
                )
                for w in raw_line.get("words") or []
                if isinstance(w, dict)
            ]
            lines.append(OcrLine(
                text=text,
                bounding_box=_bbox(raw_line.get("boundingBox")),
                confidence=_line_confidence(raw_line),
                words=words,
            ))
            text_lines.append(text)
        pages.append(OcrPage(
            number=int(raw_page.get("page") or idx),
            width=raw_page.get("width"),
            height=raw_page.get("height"),
            unit=str(raw_page.get("unit") or "pixel"),
            lines=lines,
        ))

    return OcrResponse(pages=pages, raw_text="\n".join(text_lines).strip(), status=status)


def load_read_result(path: Path) -> OcrResponse:
    """Read a saved Read API JSON document."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        return OcrResponse.failure(f"Could not read OCR result {path}: {e}")
    return parse_read_result(payload)


# =============================================================================
# Client
# =============================================================================

class _OcrFailure(Exception):
    """Internal: aborts a request/poll cycle with a user-facing message."""


class AzureReadClient:
    """Request/poll client for the Read API."""

    def __init__(self, config: OcrServiceConfig,
                 poll_interval: Optional[float] = None,
                 max_attempts: Optional[int] = None,
                 timeout: Optional[float] = None,
                 verbose: bool = False):
        """
        Args:
            config: Validated endpoint + key
            poll_interval: Seconds between result polls (default 1.0, env LOGSCAN_OCR_POLL_INTERVAL_SEC)
            max_attempts: Number of result polls (default 30, env LOGSCAN_OCR_MAX_POLL_ATTEMPTS)
            timeout: Per-request socket timeout in seconds
            verbose: Print progress
        """
        if not isinstance(config, OcrServiceConfig):
            raise TypeError("config must be an OcrServiceConfig")
        self.config = config
        self.poll_interval = cfg.ocr_poll_interval() if poll_interval is None else float(poll_interval)
        self.max_attempts = cfg.ocr_max_poll_attempts() if max_attempts is None else max(1, int(max_attempts))
        self.timeout = cfg.ocr_request_timeout() if timeout is None else float(timeout)
        self.verbose = verbose
        self.last_payload: Optional[Dict[str, Any]] = None

    @property
    def analyze_url(self) -> str:
        return self.config.endpoint + READ_ANALYZE_PATH

    def _submit(self, image_bytes: bytes) -> str:
        req = request.Request(
            self.analyze_url,
            data=image_bytes,
            headers={
                "Ocp-Apim-Subscription-Key": self.config.key,
                "Content-Type": "application/octet-stream",
            },
            method="POST",
        )
        try:
            with request.urlopen(req, timeout=self.timeout) as resp:
                operation_location = resp.headers.get("Operation-Location")
        except error.HTTPError as e:
            raise _OcrFailure(f"OCR submission failed: {e.reason}") from e
        if not operation_location:
            raise _OcrFailure("No operation location returned from OCR service")
        return operation_location

    def _fetch(self, operation_location: str) -> Dict[str, Any]:
        req = request.Request(
            operation_location,
            headers={"Ocp-Apim-Subscription-Key": self.config.key},
            method="GET",
        )
        try:
            with request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read()
        except error.HTTPError as e:
            raise _OcrFailure(f"OCR result fetch failed: {e.reason}") from e
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise _OcrFailure(f"Malformed OCR result: {e}") from e
        if not isinstance(payload, dict):
            raise _OcrFailure("Malformed OCR result: expected a JSON object")
        return payload

    def analyze(self, image_bytes: bytes) -> OcrResponse:
        """
        Run OCR on one image.

        Returns:
            OcrResponse with pages/raw_text, or with error set on any failure
        """
        self.last_payload = None
        try:
            operation_location = self._submit(image_bytes)
            if self.verbose:
                print(f"  - OCR submitted, polling {operation_location}")

            payload: Dict[str, Any] = {}
            attempts = 0
            while True:
                time.sleep(self.poll_interval)
                payload = self._fetch(operation_location)
                attempts += 1
                status = str(payload.get("status") or "")
                if self.verbose:
                    print(f"  - OCR poll {attempts}/{self.max_attempts}: {status}")
                if status not in PENDING_STATUSES or attempts >= self.max_attempts:
                    break
        except _OcrFailure as e:
            return OcrResponse.failure(str(e))
        except (error.URLError, OSError, http.client.HTTPException) as e:
            reason = getattr(e, "reason", None) or e
            return OcrResponse.failure(f"OCR request failed: {reason}")

        self.last_payload = payload
        if not payload.get("status"):
            return OcrResponse.failure("OCR processing failed with status: unknown", status="unknown")
        # Still pending after the last poll -> reported as a failed status.
        return parse_read_result(payload)

    def analyze_file(self, path: Path, prepare: bool = True) -> OcrResponse:
        try:
            data = load_image_bytes(path, prepare=prepare)
        except OSError as e:
            return OcrResponse.failure(f"Could not read image {path}: {e}")
        return self.analyze(data)
