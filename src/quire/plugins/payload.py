"""Encoding shared by the generated navigation and search scripts."""

from __future__ import annotations

import base64
import gzip
import json
from typing import Any


def encode_payload(data: Any) -> str:
    """Gzip a JSON document and return it as base64 text."""
    raw = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64.b64encode(gzip.compress(raw)).decode("ascii")


def decode_payload(payload: str) -> Any:
    """Inverse of :func:`encode_payload`."""
    return json.loads(gzip.decompress(base64.b64decode(payload)).decode("utf-8"))


def script_assignment(variable: str, payload: str) -> str:
    """JavaScript source that publishes ``payload`` as ``window.<variable>``."""
    return f'window.{variable} = "{payload}";\n'
