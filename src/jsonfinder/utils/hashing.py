"""Content-derived document identifiers."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json(document: Any) -> str:
    """Serialize ``document`` with sorted keys and compact separators."""
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_document_id(document: Any) -> str:
    """Compute the SHA256 hex digest of the canonical form of ``document``."""
    # JSON strings may carry lone surrogates
    return hashlib.sha256(canonical_json(document).encode("utf-8", "surrogatepass")).hexdigest()
