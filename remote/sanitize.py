"""Sanitation of model output and remote responses."""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from remote.config import (
    MAX_LIST_ITEMS, MAX_ITEM_CHARS, MAX_MODEL_CHARS, CLIENT_MODEL_CHARS,
    DEFAULT_SCORE, DEFAULT_CONFIDENCE, DEFAULT_MODEL
)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def limit_list(items: Any, max_items: int = MAX_LIST_ITEMS,
               max_chars: int = MAX_ITEM_CHARS) -> List[str]:
    """Keep only strings, at most max_items of at most max_chars each."""
    if not isinstance(items, list):
        return []
    return [s[:max_chars] for s in items if isinstance(s, str)][:max_items]


def normalize_result(raw: Any) -> dict:
    """
    Coerce arbitrary model output into the response schema.

    Args:
        raw: Parsed model output (any shape)

    Returns:
        dict with score (1-10), pros, cons, confidence (0-100) and model
    """
    out = {
        "score": DEFAULT_SCORE,
        "pros": [],
        "cons": [],
        "confidence": DEFAULT_CONFIDENCE,
        "model": DEFAULT_MODEL,
    }
    if not isinstance(raw, dict):
        return out

    if _is_number(raw.get("score")):
        out["score"] = _clamp(_round_half_up(raw["score"]), 1, 10)
    if _is_number(raw.get("confidence")):
        out["confidence"] = _clamp(_round_half_up(raw["confidence"]), 0, 100)
    out["pros"] = limit_list(raw.get("pros"))
    out["cons"] = limit_list(raw.get("cons"))
    if isinstance(raw.get("model"), str):
        out["model"] = raw["model"][:MAX_MODEL_CHARS]
    return out


def extract_json(text: Optional[str]) -> Optional[dict]:
    """Parse JSON from model text, falling back to the first {...} block."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        pass
    match = _JSON_OBJECT.search(text)
    if match:
        try:
            return json.loads(match.group(0))
        except ValueError:
            pass
    return None


def estimate_decoded_size(image_base64: str) -> int:
    """Decoded byte length of a base64 string, without decoding it."""
    n = len(image_base64)
    padding = len(image_base64) - len(image_base64.rstrip("="))
    return max(0, n * 3 // 4 - padding)


@dataclass
class RemoteResult:
    """Remote enrichment response, sanitized for merging."""
    score: Optional[int] = None
    pros: Optional[List[str]] = None
    cons: Optional[List[str]] = None
    confidence: Optional[int] = None
    model: str = ""
    barcode: Optional[str] = None
    ts: Optional[int] = None

    @classmethod
    def from_response(cls, data: Any) -> "RemoteResult":
        """
        Build from a decoded response body.

        Fields with the wrong type are left as None so the merge skips them.
        """
        if not isinstance(data, dict):
            raise ValueError("Response body is not a JSON object")

        result = cls()
        if _is_number(data.get("score")):
            result.score = _clamp(_round_half_up(data["score"]), 1, 10)
        if isinstance(data.get("pros"), list):
            result.pros = limit_list(data["pros"])
        if isinstance(data.get("cons"), list):
            result.cons = limit_list(data["cons"])
        if _is_number(data.get("confidence")):
            result.confidence = _clamp(_round_half_up(data["confidence"]), 0, 100)
        if data.get("model"):
            result.model = str(data["model"])[:CLIENT_MODEL_CHARS]
        if isinstance(data.get("barcode"), str):
            result.barcode = data["barcode"]
        if _is_number(data.get("ts")):
            result.ts = int(data["ts"])
        return result
