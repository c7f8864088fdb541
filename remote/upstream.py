"""Upstream vision-model call used by the analyze endpoint."""

import logging
from typing import Optional

import requests

from remote.sanitize import extract_json

logger = logging.getLogger(__name__)

PROMPT = (
    "Analyze this grocery / product photo and output STRICT JSON only with keys: "
    "score (1-10 int), pros (array short phrases), cons (array short phrases), "
    "confidence (0-100 int). No extra commentary."
)


def _response_text(body: dict) -> Optional[str]:
    """Pick the model text out of a Responses or Chat Completions body."""
    text = body.get("output_text")
    if isinstance(text, str):
        return text

    for item in body.get("output") or []:
        for part in item.get("content") or []:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                return part["text"]

    choices = body.get("choices") or []
    if choices:
        content = (choices[0].get("message") or {}).get("content")
        if isinstance(content, str):
            return content
    return None


def request_model_verdict(image_base64: str, api_key: str, url: str, model: str,
                          timeout: Optional[float] = None) -> Optional[dict]:
    """
    Ask the upstream model to score a product photo.

    Args:
        image_base64: JPEG payload, base64 without header
        api_key: Bearer credential
        url: Responses API URL
        model: Model name
        timeout: requests timeout

    Returns:
        Parsed JSON object from the model text, or None if none could be parsed

    Raises:
        requests.RequestException: Network failure or non-success status
    """
    payload = {
        "model": model,
        "input": [{
            "role": "user",
            "content": [
                {"type": "input_text", "text": PROMPT},
                {"type": "input_image", "image_url": f"data:image/jpeg;base64,{image_base64}"},
            ],
        }],
        "temperature": 0.1,
    }
    headers = {"Authorization": f"Bearer {api_key}"}

    response = requests.post(url, json=payload, headers=headers, timeout=timeout)
    response.raise_for_status()
    body = response.json()

    text = _response_text(body) if isinstance(body, dict) else None
    parsed = extract_json(text)
    if not isinstance(parsed, dict):
        logger.info("Upstream model returned no parseable JSON")
        return None
    return parsed
