from collections.abc import Mapping
from typing import Any

import httpx


def generate_text(
    prompt: str,
    api_key: str,
    model: str,
    api_url: str,
    timeout: float = 10.0,
) -> str:
    """Ask the Gemini `generateContent` endpoint for a short completion.

    Returns the stripped text of the first candidate, or an empty string
    when the response carries none.
    """

    response = httpx.post(
        f"{api_url.rstrip('/')}/models/{model}:generateContent",
        params={"key": api_key},
        json={
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"maxOutputTokens": 32, "temperature": 0.9},
        },
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("Gemini response is invalid")

    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""

    content = candidates[0].get("content") if isinstance(candidates[0], Mapping) else None
    parts = content.get("parts") if isinstance(content, Mapping) else None
    if not isinstance(parts, list):
        return ""

    texts = [
        part["text"]
        for part in parts
        if isinstance(part, Mapping) and isinstance(part.get("text"), str)
    ]
    return "".join(texts).strip()
