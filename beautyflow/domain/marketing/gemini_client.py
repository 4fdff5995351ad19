import logging
from typing import Any, Optional

import httpx

from ... import config

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """Raised when the Gemini API is unreachable or answers without text"""


class GeminiClient:
    """Thin client for the Gemini generateContent REST endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model = model or config.GEMINI_MODEL
        self.base_url = (base_url or config.GEMINI_BASE_URL).rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def generate(
        self,
        prompt: str,
        system_instruction: str,
        temperature: float,
        top_p: Optional[float] = None,
    ) -> str:
        """Generate text for a single-turn prompt"""
        if not self.configured:
            raise GeminiError("GEMINI_API_KEY not configured")

        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "thinkingConfig": {"thinkingBudget": 0},
        }
        if top_p is not None:
            generation_config["topP"] = top_p

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "generationConfig": generation_config,
        }
        url = f"{self.base_url}/models/{self.model}:generateContent"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url, json=payload, headers={"x-goog-api-key": self.api_key}
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Gemini request failed: {e}")
            raise GeminiError(str(e)) from e

        if response.status_code != 200:
            logger.error(f"❌ Gemini API error: {response.status_code}")
            logger.error(f"❌ Error response: {response.text}")
            raise GeminiError(f"Gemini API returned {response.status_code}")

        text = extract_text(response.json())
        if not text:
            raise GeminiError("Gemini response had no text")
        return text


def extract_text(body: dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate"""
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts).strip()
