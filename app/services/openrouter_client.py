"""
OpenRouter (OpenAI-compatible) client for AI text placement.

Sends the uploaded image to a vision-language model and asks it where the
overlay text should go. Every failure is reported as a single
`PlacementAnalysisError` so the caller can fall back to the heuristic
placement. One request per call: no retries, no polling.
"""

import base64
import json
import logging
import math
import re
import time
from typing import Any, Optional

import requests
from pydantic import ValidationError

from app.api.v1.schemas import PlacementPlan
from app.config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings
from app.models.styles import DEFAULT_STYLE

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
FENCE = re.compile(r"```json\n?|```\n?")
JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

MIN_FONT_SIZE_PERCENT = 0.08
MAX_FONT_SIZE_PERCENT = 0.25


class PlacementAnalysisError(RuntimeError):
    """Raised when the model cannot produce a usable placement plan."""


def build_system_prompt(text: str, style: str, width: int, height: int) -> str:
    return (
        "You are an expert text overlay designer. Your task is to find the BEST position "
        "to place text on an image.\n"
        'Output ONLY valid JSON as: {"x_percent":0.5,"y_percent":0.3,'
        '"font_size_percent":0.15,"color":"#FFFFFF"}.\n'
        f'Text: "{text}", Style: "{style}", Image: {width}x{height}px'
    )


def _clamp(value: Any, default: float, low: float, high: float) -> float:
    # Numeric strings are accepted; missing, null, boolean or non-finite
    # values fall back to the default.
    if isinstance(value, bool):
        value = default
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = default
    if not math.isfinite(number):
        number = default
    return max(low, min(high, number))


def parse_placement_response(content: str, style: str) -> PlacementPlan:
    """
    Turn the model's reply into a validated placement plan.

    The reply may wrap the JSON in a markdown code fence or surround it with
    prose; the first `{` through the last `}` is decoded. Positions are
    clamped to [0, 1], the font size to [0.08, 0.25], and anything other
    than a `#RRGGBB` colour becomes white.
    """
    json_str = content.strip()
    if "```" in json_str:
        json_str = FENCE.sub("", json_str).strip()
    match = JSON_OBJECT.search(json_str)
    if match:
        json_str = match.group(0)

    try:
        analysis = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise PlacementAnalysisError(f"Model returned malformed JSON: {exc}") from exc
    if not isinstance(analysis, dict):
        raise PlacementAnalysisError("Model returned JSON that is not an object")

    color = analysis.get("color")
    if not isinstance(color, str) or not HEX_COLOR.match(color):
        color = "#FFFFFF"

    font_key = analysis.get("font_key")
    if not isinstance(font_key, str) or not font_key.strip():
        font_key = style or DEFAULT_STYLE

    try:
        return PlacementPlan(
            x_percent=_clamp(analysis.get("x_percent"), 0.5, 0.0, 1.0),
            y_percent=_clamp(analysis.get("y_percent"), 0.5, 0.0, 1.0),
            font_size_percent=_clamp(
                analysis.get("font_size_percent"),
                0.15,
                MIN_FONT_SIZE_PERCENT,
                MAX_FONT_SIZE_PERCENT,
            ),
            color=color,
            font_key=font_key,
        )
    except ValidationError as exc:
        raise PlacementAnalysisError(f"Model returned an unusable plan: {exc}") from exc


class OpenRouterClient:
    """
    Minimal chat-completions client.

    Works against any OpenAI-compatible endpoint; OpenRouter is the default.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenRouterClient":
        return cls(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            model=settings.openrouter_model,
            timeout=settings.openrouter_timeout,
        )

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def is_available(self) -> bool:
        return bool(self.api_key)

    def analyze_placement(
        self,
        image_bytes: bytes,
        text: str,
        style: str,
        width: int,
        height: int,
        mime_type: str = "image/jpeg",
    ) -> PlacementPlan:
        """
        Ask the model for the best placement of `text` on the image.

        Raises:
            PlacementAnalysisError: on any transport, HTTP or parsing failure.
        """
        if not self.is_available():
            raise PlacementAnalysisError("No OpenRouter API key configured")

        start = time.perf_counter()
        b64_image = base64.b64encode(image_bytes).decode("utf-8")
        messages = [
            {"role": "system", "content": build_system_prompt(text, style, width, height)},
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": f'Analyze the image and place text: "{text}" in the BEST empty area.',
                    },
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{b64_image}"},
                    },
                ],
            },
        ]

        content = self._complete(messages, max_tokens=2048)
        plan = parse_placement_response(content, style)
        logger.info(
            "AI placement parsed in %.0fms: x=%.1f%%, y=%.1f%%, size=%.1f%%, color=%s",
            (time.perf_counter() - start) * 1000,
            plan.x_percent * 100,
            plan.y_percent * 100,
            plan.font_size_percent * 100,
            plan.color,
        )
        return plan

    def ping(self, prompt: str = "What is 2+2? Return only the number.") -> str:
        """Send a text-only prompt and return the reply; used for diagnostics."""
        if not self.is_available():
            raise PlacementAnalysisError("No OpenRouter API key configured")
        return self._complete([{"role": "user", "content": prompt}], max_tokens=100)

    def _complete(self, messages: list, max_tokens: int) -> str:
        """Single chat-completion round trip returning the reply text."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": 0.1,
            "max_tokens": max_tokens,
        }

        logger.info("Sending request to %s (model: %s)", self.completions_url, self.model)
        try:
            response = requests.post(
                self.completions_url,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise PlacementAnalysisError(f"OpenRouter request failed: {exc}") from exc

        if not response.ok:
            logger.error("OpenRouter returned %s: %s", response.status_code, response.text[:200])
            raise PlacementAnalysisError(f"OpenRouter {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise PlacementAnalysisError("OpenRouter returned a non-JSON body") from exc

        content = self._extract_content(body)
        if not content:
            raise PlacementAnalysisError("No content returned from OpenRouter")

        logger.info("Response received from OpenRouter")
        return content

    @staticmethod
    def _extract_content(body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        choices = body.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return None
        choice = choices[0]
        message = choice.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if content is None:
            content = choice.get("text")
        return content if isinstance(content, str) else None
