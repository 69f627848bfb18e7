"""Group name and slogan generation through the Gemini REST API.

The call is best-effort: every failure is returned as a :class:`ThemeFailure`
value instead of being raised, so callers must branch on the result.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import requests

from core import get_logger, ThemeDefaults

logger = get_logger(__name__)


@dataclass(frozen=True)
class GroupTheme:
    name: str
    slogan: Optional[str] = None


@dataclass(frozen=True)
class ThemeSuccess:
    """Themes in group order; ``None`` marks an unusable entry."""
    themes: Tuple[Optional[GroupTheme], ...]

    @property
    def usable(self) -> int:
        return sum(1 for theme in self.themes if theme is not None)


@dataclass(frozen=True)
class ThemeFailure:
    reason: str


ThemeResult = Union[ThemeSuccess, ThemeFailure]


def build_prompt(count: int) -> str:
    return (
        f"為這 {count} 個小組分別生成一個有趣的「中文組名」和「一個組隊口號」。"
        "主題要是適合辦公室團隊建設或派對。"
    )


def build_payload(count: int) -> Dict[str, Any]:
    """Request body asking for a JSON array of ``{name, slogan}`` objects."""
    return {
        "contents": [{"role": "user", "parts": [{"text": build_prompt(count)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "name": {"type": "STRING", "description": "組名"},
                        "slogan": {"type": "STRING", "description": "口號"},
                    },
                    "required": ["name", "slogan"],
                },
            },
        },
    }


def _coerce_theme(item: Any) -> Optional[GroupTheme]:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    slogan = item.get("slogan")
    if not isinstance(slogan, str) or not slogan.strip():
        slogan = None
    return GroupTheme(name=name.strip(), slogan=slogan.strip() if slogan else None)


def parse_themes(text: Optional[str]) -> ThemeResult:
    """Parse the model's text output into themes.

    An empty response is an empty array. Anything that is not a JSON array
    is a failure; malformed elements become ``None`` entries.
    """
    try:
        data = json.loads(text or "[]")
    except ValueError as e:
        return ThemeFailure(f"response is not valid JSON: {e}")
    if not isinstance(data, list):
        return ThemeFailure(f"expected a JSON array, got {type(data).__name__}")
    return ThemeSuccess(themes=tuple(_coerce_theme(item) for item in data))


def extract_text(envelope: Any) -> Optional[str]:
    """Pull the generated text out of a ``generateContent`` response."""
    try:
        parts = envelope["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(parts, list):
        return None
    texts = [
        part["text"] for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    ]
    return "".join(texts) or None


class GeminiThemeGenerator:
    """Client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = ThemeDefaults.MODEL,
        base_url: str = ThemeDefaults.BASE_URL,
        timeout: int = ThemeDefaults.TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate(self, count: int) -> ThemeResult:
        """Request ``count`` group themes.

        Args:
            count: Number of groups to name

        Returns:
            ThemeSuccess with per-group themes, or ThemeFailure with a reason
        """
        if count < 1:
            return ThemeFailure("nothing to generate")
        if not self.configured:
            return ThemeFailure("API key is not configured")

        try:
            response = self.session.post(
                self.url,
                headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
                json=build_payload(count),
                timeout=self.timeout,
            )
            response.raise_for_status()
            envelope = response.json()
        except requests.Timeout:
            return ThemeFailure(f"request timed out after {self.timeout}s")
        except requests.RequestException as e:
            return ThemeFailure(f"request failed: {e}")
        except ValueError as e:
            return ThemeFailure(f"response envelope is not JSON: {e}")

        text = extract_text(envelope)
        if text is None:
            return ThemeFailure("response envelope carries no text")
        result = parse_themes(text)
        if isinstance(result, ThemeSuccess):
            logger.info(f"Generated {result.usable}/{count} group themes with {self.model}")
        return result
