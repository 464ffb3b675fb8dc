# foodmarket/services/ai_client.py
import json
from typing import Any, Dict

import requests
from requests import RequestException

from foodmarket.domain.errors import ExternalServiceError, ServiceUnavailableError
from foodmarket.utils.retry import http_retry
from foodmarket.utils.settings import GEMINI_API_KEY, GEMINI_API_URL, GEMINI_MODEL, AI_TIMEOUT_SECONDS
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)


class WorkoutPlanClient:
    """Generative-AI collaborator: prompt in, parsed JSON plan out.

    Talks to the Gemini ``generateContent`` REST endpoint.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: int = AI_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.api_key = GEMINI_API_KEY if api_key is None else api_key
        self.model = model or GEMINI_MODEL
        self.base_url = (base_url or GEMINI_API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate_plan(self, prompt: str) -> Dict[str, Any]:
        if not self.api_key:
            raise ServiceUnavailableError("Workout planner is not configured")

        try:
            data = self._post(prompt)
        except RequestException as e:
            logger.error(f"Workout planner request failed: {e}")
            raise ExternalServiceError("Workout planner request failed") from e

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
            return parse_plan(text)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected workout planner response: {e}")
            raise ExternalServiceError("Workout planner returned an unreadable plan") from e

    @http_retry()
    def _post(self, prompt: str) -> dict:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        logger.info(f"WorkoutPlanClient POST {url}")

        resp = self.session.post(
            url,
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"responseMimeType": "application/json"},
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()


def parse_plan(text: str) -> Dict[str, Any]:
    """Parse the JSON object in a model reply, tolerating markdown fences."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)

    plan = json.loads(cleaned)
    if not isinstance(plan, dict):
        raise ValueError("plan must be a JSON object")
    return plan
