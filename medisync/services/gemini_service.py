"""
Gemini AI Service - generative-language API integration
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from medisync.config import (
    settings,
    ANALYSIS_PROMPT_TEMPLATE,
    ANALYSIS_FALLBACK_TEXT,
    CHAT_SYSTEM_PROMPT_TEMPLATE,
    CHAT_EMPTY_FALLBACK_TEXT,
    CHAT_ERROR_FALLBACK_TEXT,
    CHAT_GENERATION_CONFIG,
    CHAT_SAFETY_SETTINGS,
)

logger = logging.getLogger(__name__)

COMPLETED = "completed"
DEGRADED = "degraded"


class GeminiServiceError(Exception):
    """Transport, HTTP status or response decoding failure"""


@dataclass
class AIOutcome:
    """Tagged result of a model call: completed(text) or degraded(fallback text, cause)"""
    status: str
    text: str
    cause: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED


def extract_candidate_text(data: Any) -> str:
    """First text part of the first candidate, or an empty string"""
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


class GeminiService:
    """Service for interacting with the Gemini generateContent endpoint"""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-pro",
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize Gemini client settings"""
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        logger.info(f"Gemini service initialized (model={model})")

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def generate_content(
        self,
        prompt: str,
        generation_config: Optional[Dict[str, Any]] = None,
        safety_settings: Optional[List[Dict[str, str]]] = None
    ) -> str:
        """
        Send one prompt and return the first candidate's text

        Args:
            prompt: Full prompt text
            generation_config: Optional sampling parameters
            safety_settings: Optional content-safety thresholds

        Returns:
            Candidate text, empty when the response carries none

        Raises:
            GeminiServiceError: network error, non-2xx status or non-JSON body
        """
        payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if generation_config:
            payload["generationConfig"] = generation_config
        if safety_settings:
            payload["safetySettings"] = safety_settings

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise GeminiServiceError(f"Gemini returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise GeminiServiceError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise GeminiServiceError(f"Gemini response is not JSON: {e}") from e

        return extract_candidate_text(data)

    async def analyze_report(self, filename: str, content: str) -> AIOutcome:
        """
        Ask the model for per-organ metrics in a medical report

        Args:
            filename: Original file name
            content: Report text, already truncated

        Returns:
            AIOutcome, degraded to the canned analysis text on any failure
        """
        prompt = ANALYSIS_PROMPT_TEMPLATE.format(filename=filename, content=content)

        try:
            text = await self.generate_content(prompt)
        except Exception as e:
            logger.error(f"AI analysis error for {filename}: {e}", exc_info=True)
            return AIOutcome(status=DEGRADED, text=ANALYSIS_FALLBACK_TEXT, cause=str(e))

        if not text:
            logger.warning(f"AI analysis for {filename} returned no candidate text")
            return AIOutcome(status=DEGRADED, text=ANALYSIS_FALLBACK_TEXT, cause="empty response")

        logger.info(f"AI analysis completed for {filename} ({len(text)} chars)")
        return AIOutcome(status=COMPLETED, text=text)

    async def chat_reply(
        self,
        message: str,
        metrics: List[Dict[str, Any]],
        reports: List[Dict[str, Any]]
    ) -> AIOutcome:
        """
        Generate an assistant reply grounded in the owner's recent data

        Args:
            message: User's message
            metrics: Recent organ metric rows as dicts
            reports: Recent report rows as dicts

        Returns:
            AIOutcome; empty replies become the help menu, failures the fallback menu
        """
        prompt = self.build_chat_prompt(message, metrics, reports)

        try:
            text = (await self.generate_content(
                prompt,
                generation_config=CHAT_GENERATION_CONFIG,
                safety_settings=CHAT_SAFETY_SETTINGS
            )).strip()
        except Exception as e:
            logger.error(f"Chat error: {e}", exc_info=True)
            return AIOutcome(status=DEGRADED, text=CHAT_ERROR_FALLBACK_TEXT, cause=str(e))

        if not text:
            return AIOutcome(status=COMPLETED, text=CHAT_EMPTY_FALLBACK_TEXT)

        logger.info(f"Generated chat reply ({len(text)} chars)")
        return AIOutcome(status=COMPLETED, text=text)

    def build_chat_prompt(
        self,
        message: str,
        metrics: List[Dict[str, Any]],
        reports: List[Dict[str, Any]]
    ) -> str:
        """Embed metrics and reports context plus the user message in the system prompt"""
        metrics_context = self._format_metrics(metrics)
        reports_context = self._format_reports(reports)

        return CHAT_SYSTEM_PROMPT_TEMPLATE.format(
            metrics_context=f"Current Health Metrics:\n{metrics_context}\n" if metrics_context else "",
            reports_context=f"Recent Reports:\n{reports_context}\n" if reports_context else "",
            message=message
        )

    def _format_metrics(self, metrics: List[Dict[str, Any]]) -> str:
        """Format organ metrics for system prompt"""
        return "\n".join(
            f"{m.get('organ_type')}: {m.get('metric_name')} = {m.get('metric_value')} ({m.get('status')})"
            for m in metrics
        )

    def _format_reports(self, reports: List[Dict[str, Any]]) -> str:
        """Format report list for system prompt"""
        return "\n".join(
            f"Report: {r.get('filename')} ({r.get('upload_date')})"
            for r in reports
        )


_gemini_service: Optional[GeminiService] = None


def get_gemini_service() -> GeminiService:
    """Shared service built from settings"""
    global _gemini_service
    if _gemini_service is None:
        _gemini_service = GeminiService(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            api_base=settings.GEMINI_API_BASE,
            timeout=settings.GEMINI_TIMEOUT_SECONDS
        )
    return _gemini_service
