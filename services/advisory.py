"""Client for the optional external advisory (LLM) service."""

from __future__ import annotations

import json
import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from services.monitor import MonitorSnapshot
from settings import get_settings

logger = logging.getLogger(__name__)

FALLBACK_REASON = "connection error"
FALLBACK_ANSWER = "The advisory service is unavailable right now. Please try again later."


class SpeciesCompatibility(BaseModel):
    """Verdict returned by the external advisory service."""

    compatible: bool
    reason: str


def fallback_compatibility() -> SpeciesCompatibility:
    return SpeciesCompatibility(compatible=False, reason=FALLBACK_REASON)


def build_prompt(snapshot: MonitorSnapshot, question: str, history_points: int = 7) -> str:
    reading = snapshot.reading
    recent = snapshot.history[-history_points:]
    history_text = ", ".join(
        f"{item.timestamp_label}: {item.salinity:.2f} ppt" for item in recent
    ) or "no history"
    return (
        "You are an aquaculture advisor for a river fish farm.\n"
        f"Current salinity: {reading.salinity:.2f} ppt.\n"
        f"Current water temperature: {reading.temperature:.1f} °C.\n"
        f"Current advisory: {snapshot.advisory.kind.value} ({snapshot.advisory.message}).\n"
        f"Recent salinity history: {history_text}.\n"
        f"{question}"
    )


def species_question(species: str) -> str:
    return (
        f"Can {species} be raised in this water? Reply only with JSON of the form "
        '{"compatible": true or false, "reason": "short explanation"}.'
    )


def _strip_code_fence(text: str) -> str:
    candidate = text.strip()
    if candidate.startswith("```"):
        candidate = candidate.split("\n", 1)[1] if "\n" in candidate else ""
        if candidate.rstrip().endswith("```"):
            candidate = candidate.rstrip()[:-3]
    return candidate.strip()


def parse_compatibility(text: str) -> SpeciesCompatibility:
    """Parse a model reply into a compatibility verdict, raising ``ValueError`` if malformed."""
    try:
        payload = json.loads(_strip_code_fence(text))
        return SpeciesCompatibility.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError("Advisory reply is not a compatibility verdict.") from exc


class AdvisoryClient:
    """Minimal async HTTP client for the advisory endpoint.

    The service receives ``{"prompt": ...}`` and answers with either plain
    text or a JSON document. Failures never propagate to callers: they are
    logged and replaced by a fallback value.
    """

    def __init__(
        self,
        url: Optional[str],
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.url)

    async def complete(self, prompt: str) -> str:
        if not self.url:
            raise httpx.RequestError("Advisory service URL is not configured.")
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, json={"prompt": prompt})
            response.raise_for_status()
        return _extract_text(response)

    async def ask(self, snapshot: MonitorSnapshot, question: str) -> str:
        try:
            return await self.complete(build_prompt(snapshot, question))
        except httpx.HTTPError as exc:
            logger.warning("Advisory request failed", extra={"reason": str(exc)})
            return FALLBACK_ANSWER

    async def check_species(self, species: str, snapshot: MonitorSnapshot) -> SpeciesCompatibility:
        try:
            text = await self.complete(build_prompt(snapshot, species_question(species)))
            return parse_compatibility(text)
        except httpx.HTTPError as exc:
            logger.warning("Species check request failed", extra={"reason": str(exc)})
        except ValueError as exc:
            logger.warning("Species check reply was malformed", extra={"reason": str(exc)})
        return fallback_compatibility()


def _extract_text(response: httpx.Response) -> str:
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return response.text
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict):
        for key in ("text", "response", "output"):
            value = payload.get(key)
            if isinstance(value, str):
                return value
    return json.dumps(payload)


def build_default_advisory_client() -> AdvisoryClient:
    settings = get_settings()
    return AdvisoryClient(url=settings.advisory_url, timeout=settings.advisory_timeout)
