from __future__ import annotations

import time
from typing import Any, Dict, Iterator, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the monitor service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def get_state(self) -> Dict[str, Any]:
        return self._request("GET", "/state")

    def get_readings(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"count": count} if count is not None else None
        return self._request("GET", "/readings", params=params)

    def register_phone(self, phone_number: str) -> Dict[str, Any]:
        return self._request("POST", "/notifications/phone", json={"phone_number": phone_number})

    def toggle_sms(self) -> Dict[str, Any]:
        return self._request("POST", "/notifications/sms/toggle")

    def toggle_push(self) -> Dict[str, Any]:
        return self._request("POST", "/notifications/push/toggle")

    def acknowledge(self) -> Dict[str, Any]:
        return self._request("POST", "/notifications/modal/acknowledge")

    def check_species(self, species: str) -> Dict[str, Any]:
        return self._request("POST", "/advisory/species", json={"species": species})

    def watch(self, interval: float, iterations: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        seen = 0
        while iterations is None or seen < iterations:
            yield self.get_state()
            seen += 1
            if iterations is None or seen < iterations:
                time.sleep(interval)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
