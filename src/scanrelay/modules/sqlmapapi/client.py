"""httpx adapter for the sqlmap REST API server."""

import logging
from typing import Any

import httpx

from scanrelay.errors import ApplicationError, TransportError

from .base import RemoteScanClient
from .models import RemoteAck, RemoteStatus, ScanResult

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8775"
JSON_HEADERS = {"Content-Type": "application/json"}


def format_log_entry(entry: Any) -> str:
    """Render one log entry as a single line."""
    if isinstance(entry, dict):
        parts = [
            str(entry.get("datetime", "")).strip(),
            f"[{entry['level']}]" if entry.get("level") else "",
            str(entry.get("message", "")).strip(),
        ]
        return " ".join(part for part in parts if part)
    return str(entry)


class SqlmapApiClient(RemoteScanClient):
    """Async client for ``sqlmapapi.py -s`` servers."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self.client

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        client = self._ensure_client()
        try:
            response = await client.request(
                method,
                path,
                json=json,
                headers=JSON_HEADERS if json is not None else None,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"{method} {path} timed out after {self.timeout}s") from exc
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 500:
            raise TransportError(
                f"{method} {path} returned {response.status_code}: {response.text.strip()}"
            )
        if response.status_code >= 400:
            raise ApplicationError(
                f"{method} {path} returned {response.status_code}: {response.text.strip()}"
            )
        return response

    async def _request_json(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        response = await self._request(method, path, json=json)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ApplicationError(f"{method} {path} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise ApplicationError(f"{method} {path} returned unexpected payload")
        return payload

    @staticmethod
    def _failure_message(payload: dict[str, Any]) -> str:
        return str(payload.get("message") or "Unknown error")

    async def create_task(self) -> str:
        payload = await self._request_json("GET", "/task/new")
        task_id = payload.get("taskid")
        if not task_id:
            raise ApplicationError(f"Failed to create task: {self._failure_message(payload)}")
        logger.info("Created remote task %s", task_id)
        return str(task_id)

    async def set_options(self, task_id: str, options: dict[str, Any]) -> RemoteAck:
        if not options:
            logger.info("No options to set for task %s", task_id)
            return RemoteAck(success=True, message="no options")
        payload = await self._request_json("POST", f"/option/{task_id}/set", json=options)
        ack = RemoteAck(
            success=bool(payload.get("success")),
            message=str(payload.get("message", "")),
        )
        if ack.success:
            logger.info("Set options for task %s: %s", task_id, ", ".join(options))
        return ack

    async def start(self, task_id: str) -> RemoteAck:
        payload = await self._request_json("POST", f"/scan/{task_id}/start", json={})
        ack = RemoteAck(
            success=payload.get("success") is True,
            message=str(payload.get("message", "")),
        )
        if ack.success:
            logger.info("Started scan for task %s", task_id)
        return ack

    async def poll_status(self, task_id: str) -> RemoteStatus:
        payload = await self._request_json("GET", f"/scan/{task_id}/status")
        if payload.get("success") is False:
            raise ApplicationError(
                f"Failed to get scan status: {self._failure_message(payload)}", task_id=task_id
            )
        return RemoteStatus(
            status=str(payload.get("status", "")),
            return_code=payload.get("returncode"),
        )

    async def fetch_result(self, task_id: str) -> ScanResult:
        payload = await self._request_json("GET", f"/scan/{task_id}/data")
        if payload.get("success") is False:
            raise ApplicationError(
                f"Failed to get scan data: {self._failure_message(payload)}", task_id=task_id
            )
        errors = payload.get("error") or []
        return ScanResult(
            data=payload.get("data", []),
            errors=[str(item) for item in errors] if isinstance(errors, list) else [str(errors)],
        )

    async def fetch_log(self, task_id: str) -> list[str]:
        payload = await self._request_json("GET", f"/scan/{task_id}/log")
        if payload.get("success") is False:
            raise ApplicationError(
                f"Failed to get scan log: {self._failure_message(payload)}", task_id=task_id
            )
        return [format_log_entry(entry) for entry in payload.get("log") or []]

    async def stop(self, task_id: str) -> None:
        await self._request("GET", f"/scan/{task_id}/stop")
        logger.info("Stopped scan for task %s", task_id)

    async def kill(self, task_id: str) -> None:
        await self._request("GET", f"/scan/{task_id}/kill")
        logger.info("Killed scan for task %s", task_id)

    async def delete_task(self, task_id: str) -> None:
        await self._request("GET", f"/task/{task_id}/delete")
        logger.info("Deleted task %s", task_id)
