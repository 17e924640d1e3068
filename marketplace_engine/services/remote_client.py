import logging
import time
from typing import Any, Dict, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from marketplace_engine.config import (
    REMOTE_API_KEY, REMOTE_BASE_URL, REMOTE_MAX_RETRIES, REMOTE_RETRY_DELAY_MS,
    HTTP_CONNECT_TIMEOUT_S, HTTP_READ_TIMEOUT_S, REMOTE_SYNC_READ_TIMEOUT_S,
)
from marketplace_engine.errors import ErrorKind, RemoteError
from marketplace_engine.schemas.remote import RemoteRunResponse, RemoteStatusResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class RemoteExecutionClient:
    """
    Client for the remote GPU job API.

    Only 5xx responses and transport failures are retried; every 4xx
    (rate limiting included) fails on the first attempt.
    """

    def __init__(
        self,
        api_key: str = REMOTE_API_KEY,
        base_url: str = REMOTE_BASE_URL,
        max_retries: int = REMOTE_MAX_RETRIES,
        retry_delay_ms: int = REMOTE_RETRY_DELAY_MS,
        connect_timeout_s: float = HTTP_CONNECT_TIMEOUT_S,
        read_timeout_s: float = HTTP_READ_TIMEOUT_S,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms
        self.connect_timeout_s = connect_timeout_s
        self.read_timeout_s = read_timeout_s

    def submit(self, endpoint_id: str, payload: Dict[str, Any]) -> RemoteRunResponse:
        t0 = time.time()
        try:
            resp = self._request("POST", self._url(endpoint_id, "run"), body={"input": payload})
            out = self._parse(resp, RemoteRunResponse)
        except RemoteError as e:
            logger.error(f"Remote submit failed on {endpoint_id}: {e} ({self._elapsed_ms(t0)}ms)")
            raise
        logger.info(f"Remote job {out.id} submitted on {endpoint_id} status={out.status} ({self._elapsed_ms(t0)}ms)")
        return out

    def submit_sync(self, endpoint_id: str, payload: Dict[str, Any]) -> RemoteStatusResponse:
        t0 = time.time()
        try:
            resp = self._request("POST", self._url(endpoint_id, "runsync"), body={"input": payload},
                                 read_timeout_s=max(self.read_timeout_s, REMOTE_SYNC_READ_TIMEOUT_S))
            out = self._parse(resp, RemoteStatusResponse)
        except RemoteError as e:
            logger.error(f"Remote sync submit failed on {endpoint_id}: {e} ({self._elapsed_ms(t0)}ms)")
            raise
        logger.info(f"Remote sync job {out.id} finished on {endpoint_id} status={out.status} ({self._elapsed_ms(t0)}ms)")
        return out

    def get_status(self, endpoint_id: str, job_id: str) -> RemoteStatusResponse:
        t0 = time.time()
        try:
            resp = self._request("GET", self._url(endpoint_id, "status", job_id))
            out = self._parse(resp, RemoteStatusResponse)
        except RemoteError as e:
            logger.error(f"Remote status failed for {job_id} on {endpoint_id}: {e} ({self._elapsed_ms(t0)}ms)")
            raise
        logger.debug(f"Remote job {job_id} status={out.status} ({self._elapsed_ms(t0)}ms)")
        return out

    def cancel(self, endpoint_id: str, job_id: str) -> None:
        t0 = time.time()
        try:
            self._request("POST", self._url(endpoint_id, "cancel", job_id))
        except RemoteError as e:
            logger.error(f"Remote cancel failed for {job_id} on {endpoint_id}: {e} ({self._elapsed_ms(t0)}ms)")
            raise
        logger.info(f"Remote job {job_id} cancelled on {endpoint_id} ({self._elapsed_ms(t0)}ms)")

    def _url(self, endpoint_id: str, *parts: str) -> str:
        return "/".join([self.base_url, endpoint_id, *parts])

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "Authorization": f"Bearer {self.api_key}"}

    def _request(self, method: str, url: str, body: Optional[dict] = None,
                 read_timeout_s: Optional[float] = None) -> requests.Response:
        timeout = (self.connect_timeout_s, read_timeout_s or self.read_timeout_s)
        attempts = self.max_retries + 1
        last_error: Optional[RemoteError] = None

        for attempt in range(1, attempts + 1):
            try:
                resp = requests.request(method, url, json=body, headers=self._headers(), timeout=timeout)
            except requests.RequestException as e:
                last_error = RemoteError(
                    ErrorKind.REMOTE_REQUEST_FAILED,
                    f"Remote request failed after {attempt} attempt(s): {e}",
                )
                if attempt < attempts:
                    logger.warning(f"Remote request error on {url}, retrying ({attempt}/{self.max_retries}): {e}")
                    self._sleep()
                    continue
                raise last_error

            if resp.status_code == 429:
                raise RemoteError(
                    ErrorKind.REMOTE_RATE_LIMITED,
                    "Remote rate limit exceeded",
                    remote_status=429,
                    remote_body=resp.text,
                )

            if resp.status_code >= 500:
                last_error = RemoteError(
                    ErrorKind.REMOTE_REQUEST_FAILED,
                    f"Remote server error: {resp.status_code}",
                    remote_status=resp.status_code,
                    remote_body=resp.text,
                )
                if attempt < attempts:
                    logger.warning(f"Remote returned {resp.status_code} on {url}, retrying ({attempt}/{self.max_retries})")
                    self._sleep()
                    continue
                raise last_error

            if resp.status_code >= 400 or resp.status_code < 200:
                raise RemoteError(
                    ErrorKind.REMOTE_REQUEST_FAILED,
                    f"Remote request failed: {resp.status_code}",
                    remote_status=resp.status_code,
                    remote_body=resp.text,
                    status_code=404 if resp.status_code >= 404 else 400,
                )

            return resp

        # only reachable with a negative max_retries
        raise last_error or RemoteError(ErrorKind.REMOTE_REQUEST_FAILED, "Remote request was never attempted")

    def _parse(self, resp: requests.Response, model: Type[T]) -> T:
        try:
            return model.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise RemoteError(
                ErrorKind.REMOTE_INVALID_RESPONSE,
                f"Invalid response from remote: {e}",
                remote_status=resp.status_code,
                remote_body=resp.text,
            )

    def _sleep(self):
        if self.retry_delay_ms > 0:
            time.sleep(self.retry_delay_ms / 1000.0)

    @staticmethod
    def _elapsed_ms(t0: float) -> int:
        return int((time.time() - t0) * 1000)
