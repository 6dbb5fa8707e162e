"""JSON-over-HTTP 后端的公共调用逻辑。

补全与搜索两个后端走同一套流程：

1. 预检网络连通性，已知断网时直接抛 NetworkUnavailableError，不发请求。
2. POST JSON，传输层异常包装为 TransportError（可重试）。
3. 非 2xx 状态码包装为 BackendError（不重试），并把响应体写入日志。
4. 2xx 但取不到预期字段时不算错误，返回固定兜底文案。

具体后端只需实现 _extract_text()，并自行构造 BackendRequest。
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from cass_core.config.settings import settings
from cass_core.domain.exceptions import BackendError, NetworkUnavailableError, TransportError
from cass_core.domain.models import BackendRequest, BackendResult
from cass_core.infrastructure.logging.logger import logger
from cass_core.providers.base import Connectivity
from cass_core.providers.retry import RetryPolicy, call_with_retry


PARSE_FALLBACK = "Sorry, I couldn't understand the response."


class JsonBackendClient(ABC):
    name = "backend"

    def __init__(
        self,
        cfg=settings,
        connectivity: Optional[Connectivity] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        # connectivity 为空时视为始终在线
        self._settings = cfg
        self._connectivity = connectivity
        self._policy = RetryPolicy.from_settings(cfg)
        self._sleep = sleep

    def _send(self, request: BackendRequest) -> BackendResult:
        log_ctx: Dict[str, Any] = {"backend": self.name, "kind": request.kind}
        attempts = 0

        def attempt_once(attempt: int) -> Tuple[int, Any]:
            nonlocal attempts
            attempts = attempt
            return self._post_once(request, attempt, log_ctx)

        status_code, data = call_with_retry(attempt_once, self._policy, log_ctx, sleep=self._sleep)
        text = self._extract_text(data)
        if text is None:
            logger.warning(
                "Could not parse backend response",
                extra={"extra": {**log_ctx, "raw": data}},
            )
            return BackendResult(
                kind=request.kind,
                text=PARSE_FALLBACK,
                status_code=status_code,
                parsed=False,
                attempts=attempts,
                raw=data,
            )
        return BackendResult(
            kind=request.kind,
            text=text,
            status_code=status_code,
            attempts=attempts,
            raw=data,
        )

    def _post_once(self, request: BackendRequest, attempt: int, log_ctx: Dict[str, Any]) -> Tuple[int, Any]:
        if self._connectivity is not None and not self._connectivity.is_connected:
            logger.warning("No network connection available", extra={"extra": log_ctx})
            raise NetworkUnavailableError(code="NETWORK_UNAVAILABLE", message="No network connection")
        logger.info("Sending backend request", extra={"extra": {**log_ctx, "attempt": attempt}})
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(request.url, json=request.payload, headers=request.headers)
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时、连接重置等
            raise TransportError(code="TRANSPORT_ERROR", message=str(e))
        logger.info(
            "Backend response received",
            extra={"extra": {**log_ctx, "status": resp.status_code}},
        )
        if not 200 <= resp.status_code < 300:
            logger.error(
                "Backend error response",
                extra={"extra": {**log_ctx, "status": resp.status_code, "body": resp.text}},
            )
            raise BackendError(
                code="BACKEND_ERROR",
                message=f"{self.name} request failed with status {resp.status_code}",
                http_status=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError:
            data = None
        return resp.status_code, data

    @abstractmethod
    def _extract_text(self, data: Any) -> Optional[str]:
        """从 2xx 响应体中取出文本；取不到时返回 None。"""
