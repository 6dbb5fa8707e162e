"""后端调用的重试策略。

重试在同一次调用内顺序进行，不另起任务：
- 只有 retryable 的错误（传输层错误）才会重试；
- 总尝试次数为 max_attempts（默认 3，即首发 + 2 次重试）；
- 两次尝试之间按指数退避等待，单次等待不超过 backoff_max。
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

from cass_core.domain.exceptions import BusinessError
from cass_core.infrastructure.logging.logger import logger


T = TypeVar("T")


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    backoff_base: float = 0.5
    backoff_max: float = 4.0

    @classmethod
    def from_settings(cls, cfg) -> "RetryPolicy":
        return cls(
            max_attempts=getattr(cfg, "max_attempts", 3),
            backoff_base=getattr(cfg, "retry_backoff_base", 0.5),
            backoff_max=getattr(cfg, "retry_backoff_max", 4.0),
        )

    def delay_for(self, attempt: int) -> float:
        """第 attempt 次失败后、下一次尝试前的等待秒数。"""

        return min(self.backoff_max, self.backoff_base * (2 ** (attempt - 1)))


def call_with_retry(
    func: Callable[[int], T],
    policy: RetryPolicy,
    log_ctx: Optional[Dict[str, Any]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """执行 func(attempt)，对可重试的业务异常按策略重试。

    不可重试的异常或最后一次尝试的异常原样抛出。
    """

    attempt = 0
    while True:
        attempt += 1
        try:
            return func(attempt)
        except BusinessError as exc:
            if not exc.retryable or attempt >= policy.max_attempts:
                raise
            delay = policy.delay_for(attempt)
            payload = dict(log_ctx or {})
            payload.update(attempt=attempt, code=exc.code, error=exc.message, retry_in=delay)
            logger.log(logging.WARNING, "Backend call failed, retrying", extra={"extra": payload})
            if delay > 0:
                sleep(delay)
