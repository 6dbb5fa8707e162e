"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 ChatSession 边界做统一捕获，并转换成固定的用户提示。

retryable 标记决定后端调用的重试循环是否再次尝试：
只有传输层错误（DNS、超时、连接重置）才值得重试。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "BACKEND_ERROR"）。
        message: 错误信息，只写日志，不直接展示给用户。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 backend、body 等）。
    """

    retryable = False

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkUnavailableError(BusinessError):
    """预检发现网络已断开，不发起任何 HTTP 请求。"""


class TransportError(BusinessError):
    """传输层错误，例如 DNS 失败、超时、连接被重置。"""

    retryable = True


class BackendError(BusinessError):
    """后端返回非 2xx 状态码。状态码只记录到日志。"""


class ValidationError(BusinessError):
    """参数或配置校验失败，例如缺少 API 密钥、空消息。"""


class TurnInProgressError(BusinessError):
    """上一轮对话仍在处理中时又发起了新一轮。"""
