"""统一的消息与后端调用数据模型。

本模块定义了 CASS 内部在各组件之间共享的标准数据结构：

- Message: 一条不可变的对话消息（用户或 CASS）。
- RoutingDecision: Router 对一次用户输入的分流结果。
- BackendRequest: 发往补全/搜索后端的一次 HTTP 请求描述。
- BackendResult: 后端成功返回（2xx）后解析出的统一结果。

后端失败不通过 BackendResult 表达，而是抛出 domain.exceptions 中的异常，
由重试循环和 ChatSession 边界分别处理。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Literal, Optional
from uuid import uuid4


# 后端类型：completion 为生成式补全，search 为实时搜索
BackendKind = Literal["completion", "search"]


def _new_message_id() -> str:
    return f"m-{uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """一条对话消息，创建后不可修改。

    - content: 纯文本内容。
    - is_user: True 表示用户发出，False 表示 CASS 的回复（包括欢迎语）。
    - id: 不透明的唯一标识，仅用于 UI 关联。
    - created_at: 创建时间，消息列表的顺序以插入顺序为准。
    """

    content: str
    is_user: bool
    id: str = field(default_factory=_new_message_id)
    created_at: datetime = field(default_factory=_utcnow)


class RoutingDecision(str, Enum):
    """一次用户输入的处理路径。"""

    NEEDS_LOCATION = "needs_location"
    USE_SEARCH = "use_search"
    USE_COMPLETION = "use_completion"


@dataclass
class BackendRequest:
    """一次发往后端的 POST 请求。

    Client 负责构造 payload，重试循环只关心能否重新发送同一个请求。
    """

    kind: BackendKind
    url: str
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class BackendResult:
    """后端 2xx 响应解析后的结果。

    - text: 取出的候选文本；解析失败时为固定兜底文案。
    - parsed: 是否成功解析出预期字段。
    - attempts: 实际发起的 HTTP 次数（含重试）。
    - raw: 原始响应 JSON，用于调试或日志记录。
    """

    kind: BackendKind
    text: str
    status_code: int
    parsed: bool = True
    attempts: int = 1
    raw: Optional[Any] = None
