"""对外 API 服务模块。

提供简化的函数接口供上层应用（聊天界面、语音按钮、人格选择器）调用，
返回值都是可以直接序列化的 dict。需要多个独立会话时请直接构造 ChatSession。
"""

from typing import Optional, Dict, Any, List

from cass_core.agents.chat_session import ChatSession, create_session
from cass_core.domain.models import Message
from cass_core.infrastructure.logging.logger import logger


_session: Optional[ChatSession] = None


def get_default_session() -> ChatSession:
    """获取进程内默认会话（懒加载）。"""
    global _session
    if _session is None:
        _session = create_session()
    return _session


def reset_default_session() -> None:
    global _session
    _session = None


def _message_dict(message: Message) -> Dict[str, Any]:
    return {
        "id": message.id,
        "content": message.content,
        "is_user": message.is_user,
        "created_at": message.created_at.isoformat(),
    }


def send(text: str) -> Dict[str, Any]:
    """运行一轮对话。

    Args:
        text: 用户输入（语音识别结果或键盘输入）

    Returns:
        包含人格、CASS 回复（可能为 None）和 busy 状态的字典

    Raises:
        TurnInProgressError: 上一轮仍在处理
    """
    session = get_default_session()
    try:
        reply = session.send_message(text)
    except Exception as e:
        logger.error(f"Turn failed: {e}", extra={"extra": {"error": str(e)}})
        raise
    return {
        "personality": session.selected_personality.value,
        "assistant_message": _message_dict(reply) if reply else None,
        "is_processing": session.is_processing,
    }


def switch_personality(name: str) -> Dict[str, Any]:
    """切换人格并返回新的欢迎语。"""
    session = get_default_session()
    session.switch_personality(name)
    welcome = session.messages[0]
    return {
        "personality": session.selected_personality.value,
        "welcome_message": _message_dict(welcome),
    }


def get_messages() -> List[Dict[str, Any]]:
    """获取当前会话的全部消息（按插入顺序）。"""
    return [_message_dict(m) for m in get_default_session().messages]
