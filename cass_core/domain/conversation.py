"""会话状态与内存存储。

CASS 只有一个逻辑会话，不做跨进程持久化；ConversationState 由
ChatSession 显式创建并持有，InMemoryConversationStore 负责所有写操作。

不变量：
- messages 初始化后永不为空（至少包含当前人格的欢迎语）。
- 只追加，不删除单条消息；切换人格时整体清空并重新写入欢迎语。
"""

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

from cass_core.domain.exceptions import ValidationError
from cass_core.domain.models import Message
from cass_core.personalities.registry import Personality, welcome_message_for


@dataclass
class ConversationState:
    """单个会话的全部可变状态。

    generation 在每次切换人格时加一，用来识别切换之前发出、
    切换之后才返回的过期后端结果。
    """

    selected_personality: Personality
    messages: List[Message] = field(default_factory=list)
    last_user_query: Optional[str] = None
    last_ai_response: Optional[str] = None
    user_has_provided_location: bool = False
    generation: int = 0


class ConversationListener(Protocol):
    """会话事件的订阅者（通常是语音播报桥接）。"""

    def assistant_message_added(self, message: Message, personality: Personality) -> None:
        ...

    def personality_switched(self, personality: Personality) -> None:
        ...


class InMemoryConversationStore:
    def __init__(
        self,
        personality: Personality = Personality.FRIEND,
        listeners: Optional[Sequence[ConversationListener]] = None,
    ):
        self._lock = threading.RLock()
        self._listeners: List[ConversationListener] = list(listeners or [])
        self.state = ConversationState(selected_personality=personality)
        self.state.messages.append(Message(content=welcome_message_for(personality), is_user=False))

    def add_listener(self, listener: ConversationListener) -> None:
        self._listeners.append(listener)

    @property
    def messages(self) -> List[Message]:
        with self._lock:
            return list(self.state.messages)

    def append_user(self, text: str) -> Message:
        if not text or not text.strip():
            raise ValidationError(code="EMPTY_MESSAGE", message="User message must not be empty")
        message = Message(content=text, is_user=True)
        with self._lock:
            self.state.messages.append(message)
        return message

    def start_turn(self, text: str) -> Tuple[Message, int]:
        """追加用户消息并记录 last_user_query，同时返回当前代数。

        两步在同一把锁内完成，切换人格不会插在中间。
        """
        with self._lock:
            message = self.append_user(text)
            self.state.last_user_query = text
            return message, self.state.generation

    def append_assistant(self, text: str, expected_generation: Optional[int] = None) -> Optional[Message]:
        """追加一条 CASS 消息，并通知订阅者（触发语音播报）。

        传入 expected_generation 时，若期间发生过人格切换则丢弃该消息并返回 None。
        """
        message = Message(content=text, is_user=False)
        with self._lock:
            if expected_generation is not None and expected_generation != self.state.generation:
                return None
            self.state.messages.append(message)
            personality = self.state.selected_personality
        for listener in self._listeners:
            listener.assistant_message_added(message, personality)
        return message

    def switch_personality(self, personality: Personality) -> None:
        """清空消息并写入新人格的欢迎语。

        先通知订阅者停止正在进行的播报，再重置状态；
        欢迎语本身不经过 append_assistant，因此不会被朗读。
        """
        for listener in self._listeners:
            listener.personality_switched(personality)
        with self._lock:
            self.state.selected_personality = personality
            self.state.messages = [Message(content=welcome_message_for(personality), is_user=False)]
            self.state.generation += 1

    def last_user_message(self) -> Optional[Message]:
        with self._lock:
            for message in reversed(self.state.messages):
                if message.is_user:
                    return message
        return None

    def last_assistant_message(self) -> Optional[Message]:
        with self._lock:
            for message in reversed(self.state.messages):
                if not message.is_user:
                    return message
        return None
