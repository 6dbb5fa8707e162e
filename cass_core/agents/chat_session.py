"""对话会话（单轮驱动）核心模块。

ChatSession 持有一个 ConversationStore，并按以下流程驱动每一轮对话：

1. 设置 busy 标记，同一时刻只允许一轮在处理中。
2. 追加用户消息，记录 last_user_query。
3. 调用 LangGraph 流程：路由 -> 追问位置 / 搜索 / 补全 -> 清洗。
4. 若期间未切换人格，追加 CASS 回复（触发语音播报）；否则丢弃过期结果。
5. 无论成功失败都清除 busy 标记，回到空闲状态。
"""

from typing import Optional, Dict, Any, List, Union
from uuid import uuid4
import threading
import time
import logging

from cass_core.config.settings import settings
from cass_core.domain.conversation import ConversationState, InMemoryConversationStore
from cass_core.domain.exceptions import TurnInProgressError
from cass_core.domain.models import Message, RoutingDecision
from cass_core.flows.graph import FAILURE_MESSAGE, build_turn_graph
from cass_core.infrastructure.logging.logger import logger
from cass_core.personalities.registry import Personality, resolve_personality
from cass_core.providers import create_completion_client, create_search_client
from cass_core.providers.base import CompletionClient, Connectivity, SearchClient
from cass_core.providers.network import NetworkMonitor
from cass_core.routing.router import Router
from cass_core.speech.base import LoggingSynthesizer, SpeechNotifier, SpeechSynthesizer


class ChatSession:
    def __init__(
        self,
        completion_client: Optional[CompletionClient] = None,
        search_client: Optional[SearchClient] = None,
        cfg=settings,
        connectivity: Optional[Connectivity] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
        router: Optional[Router] = None,
        personality: Optional[Personality] = None,
    ):
        """初始化会话。

        Args:
            completion_client: 补全后端（默认按配置创建 GeminiClient）
            search_client: 搜索后端（默认按配置创建 TavilyClient）
            cfg: 配置对象，默认使用全局 settings
            connectivity: 网络连通性信号，为空时视为始终在线
            synthesizer: 语音合成协作方，默认只写日志
            router: 路由器，默认使用配置中的关键词
            personality: 初始人格，默认取 cfg.default_personality
        """
        self._settings = cfg
        initial = personality or resolve_personality(getattr(cfg, "default_personality", "friend"))
        self._synthesizer = synthesizer or LoggingSynthesizer()
        self._store = InMemoryConversationStore(initial, listeners=[SpeechNotifier(self._synthesizer)])
        self._router = router or Router.from_settings(cfg)
        self._completion_client = completion_client or create_completion_client(cfg, connectivity)
        self._search_client = search_client or create_search_client(cfg, connectivity)
        self._graph = build_turn_graph(
            store=self._store,
            router=self._router,
            completion_client=self._completion_client,
            search_client=self._search_client,
            max_context_messages=getattr(cfg, "max_context_messages", 4),
            summary_threshold=getattr(cfg, "summary_threshold", 10),
        )
        self._busy_lock = threading.Lock()
        self._is_processing = False

    # ---- 只读访问 ----

    @property
    def store(self) -> InMemoryConversationStore:
        return self._store

    @property
    def state(self) -> ConversationState:
        return self._store.state

    @property
    def messages(self) -> List[Message]:
        return self._store.messages

    @property
    def selected_personality(self) -> Personality:
        return self._store.state.selected_personality

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def last_user_query(self) -> Optional[str]:
        return self._store.state.last_user_query

    @property
    def last_ai_response(self) -> Optional[str]:
        return self._store.state.last_ai_response

    # ---- 状态变更 ----

    def provide_location(self, value: bool = True) -> None:
        """标记用户已经提供过位置，之后的位置类问题直接走搜索。"""
        self._store.state.user_has_provided_location = value

    def switch_personality(self, personality: Union[Personality, str]) -> None:
        """切换人格：停止播报、清空消息并写入新的欢迎语。

        不会取消正在进行的后端调用；其结果返回时会因代数不一致被丢弃。
        """
        if not isinstance(personality, Personality):
            personality = resolve_personality(personality)
        self._store.switch_personality(personality)
        logger.info(
            "Switched personality",
            extra={"extra": {"personality": personality.value, "generation": self._store.state.generation}},
        )

    def send_message(self, text: str) -> Optional[Message]:
        """执行一轮对话。

        Returns:
            追加的 CASS 消息；空输入或结果因人格切换而过期时返回 None。

        Raises:
            TurnInProgressError: 上一轮尚未结束。
        """
        if not text or not text.strip():
            return None
        with self._busy_lock:
            if self._is_processing:
                raise TurnInProgressError(code="TURN_IN_PROGRESS", message="A turn is already being processed")
            self._is_processing = True

        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "personality": self.selected_personality.value,
        }
        try:
            user_msg, generation = self._store.start_turn(text)
            state = self._store.state
            self._log(logging.INFO, "Stored user message", log_ctx, message_id=user_msg.id)

            result = self._graph.invoke(
                {
                    "query": text,
                    "trace_id": log_ctx["trace_id"],
                    "user_has_provided_location": state.user_has_provided_location,
                }
            )
            reply = result.get("reply") or FAILURE_MESSAGE
            decision = result.get("decision")

            assistant_msg = self._store.append_assistant(reply, expected_generation=generation)
            if assistant_msg is None:
                self._log(
                    logging.WARNING,
                    "Discarded stale reply after personality switch",
                    log_ctx,
                    decision=decision,
                )
                return None
            if decision != RoutingDecision.NEEDS_LOCATION.value and not result.get("failed"):
                state.last_ai_response = reply

            self._log(
                logging.INFO,
                "Completed turn",
                log_ctx,
                decision=decision,
                failed=bool(result.get("failed")),
                elapsed_seconds=round(time.time() - start_time, 2),
                assistant_message_id=assistant_msg.id,
            )
            return assistant_msg
        finally:
            self._is_processing = False

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})


def create_session(start_network_monitor: bool = True, cfg=settings, **kwargs: Any) -> ChatSession:
    """按配置创建会话；默认同时启动后台网络监测。"""

    if start_network_monitor and kwargs.get("connectivity") is None:
        monitor = NetworkMonitor.from_settings(cfg)
        monitor.start()
        kwargs["connectivity"] = monitor
    return ChatSession(cfg=cfg, **kwargs)
