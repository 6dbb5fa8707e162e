"""提示词构造工具。

把当前会话状态和人格配置拼成一条发给补全后端的提示词字符串。
无论会话多长，提示词中逐字出现的历史消息数都不超过 max_context_messages，
更早的消息只以一行固定格式的摘要出现，从而控制 token 成本与延迟。

输出只依赖 ConversationState，不含任何随机成分。
"""

from typing import Iterable, List, Sequence

from cass_core.domain.conversation import ConversationState
from cass_core.domain.models import Message
from cass_core.personalities.registry import get_profile


ASSISTANT_NAME = "CASS"
MAX_CONTEXT_MESSAGES = 4
SUMMARY_THRESHOLD = 10


def _distinct(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _join_topics(items: List[str], limit: int, suffix: str) -> str:
    text = ", ".join(items[:limit])
    if len(items) > limit:
        text += suffix
    return text


def summarize_history(messages: Sequence[Message]) -> str:
    """为较早的消息生成一句固定格式的摘要。

    只取前 3 条不重复的用户消息和前 2 条不重复的 CASS 回复，
    超出部分用 "and other topics" / "and other guidance" 代替。
    """

    user_topics = _distinct(m.content for m in messages if m.is_user)
    responses = _distinct(m.content for m in messages if not m.is_user)
    summary = "User has discussed: " + _join_topics(user_topics, 3, " and other topics")
    summary += f". {ASSISTANT_NAME} has provided responses about: "
    summary += _join_topics(responses, 2, " and other guidance")
    return summary + "."


def _render(message: Message) -> str:
    speaker = "User" if message.is_user else ASSISTANT_NAME
    return f"{speaker}: {message.content}"


def build_prompt(
    state: ConversationState,
    max_context_messages: int = MAX_CONTEXT_MESSAGES,
    summary_threshold: int = SUMMARY_THRESHOLD,
) -> str:
    """根据会话状态构造一条有界的提示词。

    结构依次为：回答风格指令、系统提示词、（可选）早期摘要、
    最近上下文（不含最后两条）、最近一条用户消息、结尾的 "CASS:" 提示。
    """

    profile = get_profile(state.selected_personality)
    messages = list(state.messages)
    prompt = profile.answer_style + "\n" + profile.system_prompt + "\n\n"

    recent = messages[-max_context_messages:]
    if len(messages) > max_context_messages + summary_threshold:
        earlier = messages[:-max_context_messages]
        prompt += f"Earlier conversation summary: {summarize_history(earlier)}\n\n"

    if len(recent) > 2:
        prompt += "Previous conversation context:\n"
        for message in recent[:-2]:
            prompt += _render(message) + "\n"
        prompt += "\n"

    last_user = next((m for m in reversed(messages) if m.is_user), None)
    if last_user is not None:
        prompt += _render(last_user) + "\n"

    prompt += f"{ASSISTANT_NAME}:"
    return prompt
