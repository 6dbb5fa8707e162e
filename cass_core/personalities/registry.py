"""人格（Personality）配置注册表。

每种人格对应一组静态配置：

- system_prompt: 描述 CASS 身份与语气的系统提示词。
- answer_style: 回答风格指令，对语气有最终决定权，并把回复限制在两句话以内。
- welcome_message: 会话开始或切换人格时的第一条消息。为空时使用 DEFAULT_WELCOME。
- voice: 语音播报参数（语速、音高、首选音色，找不到时回退到 locale）。

上层只通过 get_profile() 取配置，新增人格只需要在这里登记。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional


class Personality(str, Enum):
    FRIEND = "friend"
    MENTOR = "mentor"
    DEBATOR = "debator"


@dataclass(frozen=True)
class VoiceProfile:
    """语音播报参数。voice_identifier 不可用时使用 locale 对应的默认音色。"""

    rate: float
    pitch: float
    locale: str
    voice_identifier: Optional[str] = None


@dataclass(frozen=True)
class PersonalityProfile:
    """单个人格的完整配置。"""

    personality: Personality
    display_name: str
    system_prompt: str
    answer_style: str
    welcome_message: str
    voice: VoiceProfile


DEFAULT_WELCOME = "Hey! What's on your mind?"

# 三种人格共用的约束：两句话以内，不承诺稍后查询或回复，总是尝试直接回答
_ANSWER_RULES = (
    "Limit your answer to no more than 2 sentences. "
    "Never say you will search, check, or get back to the user. "
    "Always provide a direct answer, or say you don't know. "
    "Do not promise to follow up later. "
    "Always attempt to answer the user's question as best you can, using your knowledge and any available context. "
    "Only say you don't know if you truly cannot provide any answer."
)


PERSONALITY_REGISTRY: Mapping[Personality, PersonalityProfile] = {
    Personality.FRIEND: PersonalityProfile(
        personality=Personality.FRIEND,
        display_name="Friend",
        system_prompt=(
            "Your name is CASS. Respond in a warm, encouraging, expressive, and positive tone. "
            "Be a real friend who listens, jokes, and uplifts. Use casual, friendly language "
            "and show genuine interest in the user's feelings and life."
        ),
        answer_style=(
            "Answer as a supportive, enthusiastic, and casual male friend. Be warm, expressive, and positive. "
            "Use friendly language, show genuine interest, and respond as a real friend would. "
            "Remember our previous conversation and build on it naturally. " + _ANSWER_RULES
        ),
        welcome_message="Hey buddy! What's on your mind?",
        voice=VoiceProfile(rate=0.48, pitch=0.98, locale="en-US"),
    ),
    Personality.MENTOR: PersonalityProfile(
        personality=Personality.MENTOR,
        display_name="Mentor",
        system_prompt=(
            "Your name is CASS. Respond with wisdom and clarity. Offer guidance, advice, and insight "
            "in a thoughtful, direct, and helpful way. Be like a trusted mentor."
        ),
        answer_style=(
            "Answer as a wise mentor. Be concise, clear, and insightful. "
            "Remember our previous conversation and provide guidance that builds on earlier discussions. "
            + _ANSWER_RULES
        ),
        welcome_message=(
            "How can I help you today? Do you have any questions about your career, "
            "relationships, personal life, etc.?"
        ),
        voice=VoiceProfile(
            rate=0.44,
            pitch=0.88,
            locale="en-GB",
            voice_identifier="com.apple.ttsbundle.Daniel-compact",
        ),
    ),
    Personality.DEBATOR: PersonalityProfile(
        personality=Personality.DEBATOR,
        display_name="Debator",
        system_prompt=(
            "Your name is CASS. Take the opposite stance of the user, challenge their assumptions, "
            "and argue the contrary position, but remain respectful and logical."
        ),
        answer_style=(
            "Answer as a logical debater. Be concise, clear, and challenging. "
            "Remember our previous conversation and continue the debate with context from earlier exchanges. "
            + _ANSWER_RULES
        ),
        welcome_message="What topic would you like to debate today?",
        voice=VoiceProfile(
            rate=0.48,
            pitch=0.98,
            locale="en-US",
            voice_identifier="com.apple.ttsbundle.Tom-compact",
        ),
    ),
}


def get_profile(personality: Personality) -> PersonalityProfile:
    """获取人格配置。"""

    return PERSONALITY_REGISTRY[personality]


def welcome_message_for(personality: Personality) -> str:
    """获取人格的欢迎语；未登记或欢迎语为空时返回 DEFAULT_WELCOME。"""

    profile = PERSONALITY_REGISTRY.get(personality)
    if profile is None or not profile.welcome_message:
        return DEFAULT_WELCOME
    return profile.welcome_message


def resolve_personality(name: str) -> Personality:
    """根据名称获取 Personality，支持枚举值与展示名，不区分大小写。"""

    key = name.strip().lower()
    for personality, profile in PERSONALITY_REGISTRY.items():
        if key in (personality.value, profile.display_name.lower()):
            return personality
    raise KeyError(f"Unknown personality: {name!r}")


def available_personalities() -> Dict[str, str]:
    """返回 {枚举值: 展示名}，供人格选择器使用。"""

    return {p.value: profile.display_name for p, profile in PERSONALITY_REGISTRY.items()}
