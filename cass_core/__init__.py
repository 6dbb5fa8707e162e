"""CASS Core 顶层包。

该包提供 CASS 对话助手的核心编排逻辑，
包括配置加载、人格注册表、会话状态、提示词构造、
查询路由、后端调用与重试、回复清洗以及单轮对话驱动。
"""

from cass_core.agents.chat_session import ChatSession, create_session

__all__ = ["ChatSession", "create_session"]
