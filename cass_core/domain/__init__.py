"""领域层模型与协议。

包含：
- models: Message / RoutingDecision / BackendRequest / BackendResult 模型。
- conversation: 会话状态 ConversationState 与内存存储 InMemoryConversationStore。
- exceptions: 业务异常类型定义。
"""
