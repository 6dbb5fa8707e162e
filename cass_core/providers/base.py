"""后端客户端抽象接口。

ChatSession 不直接依赖具体后端的 HTTP 细节，而是依赖这里的协议：

- CompletionClient: 生成式补全，complete(prompt) -> 文本。
- SearchClient: 实时搜索，search(query) -> 合成答案文本。
- Connectivity: 网络连通性信号，预检失败时不发起任何请求。

测试或替换后端时，只需提供满足协议的对象。
"""

from typing import Protocol


class Connectivity(Protocol):
    """只读的连通性布尔值，允许短暂过期。"""

    @property
    def is_connected(self) -> bool:
        ...


class CompletionClient(Protocol):
    name: str

    def complete(self, prompt: str) -> str:
        ...


class SearchClient(Protocol):
    name: str

    def search(self, query: str) -> str:
        ...
