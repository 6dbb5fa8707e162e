"""后端集成层。

该包下的模块负责：
- 定义后端抽象接口 (base)。
- 公共的 JSON-over-HTTP 调用与重试 (http_backend, retry)。
- 网络连通性监测 (network)。
- 各后端的具体实现 (gemini_client、tavily_client)。
"""

from typing import Optional

from cass_core.config.settings import settings
from cass_core.providers.base import CompletionClient, Connectivity, SearchClient
from cass_core.providers.gemini_client import GeminiClient
from cass_core.providers.tavily_client import TavilyClient


def create_completion_client(cfg=None, connectivity: Optional[Connectivity] = None) -> CompletionClient:
    """创建补全后端客户端，默认取全局配置。"""

    return GeminiClient(cfg or settings, connectivity=connectivity)


def create_search_client(cfg=None, connectivity: Optional[Connectivity] = None) -> SearchClient:
    """创建搜索后端客户端，默认取全局配置。"""

    return TavilyClient(cfg or settings, connectivity=connectivity)
