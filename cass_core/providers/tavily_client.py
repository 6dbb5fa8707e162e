"""搜索后端（Tavily）适配器。

- URL: {base_url}/search
- 认证: Authorization: Bearer <api_key>
- 请求体: query / search_depth="advanced" / max_results=5 / include_answer=true
- 只消费合成答案 answer 字段，原始结果列表直接丢弃。
"""

from typing import Any, Optional

from cass_core.domain.exceptions import ValidationError
from cass_core.domain.models import BackendRequest, BackendResult
from cass_core.providers.http_backend import JsonBackendClient


class TavilyClient(JsonBackendClient):
    """搜索后端客户端实现。"""

    name = "tavily"

    def search(self, query: str) -> str:
        return self.search_result(query).text

    def search_result(self, query: str) -> BackendResult:
        return self._send(self.build_request(query))

    def build_request(self, query: str) -> BackendRequest:
        api_key = getattr(self._settings, "tavily_api_key", None)
        if not api_key:
            raise ValidationError(code="MISSING_API_KEY", message="TAVILY_API_KEY not set")
        base = self._settings.tavily_base_url.rstrip("/")
        return BackendRequest(
            kind="search",
            url=f"{base}/search",
            payload={
                "query": query,
                "search_depth": self._settings.search_depth,
                "max_results": self._settings.search_max_results,
                "include_answer": True,
            },
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    def _extract_text(self, data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        answer = data.get("answer")
        return answer if isinstance(answer, str) else None
