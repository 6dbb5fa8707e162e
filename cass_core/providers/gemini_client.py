"""补全后端（Gemini generateContent）适配器。

- URL: {base_url}/models/{model}:generateContent
- 认证: x-goog-api-key: <api_key>
- 请求体: contents + generationConfig（maxOutputTokens=80, temperature=0.6）
- 成功路径读取 candidates[0].content.parts[0].text

较小的 maxOutputTokens 与固定温度让回复保持简短，配合两句话的回答风格。
"""

from typing import Any, Optional

from cass_core.domain.exceptions import ValidationError
from cass_core.domain.models import BackendRequest, BackendResult
from cass_core.providers.http_backend import JsonBackendClient


class GeminiClient(JsonBackendClient):
    """补全后端客户端实现。"""

    name = "gemini"

    def complete(self, prompt: str) -> str:
        return self.complete_result(prompt).text

    def complete_result(self, prompt: str) -> BackendResult:
        return self._send(self.build_request(prompt))

    def build_request(self, prompt: str) -> BackendRequest:
        api_key = getattr(self._settings, "gemini_api_key", None)
        if not api_key:
            raise ValidationError(code="MISSING_API_KEY", message="GEMINI_API_KEY not set")
        base = self._settings.gemini_base_url.rstrip("/")
        return BackendRequest(
            kind="completion",
            url=f"{base}/models/{self._settings.gemini_model}:generateContent",
            payload={
                "contents": [
                    {
                        "role": "user",
                        "parts": [{"text": prompt}],
                    }
                ],
                "generationConfig": {
                    "maxOutputTokens": self._settings.max_output_tokens,
                    "temperature": self._settings.temperature,
                },
            },
            headers={
                "x-goog-api-key": api_key,
                "Content-Type": "application/json",
            },
        )

    def _extract_text(self, data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            return None
        text = parts[0].get("text")
        return text if isinstance(text, str) else None
