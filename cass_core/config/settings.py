"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
API 密钥、后端地址、关键词列表等都在这里集中注入，不再写死在代码里。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("CASS_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
        Path(__file__).resolve().parents[1] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """CASS 客户端配置（使用 Pydantic）。"""

    # ---- 补全后端（Gemini generateContent） ----
    gemini_api_key: Optional[str] = Field(default=None, description="补全后端 API 密钥")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="补全后端基础URL",
    )
    gemini_model: str = Field(default="gemini-2.0-flash", description="补全模型名")
    max_output_tokens: int = Field(default=80, ge=1, description="单次回复最多生成的 token 数")
    temperature: float = Field(default=0.6, ge=0.0, le=2.0, description="采样温度")

    # ---- 搜索后端（Tavily） ----
    tavily_api_key: Optional[str] = Field(default=None, description="搜索后端 API 密钥")
    tavily_base_url: str = Field(default="https://api.tavily.com", description="搜索后端基础URL")
    search_depth: str = Field(default="advanced", description="搜索深度")
    search_max_results: int = Field(default=5, ge=1, le=20, description="搜索结果条数上限")

    # ---- HTTP 与重试 ----
    http_timeout: float = Field(default=30.0, ge=1.0, description="单次 HTTP 调用超时时间（秒）")
    max_attempts: int = Field(default=3, ge=1, le=5, description="传输层失败时的总尝试次数")
    retry_backoff_base: float = Field(default=0.5, ge=0.0, description="指数退避的初始等待（秒）")
    retry_backoff_max: float = Field(default=4.0, ge=0.0, description="单次退避等待上限（秒）")

    # ---- 网络连通性探测 ----
    connectivity_probe_host: str = Field(default="8.8.8.8", description="连通性探测主机")
    connectivity_probe_port: int = Field(default=53, description="连通性探测端口")
    connectivity_probe_interval: float = Field(default=5.0, gt=0.0, description="探测间隔（秒）")

    # ---- 对话与提示词 ----
    default_personality: str = Field(default="friend", description="启动时的默认人格")
    max_context_messages: int = Field(default=4, ge=2, le=50, description="提示词中保留的最近消息数")
    summary_threshold: int = Field(
        default=10,
        ge=0,
        description="消息总数超过 max_context_messages + summary_threshold 时生成早期摘要",
    )
    location_keywords: Optional[List[str]] = Field(default=None, description="覆盖默认的位置关键词")
    search_keywords: Optional[List[str]] = Field(default=None, description="覆盖默认的搜索关键词")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("gemini_api_key", "tavily_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = Settings()
