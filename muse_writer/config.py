import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator
import yaml


class ProviderConfig(BaseModel):
    api_key: str = Field(default="")
    base_url: Optional[str] = Field(default=None)
    model: Optional[str] = Field(default=None)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


class ProvidersConfig(BaseModel):
    deepseek: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://api.deepseek.com")
    )
    qwen: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(
            base_url="https://dashscope-intl.aliyuncs.com/compatible-mode/v1"
        )
    )
    kimi: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://api.moonshot.cn/v1")
    )
    openrouter: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://openrouter.ai/api/v1")
    )
    gemini: ProviderConfig = Field(default_factory=ProviderConfig)


class CacheConfig(BaseModel):
    cache_dir: Path = Field(default=Path(".muse_cache"))
    key_prefix: str = Field(default="critique_cache_", min_length=1)


class CritiqueConfig(BaseModel):
    model: str = Field(default="DeepSeek R1")
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_content_chars: int = Field(default=20000, gt=0)


# Environment variable -> provider name
API_KEY_ENV = {
    "DEEPSEEK_API_KEY": "deepseek",
    "QWEN_API_KEY": "qwen",
    "KIMI_API_KEY": "kimi",
    "OPENROUTER_API_KEY": "openrouter",
    "GOOGLE_API_KEY": "gemini",
}


class Config(BaseModel):
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    critique: CritiqueConfig = Field(default_factory=CritiqueConfig)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return value

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path):
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, allow_unicode=True)

    def with_env(self) -> "Config":
        """Return a copy with API keys filled in from the environment."""
        config = self.model_copy(deep=True)
        for env_name, provider in API_KEY_ENV.items():
            value = os.environ.get(env_name)
            if value:
                getattr(config.providers, provider).api_key = value
        return config
