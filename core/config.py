"""
使用 Pydantic Settings 进行配置管理
从 app.properties 文件和环境变量加载配置
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger


class Settings(BaseSettings):
    """控制器配置，包含参数校验"""

    # Kubernetes 配置
    POD_NAMESPACE: str = Field(default="default", description="阶段作业所在的命名空间")
    KUBECONFIG: Optional[str] = Field(
        default=None, description="集群外运行时使用的 kubeconfig 路径"
    )
    SCENARIO_LABEL: str = Field(default="Cascade", description="作业 app 标签的值")

    # 场景配置
    SCENARIO_NAME: str = Field(
        default="Test-image-processing", description="场景名称（用于状态消息）"
    )
    CONFIG_FILE: str = Field(
        default="/tmp/configuration", description="场景配置 JSON 文件路径"
    )

    # 状态服务配置
    STATUS_SERVER: str = Field(default="127.0.0.1:8000", description="状态服务地址")
    WEBHOOK_TIMEOUT: float = Field(default=10.0, description="Webhook 请求超时（秒）")

    # 轮询配置
    POLL_INTERVAL: float = Field(default=5.0, description="作业状态轮询间隔（秒）")
    STAGE_TIMEOUT: int = Field(
        default=0, description="单个阶段的最长等待时间（秒），0 表示不限制"
    )

    # 日志配置
    LOG_LEVEL: str = Field(default="INFO", description="日志级别")
    LOG_FILE: Optional[str] = Field(default=None, description="日志文件路径")
    LOG_SERIALIZE: bool = Field(
        default=False, description="控制台日志是否输出为 JSON 行"
    )

    model_config = SettingsConfigDict(
        env_file="app.properties",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("POLL_INTERVAL", "WEBHOOK_TIMEOUT")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("必须大于 0")
        return v

    @field_validator("STAGE_TIMEOUT")
    @classmethod
    def validate_stage_timeout(cls, v: int) -> int:
        if v < 0:
            raise ValueError("STAGE_TIMEOUT 不能为负数")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL 必须为 {valid_levels} 中的一项")
        return v_upper

    def get_status_url(self) -> str:
        """
        获取状态服务 URL

        未指定协议的地址（如 127.0.0.1:8000）默认使用 http

        返回:
            状态服务 URL 字符串
        """
        return normalize_url(self.STATUS_SERVER)


def normalize_url(address: str) -> str:
    """为缺少协议的地址补全 http://"""
    address = address.strip()
    if "://" not in address:
        return f"http://{address}"
    return address


# ========== 配置获取函数 ==========
# 使用 functools.lru_cache 实现单例


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置实例（单例）

    返回:
        配置实例
    """
    settings = Settings()
    logger.info("Settings loaded")
    return settings


def reload_settings() -> Settings:
    """
    重新加载配置

    清除 lru_cache 缓存并重新加载配置

    返回:
        新的配置实例
    """
    get_settings.cache_clear()
    logger.info("Settings reloaded")
    return get_settings()
