"""
Webhook Notifier - 状态消息推送

向外部状态服务 POST 一条 {"message": ...}，尽力而为，从不抛出异常
"""

from dataclasses import dataclass
from typing import Optional

import requests
from loguru import logger

from core.config import normalize_url


@dataclass(frozen=True)
class WebhookResult:
    """一次推送的结果"""

    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """状态服务是否返回 200"""
        return self.error is None and self.status_code == 200


class WebhookNotifier:
    """状态消息推送器"""

    def __init__(
        self,
        address: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            address: 状态服务地址，缺少协议时默认 http
            timeout: 请求超时（秒）
            session: requests 会话（可选，用于依赖注入）
        """
        self.url = normalize_url(address)
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, message: str) -> WebhookResult:
        """
        推送一条消息

        Args:
            message: 消息文本

        Returns:
            WebhookResult，传输错误记录在 error 中
        """
        try:
            response = self.session.post(
                self.url, json={"message": message}, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            return WebhookResult(error=f"{type(e).__name__}: {e}")

        try:
            logger.debug(f"Webhook {self.url} answered {response.status_code}")
            return WebhookResult(status_code=response.status_code)
        finally:
            response.close()
