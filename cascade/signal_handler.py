"""
信号处理器
"""
import signal
from typing import Callable, List, Optional
from loguru import logger


class SignalHandler:
    """
    停止信号处理器

    收到 SIGTERM/SIGINT 时依次调用已注册的回调，例如让编排器
    结束当前轮询。回调异常只记录日志。

    使用示例:
        SignalHandler() \\
            .on_shutdown(orchestrator.stop) \\
            .register()
    """

    def __init__(self):
        self._shutdown_callbacks: List[Callable[[], None]] = []
        self._original_handlers = {}

    def on_shutdown(self, callback: Callable[[], None]) -> "SignalHandler":
        """
        添加关闭回调

        Returns:
            self (支持链式调用)
        """
        self._shutdown_callbacks.append(callback)
        return self

    def handle(self, signum: int, frame=None) -> None:
        """执行所有关闭回调"""
        sig_name = signal.Signals(signum).name
        logger.warning(f"🛑 Received {sig_name}, stopping scenario...")

        for callback in self._shutdown_callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"❌ Error in shutdown callback: {e}")

    def register(self, signals: Optional[List[int]] = None) -> None:
        """
        注册信号处理器

        Args:
            signals: 要处理的信号列表（默认：SIGTERM, SIGINT）
        """
        if signals is None:
            signals = [signal.SIGTERM, signal.SIGINT]

        for sig in signals:
            self._original_handlers[sig] = signal.signal(sig, self.handle)
            logger.debug(f"Registered handler for {signal.Signals(sig).name}")

    def restore(self) -> None:
        """恢复原始信号处理器"""
        for sig, original_handler in self._original_handlers.items():
            signal.signal(sig, original_handler)
        self._original_handlers.clear()
