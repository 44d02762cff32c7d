"""
线程安全的单例装饰器实现
"""

import threading
from typing import Any, Callable, TypeVar
from functools import wraps

T = TypeVar("T")


def singleton(cls: type[T]) -> Callable[..., T]:
    """
    线程安全的单例装饰器，采用双重检查锁模式

    被装饰的类暴露 reset_instance()，用于测试中丢弃已创建的实例

    用法示例:
        @singleton
        class KubernetesManager:
            pass

        manager = KubernetesManager()
        KubernetesManager.reset_instance()
    """
    instance: dict = {}
    lock = threading.Lock()

    @wraps(cls)
    def get_instance(*args: Any, **kwargs: Any) -> T:
        if "value" not in instance:
            with lock:
                if "value" not in instance:
                    instance["value"] = cls(*args, **kwargs)
        return instance["value"]

    def reset_instance() -> None:
        with lock:
            instance.clear()

    get_instance.reset_instance = reset_instance
    return get_instance
