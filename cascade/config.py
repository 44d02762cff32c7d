"""
Sequencer 模块配置
统一管理阶段编排相关的配置参数
"""

from dataclasses import dataclass

from core.config import Settings


@dataclass(frozen=True)
class SequencerConfig:
    """编排器配置类"""

    namespace: str = "default"  # 阶段作业所在命名空间
    scenario_name: str = "Test-image-processing"  # 场景名称（用于状态消息）
    scenario_label: str = "Cascade"  # 作业 app 标签
    poll_interval: float = 5.0  # 状态轮询间隔（秒）
    stage_timeout: int = 0  # 单阶段最长等待时间（秒），0 表示不限制
    deadline_grace: int = 300  # activeDeadlineSeconds 之后额外等待的时间（秒）

    @classmethod
    def from_settings(cls, settings: Settings) -> "SequencerConfig":
        """
        从全局配置构建

        Args:
            settings: Settings 实例

        Returns:
            SequencerConfig 实例
        """
        return cls(
            namespace=settings.POD_NAMESPACE,
            scenario_name=settings.SCENARIO_NAME,
            scenario_label=settings.SCENARIO_LABEL,
            poll_interval=settings.POLL_INTERVAL,
            stage_timeout=settings.STAGE_TIMEOUT,
        )
