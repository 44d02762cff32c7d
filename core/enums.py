"""
场景控制器的枚举类型定义
"""

from enum import Enum


class JobStatus(str, Enum):
    """阶段作业状态枚举"""

    NOT_STARTED = "NOT_STARTED"  # 已提交，尚无 Pod 运行
    RUNNING = "RUNNING"  # 正在运行
    SUCCEEDED = "SUCCEEDED"  # 已成功
    FAILED = "FAILED"  # 失败

    @property
    def is_terminal(self) -> bool:
        """是否为终止状态"""
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)


class ScenarioState(str, Enum):
    """场景整体状态枚举"""

    IN_PROGRESS = "IN_PROGRESS"  # 执行中
    COMPLETED = "COMPLETED"  # 全部阶段成功
    ABORTED = "ABORTED"  # 已中止
