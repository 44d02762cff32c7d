"""
Cascade - 场景阶段编排

职责：
- 按顺序提交阶段作业
- 轮询作业状态直到终止
- 推导阶段间的产物路径
- 向状态服务推送阶段和场景结果

架构：
- artifacts: 产物路径推导
- launcher: 作业清单构建与提交
- poller: 作业状态查询
- webhook: 状态消息推送
- orchestrator: 阶段编排循环
- repositories/: Kubernetes 操作仓储
"""

__version__ = "1.0.0"

from .artifacts import ArtifactPath
from .orchestrator import ScenarioOrchestrator, ScenarioResult

__all__ = [
    "ArtifactPath",
    "ScenarioOrchestrator",
    "ScenarioResult",
]
