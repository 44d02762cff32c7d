"""
Artifact Path - 阶段间产物路径推导

场景的输入包地址只在第一阶段读取一次，之后每个阶段的地址都由它推导：

    pkg.tgz -> pkg-stage-1.tgz -> pkg-stage-2.tgz -> ... -> pkg-final.tgz

ArtifactPath 是不可变值，由编排器逐阶段传递，每次推进返回新的实例。
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence

from loguru import logger

from core.models import S3PATH_KEY, StageConfig


PACKAGE_SUFFIX = ".tgz"
FINAL_STAGE_KEY = "finalstage"


@dataclass(frozen=True)
class ArtifactPath:
    """当前阶段的产物路径信息"""

    stage_num: int = 0
    path: str = ""
    is_last_stage: bool = False

    @classmethod
    def seed(cls, stages: Sequence[StageConfig]) -> "ArtifactPath":
        """
        从第一阶段的配置创建初始值

        Args:
            stages: 按顺序排列的阶段配置

        Returns:
            stage_num 为 0 的 ArtifactPath
        """
        if not stages:
            raise ValueError("scenario has no stages")

        path = stages[0].seed_path
        if path is None:
            logger.warning(
                f"Stage {stages[0].module_name} has no '{S3PATH_KEY}' parameter, "
                f"derived package paths will be empty"
            )
            path = ""

        return cls(stage_num=0, path=path, is_last_stage=len(stages) == 1)

    def advance(self, stage_num: int, total_stages: int) -> "ArtifactPath":
        """
        推进到指定阶段

        path 保持不变，只更新阶段序号和是否为最后阶段

        Args:
            stage_num: 新的阶段序号（从 0 开始）
            total_stages: 阶段总数

        Returns:
            新的 ArtifactPath
        """
        if not 0 <= stage_num < total_stages:
            raise ValueError(f"stage {stage_num} out of range for {total_stages} stages")
        return replace(
            self, stage_num=stage_num, is_last_stage=stage_num == total_stages - 1
        )

    @property
    def prefix(self) -> str:
        """去掉 .tgz 后缀的路径前缀"""
        return self.path.split(PACKAGE_SUFFIX)[0]

    def stage_path(self) -> Optional[str]:
        """
        当前阶段使用的产物地址

        Returns:
            第 i (>0) 阶段返回 {prefix}-stage-{i}.tgz；第一阶段返回 None
        """
        if self.stage_num == 0:
            return None
        return f"{self.prefix}-stage-{self.stage_num}{PACKAGE_SUFFIX}"

    def final_path(self) -> str:
        """场景完成后的最终产物地址"""
        return f"{self.prefix}-final{PACKAGE_SUFFIX}"

    def stage_environment(self) -> Dict[str, str]:
        """
        当前阶段需要额外注入的环境变量

        Returns:
            可能包含 s3path 和 finalstage 的字典
        """
        env: Dict[str, str] = {}
        stage_path = self.stage_path()
        if stage_path is not None:
            env[S3PATH_KEY] = stage_path
        if self.is_last_stage:
            env[FINAL_STAGE_KEY] = "true"
        return env
