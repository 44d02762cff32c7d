"""
场景配置数据模型

场景配置文件是一个 JSON 数组，每个元素描述一个阶段：

    [
      {
        "moduleName": "ingest",
        "configuration": {"s3path": "bucket/pkg.tgz"},
        "template": {"spec": {"containers": [...], "restartPolicy": "Never"}},
        "ttlSecondsAfterFinished": 300,
        "backoffLimit": 0,
        "activeDeadlineSeconds": 3600
      },
      ...
    ]
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ScenarioConfigException
from core.utils.validators import validate_env_name, validate_job_name


# 第一阶段配置中保存场景输入包地址的保留键
S3PATH_KEY = "s3path"


class StageConfig(BaseModel):
    """单个阶段的配置（不可变）"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    module_name: str = Field(
        ..., alias="moduleName", description="模块名称，同时作为作业名称"
    )

    template: Dict[str, Any] = Field(..., description="Pod 模板（PodTemplateSpec）")

    configuration: Dict[str, str] = Field(
        default_factory=dict, description="阶段参数，作为容器环境变量注入"
    )

    ttl_seconds_after_finished: Optional[int] = Field(
        default=None, alias="ttlSecondsAfterFinished", ge=0
    )

    backoff_limit: Optional[int] = Field(default=None, alias="backoffLimit", ge=0)

    active_deadline_seconds: Optional[int] = Field(
        default=None, alias="activeDeadlineSeconds", gt=0
    )

    @field_validator("module_name")
    @classmethod
    def validate_module_name(cls, v: str) -> str:
        """校验模块名称可作为 Kubernetes Job 名称"""
        validate_job_name(v)
        return v

    @field_validator("configuration")
    @classmethod
    def validate_configuration(cls, v: Dict[str, str]) -> Dict[str, str]:
        """校验参数名称可作为环境变量名称"""
        for key in v:
            validate_env_name(key)
        return v

    @field_validator("template")
    @classmethod
    def validate_template(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """校验模板至少包含一个容器"""
        spec = v.get("spec")
        if not isinstance(spec, dict):
            raise ValueError("template.spec must be an object")

        containers = spec.get("containers")
        if not isinstance(containers, list) or not containers:
            raise ValueError("template.spec.containers must contain at least one container")

        if not isinstance(containers[0], dict):
            raise ValueError("template.spec.containers[0] must be an object")
        return v

    @property
    def seed_path(self) -> Optional[str]:
        """配置中声明的输入包地址（仅第一阶段有意义）"""
        return self.configuration.get(S3PATH_KEY)


def parse_scenario(data: Any, source: str = "<memory>") -> List[StageConfig]:
    """
    将已解析的 JSON 数据转换为阶段配置列表

    Args:
        data: json.load 的结果
        source: 数据来源（用于错误消息）

    Returns:
        按场景顺序排列的阶段配置列表

    Raises:
        ScenarioConfigException: 如果配置无效
    """
    if not isinstance(data, list):
        raise ScenarioConfigException(source, "top-level value must be a list of stages")

    if not data:
        raise ScenarioConfigException(source, "scenario has no stages")

    stages: List[StageConfig] = []
    for index, item in enumerate(data):
        try:
            stages.append(StageConfig.model_validate(item))
        except ValidationError as e:
            raise ScenarioConfigException(source, f"stage {index}: {e}") from e

    seen = set()
    for stage in stages:
        if stage.module_name in seen:
            raise ScenarioConfigException(
                source, f"duplicate moduleName {stage.module_name!r}"
            )
        seen.add(stage.module_name)

    return stages


def load_scenario(path: Union[str, Path]) -> List[StageConfig]:
    """
    从 JSON 文件读取场景配置

    Args:
        path: 配置文件路径

    Returns:
        按场景顺序排列的阶段配置列表

    Raises:
        ScenarioConfigException: 如果文件不可读或内容无效
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ScenarioConfigException(str(path), f"cannot read file: {e}") from e
    except json.JSONDecodeError as e:
        raise ScenarioConfigException(str(path), f"invalid JSON: {e}") from e

    stages = parse_scenario(data, source=str(path))
    logger.info(f"Loaded scenario with {len(stages)} stages from {path}")
    return stages
