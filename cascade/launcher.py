"""
Job Launcher - 阶段作业启动器

把阶段配置和当前产物路径转换为 Kubernetes Job 并提交
"""

import copy
from typing import Any, Dict, List, Optional

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from loguru import logger
from urllib3.exceptions import HTTPError

from core.exceptions import JobSubmissionException
from core.models import StageConfig
from cascade.artifacts import ArtifactPath
from cascade.repositories import JobRepository


def build_environment(stage: StageConfig, artifact: ArtifactPath) -> List[Dict[str, str]]:
    """
    构建容器环境变量列表

    先展开阶段参数，再追加推导出的产物路径和最终阶段标记。
    被推导值覆盖的同名参数不会重复出现。

    Args:
        stage: 阶段配置
        artifact: 当前产物路径

    Returns:
        [{"name": ..., "value": ...}, ...]
    """
    derived = artifact.stage_environment()

    env = [
        {"name": key, "value": value}
        for key, value in stage.configuration.items()
        if key not in derived
    ]
    env.extend({"name": key, "value": value} for key, value in derived.items())
    return env


def build_job_manifest(
    stage: StageConfig,
    artifact: ArtifactPath,
    namespace: str,
    scenario_label: str = "Cascade",
) -> Dict[str, Any]:
    """
    构建 batch/v1 Job 清单

    模板被深拷贝，只替换第一个容器的环境变量

    Args:
        stage: 阶段配置
        artifact: 当前产物路径
        namespace: 命名空间
        scenario_label: app 标签的值

    Returns:
        Job 清单字典
    """
    template = copy.deepcopy(stage.template)
    template["spec"]["containers"][0]["env"] = build_environment(stage, artifact)

    spec: Dict[str, Any] = {"template": template}
    if stage.ttl_seconds_after_finished is not None:
        spec["ttlSecondsAfterFinished"] = stage.ttl_seconds_after_finished
    if stage.backoff_limit is not None:
        spec["backoffLimit"] = stage.backoff_limit
    if stage.active_deadline_seconds is not None:
        spec["activeDeadlineSeconds"] = stage.active_deadline_seconds

    return {
        "apiVersion": "batch/v1",
        "kind": "Job",
        "metadata": {
            "name": stage.module_name,
            "namespace": namespace,
            "labels": {"app": scenario_label, "modulename": stage.module_name},
        },
        "spec": spec,
    }


class JobLauncher:
    """
    阶段作业启动器

    每次调用 launch() 在命名空间中创建一个 Job。同名 Job 已存在时
    创建会失败，与其他提交失败一样抛出 JobSubmissionException。
    """

    def __init__(
        self,
        batch_api: client.BatchV1Api,
        namespace: str,
        scenario_label: str = "Cascade",
        job_repository: Optional[JobRepository] = None,
    ):
        """
        Args:
            batch_api: BatchV1Api 客户端
            namespace: 命名空间
            scenario_label: app 标签的值
            job_repository: Job 仓储（可选，用于依赖注入）
        """
        self.batch_api = batch_api
        self.namespace = namespace
        self.scenario_label = scenario_label
        self.job_repository = job_repository or JobRepository

    def launch(self, stage: StageConfig, artifact: ArtifactPath) -> Dict[str, Any]:
        """
        提交阶段作业

        Args:
            stage: 阶段配置
            artifact: 当前产物路径

        Returns:
            已提交的 Job 清单

        Raises:
            JobSubmissionException: 如果 API 拒绝或无法连接
        """
        manifest = build_job_manifest(
            stage, artifact, self.namespace, self.scenario_label
        )

        try:
            self.job_repository.create_job(self.batch_api, self.namespace, manifest)
        except ApiException as e:
            raise JobSubmissionException(
                stage.module_name, f"{e.status} {e.reason}"
            ) from e
        except HTTPError as e:
            raise JobSubmissionException(stage.module_name, str(e)) from e

        logger.info(
            f"🚀 Created job {stage.module_name} "
            f"(stage {artifact.stage_num}, namespace {self.namespace})"
        )
        return manifest
