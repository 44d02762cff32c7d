"""
Scenario Orchestrator - 场景阶段编排器

按顺序逐个运行阶段作业：

    提交 -> 轮询直到终止 -> 推送状态 -> 成功时删除作业 -> 下一阶段

任何阶段失败都会终止整个场景，后续阶段不会被提交。
"""

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from loguru import logger
from urllib3.exceptions import HTTPError

from core.enums import JobStatus, ScenarioState
from core.exceptions import (
    JobStatusQueryException,
    JobSubmissionException,
    ScenarioInterruptedException,
    StageTimeoutException,
)
from core.models import StageConfig
from core.utils.time_utils import format_duration, format_elapsed_time
from cascade.artifacts import ArtifactPath
from cascade.config import SequencerConfig
from cascade.launcher import JobLauncher
from cascade.poller import StatusPoller
from cascade.repositories import JobRepository
from cascade.webhook import WebhookNotifier


@dataclass
class ScenarioResult:
    """场景执行结果"""

    state: ScenarioState
    completed_stages: List[str] = field(default_factory=list)
    failed_stage: Optional[str] = None
    final_path: Optional[str] = None
    reason: Optional[str] = None

    @property
    def exit_code(self) -> int:
        """进程退出码：全部成功为 0，否则为 1"""
        return 0 if self.state == ScenarioState.COMPLETED else 1


class ScenarioOrchestrator:
    """
    场景编排器

    架构说明：
    - 使用 JobLauncher 提交作业
    - 使用 StatusPoller 查询状态，轮询循环在这里
    - 使用 WebhookNotifier 推送状态，推送失败只记录日志
    - 只有编排器决定错误是否终止场景
    - 支持依赖注入，便于测试
    """

    def __init__(
        self,
        stages: Sequence[StageConfig],
        batch_api: client.BatchV1Api,
        notifier: WebhookNotifier,
        config: Optional[SequencerConfig] = None,
        launcher: Optional[JobLauncher] = None,
        poller: Optional[StatusPoller] = None,
        job_repository: Optional[JobRepository] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            stages: 按顺序排列的阶段配置
            batch_api: BatchV1Api 客户端
            notifier: 状态推送器
            config: 编排器配置（可选）
            launcher: 作业启动器（可选，用于依赖注入）
            poller: 状态查询器（可选，用于依赖注入）
            job_repository: Job 仓储（可选，用于依赖注入）
            clock: 单调时钟（用于测试阶段超时）
        """
        if not stages:
            raise ValueError("scenario has no stages")

        self.stages = list(stages)
        self.config = config or SequencerConfig()
        self.batch_api = batch_api
        self.notifier = notifier
        self.job_repository = job_repository or JobRepository
        self.launcher = launcher or JobLauncher(
            batch_api,
            self.config.namespace,
            self.config.scenario_label,
            job_repository=self.job_repository,
        )
        self.poller = poller or StatusPoller(
            batch_api, self.config.namespace, job_repository=self.job_repository
        )
        self._clock = clock
        self._stop_event = threading.Event()

    def stop(self) -> None:
        """请求停止：中断当前等待，不再提交后续阶段"""
        logger.warning("Stop requested, scenario will be aborted")
        self._stop_event.set()

    def run(self) -> ScenarioResult:
        """
        运行整个场景

        Returns:
            ScenarioResult
        """
        scenario = self.config.scenario_name
        started_at = datetime.now(timezone.utc)
        logger.info(f"▶️  Starting scenario {scenario} ({len(self.stages)} stages)")

        completed: List[str] = []
        artifact = ArtifactPath.seed(self.stages)

        for index, stage in enumerate(self.stages):
            artifact = artifact.advance(index, len(self.stages))
            name = stage.module_name

            if self._stop_event.is_set():
                return self._abort(completed, name, "stopped before submission")

            try:
                self.launcher.launch(stage, artifact)
            except JobSubmissionException as e:
                logger.error(f"❌ {e}")
                return self._abort(completed, name, str(e))

            stage_started = self._clock()
            try:
                status = self._wait_for_terminal(stage)
            except StageTimeoutException as e:
                logger.error(f"⏰ {e}")
                self._notify(
                    f"Module {name} in scenario {scenario} failed: "
                    f"no result after {format_duration(e.timeout)}"
                )
                return self._abort(completed, name, str(e))
            except ScenarioInterruptedException as e:
                self._notify(f"Scenario {scenario} stopped during module {name}")
                return self._abort(completed, name, str(e))

            elapsed = format_duration(self._clock() - stage_started)

            if status == JobStatus.FAILED:
                self._notify(f"Module {name} in scenario {scenario} failed")
                logger.error(f"❌ Scenario execution failed at job {name} (elapsed: {elapsed})")
                return self._abort(completed, name, f"job {name} failed")

            logger.info(f"✅ Job {name} succeeded (elapsed: {elapsed})")
            self._notify(f"Module {name} in scenario {scenario} finished successfully")
            self._delete_job(name)
            completed.append(name)

        final_path = artifact.final_path()
        logger.info(
            f"🏁 Scenario {scenario} finished successfully "
            f"in {format_elapsed_time(started_at)}, package: {final_path}"
        )
        self._notify(
            f"Scenario {scenario} completed successfully. "
            f"Package address - {final_path}"
        )
        return ScenarioResult(
            state=ScenarioState.COMPLETED,
            completed_stages=completed,
            final_path=final_path,
        )

    def _stage_timeout(self, stage: StageConfig) -> int:
        """
        计算阶段的兜底等待时间

        阶段设置了 activeDeadlineSeconds 时，由集群负责超时并将作业标记为
        Failed，兜底时间不早于该期限加上 deadline_grace。

        Returns:
            秒数，0 表示不限制
        """
        timeout = self.config.stage_timeout
        if timeout <= 0 or stage.active_deadline_seconds is None:
            return timeout
        return max(timeout, stage.active_deadline_seconds + self.config.deadline_grace)

    def _wait_for_terminal(self, stage: StageConfig) -> JobStatus:
        """
        轮询直到作业进入终止状态

        查询失败只记录日志，下一轮继续查询

        Args:
            stage: 阶段配置

        Returns:
            JobStatus.SUCCEEDED 或 JobStatus.FAILED

        Raises:
            StageTimeoutException: 超过兜底等待时间仍未终止
            ScenarioInterruptedException: 收到停止请求
        """
        job_name = stage.module_name
        timeout = self._stage_timeout(stage)
        deadline = self._clock() + timeout if timeout > 0 else None
        announced = False

        while not self._stop_event.is_set():
            try:
                status = self.poller.poll(job_name)
            except JobStatusQueryException as e:
                logger.error(f"Get job status failed: {e}")
                status = None

            if status is not None and status.is_terminal:
                return status

            if status == JobStatus.RUNNING and not announced:
                logger.info(f"Job {job_name} started")
                announced = True

            if deadline is not None and self._clock() >= deadline:
                raise StageTimeoutException(job_name, timeout)

            self._stop_event.wait(self.config.poll_interval)

        raise ScenarioInterruptedException(job_name)

    def _delete_job(self, job_name: str) -> None:
        """删除已成功的作业，失败只记录日志"""
        try:
            self.job_repository.delete_job(
                self.batch_api, job_name, self.config.namespace
            )
        except (ApiException, HTTPError) as e:
            logger.error(f"Failed to delete successful job {job_name}: {e}")

    def _notify(self, message: str) -> None:
        """推送状态消息，失败只记录日志"""
        result = self.notifier.send(message)
        if result.error is not None:
            logger.error(f"Webhook failed: {result.error}")
        elif not result.ok:
            logger.error(f"Webhook returned status {result.status_code}")

    def _abort(
        self, completed: List[str], failed_stage: str, reason: str
    ) -> ScenarioResult:
        """构造中止结果"""
        logger.error(
            f"Scenario {self.config.scenario_name} aborted at {failed_stage} "
            f"({len(completed)}/{len(self.stages)} stages completed)"
        )
        return ScenarioResult(
            state=ScenarioState.ABORTED,
            completed_stages=list(completed),
            failed_stage=failed_stage,
            reason=reason,
        )
