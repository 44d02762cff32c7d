"""
Status Poller - 作业状态查询

单次查询 Job 的计数器并归类为 JobStatus，循环由编排器负责
"""

from typing import Optional

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from loguru import logger
from urllib3.exceptions import HTTPError

from core.enums import JobStatus
from core.exceptions import JobStatusQueryException
from cascade.repositories import JobRepository


def classify_job_status(
    active: Optional[int], succeeded: Optional[int], failed: Optional[int]
) -> JobStatus:
    """
    根据 Job 计数器判断状态

    按顺序匹配：全部为 0 -> NOT_STARTED；succeeded > 0 -> SUCCEEDED；
    failed > 0 -> FAILED；否则 RUNNING。None 视为 0。

    Args:
        active: 运行中的 Pod 数
        succeeded: 成功的 Pod 数
        failed: 失败的 Pod 数

    Returns:
        JobStatus
    """
    active = active or 0
    succeeded = succeeded or 0
    failed = failed or 0

    if active == 0 and succeeded == 0 and failed == 0:
        return JobStatus.NOT_STARTED
    if succeeded > 0:
        return JobStatus.SUCCEEDED
    if failed > 0:
        return JobStatus.FAILED
    return JobStatus.RUNNING


class StatusPoller:
    """作业状态查询器"""

    def __init__(
        self,
        batch_api: client.BatchV1Api,
        namespace: str,
        job_repository: Optional[JobRepository] = None,
    ):
        self.batch_api = batch_api
        self.namespace = namespace
        self.job_repository = job_repository or JobRepository

    def poll(self, job_name: str) -> JobStatus:
        """
        查询一次作业状态

        Args:
            job_name: Job 名称

        Returns:
            当前 JobStatus

        Raises:
            JobStatusQueryException: 查询失败（不代表作业失败）
        """
        try:
            status = self.job_repository.read_job_status(
                self.batch_api, job_name, self.namespace
            )
        except ApiException as e:
            raise JobStatusQueryException(job_name, f"{e.status} {e.reason}") from e
        except HTTPError as e:
            raise JobStatusQueryException(job_name, str(e)) from e

        if status is None:
            return JobStatus.NOT_STARTED

        job_status = classify_job_status(status.active, status.succeeded, status.failed)
        logger.debug(
            f"Job {job_name}: active={status.active}, succeeded={status.succeeded}, "
            f"failed={status.failed} -> {job_status.value}"
        )
        return job_status
