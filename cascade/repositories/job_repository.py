"""
阶段作业 Kubernetes 操作仓储

集中管理所有对 batch/v1 Job 资源的创建、查询和删除操作
"""

from typing import Any, Dict

from kubernetes import client
from loguru import logger


class JobRepository:
    """
    Job 资源操作仓储

    职责：
    - 封装 BatchV1Api 调用
    - 统一命名空间和删除策略
    - API 异常原样向上抛出，由调用方决定如何处理
    """

    @staticmethod
    def create_job(
        batch_api: client.BatchV1Api, namespace: str, manifest: Dict[str, Any]
    ) -> Any:
        """
        创建 Job

        Args:
            batch_api: BatchV1Api 客户端
            namespace: 命名空间
            manifest: Job 清单（字典形式）

        Returns:
            API 返回的 V1Job 对象
        """
        job = batch_api.create_namespaced_job(namespace=namespace, body=manifest)
        logger.debug(f"Created job {manifest['metadata']['name']} in namespace {namespace}")
        return job

    @staticmethod
    def read_job_status(
        batch_api: client.BatchV1Api, name: str, namespace: str
    ) -> Any:
        """
        读取 Job 状态

        Args:
            batch_api: BatchV1Api 客户端
            name: Job 名称
            namespace: 命名空间

        Returns:
            V1JobStatus 对象（可能为 None）
        """
        job = batch_api.read_namespaced_job(name=name, namespace=namespace)
        return job.status

    @staticmethod
    def delete_job(batch_api: client.BatchV1Api, name: str, namespace: str) -> None:
        """
        删除 Job，并在后台级联删除其 Pod

        Args:
            batch_api: BatchV1Api 客户端
            name: Job 名称
            namespace: 命名空间
        """
        batch_api.delete_namespaced_job(
            name=name,
            namespace=namespace,
            body=client.V1DeleteOptions(propagation_policy="Background"),
        )
        logger.debug(f"Deleted job {name} in namespace {namespace}")
