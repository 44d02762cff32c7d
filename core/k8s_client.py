"""
Kubernetes API 连接管理器
"""

from typing import Optional

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from loguru import logger

from .config import get_settings
from .utils.singleton import singleton
from .exceptions import KubernetesConnectionException, KubernetesNotInitializedException


@singleton
class KubernetesManager:
    """
    单例 Kubernetes 连接管理器
    用于加载集群凭据并提供 BatchV1Api 客户端
    """

    def __init__(self):
        self._api_client: Optional[client.ApiClient] = None
        self._batch_api: Optional[client.BatchV1Api] = None
        self.in_cluster: bool = False

    def init(self) -> None:
        """
        加载集群凭据并创建 API 客户端

        优先使用 Pod 内的 ServiceAccount 凭据，失败时回退到 kubeconfig
        （KUBECONFIG 配置项或默认的 ~/.kube/config）

        Raises:
            KubernetesConnectionException: 如果两种方式都无法加载凭据
        """
        if self._api_client is not None:
            logger.warning("KubernetesManager 已经初始化")
            return

        settings = get_settings()

        try:
            config.load_incluster_config()
            self.in_cluster = True
            logger.debug("Loaded in-cluster Kubernetes configuration")
        except ConfigException as e:
            logger.debug(f"In-cluster configuration unavailable ({e}), falling back to kubeconfig")
            try:
                config.load_kube_config(config_file=settings.KUBECONFIG)
            except (ConfigException, OSError) as kube_err:
                raise KubernetesConnectionException(
                    f"the kubeconfig cannot be loaded: {kube_err}"
                ) from kube_err
            self.in_cluster = False

        self._api_client = client.ApiClient()
        self._batch_api = client.BatchV1Api(self._api_client)

        mode = "in-cluster" if self.in_cluster else "kubeconfig"
        logger.info(f"Kubernetes管理器已初始化（{mode}）")

    def close(self) -> None:
        """关闭 API 客户端"""
        if self._api_client is not None:
            self._api_client.close()
            self._api_client = None
            self._batch_api = None
            logger.info("Kubernetes连接已关闭")

    def get_batch_api(self) -> client.BatchV1Api:
        """
        获取 BatchV1Api 客户端

        返回:
            BatchV1Api 实例
        """
        if self._batch_api is None:
            raise KubernetesNotInitializedException()
        return self._batch_api

    def is_initialized(self) -> bool:
        """检查是否已初始化"""
        return self._batch_api is not None


# 全局实例
k8s_manager = KubernetesManager()
