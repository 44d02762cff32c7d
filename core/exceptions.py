"""
场景控制器的自定义异常
"""


class CascadeException(Exception):
    """Cascade 控制器基础异常类"""
    pass


# ========== 配置异常 ==========

class ScenarioConfigException(CascadeException):
    """场景配置无效异常"""
    def __init__(self, source: str, reason: str):
        self.source = source
        super().__init__(f"Invalid scenario configuration {source}: {reason}")


# ========== Kubernetes 异常 ==========

class KubernetesException(CascadeException):
    """Kubernetes 相关异常基类"""
    pass


class KubernetesNotInitializedException(KubernetesException):
    """Kubernetes 客户端未初始化异常"""
    def __init__(self):
        super().__init__(
            "KubernetesManager not initialized. Call init() first."
        )


class KubernetesConnectionException(KubernetesException):
    """Kubernetes 连接异常"""
    def __init__(self, detail: str):
        super().__init__(f"Kubernetes connection error: {detail}")


# ========== 作业异常 ==========

class JobException(CascadeException):
    """阶段作业异常基类"""
    def __init__(self, job_name: str, message: str):
        self.job_name = job_name
        super().__init__(message)


class JobSubmissionException(JobException):
    """作业提交失败异常"""
    def __init__(self, job_name: str, detail: str):
        super().__init__(job_name, f"Failed to create job {job_name}: {detail}")


class JobStatusQueryException(JobException):
    """作业状态查询失败异常"""
    def __init__(self, job_name: str, detail: str):
        super().__init__(
            job_name, f"Failed to read status of job {job_name}: {detail}"
        )


class StageTimeoutException(JobException):
    """阶段在限定时间内未进入终止状态"""
    def __init__(self, job_name: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            job_name, f"Job {job_name} did not finish within {timeout}s"
        )


# ========== 场景异常 ==========

class ScenarioInterruptedException(CascadeException):
    """场景被停止请求中断"""
    def __init__(self, job_name: str):
        self.job_name = job_name
        super().__init__(f"Scenario stopped while waiting for job {job_name}")
