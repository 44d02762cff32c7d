"""
验证工具
"""
import re


# Kubernetes 对象名称（RFC 1123 subdomain，由点分隔的 label 组成）
_DNS_SUBDOMAIN_PATTERN = re.compile(
    r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$'
)
# Job 名称会作为 Pod 标签值使用，长度上限为 63
MAX_JOB_NAME_LENGTH = 63


def validate_job_name(name: str) -> bool:
    """
    验证作业名称是否为合法的 Kubernetes 资源名称

    Args:
        name: 要验证的作业名称

    Returns:
        有效则返回True

    Raises:
        ValueError: 如果名称无效
    """
    if not name:
        raise ValueError("Job name cannot be empty")

    if len(name) > MAX_JOB_NAME_LENGTH:
        raise ValueError(
            f"Job name {name!r} is longer than {MAX_JOB_NAME_LENGTH} characters"
        )

    if not _DNS_SUBDOMAIN_PATTERN.match(name):
        raise ValueError(
            f"Invalid job name: {name!r}. "
            "Expected lowercase alphanumerics, '-' and '.', "
            "starting and ending with an alphanumeric"
        )

    return True


def validate_env_name(name: str) -> bool:
    """
    验证环境变量名称

    Args:
        name: 环境变量名称

    Returns:
        有效则返回True

    Raises:
        ValueError: 如果名称为空或包含 '='
    """
    if not name or not name.strip():
        raise ValueError("Environment variable name cannot be empty")

    if "=" in name:
        raise ValueError(f"Environment variable name cannot contain '=': {name!r}")

    return True
