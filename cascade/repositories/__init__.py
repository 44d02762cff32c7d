"""
Kubernetes 操作仓储模块
"""

from .job_repository import JobRepository

__all__ = ["JobRepository"]
