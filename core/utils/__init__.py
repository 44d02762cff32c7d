"""
Utility modules for the cascade scenario controller
"""
from .logger import setup_logger
from .singleton import singleton
from .time_utils import format_elapsed_time, format_duration
from .validators import validate_job_name, validate_env_name

__all__ = [
    "setup_logger",
    "singleton",
    "format_elapsed_time",
    "format_duration",
    "validate_job_name",
    "validate_env_name",
]
