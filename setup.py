"""
Cascade Scenario Controller 安装配置
"""
from setuptools import setup, find_packages

setup(
    name="cascade-scenario-controller",
    version="1.0.0",
    description="按顺序在 Kubernetes 上运行多阶段场景作业的控制器",
    author="Cascade Team",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "kubernetes>=28.1.0",
        "loguru>=0.7.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "requests>=2.31.0",
        "urllib3>=1.26.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cascade-scenario=cascade.main:main",
        ],
    },
)
