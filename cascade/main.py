"""
Cascade Scenario Controller - 主入口

读取场景配置，连接集群，按顺序运行所有阶段作业。
退出码：0 表示场景全部成功，1 表示失败或中止。
"""

import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from core.config import get_settings
from core.exceptions import KubernetesConnectionException, ScenarioConfigException
from core.k8s_client import k8s_manager
from core.models import load_scenario
from core.utils.logger import setup_logger

from cascade.config import SequencerConfig
from cascade.orchestrator import ScenarioOrchestrator
from cascade.signal_handler import SignalHandler
from cascade.webhook import WebhookNotifier


def run() -> int:
    """
    运行一次场景

    Returns:
        进程退出码
    """
    settings = get_settings()
    setup_logger(settings.LOG_LEVEL, settings.LOG_FILE, settings.LOG_SERIALIZE)

    logger.info("=" * 70)
    logger.info(f"🌊 Cascade Scenario Controller: {settings.SCENARIO_NAME}")
    logger.info("=" * 70)

    # 读取场景配置
    try:
        stages = load_scenario(settings.CONFIG_FILE)
    except ScenarioConfigException as e:
        logger.error(f"✗ {e}")
        return 1

    # 连接集群
    try:
        k8s_manager.init()
        logger.info("✓ Kubernetes API connected")
    except KubernetesConnectionException as e:
        logger.error(f"✗ {e}")
        return 1

    logger.info("-" * 70)
    logger.info(f"Namespace: {settings.POD_NAMESPACE}")
    logger.info(f"Status server: {settings.get_status_url()}")
    logger.info(f"Stages: {', '.join(stage.module_name for stage in stages)}")
    logger.info("-" * 70)

    notifier = WebhookNotifier(settings.STATUS_SERVER, timeout=settings.WEBHOOK_TIMEOUT)
    orchestrator = ScenarioOrchestrator(
        stages,
        k8s_manager.get_batch_api(),
        notifier,
        config=SequencerConfig.from_settings(settings),
    )

    signal_handler = SignalHandler().on_shutdown(orchestrator.stop)
    signal_handler.register()

    try:
        result = orchestrator.run()
    finally:
        signal_handler.restore()
        k8s_manager.close()

    logger.info("=" * 70)
    logger.info(f"Scenario {result.state.value}, exit code {result.exit_code}")
    logger.info("=" * 70)
    return result.exit_code


def main():
    """控制器主入口"""
    sys.exit(run())


if __name__ == "__main__":
    main()
