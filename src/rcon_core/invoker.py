"""
命令调用器 (Command Invoker)

一次调用的完整流程: 拼接命令 -> 连接 -> 认证 -> 执行 -> 断开。
无论成功与否，连接都会在返回前被关闭。不做任何重试。
"""

import asyncio
import logging
from collections.abc import Sequence

from .config import RconConfig
from .core import RconCore

logger = logging.getLogger(__name__)


def join_command(tokens: Sequence[str]) -> str:
    """将多个命令片段用单个空格拼接成一条命令。"""
    return " ".join(tokens)


class CommandInvoker:
    """驱动 RconCore 完成单次命令调用。"""

    def __init__(self, config: RconConfig) -> None:
        self.config = config

    async def invoke(self, tokens: Sequence[str]) -> str:
        """执行一次命令调用。

        Args:
            tokens: 有序的命令片段。

        Returns:
            str: 服务器的响应文本。

        Raises:
            RconError: 任一阶段失败。连接在抛出前已关闭。
        """
        command = join_command(tokens)

        async with RconCore(self.config) as core:
            await core.login()
            response = await core.execute(command)

        logger.debug(f"命令完成: {command!r}")
        return response

    def run(self, tokens: Sequence[str]) -> str:
        """同步入口，供 CLI 使用。"""
        return asyncio.run(self.invoke(tokens))
