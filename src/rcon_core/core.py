# File: src/rcon_core/core.py
"""
RCON 核心引擎 (Core Engine)

职责：
1. 资源组装：Config + State + Connection + AuthSession + CommandChannel。
2. 生命周期：Connect -> Authenticate -> Execute -> Close。
"""

import logging
from dataclasses import replace

from .auth import AuthSession
from .channel import CommandChannel
from .config import RconConfig
from .exceptions import AuthError, RconError
from .network import Connection
from .state import RconState

logger = logging.getLogger(__name__)


class RconCore:
    """RCON 客户端核心引擎 (Async)。

    一个实例对应一条连接，关闭后不可复用。
    """

    def __init__(self, config: RconConfig) -> None:
        self.config = config
        self._state = RconState()
        self.connection = Connection(config.host, config.port, self._state)
        self.auth = AuthSession(self.connection)
        self.channel = CommandChannel(self.connection)

    @property
    def state(self) -> RconState:
        """获取当前会话状态的只读副本。"""
        return replace(self._state)

    async def connect(self) -> None:
        logger.info(f"正在连接 {self.config.host}:{self.config.port} ...")
        try:
            await self.connection.connect(self.config.connect_timeout)
        except RconError as e:
            self._state.last_error = str(e)
            raise
        self._log_status("连接成功")

    async def login(self) -> None:
        """执行认证。

        Raises:
            AuthError: 认证被拒绝。
            NetworkError: 网络通信异常。
            ProtocolError: 协议交互异常。
        """
        try:
            await self.auth.authenticate(self.config.password)
        except AuthError:
            self._log_status("认证被拒绝")
            raise
        self._log_status("认证成功")

    async def execute(self, command: str) -> str:
        """执行一条命令并返回响应文本。"""
        return await self.channel.execute(command)

    async def close(self) -> None:
        """关闭连接 (幂等)。"""
        await self.connection.disconnect()
        self._log_status("连接已关闭")

    def _log_status(self, msg: str) -> None:
        logger.info(f"[{self._state.status.name}] {msg}")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
