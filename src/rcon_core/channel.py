"""
RCON 命令通道 (Command Channel)

在已认证的连接上发送一条命令，并返回与之对应的响应文本。

已知限制: 每条命令只读取一个响应包。服务器可能把超长的响应拆分成多个包，
本实现不做多包重组。
"""

import logging
from typing import TYPE_CHECKING

from .exceptions import ExecError, ExecErrorCode, RconError
from .protocols.constants import PacketType
from .protocols.packets import encode_packet

if TYPE_CHECKING:
    from .network import Connection

logger = logging.getLogger(__name__)


class CommandChannel:
    """命令请求/响应通道。"""

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection
        self.state = connection.state

    async def execute(self, command: str) -> str:
        """执行一条命令。

        Args:
            command: 命令文本 (已由调用方用单个空格拼接)。

        Returns:
            str: 服务器响应的文本。

        Raises:
            ExecError: 尚未认证。此时不会发生任何网络 I/O。
            NetworkError: 网络通信异常。
            ProtocolError: 响应包格式错误。
        """
        if not self.state.is_authenticated:
            raise ExecError(ExecErrorCode.NOT_AUTHENTICATED)

        request_id = self.state.allocate_request_id()
        logger.debug(f"执行命令 (id={request_id}): {command!r}")

        try:
            await self.connection.send(
                encode_packet(request_id, PacketType.EXECCOMMAND, command)
            )
            resp = await self.connection.receive()
        except RconError as e:
            self.state.last_error = str(e)
            raise

        if resp.request_id != request_id:
            # 单包模式下不做重组，仅记录
            logger.warning(
                f"响应 ID 与请求不一致 (期望 {request_id}, 收到 {resp.request_id})"
            )

        return resp.text
