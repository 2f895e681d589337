# src/rcon_core/network.py
"""
RCON 核心库 - 网络模块 (Network) [Asyncio Edition]

封装 TCP 连接的建立、分帧收发与关闭。
该模块屏蔽了底层 Stream 的复杂性，向会话层提供按包收发的接口。
"""

import asyncio
import logging

from .exceptions import ConnectError, NetworkError, ProtocolError, StateError
from .protocols import constants
from .protocols.packets import Packet, decode_packet, read_size_prefix
from .state import RconState, SessionStatus

logger = logging.getLogger(__name__)


class Connection:
    """一条 RCON TCP 连接。

    每个实例在生命周期内只拥有一个 TCP 流：
    CLOSED -> CONNECTED -> ... -> CLOSED，关闭后不会被隐式重开。
    """

    def __init__(self, host: str, port: int, state: RconState | None = None):
        self.host = host
        self.port = port
        self.state = state if state is not None else RconState()
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._closed = False

    @property
    def is_connected(self) -> bool:
        return self._writer is not None

    async def connect(
        self, timeout: float = constants.DEFAULT_CONNECT_TIMEOUT
    ) -> None:
        """建立 TCP 连接。

        Args:
            timeout: 拨号超时时间 (秒)。仅作用于连接阶段。

        Raises:
            ConnectError: 超时或被拒绝。不会重试。
            StateError: 连接已建立或已关闭过。
        """
        if self._closed:
            raise StateError("连接已关闭，不能重新打开")
        if self.is_connected:
            raise StateError("连接已建立，不能重复连接")

        addr = (self.host, self.port)
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), timeout=timeout
            )
        except asyncio.TimeoutError:
            raise ConnectError(f"连接 RCON 服务器超时 {addr} ({timeout}s)") from None
        except OSError as e:
            raise ConnectError(f"连接 RCON 服务器失败 {addr}: {e}") from e

        self.state.status = SessionStatus.CONNECTED
        logger.debug(f"TCP 连接已建立: {addr}")

    async def send(self, packet: bytes) -> None:
        """发送一个已编码的数据包，直到全部字节写出。

        Raises:
            NetworkError: 未连接或写入失败。
        """
        if self._writer is None:
            raise NetworkError("未连接到 RCON 服务器")

        try:
            self._writer.write(packet)
            await self._writer.drain()
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e

        logger.debug(f"已发送 {len(packet)} 字节")

    async def receive(self) -> Packet:
        """接收一个完整的数据包。

        先读 4 字节 size，再读恰好 size 字节，交给解码器。

        Raises:
            NetworkError: 未连接、读取失败，或对端在包边界关闭连接。
            ProtocolError: 数据包格式错误或在中途被截断。
        """
        if self._reader is None:
            raise NetworkError("未连接到 RCON 服务器")

        header = await self._read_exactly(constants.SIZE_FIELD_LEN, at_boundary=True)
        size = read_size_prefix(header)
        body = await self._read_exactly(size)
        return decode_packet(header + body)

    async def _read_exactly(self, n: int, at_boundary: bool = False) -> bytes:
        """循环读取，直到累计读满 n 字节。

        单次 read 可能只返回部分数据，不能假设一次读完。
        """
        assert self._reader is not None

        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = await self._reader.read(n - len(buf))
            except OSError as e:
                raise NetworkError(f"接收失败: {e}") from e

            if not chunk:
                if at_boundary and not buf:
                    raise NetworkError("连接已被服务器关闭")
                raise ProtocolError(f"数据包被截断: 期望 {n} 字节, 仅收到 {len(buf)}")
            buf.extend(chunk)

        return bytes(buf)

    async def disconnect(self) -> None:
        """关闭连接 (幂等)。

        清除认证状态，可以在任何状态下重复调用。
        """
        writer = self._writer
        self._reader = None
        self._writer = None
        self._closed = True
        self.state.status = SessionStatus.CLOSED

        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"关闭连接时对端已断开: {e}")
        logger.debug("TCP 连接已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
