# tests/conftest.py
import asyncio
import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rcon_core.config import RconConfig
from rcon_core.protocols import PacketType, decode_packet, encode_packet

SERVER_PASSWORD = "s3cret"


@pytest.fixture(autouse=True)
def clean_rcon_env(monkeypatch):
    """[Fixture] 清除宿主机上的 MC_RCON_ 环境变量，避免污染测试。"""
    for key in list(os.environ):
        if key.startswith("MC_RCON_"):
            monkeypatch.delenv(key)


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个指向本地的 RconConfig 对象。
    """
    return RconConfig(
        host="127.0.0.1",
        port=25575,
        password=SERVER_PASSWORD,
        connect_timeout=1.0,
    )


class OneByteReader:
    """模拟极端分片的传输层：每次 read 只返回 1 个字节。"""

    def __init__(self, data: bytes):
        self._data = bytearray(data)
        self.calls: list[int] = []

    async def read(self, n: int) -> bytes:
        self.calls.append(n)
        if not self._data:
            return b""
        chunk = bytes(self._data[:1])
        del self._data[:1]
        return chunk


async def read_frame(reader: asyncio.StreamReader):
    """服务端辅助函数：读取一个完整的数据包。返回 None 表示对端已关闭。"""
    header = await reader.read(4)
    if not header:
        return None
    while len(header) < 4:
        header += await reader.readexactly(4 - len(header))
    size = int.from_bytes(header, "little", signed=True)
    body = await reader.readexactly(size)
    return decode_packet(header + body)


class FakeRconServer:
    """一个最小的 RCON 服务端，用于集成测试。

    - AUTH: 密码正确则回显请求 ID，否则返回 -1。
    - EXECCOMMAND: 返回 "echo: <command>"。
    """

    def __init__(self, password: str = SERVER_PASSWORD):
        self.password = password
        self.received = []
        self.client_closed = asyncio.Event()
        self._server: asyncio.AbstractServer | None = None

    @property
    def port(self) -> int:
        assert self._server is not None
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> "FakeRconServer":
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        return self

    async def stop(self) -> None:
        if self._server:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, reader, writer):
        try:
            while True:
                pkt = await read_frame(reader)
                if pkt is None:
                    break
                self.received.append(pkt)

                if pkt.packet_type == PacketType.AUTH:
                    ok = pkt.text == self.password
                    resp = encode_packet(
                        pkt.request_id if ok else -1, PacketType.AUTH_RESPONSE, b""
                    )
                else:
                    resp = encode_packet(
                        pkt.request_id,
                        PacketType.RESPONSE_VALUE,
                        f"echo: {pkt.text}",
                    )
                writer.write(resp)
                await writer.drain()
        finally:
            self.client_closed.set()
            writer.close()


@pytest_asyncio.fixture
async def rcon_server():
    server = await FakeRconServer().start()
    yield server
    await server.stop()


@pytest.fixture
def server_config(rcon_server):
    return RconConfig(
        host="127.0.0.1",
        port=rcon_server.port,
        password=SERVER_PASSWORD,
        connect_timeout=1.0,
    )
