# tests/test_network.py
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conftest import OneByteReader
from rcon_core.exceptions import ConnectError, NetworkError, ProtocolError, StateError
from rcon_core.network import Connection
from rcon_core.protocols import PacketType, encode_packet
from rcon_core.state import SessionStatus


@pytest.mark.asyncio
async def test_connect_send_receive(rcon_server):
    conn = Connection("127.0.0.1", rcon_server.port)
    await conn.connect(timeout=1.0)
    assert conn.state.status is SessionStatus.CONNECTED

    await conn.send(encode_packet(9, PacketType.EXECCOMMAND, "list"))
    pkt = await conn.receive()

    assert pkt.request_id == 9
    assert pkt.packet_type == PacketType.RESPONSE_VALUE
    assert pkt.text == "echo: list"

    await conn.disconnect()
    await asyncio.wait_for(rcon_server.client_closed.wait(), timeout=1.0)


@pytest.mark.asyncio
async def test_receive_one_byte_fragments():
    """传输层每次只返回 1 字节时，receive 仍能拼出完整的包"""
    data = encode_packet(5, PacketType.RESPONSE_VALUE, b"There are 0 players")
    conn = Connection("127.0.0.1", 0)
    reader = OneByteReader(data)
    conn._reader = reader

    pkt = await conn.receive()

    assert pkt.request_id == 5
    assert pkt.payload == b"There are 0 players"
    assert len(reader.calls) == len(data)
    # 每次只请求剩余的字节数
    assert reader.calls[:4] == [4, 3, 2, 1]


@pytest.mark.asyncio
async def test_receive_truncated_packet():
    data = encode_packet(5, PacketType.RESPONSE_VALUE, b"abc")
    conn = Connection("127.0.0.1", 0)
    conn._reader = OneByteReader(data[:-3])

    with pytest.raises(ProtocolError, match="截断"):
        await conn.receive()


@pytest.mark.asyncio
async def test_receive_peer_closed_at_boundary():
    conn = Connection("127.0.0.1", 0)
    conn._reader = OneByteReader(b"")

    with pytest.raises(NetworkError, match="关闭"):
        await conn.receive()


@pytest.mark.asyncio
async def test_receive_invalid_size_prefix():
    conn = Connection("127.0.0.1", 0)
    conn._reader = OneByteReader((3).to_bytes(4, "little") + b"\x00" * 3)

    with pytest.raises(ProtocolError):
        await conn.receive()


@pytest.mark.asyncio
async def test_receive_oversized_size_prefix_reads_nothing_more():
    """声明的 size 超过上限时立即失败，不再继续读取包体"""
    conn = Connection("127.0.0.1", 0)
    reader = OneByteReader((2**31 - 1).to_bytes(4, "little") + b"\x00" * 16)
    conn._reader = reader

    with pytest.raises(ProtocolError, match="过长"):
        await conn.receive()

    assert len(reader.calls) == 4


@pytest.mark.asyncio
async def test_send_flushes_whole_buffer():
    conn = Connection("127.0.0.1", 0)
    writer = MagicMock()
    writer.drain = AsyncMock()
    conn._writer = writer
    packet = encode_packet(1, PacketType.AUTH, "pw")

    await conn.send(packet)

    writer.write.assert_called_once_with(packet)
    writer.drain.assert_awaited_once()


@pytest.mark.asyncio
async def test_send_error_is_wrapped():
    conn = Connection("127.0.0.1", 0)
    writer = MagicMock()
    writer.drain = AsyncMock(side_effect=ConnectionResetError("reset"))
    conn._writer = writer

    with pytest.raises(NetworkError, match="发送失败"):
        await conn.send(b"data")


@pytest.mark.asyncio
async def test_send_and_receive_require_connection():
    conn = Connection("127.0.0.1", 0)

    with pytest.raises(NetworkError, match="未连接"):
        await conn.send(b"data")
    with pytest.raises(NetworkError, match="未连接"):
        await conn.receive()


@pytest.mark.asyncio
async def test_connect_refused():
    conn = Connection("127.0.0.1", 1)
    with patch(
        "rcon_core.network.asyncio.open_connection",
        AsyncMock(side_effect=ConnectionRefusedError("refused")),
    ):
        with pytest.raises(ConnectError, match="连接 RCON 服务器失败"):
            await conn.connect()

    assert conn.state.status is SessionStatus.CLOSED


@pytest.mark.asyncio
async def test_connect_timeout():
    async def _hang(*args, **kwargs):
        await asyncio.sleep(10)

    conn = Connection("127.0.0.1", 25575)
    with patch("rcon_core.network.asyncio.open_connection", _hang):
        with pytest.raises(ConnectError, match="超时"):
            await conn.connect(timeout=0.01)


@pytest.mark.asyncio
async def test_disconnect_is_idempotent(rcon_server):
    conn = Connection("127.0.0.1", rcon_server.port)
    await conn.connect()
    conn.state.status = SessionStatus.AUTHENTICATED

    await conn.disconnect()
    await conn.disconnect()

    assert conn.state.status is SessionStatus.CLOSED
    assert conn.state.is_authenticated is False
    assert conn.is_connected is False


@pytest.mark.asyncio
async def test_disconnect_without_connect():
    conn = Connection("127.0.0.1", 0)
    await conn.disconnect()
    assert conn.state.status is SessionStatus.CLOSED


@pytest.mark.asyncio
async def test_never_reopened(rcon_server):
    conn = Connection("127.0.0.1", rcon_server.port)
    await conn.connect()

    with pytest.raises(StateError, match="重复连接"):
        await conn.connect()

    await conn.disconnect()
    with pytest.raises(StateError, match="不能重新打开"):
        await conn.connect()


@pytest.mark.asyncio
async def test_async_context_manager_closes(rcon_server):
    async with Connection("127.0.0.1", rcon_server.port) as conn:
        assert conn.is_connected

    assert conn.is_connected is False
    await asyncio.wait_for(rcon_server.client_closed.wait(), timeout=1.0)
