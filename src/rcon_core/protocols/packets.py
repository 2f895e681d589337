# File: src/rcon_core/protocols/packets.py
"""
Source RCON 封包构建与解析 (Packet Codec)

负责 Python 数据结构与协议二进制字节流 (bytes) 之间的转换。
本模块是无状态的 (Stateless)，不包含任何网络 I/O，请求 ID 由调用方分配。

线上格式 (所有整数为小端序有符号 32 位):
    [ size ][ request_id ][ type ][ payload ][ 0x00 ][ 0x00 ]
size = size 字段之后所有内容的字节数。
"""

import logging
from dataclasses import dataclass

from ..exceptions import ProtocolError
from . import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Packet:
    """一个解析后的 RCON 数据包。

    Attributes:
        size: 包头声明的长度 (不含 size 字段本身)。
        request_id: 请求 ID，服务器原样回显。
        packet_type: 包类型，见 constants.PacketType。
        payload: 原始载荷，不含结尾的两个 NUL。
    """

    size: int
    request_id: int
    packet_type: int
    payload: bytes

    @property
    def text(self) -> str:
        """以 UTF-8 解码的载荷文本，非法字节会被替换。"""
        return self.payload.decode("utf-8", errors="replace")


def encode_packet(request_id: int, packet_type: int, payload: bytes | str) -> bytes:
    """构建一个 RCON 数据包。

    Args:
        request_id: 调用方分配的请求 ID。
        packet_type: 包类型。
        payload: 载荷，str 会按 UTF-8 编码。

    Returns:
        bytes: 完整的数据包，包含 size 前缀。

    Raises:
        ValueError: 违反前置条件 (载荷含 NUL、超长、整数越界)。
            这属于调用方的编程错误，不是可恢复的运行时错误。
    """
    if isinstance(payload, str):
        payload = payload.encode("utf-8")

    if b"\x00" in payload:
        raise ValueError("payload 不能包含 NUL 字节")
    if len(payload) > constants.MAX_PAYLOAD_LEN:
        raise ValueError(f"payload 过长: {len(payload)} 字节")
    for name, val in (("request_id", request_id), ("packet_type", packet_type)):
        if not constants.INT32_MIN <= val <= constants.INT32_MAX:
            raise ValueError(f"{name} 超出有符号 32 位范围: {val}")

    size = constants.MIN_PACKET_SIZE + len(payload)
    return (
        constants.HEADER.pack(size, request_id, packet_type)
        + payload
        + constants.TERMINATOR
    )


def read_size_prefix(header: bytes) -> int:
    """解析 4 字节的 size 前缀。

    Raises:
        ProtocolError: 前缀长度不是 4 字节，或声明的 size 过短/过长。
    """
    if len(header) != constants.SIZE_FIELD_LEN:
        raise ProtocolError(f"size 前缀长度错误: {len(header)} 字节")

    (size,) = constants.INT32.unpack(header)
    if size < constants.MIN_PACKET_SIZE:
        raise ProtocolError(f"数据包过短: size={size}")
    if size > constants.MAX_RECEIVE_SIZE:
        raise ProtocolError(f"数据包过长: size={size}")
    return size


def decode_packet(data: bytes) -> Packet:
    """解析一个完整的 RCON 数据包 (包含 size 前缀)。

    去掉结尾固定的 2 个字节后，剩余部分即为 payload。

    Args:
        data: 传输层读到的完整字节流。

    Returns:
        Packet: 解析后的数据包。

    Raises:
        ProtocolError: 数据不足 10 字节，或声明的 size 与实际字节数不一致。
    """
    if len(data) < constants.SIZE_FIELD_LEN:
        raise ProtocolError(f"数据包过短: 仅 {len(data)} 字节")

    (size,) = constants.INT32.unpack_from(data, 0)
    body_len = len(data) - constants.SIZE_FIELD_LEN

    if body_len < constants.MIN_PACKET_SIZE:
        raise ProtocolError(f"数据包过短: size 字段后仅 {body_len} 字节")
    if size != body_len:
        raise ProtocolError(f"数据包长度不匹配: 声明 {size}, 实际 {body_len}")

    _, request_id, packet_type = constants.HEADER.unpack_from(data, 0)
    payload = data[constants.HEADER.size : -len(constants.TERMINATOR)]

    logger.debug(
        "decode: id=%d type=%d payload_len=%d", request_id, packet_type, len(payload)
    )
    return Packet(
        size=size,
        request_id=request_id,
        packet_type=packet_type,
        payload=bytes(payload),
    )
