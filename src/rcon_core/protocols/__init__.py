# src/rcon_core/protocols/__init__.py
"""
Source RCON 协议层 (Protocol Layer)

本包负责协议数据包的纯粹构建 (Encode) 与解析 (Decode)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何状态管理 (State)。
"""

from . import constants
from .constants import PacketType
from .packets import Packet, decode_packet, encode_packet, read_size_prefix

# 公共 API
__all__ = [
    "constants",
    "PacketType",
    "Packet",
    "encode_packet",
    "decode_packet",
    "read_size_prefix",
]
