# src/rcon_core/protocols/constants.py
"""
Source RCON 协议常量表 (Constants)

仅定义协议的结构性常量（包类型、长度、边界）。
"""

import struct


# =========================================================================
# 包类型 (Packet Types)
# =========================================================================
class PacketType:
    """数据包头部的 Type 字段定义。

    注意 AUTH_RESPONSE 与 EXECCOMMAND 共用数值 2，
    只能由调用上下文 (方向) 区分。
    """

    AUTH = 3  # 认证请求 (Client -> Server)
    AUTH_RESPONSE = 2  # 认证响应 (Server -> Client)
    EXECCOMMAND = 2  # 执行命令 (Client -> Server)
    RESPONSE_VALUE = 0  # 命令响应 (Server -> Client)


# =========================================================================
# 结构 (Structure)
# =========================================================================
# 所有整数均为小端序有符号 32 位
INT32 = struct.Struct("<i")
HEADER = struct.Struct("<iii")  # size, request_id, type

SIZE_FIELD_LEN = 4
REQUEST_ID_LEN = 4
TYPE_LEN = 4
TERMINATOR = b"\x00\x00"  # Payload 结束符 + 填充

# size 字段之后最少的字节数: request_id + type + 2 个 NUL
MIN_PACKET_SIZE = REQUEST_ID_LEN + TYPE_LEN + len(TERMINATOR)

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)

# Payload 最大长度，保证 size 不超出有符号 32 位
MAX_PAYLOAD_LEN = INT32_MAX - MIN_PACKET_SIZE

# 接收时允许的最大 size，超出视为损坏的数据流
MAX_RECEIVE_SIZE = 1024 * 1024

# 服务器用 -1 表示认证失败
AUTH_FAILED_REQUEST_ID = -1

# 请求 ID 种子取模范围，为自增预留空间
REQUEST_ID_SEED_MODULUS = 2**30 - 1

# =========================================================================
# 连接参数 (Connection)
# =========================================================================
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 25575
DEFAULT_CONNECT_TIMEOUT = 10.0
