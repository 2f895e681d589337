# File: src/rcon_core/state.py
"""
RCON 核心库 - 状态模块

负责定义和存储会话的易变状态。
Connection、AuthSession、CommandChannel 共享同一个状态对象。
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto

from .exceptions import StateError
from .protocols.constants import INT32_MAX, REQUEST_ID_SEED_MODULUS


class SessionStatus(Enum):
    """会话的生命周期状态枚举。

    状态流转示意:
    CLOSED -> CONNECTED -> AUTH_PENDING -> AUTHENTICATED -> CLOSED
                                 |
                                 v
                              REJECTED -> CLOSED
    """

    CLOSED = auto()
    """未连接，或连接已关闭。"""

    CONNECTED = auto()
    """TCP 连接已建立，尚未认证。"""

    AUTH_PENDING = auto()
    """认证包已发出，正在等待服务器响应。"""

    AUTHENTICATED = auto()
    """认证成功，可以执行命令。"""

    REJECTED = auto()
    """认证被拒绝。该连接不可再用于认证或执行命令。"""


def _seed_request_id() -> int:
    """以当前时间为种子生成一个非零的正整数起始 ID。

    服务器保留 -1 表示认证失败，因此起始值必须避开它。
    """
    return int(time.time()) % REQUEST_ID_SEED_MODULUS + 1


@dataclass
class RconState:
    """存储 RCON 会话的易变状态数据。

    每次调用 (一次连接) 对应一个状态对象，不跨连接复用。

    Attributes:
        status: 当前会话状态。
        next_request_id: 最近一次分配的请求 ID，下一次分配在此基础上自增。
        last_error: 最近一次发生的错误信息描述，用于 UI 显示。
    """

    status: SessionStatus = SessionStatus.CLOSED
    next_request_id: int = field(default_factory=_seed_request_id)
    last_error: str = ""

    @property
    def is_authenticated(self) -> bool:
        """判断当前是否处于已认证状态。"""
        return self.status is SessionStatus.AUTHENTICATED

    def allocate_request_id(self) -> int:
        """分配一个新的请求 ID。

        ID 在连接生命周期内严格递增，耗尽时报错而不是回绕。

        Raises:
            StateError: 超出有符号 32 位整数范围。
        """
        if self.next_request_id >= INT32_MAX:
            raise StateError("请求 ID 空间已耗尽，请重新建立连接")
        self.next_request_id += 1
        return self.next_request_id
