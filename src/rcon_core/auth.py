"""
RCON 认证会话 (Auth Session)

职责：在已建立的连接上执行一次性的认证握手，并维护认证状态：
Unauthenticated -> AuthPending -> {Authenticated, Rejected}

认证被拒绝后不重试，调用方必须新建连接。
"""

import logging
from typing import TYPE_CHECKING

from .exceptions import AuthError, AuthErrorCode, RconError, StateError
from .protocols import constants
from .protocols.constants import PacketType
from .protocols.packets import encode_packet
from .state import SessionStatus

if TYPE_CHECKING:
    from .network import Connection


class AuthSession:
    """认证握手的执行者。"""

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection
        self.state = connection.state
        self.logger = logging.getLogger(self.__class__.__name__)

    async def authenticate(self, password: str) -> None:
        """发送 AUTH 包并校验服务器的响应。

        Args:
            password: RCON 密码，仅作为载荷发送，不会写入日志。

        Raises:
            AuthError: 密码错误 (INVALID_CREDENTIALS) 或请求 ID 不匹配 (MISMATCH)。
            NetworkError: 网络通信异常。
            ProtocolError: 响应包格式错误。
            StateError: 会话不处于刚连接的状态 (已被拒绝、已认证或已关闭)。
        """
        if self.state.status is not SessionStatus.CONNECTED:
            raise StateError(
                f"当前状态 {self.state.status.name} 不允许认证，请重新建立连接"
            )

        request_id = self.state.allocate_request_id()
        packet = encode_packet(request_id, PacketType.AUTH, password)
        self.state.status = SessionStatus.AUTH_PENDING
        self.logger.debug(f"发送认证请求 (id={request_id})")

        try:
            await self.connection.send(packet)
            resp = await self.connection.receive()
        except RconError as e:
            self._reject(f"认证过程中断: {e}")
            raise

        if resp.request_id == constants.AUTH_FAILED_REQUEST_ID:
            err = AuthError(AuthErrorCode.INVALID_CREDENTIALS)
            self._reject(str(err))
            raise err

        if resp.request_id != request_id:
            err = AuthError(
                AuthErrorCode.MISMATCH, expected=request_id, got=resp.request_id
            )
            self._reject(str(err))
            raise err

        self.state.status = SessionStatus.AUTHENTICATED
        self.logger.info("认证成功")

    def _reject(self, reason: str) -> None:
        self.state.status = SessionStatus.REJECTED
        self.state.last_error = reason
        self.logger.warning(reason)
