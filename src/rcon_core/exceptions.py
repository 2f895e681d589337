# File: src/rcon_core/exceptions.py
"""
RCON 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI）能进行精细的错误处理。
"""

from enum import IntEnum


class RconError(Exception):
    """RCON 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 rcon-core 抛出的已知错误。
    """

    pass


class ConfigError(RconError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 password)。
    2. 字段格式错误 (如端口不是整数或超出范围)。
    3. 找不到配置文件或环境变量。
    """

    pass


class NetworkError(RconError):
    """网络层面的错误 (I/O 级别)。

    触发场景:
    1. 发送 (write) 或 接收 (read) 失败。
    2. 对端关闭了连接。
    3. 在未连接的状态下进行收发。

    注意: 本库不做任何自动重试，连接在此之后不再可信。
    """

    pass


class ConnectError(NetworkError):
    """建立 TCP 连接失败 (拨号超时或被拒绝)。

    对当前调用是致命的，不会重试。
    """

    pass


class ProtocolError(RconError):
    """协议交互错误 (逻辑级别)。

    触发场景:
    1. 数据包长度不足 (size 字段之后不足 10 字节)。
    2. 声明的 size 与实际收到的字节数不一致。
    3. 数据包在传输中途被截断。
    """

    pass


class StateError(RconError):
    """状态机错误 (FSM Violation)。

    触发场景:
    1. 对已连接的连接重复调用 connect。
    2. 对已关闭的连接重新 connect (连接从不隐式重开)。
    3. 请求 ID 空间耗尽。
    """

    pass


class AuthErrorCode(IntEnum):
    """认证失败原因枚举。"""

    INVALID_CREDENTIALS = 1  # 服务器以 request_id == -1 拒绝
    MISMATCH = 2  # 响应的 request_id 与刚发送的不一致

    @property
    def description(self) -> str:
        """获取错误码对应的人类可读中文描述。"""
        _DESC_MAP = {
            1: "认证失败: RCON 密码错误",
            2: "认证失败: 请求 ID 不匹配",
        }
        return _DESC_MAP.get(self.value, f"未知认证错误 (Code: {self.value})")


class AuthError(RconError):
    """认证被拒绝。

    对当前会话是致命的。调用方必须新建连接才能再次尝试。
    """

    def __init__(
        self,
        error_code: AuthErrorCode,
        expected: int | None = None,
        got: int | None = None,
    ) -> None:
        """初始化认证错误。

        Args:
            error_code: 失败原因。
            expected: [MISMATCH] 刚发送的请求 ID。
            got: [MISMATCH] 服务器回显的请求 ID。
        """
        message = error_code.description
        if error_code is AuthErrorCode.MISMATCH:
            message = f"{message} (期望 {expected}, 收到 {got})"

        super().__init__(message)
        self.error_code = error_code
        self.expected = expected
        self.got = got


class ExecErrorCode(IntEnum):
    """命令执行失败原因枚举。"""

    NOT_AUTHENTICATED = 1

    @property
    def description(self) -> str:
        _DESC_MAP = {
            1: "尚未认证，无法执行命令",
        }
        return _DESC_MAP.get(self.value, f"未知执行错误 (Code: {self.value})")


class ExecError(StateError):
    """命令执行的前置条件不满足 (本地错误，未进行任何网络 I/O)。"""

    def __init__(self, error_code: ExecErrorCode) -> None:
        super().__init__(error_code.description)
        self.error_code = error_code
