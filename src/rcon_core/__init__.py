# src/rcon_core/__init__.py
"""
Rcon-Core v0.1.0
Source RCON 协议的异步客户端核心库。
"""

__version__ = "0.1.0"

# 暴露核心配置
from .config import (
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露引擎与状态
from .core import RconCore

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthError,
    AuthErrorCode,
    ConfigError,
    ConnectError,
    ExecError,
    ExecErrorCode,
    NetworkError,
    ProtocolError,
    RconError,
    StateError,
)
from .invoker import CommandInvoker
from .network import Connection
from .state import RconState, SessionStatus

__all__ = [
    "RconCore",
    "RconConfig",
    "RconState",
    "SessionStatus",
    "Connection",
    "CommandInvoker",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "RconError",
    "ConfigError",
    "NetworkError",
    "ConnectError",
    "ProtocolError",
    "StateError",
    "AuthError",
    "AuthErrorCode",
    "ExecError",
    "ExecErrorCode",
]
