"""
RCON 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .protocols import constants

logger = logging.getLogger(__name__)

ENV_PREFIX = "MC_RCON_"


@dataclass(frozen=True)
class RconConfig:
    """RconCore 的强类型配置对象。

    所有字段均为只读 (frozen=True)，配置在进程启动时加载一次，之后不再改变。

    Attributes:
        host: RCON 服务器地址。
        port: RCON 端口 (Minecraft 默认 25575)。
        password: RCON 密码。
        connect_timeout: 建立 TCP 连接的超时时间 (秒)。
    """

    host: str
    port: int
    password: str
    connect_timeout: float = constants.DEFAULT_CONNECT_TIMEOUT

    def __repr__(self) -> str:
        """
        覆盖默认的 repr，隐藏密码字段，防止日志泄露敏感信息。
        """
        return (
            f"<{self.__class__.__name__} "
            f"server={self.host}:{self.port}, "
            f"password='******', "
            f"connect_timeout={self.connect_timeout}>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> RconConfig:
    """通用工厂：将字典转换为强类型配置对象。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        RconConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    if "password" not in raw_data:
        raise ConfigError("配置缺失: 缺少必要字段 'password'")

    password = str(raw_data["password"])
    if "\x00" in password:
        raise ConfigError("密码格式无效: 不能包含 NUL 字符")

    host = str(raw_data.get("host") or constants.DEFAULT_HOST)

    raw_port = raw_data.get("port", constants.DEFAULT_PORT)
    try:
        port = int(raw_port)
    except (TypeError, ValueError):
        raise ConfigError(f"端口格式无效: {raw_port!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"端口超出范围: {port}")

    raw_timeout = raw_data.get("timeout", constants.DEFAULT_CONNECT_TIMEOUT)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError):
        raise ConfigError(f"超时格式无效: {raw_timeout!r}") from None
    if timeout <= 0:
        raise ConfigError(f"超时必须为正数: {timeout}")

    return RconConfig(
        host=host,
        port=port,
        password=password,
        connect_timeout=timeout,
    )


def load_config_from_toml(file_path: Path, profile: str = "default") -> RconConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [rcon]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "rcon" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [rcon] 节，忽略 profile='{profile}'。")
        raw_config = data["rcon"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env() -> RconConfig:
    """从环境变量加载配置 (Docker Friendly)。

    读取 `MC_RCON_HOST`、`MC_RCON_PORT`、`MC_RCON_PASSWORD`、`MC_RCON_TIMEOUT`。

    Raises:
        ConfigError: 未检测到任何相关环境变量，或字段无效。
    """
    env_map = {
        "host": "HOST",
        "port": "PORT",
        "password": "PASSWORD",
        "timeout": "TIMEOUT",
    }

    raw_data = {}
    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"{ENV_PREFIX}{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError(f"未检测到 {ENV_PREFIX} 前缀的环境变量")

    return create_config_from_dict(raw_data)
