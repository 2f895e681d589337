# src/rcon_core/cli.py
"""
rcon-core 命令行入口。

用法: rcon-core [选项] COMMAND...
配置来源优先级: 命令行参数 > TOML 文件 > 环境变量 (可由 .env 提供)。
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import RconConfig, load_config_from_env, load_config_from_toml
from .exceptions import ConfigError, RconError
from .invoker import CommandInvoker

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("RconCLI")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcon-core",
        description="通过 Source RCON 协议向游戏服务器发送一条管理命令。",
    )
    parser.add_argument("command", nargs="+", help="要执行的命令 (多个片段以空格拼接)")
    parser.add_argument("--env-file", type=Path, help=".env 文件路径 (默认 ./.env)")
    parser.add_argument("--config", type=Path, help="TOML 配置文件路径")
    parser.add_argument("--profile", default="default", help="TOML 配置预设名")
    parser.add_argument("--host", help="覆盖服务器地址")
    parser.add_argument("--port", type=int, help="覆盖 RCON 端口")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_cli_config(args: argparse.Namespace) -> RconConfig:
    """
    为 CLI 工具加载配置。
    优先使用 TOML 文件，否则查找 .env 文件并从环境变量中读取。
    """
    if args.config:
        config = load_config_from_toml(args.config, args.profile)
    else:
        env_path = args.env_file or Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=False)
            logger.debug(f"已加载配置文件: {env_path}")
        elif args.env_file:
            raise ConfigError(f"配置文件未找到: {env_path}")
        config = load_config_from_env()

    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        if not 0 < args.port < 65536:
            raise ConfigError(f"端口超出范围: {args.port}")
        overrides["port"] = args.port

    config = replace(config, **overrides)
    logger.debug(f"配置加载完成: {config!r}")
    return config


def main(argv: list[str] | None = None) -> int:
    """
    程序主入口点。
    成功时打印服务器响应并返回 0；失败时打印一行错误信息并返回非零值。
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    try:
        config = load_cli_config(args)
        response = CommandInvoker(config).run(args.command)
    except ConfigError as ce:
        print(f"配置错误: {ce}", file=sys.stderr)
        return 1
    except RconError as e:
        print(f"执行 RCON 命令失败: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("已中断", file=sys.stderr)
        return 130

    print(response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
