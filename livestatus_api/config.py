"""Configuration management for the Livestatus API gateway."""

import os
import re
import json
import socket
from pathlib import Path
from typing import Optional, Dict, Any, Tuple, Union
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
import logging

import yaml

_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
_DURATION_PATTERN = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(ms|s|m|h)?\s*$")


def parse_duration(value: Union[str, int, float]) -> float:
    """Parse a timeout given as seconds or as a duration string like '5s' or '500ms'."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    number, unit = match.groups()
    return float(number) * _DURATION_UNITS[unit or "s"]


def parse_socket_address(address: str) -> Tuple[int, Union[str, Tuple[str, int]]]:
    """Split a Livestatus address into a socket family and connect target.

    Accepted forms are ``unix:/path/to/live``, ``tcp:host:port`` and a bare
    filesystem path, which is treated as a unix socket.
    """
    if address.startswith("tcp:"):
        host, sep, port = address[4:].rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(
                f"Invalid livestatus tcp address '{address}'. "
                "Correct example is 'tcp:somehost:6557'"
            )
        return socket.AF_INET, (host, int(port))

    path = address[5:] if address.startswith("unix:") else address
    if not path:
        raise ValueError(
            f"Invalid livestatus unix address '{address}'. "
            "Correct example is 'unix:/var/cache/naemon/live'"
        )
    return socket.AF_UNIX, path


class LivestatusConfig(BaseModel):
    """Configuration for the Livestatus socket connection."""

    socket_path: str = Field(
        default="/var/cache/naemon/live", description="Path or address of the Livestatus socket"
    )
    timeout: float = Field(
        default=5.0, description="Timeout in seconds for one Livestatus round trip"
    )

    @field_validator('socket_path')
    @classmethod
    def validate_socket_path(cls, v: str) -> str:
        """Validate that socket_path is a usable socket address."""
        v = v.strip()
        parse_socket_address(v)
        return v

    @field_validator('timeout', mode='before')
    @classmethod
    def validate_timeout(cls, v: Any) -> float:
        """Validate timeout is a positive, reasonable duration."""
        seconds = parse_duration(v)
        if seconds <= 0:
            raise ValueError("timeout must be positive")
        if seconds > 300:  # 5 minutes
            raise ValueError("timeout should not exceed 300 seconds")
        return seconds

    @property
    def address(self) -> Tuple[int, Union[str, Tuple[str, int]]]:
        return parse_socket_address(self.socket_path)


class ServerConfig(BaseModel):
    """Configuration for the HTTP listener."""

    listen_address: str = Field(default=":7654", description="Address to listen on for requests")

    @field_validator('listen_address')
    @classmethod
    def validate_listen_address(cls, v: str) -> str:
        """Validate that listen_address has the form [host]:port."""
        v = v.strip()
        host, sep, port = v.rpartition(":")
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"Invalid listen address: {v!r} (expected [host]:port)")
        return v

    @property
    def host(self) -> str:
        host = self.listen_address.rpartition(":")[0]
        return host.strip("[]") or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.listen_address.rpartition(":")[2])


class AppConfig(BaseModel):
    """Main application configuration."""

    livestatus: LivestatusConfig = Field(default_factory=LivestatusConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(getattr(logging, level, None), int):
            raise ValueError(f"Invalid log level: {v}")
        return level


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger = logging.getLogger(__name__)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if config_path.suffix.lower() in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}

            elif config_path.suffix.lower() == '.json':
                return json.load(f) or {}

            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    except Exception as e:
        logger.error(f"Failed to load config file {config_path}: {e}")
        raise


def find_config_file() -> Optional[Path]:
    """Find configuration file in standard locations."""
    search_paths = [
        Path.cwd() / "config.yaml",
        Path.cwd() / "config.yml",
        Path.cwd() / "config.json",
        Path.cwd() / ".livestatus-api.yaml",
        Path.cwd() / ".livestatus-api.yml",
        Path.cwd() / ".livestatus-api.json",
        Path.home() / ".config" / "livestatus-api" / "config.yaml",
        Path.home() / ".config" / "livestatus-api" / "config.yml",
        Path.home() / ".config" / "livestatus-api" / "config.json",
    ]

    for config_path in search_paths:
        if config_path.exists():
            return config_path

    return None


def merge_config(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge configuration dictionaries with override taking precedence."""
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value

    return merged


def load_config(config_file: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load configuration from multiple sources with priority order.

    Priority (highest to lowest):
    1. Environment variables (including a .env file)
    2. Specified config file (if provided)
    3. Auto-discovered config file
    4. Default values
    """
    logger = logging.getLogger(__name__)

    # Start with empty config
    config_data = {}

    # 1. Load from config file (lowest priority)
    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            config_data = load_config_file(config_path)
            logger.info(f"Loaded configuration from: {config_path}")
        else:
            raise FileNotFoundError(f"Specified config file not found: {config_path}")
    else:
        config_path = find_config_file()
        if config_path:
            config_data = load_config_file(config_path)
            logger.info(f"Auto-discovered configuration file: {config_path}")

    # 2. Load .env file (medium priority)
    load_dotenv()

    # 3. Override with environment variables (highest priority)
    env_config = {
        "livestatus": {
            "socket_path": os.getenv("LIVESTATUS_SOCKET_PATH"),
            "timeout": os.getenv("LIVESTATUS_TIMEOUT"),
        },
        "server": {
            "listen_address": os.getenv("LIVESTATUS_API_LISTEN_ADDRESS"),
        },
        "log_level": os.getenv("LOG_LEVEL"),
    }

    # Remove None values from env config
    def remove_none_values(d):
        if isinstance(d, dict):
            return {k: remove_none_values(v) for k, v in d.items() if v is not None}
        return d

    env_config = remove_none_values(env_config)

    final_config = merge_config(config_data, env_config)

    return AppConfig(
        livestatus=LivestatusConfig(**final_config.get("livestatus", {})),
        server=ServerConfig(**final_config.get("server", {})),
        log_level=final_config.get("log_level", "INFO"),
    )
