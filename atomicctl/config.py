"""Configuration management for the atomicctl application.

Settings come from the following sources, highest precedence first:
1. Explicit CLI options
2. The host file passed with --file
3. Environment variables (optionally from a .env file)
4. Default values
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from jsonschema import validate, ValidationError as SchemaValidationError
from pydantic import BaseModel, Field, ValidationError as ModelValidationError, field_validator

from atomicctl.modules.provision.models import (
    DEFAULT_DOCKER_PORT,
    AuthOptions,
    EngineOptions,
    StaticDriver,
    SwarmOptions,
)

logger = logging.getLogger("atomicctl.config")

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Environment settings with sensible defaults."""

    SSH_USER: str = os.getenv("ATOMICCTL_SSH_USER", "cloud-user")
    SSH_KEY: str = os.getenv("ATOMICCTL_SSH_KEY", "~/.ssh/id_rsa")
    SSH_PORT: int = int(os.getenv("ATOMICCTL_SSH_PORT", "22"))
    SSH_TIMEOUT: int = int(os.getenv("ATOMICCTL_SSH_TIMEOUT", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("ATOMICCTL_LOG_LEVEL", "INFO").upper()
    LOG_FILE: Optional[str] = os.getenv("ATOMICCTL_LOG_FILE") or None


HOST_SCHEMA = {
    "type": "object",
    "properties": {
        "machine_name": {"type": "string"},
        "driver_name": {"type": "string"},
        "provisioner": {"type": "string"},
        "docker_port": {"type": "integer"},
        "ssh": {
            "type": "object",
            "properties": {
                "host": {"type": "string"},
                "user": {"type": "string"},
                "key_path": {"type": "string"},
                "port": {"type": "integer"},
                "timeout": {"type": "integer"},
            },
            "required": ["host"],
        },
        "logging": {"type": "object"},
        "engine": {
            "type": "object",
            "properties": {
                "storage_driver": {"type": "string"},
                "labels": {"type": "array", "items": {"type": "string"}},
                "insecure_registry": {"type": "array", "items": {"type": "string"}},
                "registry_mirror": {"type": "array", "items": {"type": "string"}},
                "arbitrary_flags": {"type": "array", "items": {"type": "string"}},
                "env": {"type": "array", "items": {"type": "string"}},
            },
        },
        "swarm": {"type": "object"},
    },
    "required": ["machine_name", "ssh"],
}


class ConfigError(Exception):
    """Raised when a host file cannot be loaded or is invalid."""
    pass


class SSHConfig(BaseModel):
    """SSH connection configuration."""
    host: str = Field(description="Address of the host to provision")
    user: str = Field(default_factory=lambda: Config.SSH_USER, description="SSH username")
    key_path: str = Field(default_factory=lambda: Config.SSH_KEY, description="Path to SSH private key")
    port: int = Field(default_factory=lambda: Config.SSH_PORT, description="SSH port number")
    timeout: int = Field(default_factory=lambda: Config.SSH_TIMEOUT, description="Connection timeout in seconds")

    @field_validator('key_path')
    @classmethod
    def expand_key_path(cls, v: str) -> str:
        """Expand the user home directory in the key path."""
        return os.path.expanduser(v)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default_factory=lambda: Config.LOG_LEVEL)
    file: Optional[str] = Field(default_factory=lambda: Config.LOG_FILE)
    max_size_mb: int = 100
    backup_count: int = 5


class EngineConfig(BaseModel):
    """Docker engine options as written in the host file."""
    storage_driver: str = ''
    labels: List[str] = Field(default_factory=list)
    insecure_registry: List[str] = Field(default_factory=list)
    registry_mirror: List[str] = Field(default_factory=list)
    arbitrary_flags: List[str] = Field(default_factory=list)
    env: List[str] = Field(default_factory=list)


class SwarmConfig(BaseModel):
    enabled: bool = False
    master: bool = False
    discovery: str = ''
    image: str = 'swarm:latest'
    host: str = 'tcp://0.0.0.0:3376'
    strategy: str = 'spread'
    arbitrary_flags: List[str] = Field(default_factory=list)


class HostConfig(BaseModel):
    """Everything needed to provision one host."""
    machine_name: str
    driver_name: str = 'generic'
    provisioner: str = 'AtomicHost'
    docker_port: int = DEFAULT_DOCKER_PORT
    ssh: SSHConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    swarm: SwarmConfig = Field(default_factory=SwarmConfig)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'HostConfig':
        """Load and validate a host file.

        Raises:
            ConfigError: If the file is missing, not YAML or fails validation
        """
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigError(f"Host file not found: {path}")

        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HostConfig':
        try:
            validate(instance=data, schema=HOST_SCHEMA)
        except SchemaValidationError as e:
            raise ConfigError(f"Host file validation error: {e.message}") from e
        try:
            return cls(**data)
        except ModelValidationError as e:
            raise ConfigError(f"Host file validation error: {e}") from e

    def engine_options(self) -> EngineOptions:
        return EngineOptions(**self.engine.model_dump())

    def auth_options(self) -> AuthOptions:
        return AuthOptions()

    def swarm_options(self) -> SwarmOptions:
        return SwarmOptions(
            is_swarm=self.swarm.enabled,
            master=self.swarm.master,
            discovery=self.swarm.discovery,
            image=self.swarm.image,
            host=self.swarm.host,
            strategy=self.swarm.strategy,
            arbitrary_flags=list(self.swarm.arbitrary_flags),
        )

    def driver(self) -> StaticDriver:
        return StaticDriver(
            machine_name=self.machine_name,
            driver_name=self.driver_name,
            ip_address=self.ssh.host,
        )
