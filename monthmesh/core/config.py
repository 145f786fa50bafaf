"""
Configuration Management for MonthMesh

Provides validated configuration with sensible defaults.
Supports environment variable overrides (prefix MONTHMESH_).

Design:
- Immutable after construction
- Fail-fast on invalid configuration
- Type-safe with dataclasses
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from monthmesh.core.errors import ConfigurationError
from monthmesh.core.types import Result, Ok, Err
from monthmesh.core import constants as C


class ReadFailurePolicy(Enum):
    """
    What listing hot users does when the merged query fails.
    
    PROPAGATE returns the QueryError to the caller.
    DEGRADE_TO_EMPTY logs the failure and returns an empty list.
    """
    PROPAGATE = "propagate"
    DEGRADE_TO_EMPTY = "degrade_to_empty"
    
    @classmethod
    def parse(cls, value: str) -> ReadFailurePolicy:
        normalized = value.strip().lower().replace("-", "_")
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ValueError(f"unknown read failure policy '{value}'")


@dataclass(frozen=True)
class StorageConfig:
    """Partition storage layout."""
    
    partition_dir: Path = field(default_factory=lambda: Path(C.PARTITION_DIR))
    file_suffix: str = C.PARTITION_SUFFIX
    table_name: str = C.PARTITION_TABLE
    
    def partition_path(self, identifier: str) -> Path:
        """Backing file for a partition identifier."""
        return self.partition_dir / f"{identifier}{self.file_suffix}"


@dataclass(frozen=True)
class WindowConfig:
    """Hot window configuration."""
    
    months: int = C.WINDOW_MONTHS


@dataclass(frozen=True)
class ServerConfig:
    """HTTP transport bind address."""
    
    host: str = C.DEFAULT_HOST
    port: int = C.DEFAULT_PORT


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration."""
    
    log_level: str = C.DEFAULT_LOG_LEVEL
    log_json: bool = False


@dataclass(frozen=True)
class MonthMeshConfig:
    """Root configuration."""
    
    storage: StorageConfig = field(default_factory=StorageConfig)
    window: WindowConfig = field(default_factory=WindowConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)
    read_failure_policy: ReadFailurePolicy = ReadFailurePolicy.PROPAGATE
    
    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
    ) -> Result[MonthMeshConfig, ConfigurationError]:
        """
        Load configuration from environment variables.
        
        Example: MONTHMESH_PARTITION_DIR, MONTHMESH_WINDOW_MONTHS, MONTHMESH_PORT
        """
        env = os.environ if environ is None else environ
        try:
            storage = StorageConfig(
                partition_dir=Path(env.get("MONTHMESH_PARTITION_DIR", C.PARTITION_DIR)),
            )
            window = WindowConfig(
                months=int(env.get("MONTHMESH_WINDOW_MONTHS", str(C.WINDOW_MONTHS))),
            )
            server = ServerConfig(
                host=env.get("MONTHMESH_HOST", C.DEFAULT_HOST),
                port=int(env.get("MONTHMESH_PORT", str(C.DEFAULT_PORT))),
            )
            observability = ObservabilityConfig(
                log_level=env.get("MONTHMESH_LOG_LEVEL", C.DEFAULT_LOG_LEVEL).upper(),
                log_json=env.get("MONTHMESH_LOG_JSON", "false").lower() in ("1", "true", "yes"),
            )
            policy = ReadFailurePolicy.parse(
                env.get("MONTHMESH_READ_FAILURE_POLICY", ReadFailurePolicy.PROPAGATE.value)
            )
            return Ok(cls(
                storage=storage,
                window=window,
                server=server,
                observability=observability,
                read_failure_policy=policy,
            ))
        except (ValueError, TypeError) as e:
            return Err(ConfigurationError.invalid(str(e)))
    
    def validate(self) -> Result[None, ConfigurationError]:
        """Validate configuration invariants."""
        reason = self._problem()
        if reason is not None:
            return Err(ConfigurationError.invalid(reason))
        return Ok(None)
    
    def _problem(self) -> Optional[str]:
        if not 0 <= self.window.months <= C.MAX_WINDOW_MONTHS:
            return f"Window months must be between 0 and {C.MAX_WINDOW_MONTHS}"
        if not 0 < self.server.port < 65536:
            return f"Port {self.server.port} out of range"
        if self.observability.log_level not in C.LOG_LEVELS:
            return f"Unknown log level '{self.observability.log_level}'"
        if not self.storage.table_name.isidentifier():
            return f"Table name '{self.storage.table_name}' is not a plain identifier"
        if not self.storage.file_suffix.startswith("."):
            return "Partition file suffix must start with '.'"
        return None
    
    def with_overrides(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        partition_dir: Optional[Path] = None,
    ) -> MonthMeshConfig:
        """Return a copy with command-line overrides applied."""
        config = self
        if host is not None or port is not None:
            config = replace(config, server=ServerConfig(
                host=host if host is not None else config.server.host,
                port=port if port is not None else config.server.port,
            ))
        if partition_dir is not None:
            config = replace(config, storage=replace(config.storage, partition_dir=partition_dir))
        return config
