"""Configuration manager that resolves the environment into one immutable config."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from ignition_entrypoint.client.errors import ConfigurationError
from ignition_entrypoint.config.constants import (
    DEFAULT_COMMISSIONING_DELAY,
    DEFAULT_INSTALL_DIR,
    DEFAULT_STARTUP_DELAY,
    ENV_ADMIN_PASSWORD,
    ENV_ADMIN_USERNAME,
    ENV_AUTOACCEPT_DELAY,
    ENV_COMMISSIONING_DELAY,
    ENV_HTTP_PORT,
    ENV_HTTPS_PORT,
    ENV_INIT_MEMORY,
    ENV_INSTALL_LOCATION,
    ENV_MAX_MEMORY,
    ENV_MODULE_RELINK,
    ENV_NETWORK_PREFIX,
    ENV_RANDOM_ADMIN_PASSWORD,
    ENV_STARTUP_DELAY,
    ENV_SYSTEM_NAME,
    ENV_USE_SSL,
)
from ignition_entrypoint.config.models import (
    AdminCredentials,
    EntrypointConfig,
    EntrypointPaths,
    GatewayNetworkConnection,
    MemorySettings,
)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


class ConfigManager:
    """Reads the container environment and resolves an EntrypointConfig."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        paths: EntrypointPaths | None = None,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self._paths = paths

    def _get(self, name: str) -> str | None:
        value = self.environ.get(name)
        return value if value else None

    def file_env(self, name: str) -> str | None:
        """Read ``name`` directly or from the file named by ``name_FILE``.

        Setting both is a conflict.
        """
        value = self._get(name)
        file_name = self._get(f"{name}_FILE")
        if value and file_name:
            raise ConfigurationError(
                f"Both {name} and {name}_FILE are set (but are exclusive)"
            )
        if file_name:
            try:
                return Path(file_name).read_text().rstrip("\n")
            except OSError as exc:
                raise ConfigurationError(
                    f"Cannot read {name}_FILE ({file_name}): {exc}"
                ) from exc
        return value

    def _int(self, name: str, default: int | None = None) -> int | None:
        raw = self._get(name)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(
                f"Invalid value for {name}, must be an integer: {raw}"
            ) from None

    def resolve_paths(self) -> EntrypointPaths:
        if self._paths is not None:
            return self._paths
        install = self._get(ENV_INSTALL_LOCATION)
        return EntrypointPaths(install_dir=Path(install) if install else DEFAULT_INSTALL_DIR)

    def resolve_memory(self) -> MemorySettings:
        init_memory = self._int(ENV_INIT_MEMORY)
        max_memory = self._int(ENV_MAX_MEMORY)
        try:
            return MemorySettings(init_memory=init_memory, max_memory=max_memory)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid memory specification: {_format_validation_error(exc)}"
            ) from exc

    def resolve_network(self) -> tuple[GatewayNetworkConnection, ...]:
        """Discover connections by index until the first missing HOST."""
        connections: list[GatewayNetworkConnection] = []
        index = 0
        while True:
            prefix = f"{ENV_NETWORK_PREFIX}{index}_"
            host = self._get(f"{prefix}HOST")
            if host is None:
                break
            try:
                connections.append(
                    GatewayNetworkConnection.from_settings(
                        index,
                        host,
                        ping_rate=self._get(f"{prefix}PINGRATE"),
                        enabled=self._get(f"{prefix}ENABLED"),
                        enable_ssl=self._get(f"{prefix}ENABLESSL"),
                        port=self._get(f"{prefix}PORT"),
                    )
                )
            except ValidationError as exc:
                raise ConfigurationError(
                    f"Invalid gateway network connection {index}: "
                    f"{_format_validation_error(exc)}"
                ) from exc
            index += 1
        return tuple(connections)

    def resolve_autoaccept_delay(self) -> int | None:
        raw = self._get(ENV_AUTOACCEPT_DELAY)
        if raw is None:
            return None
        try:
            delay = int(raw)
        except ValueError:
            return None
        return delay if delay > 0 else None

    def resolve(self) -> EntrypointConfig:
        """Resolve the full configuration.

        Raises ConfigurationError before any side effect is attempted.
        """
        admin = {
            "username": self._get(ENV_ADMIN_USERNAME) or AdminCredentials().username,
            "password": self.file_env(ENV_ADMIN_PASSWORD),
            "random_password": self._get(ENV_RANDOM_ADMIN_PASSWORD) is not None,
        }
        data: dict[str, object] = {
            "paths": self.resolve_paths(),
            "admin": admin,
            "system_name": self._get(ENV_SYSTEM_NAME),
            "network": self.resolve_network(),
            "autoaccept_delay": self.resolve_autoaccept_delay(),
            "memory": self.resolve_memory(),
            "startup_delay": self._int(ENV_STARTUP_DELAY, DEFAULT_STARTUP_DELAY),
            "commissioning_delay": self._int(
                ENV_COMMISSIONING_DELAY, DEFAULT_COMMISSIONING_DELAY,
            ),
        }
        for key, env in (
            ("http_port", ENV_HTTP_PORT),
            ("https_port", ENV_HTTPS_PORT),
            ("use_ssl", ENV_USE_SSL),
            ("module_relink", ENV_MODULE_RELINK),
        ):
            raw = self._get(env)
            if raw is not None:
                data[key] = raw
        try:
            return EntrypointConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid configuration: {_format_validation_error(exc)}"
            ) from exc
