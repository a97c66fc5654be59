"""Pydantic models for entrypoint configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ignition_entrypoint.config.constants import (
    COMMISSIONED_MARKER_FILE,
    DEFAULT_ADMIN_USERNAME,
    DEFAULT_COMMISSIONING_DELAY,
    DEFAULT_DATA_DIR,
    DEFAULT_HTTP_PORT,
    DEFAULT_HTTPS_PORT,
    DEFAULT_INSTALL_DIR,
    DEFAULT_LIVE_MODULE_DIR,
    DEFAULT_LOG_DIR,
    DEFAULT_MODULE_DROP_DIR,
    DEFAULT_NETWORK_PORT,
    DEFAULT_RESTORE_ARCHIVE,
    DEFAULT_STARTUP_DELAY,
    INIT_PROPERTIES_FILE,
    INSTALL_INFO_FILE,
    MIN_INIT_MEMORY,
    MIN_MAX_MEMORY,
    PROVISIONING_LOG_FILE,
    ROW_STORE_FILE,
    UPGRADE_MARKER_FILE,
)


class EntrypointPaths(BaseModel):
    """Filesystem locations inside the gateway container."""

    model_config = ConfigDict(frozen=True)

    install_dir: Path = DEFAULT_INSTALL_DIR
    data_dir: Path = DEFAULT_DATA_DIR
    log_dir: Path = DEFAULT_LOG_DIR
    module_drop_dir: Path = DEFAULT_MODULE_DROP_DIR
    live_module_dir: Path = DEFAULT_LIVE_MODULE_DIR
    restore_archive: Path = DEFAULT_RESTORE_ARCHIVE

    @property
    def install_info(self) -> Path:
        return self.install_dir / INSTALL_INFO_FILE

    @property
    def row_store(self) -> Path:
        return self.data_dir / ROW_STORE_FILE

    @property
    def upgrade_marker(self) -> Path:
        return self.data_dir / UPGRADE_MARKER_FILE

    @property
    def commissioned_marker(self) -> Path:
        return self.data_dir / COMMISSIONED_MARKER_FILE

    @property
    def init_properties(self) -> Path:
        return self.data_dir / INIT_PROPERTIES_FILE

    @property
    def temp_dir(self) -> Path:
        return self.data_dir / "temp"

    @property
    def provisioning_log(self) -> Path:
        return self.log_dir / PROVISIONING_LOG_FILE


def _render(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class GatewayNetworkConnection(BaseModel):
    """An outgoing gateway network connection declared by index."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    host: str = Field(min_length=1)
    ping_rate: int | None = None
    enabled: bool | None = None
    enable_ssl: bool = True
    port: int | None = Field(default=None, gt=0, le=65535)

    def init_properties(self) -> list[tuple[str, str]]:
        """Return the ``gateway.network.<i>.*`` init settings, in write order."""
        prefix = f"gateway.network.{self.index}"
        props: list[tuple[str, str]] = []
        if self.ping_rate is not None:
            props.append((f"{prefix}.PingRate", _render(self.ping_rate)))
        if self.enabled is not None:
            props.append((f"{prefix}.Enabled", _render(self.enabled)))
        props.append((f"{prefix}.Host", self.host))
        props.append((f"{prefix}.EnableSSL", _render(self.enable_ssl)))
        if self.port is not None:
            props.append((f"{prefix}.Port", _render(self.port)))
        return props

    @classmethod
    def from_settings(
        cls,
        index: int,
        host: str,
        *,
        ping_rate: str | None = None,
        enabled: str | None = None,
        enable_ssl: str | None = None,
        port: str | None = None,
    ) -> GatewayNetworkConnection:
        """Build a connection from raw strings.

        The port falls back to 8060 only when EnableSSL was left at its
        default and no port was given.
        """
        data: dict[str, object] = {"index": index, "host": host}
        if ping_rate:
            data["ping_rate"] = ping_rate
        if enabled:
            data["enabled"] = enabled
        if enable_ssl:
            data["enable_ssl"] = enable_ssl
        if port:
            data["port"] = port
        elif not enable_ssl:
            data["port"] = DEFAULT_NETWORK_PORT
        return cls.model_validate(data)


class MemorySettings(BaseModel):
    """Java wrapper memory limits in MB."""

    model_config = ConfigDict(frozen=True)

    init_memory: int | None = Field(default=None, ge=MIN_INIT_MEMORY)
    max_memory: int | None = Field(default=None, ge=MIN_MAX_MEMORY)

    @model_validator(mode="after")
    def check_order(self) -> MemorySettings:
        low = self.init_memory if self.init_memory is not None else MIN_INIT_MEMORY
        high = self.max_memory if self.max_memory is not None else MIN_MAX_MEMORY
        if low > high:
            raise ValueError(
                f"Invalid memory specification, min ({low}) must be less than max ({high})"
            )
        return self

    def wrapper_options(self) -> list[str]:
        options: list[str] = []
        if self.init_memory is not None:
            options.append(f"wrapper.java.initmemory={self.init_memory}")
        if self.max_memory is not None:
            options.append(f"wrapper.java.maxmemory={self.max_memory}")
        return options


class AdminCredentials(BaseModel):
    """Admin account supplied to the commissioning wizard."""

    model_config = ConfigDict(frozen=True)

    username: str = DEFAULT_ADMIN_USERNAME
    password: str | None = Field(default=None, repr=False)
    random_password: bool = False

    @property
    def resolvable(self) -> bool:
        return bool(self.password) or self.random_password


class EntrypointConfig(BaseModel):
    """Root configuration, resolved once from the environment."""

    model_config = ConfigDict(frozen=True)

    paths: EntrypointPaths = Field(default_factory=EntrypointPaths)
    admin: AdminCredentials = Field(default_factory=AdminCredentials)
    http_port: int = Field(default=DEFAULT_HTTP_PORT, gt=0, le=65535)
    https_port: int = Field(default=DEFAULT_HTTPS_PORT, gt=0, le=65535)
    use_ssl: bool | None = None
    system_name: str | None = None
    network: tuple[GatewayNetworkConnection, ...] = ()
    autoaccept_delay: int | None = None
    memory: MemorySettings = Field(default_factory=MemorySettings)
    module_relink: bool = False
    startup_delay: int = Field(default=DEFAULT_STARTUP_DELAY, ge=1)
    commissioning_delay: int = Field(default=DEFAULT_COMMISSIONING_DELAY, ge=1)

    def init_properties(self) -> list[tuple[str, str]]:
        """Return every init setting for a fresh install, in write order."""
        props: list[tuple[str, str]] = []
        if self.system_name:
            props.append(("SystemName", self.system_name))
        if self.use_ssl is not None:
            props.append(("UseSSL", _render(self.use_ssl)))
        for connection in self.network:
            props.extend(connection.init_properties())
        return props
