"""Default paths, environment variable names, and constants."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "ignition-entrypoint"

# Filesystem layout of the gateway image
DEFAULT_INSTALL_DIR = Path("/usr/local/share/ignition")
DEFAULT_DATA_DIR = Path("/var/lib/ignition/data")
DEFAULT_LOG_DIR = Path("/var/log/ignition")
DEFAULT_MODULE_DROP_DIR = Path("/modules")
DEFAULT_LIVE_MODULE_DIR = Path("/var/lib/ignition/user-lib/modules")
DEFAULT_RESTORE_ARCHIVE = Path("/restore.gwbk")

INSTALL_INFO_FILE = "lib/install-info.txt"
ROW_STORE_FILE = "db/config.idb"
UPGRADE_MARKER_FILE = ".docker-init-complete"
COMMISSIONED_MARKER_FILE = ".docker-commissioned"
INIT_PROPERTIES_FILE = "init.properties"
PROVISIONING_LOG_FILE = "provisioning.log"
MODULE_SUFFIX = ".modl"

GATEWAY_COMMAND = "./ignition-gateway"
RESTORE_COMMAND = "./gwcmd.sh"
AUTOACCEPT_COMMAND = "accept-gwnetwork.sh"
UPGRADER_CLASS = "com.inductiveautomation.ignition.common.upgrader.Upgrader"
UPGRADER_CONFIG = "ignition.conf"

# Environment variable names
ENV_INSTALL_LOCATION = "IGNITION_INSTALL_LOCATION"
ENV_STARTUP_DELAY = "IGNITION_STARTUP_DELAY"
ENV_COMMISSIONING_DELAY = "IGNITION_COMMISSIONING_DELAY"
ENV_ADMIN_USERNAME = "GATEWAY_ADMIN_USERNAME"
ENV_ADMIN_PASSWORD = "GATEWAY_ADMIN_PASSWORD"
ENV_RANDOM_ADMIN_PASSWORD = "GATEWAY_RANDOM_ADMIN_PASSWORD"
ENV_HTTP_PORT = "GATEWAY_HTTP_PORT"
ENV_HTTPS_PORT = "GATEWAY_HTTPS_PORT"
ENV_USE_SSL = "GATEWAY_USESSL"
ENV_SYSTEM_NAME = "GATEWAY_SYSTEM_NAME"
ENV_INIT_MEMORY = "GATEWAY_INIT_MEMORY"
ENV_MAX_MEMORY = "GATEWAY_MAX_MEMORY"
ENV_MODULE_RELINK = "GATEWAY_MODULE_RELINK"
ENV_AUTOACCEPT_DELAY = "GATEWAY_NETWORK_AUTOACCEPT_DELAY"
ENV_NETWORK_PREFIX = "GATEWAY_NETWORK_"

# Gateway defaults
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_HTTP_PORT = 8088
DEFAULT_HTTPS_PORT = 8043
DEFAULT_NETWORK_PORT = 8060
DEFAULT_STARTUP_DELAY = 60
DEFAULT_COMMISSIONING_DELAY = 10
MIN_INIT_MEMORY = 256
MIN_MAX_MEMORY = 512
RANDOM_PASSWORD_LENGTH = 32

# Interim instance endpoints
LOCAL_GATEWAY_URL = "http://localhost:8088"
STATUS_PATH = "/StatusPing"
MAIN_STATUS_PATH = "/main/StatusPing"
POST_STEP_PATH = "/post-step"
RUNNING_TOKEN = "RUNNING"
POLL_INTERVAL = 1.0
RESTORE_SETTLE_SECONDS = 5.0
