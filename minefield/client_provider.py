"""Connection settings for the worker and the HTTP server."""
import os
import pathlib
import platform
from dataclasses import dataclass, field
from temporalio.client import Client
from temporalio.envconfig import ClientConfig

CONFIG_FILE_NAME = pathlib.Path("temporalio", "temporal.toml")


@dataclass
class ConnectionSettings:
    """Where to find Temporal, read from the environment.

    When TEMPORAL_PROFILE names a profile and the Temporal config file exists,
    the profile wins over TEMPORAL_ADDRESS / TEMPORAL_NAMESPACE.
    TEMPORAL_CONFIG_FILE points at a config file outside the default location.
    """
    address: str = field(default_factory=lambda: os.getenv("TEMPORAL_ADDRESS", "localhost:7233"))
    namespace: str = field(default_factory=lambda: os.getenv("TEMPORAL_NAMESPACE", "default"))
    profile: str | None = field(default_factory=lambda: os.getenv("TEMPORAL_PROFILE"))
    config_file: str | None = field(default_factory=lambda: os.getenv("TEMPORAL_CONFIG_FILE"))
    task_queue: str = field(default_factory=lambda: os.getenv("MINEFIELD_TASK_QUEUE", "minefield-task-queue"))

    @property
    def config_file_path(self) -> pathlib.Path:
        if self.config_file:
            return pathlib.Path(self.config_file)
        return get_config_file_path()

    def uses_profile(self) -> bool:
        return bool(self.profile) and self.config_file_path.is_file()


async def get_temporal_client(settings: ConnectionSettings | None = None) -> Client:
    settings = settings or ConnectionSettings()
    if settings.uses_profile():
        connect_config = ClientConfig.load_client_connect_config(
            profile=settings.profile,
            config_file=str(settings.config_file_path),
        )
        return await Client.connect(**connect_config)
    return await Client.connect(settings.address, namespace=settings.namespace)


def get_config_file_path() -> pathlib.Path:
    """Per-OS default location of the Temporal CLI config file."""
    system = platform.system()
    if system == "Windows":
        app_data = os.getenv("AppData")
        if app_data is None:
            raise RuntimeError("AppData environment variable not set")
        return pathlib.Path(app_data) / CONFIG_FILE_NAME

    if system == "Darwin":
        config_dir = pathlib.Path.home() / "Library" / "Application Support"
    else:
        config_dir = pathlib.Path(os.getenv("XDG_CONFIG_HOME") or pathlib.Path.home() / ".config")
    return config_dir / CONFIG_FILE_NAME
