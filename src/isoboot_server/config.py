from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .services.boot_script import BootConfiguration, InitrdSpec, parse_initrd_spec


def _rooted(path: str) -> str:
    if path and not path.startswith("/"):
        return "/" + path
    return path


class Settings(BaseSettings):
    # Image
    iso_path: str | None = Field(default=None, alias="ISOBOOT_ISO")
    chunk_size: int = Field(default=64 * 1024, alias="ISOBOOT_CHUNK_SIZE")
    handle_pool_max_idle: int = Field(default=8, alias="ISOBOOT_HANDLE_POOL_MAX_IDLE")

    # Boot script
    kernel_path: str = Field(default="", alias="ISOBOOT_KERNEL")
    initrds: list[str] = Field(default_factory=list, alias="ISOBOOT_INITRD")
    kernel_params: str = Field(default="", alias="ISOBOOT_PARAMS")
    boot_host: str | None = Field(default=None, alias="ISOBOOT_BOOT_HOST")

    # API
    api_host: str = Field(default="0.0.0.0", alias="ISOBOOT_HOST")  # noqa: S104
    api_port: int = Field(default=8080, alias="ISOBOOT_PORT")
    metrics_path: str | None = Field(default=None, alias="ISOBOOT_METRICS_PATH")

    log_level: str = Field(default="INFO", alias="ISOBOOT_LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        populate_by_name = True

    @field_validator("metrics_path")
    @classmethod
    def _check_metrics_path(cls, value: str | None) -> str | None:
        if value is None:
            return None
        path = value.rstrip("/")
        if not path.startswith("/"):
            raise ValueError("metrics path must be an absolute path below the root, e.g. /_metrics")
        return path

    def boot_configuration(self) -> BootConfiguration:
        initrds = []
        for spec in self.initrds:
            initrd = parse_initrd_spec(spec)
            initrds.append(InitrdSpec(path=_rooted(initrd.path), label=initrd.label))
        return BootConfiguration(
            kernel_path=_rooted(self.kernel_path),
            kernel_params=self.kernel_params,
            initrds=tuple(initrds),
        )


settings = Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
