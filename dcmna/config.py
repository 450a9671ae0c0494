"""Runtime settings for the HTTP service, read from the environment."""

from __future__ import annotations
import os
from typing import Mapping, NamedTuple

ENV_PREFIX = "DCMNA_"
LOCAL_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"


class Settings(NamedTuple):
    """Service settings."""
    frontend_urls: tuple[str, ...] = ("*",)  # allowed CORS origins
    host: str = "127.0.0.1"
    port: int = 5000
    log_level: str = "INFO"

    def cors_options(self) -> dict:
        """
        CORSMiddleware arguments: everything when "*" is listed, otherwise the
        listed origins plus local development hosts.
        """
        if "*" in self.frontend_urls:
            return {"allow_origins": ["*"], "allow_origin_regex": None}
        return {"allow_origins": list(self.frontend_urls), "allow_origin_regex": LOCAL_ORIGIN_REGEX}


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from DCMNA_* variables.

    Variables:
        DCMNA_FRONTEND_URL: comma-separated CORS origins (default "*")
        DCMNA_HOST, DCMNA_PORT: bind address (default 127.0.0.1:5000)
        DCMNA_LOG_LEVEL: logging level name (default INFO)
    """
    if environ is None:
        environ = os.environ
    defaults = Settings()

    raw_frontend = environ.get(f"{ENV_PREFIX}FRONTEND_URL", "*")
    origins = tuple(s.strip() for s in raw_frontend.split(",") if s.strip())

    raw_port = environ.get(f"{ENV_PREFIX}PORT")
    port = defaults.port
    if raw_port is not None:
        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {raw_port!r}") from None
        if not 0 < port < 65536:
            raise ValueError(f"{ENV_PREFIX}PORT out of range: {port}")

    return Settings(
        frontend_urls=origins or defaults.frontend_urls,
        host=environ.get(f"{ENV_PREFIX}HOST", defaults.host),
        port=port,
        log_level=environ.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
    )
