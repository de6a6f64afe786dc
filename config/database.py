import os
from dataclasses import dataclass
from typing import Mapping, Optional

from django.core.exceptions import ImproperlyConfigured

DEFAULT_PORT = 5432


def _int_env(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key, "")
    if raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ImproperlyConfigured(f"{key} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class DatabaseConfig:
    """
    PostgreSQL connection parameters read from the process environment:
    DB_HOST, DB_PORT (default 5432), DB_USER, DB_PASSWORD, DB_NAME.
    """

    host: str = "localhost"
    port: int = DEFAULT_PORT
    user: str = ""
    password: str = ""
    name: str = ""
    conn_max_age: int = 0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseConfig":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("DB_HOST") or "localhost",
            port=_int_env(env, "DB_PORT", DEFAULT_PORT),
            user=env.get("DB_USER", ""),
            password=env.get("DB_PASSWORD", ""),
            name=env.get("DB_NAME", ""),
            conn_max_age=_int_env(env, "DB_CONN_MAX_AGE", 0),
        )

    def as_django(self) -> dict:
        return {
            "ENGINE": "django.db.backends.postgresql",
            "HOST": self.host,
            "PORT": str(self.port),
            "USER": self.user,
            "PASSWORD": self.password,
            "NAME": self.name,
            "CONN_MAX_AGE": self.conn_max_age,
        }
