from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote_plus

from sqlalchemy.engine import URL

from search_indexer.core.config import Settings
from search_indexer.services.errors import ConfigurationError
from search_indexer.services.secrets import SecretsProvider

ENV_DB_USER = "SEARCH_SERVICE_DB_USER"
ENV_DB_HOST = "SEARCH_SERVICE_DB_HOST"
ENV_DB_PORT = "SEARCH_SERVICE_DB_PORT"
ENV_DB_DATABASE = "SEARCH_SERVICE_DB_DATABASE"
ENV_DB_PASS = "SEARCH_SERVICE_DB_PASS"
ENV_DB_PASS_SECRET = "SEARCH_SERVICE_DB_PASS_SECRET"


@dataclass(frozen=True, slots=True)
class DatabaseCredentials:
    user: str
    host: str
    port: str
    database: str
    password: str = field(repr=False)

    def connection_string(self) -> str:
        return f"postgres://{self.user}:{quote_plus(self.password)}@{self.host}:{self.port}/{self.database}"

    def sqlalchemy_url(self, drivername: str = "postgresql+psycopg") -> URL:
        if not self.port.isdigit():
            raise ConfigurationError(f"{ENV_DB_PORT} must be a port number")
        return URL.create(
            drivername,
            username=self.user,
            password=self.password,
            host=self.host,
            port=int(self.port),
            database=self.database,
        )


def _resolve_password(settings: Settings, secrets: SecretsProvider) -> str:
    password = settings.db_pass or ""
    if settings.db_pass_secret:
        password = secrets.get_global_secret_string(settings.db_pass_secret)
    if not password:
        raise ConfigurationError(f"{ENV_DB_PASS} or {ENV_DB_PASS_SECRET} must be specified")
    return password


def _required(value: str | None, env_name: str) -> str:
    if not value:
        raise ConfigurationError(f"{env_name} must be specified")
    return value


def resolve_credentials(settings: Settings, secrets: SecretsProvider) -> DatabaseCredentials:
    password = _resolve_password(settings, secrets)
    user = _required(settings.db_user, ENV_DB_USER)
    host = _required(settings.db_host, ENV_DB_HOST)
    port = _required(settings.db_port, ENV_DB_PORT)
    database = _required(settings.db_database, ENV_DB_DATABASE)
    return DatabaseCredentials(user=user, host=host, port=port, database=database, password=password)


def resolve_connection_string(settings: Settings, secrets: SecretsProvider) -> str:
    return resolve_credentials(settings, secrets).connection_string()
