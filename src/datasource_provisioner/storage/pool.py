"""Pool configuration and the default SQLAlchemy pool factory."""

import re
from typing import Callable, Optional

from pydantic import BaseModel, Field
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, DisconnectionError
from sqlalchemy.pool import QueuePool

from datasource_provisioner.errors import ContractViolation, ProvisioningError, check_argument
from datasource_provisioner.logger import get_logger

logger = get_logger(__name__)

_JDBC_URL = re.compile(r"^jdbc:(?P<prefix>[^:]+):(?P<rest>.*)$")

# Oracle "thin:user/password@" and network "//user:password@" segments
_URL_CREDENTIALS = re.compile(r"(?<=:thin:)[^@]+(?=@)|(?<=//)[^/@]+@")

# Connector/J multi-host sub-protocols
_SUB_PROTOCOL = re.compile(r"^(?:loadbalance|replication):(?=//)")

# DB-API module -> SQLAlchemy driver suffix
_SQLALCHEMY_DRIVERS: dict[str, Optional[str]] = {
    "sqlite3": "pysqlite",
    "pymysql": "pymysql",
    "MySQLdb": "mysqldb",
    "mysql.connector": "mysqlconnector",
    "mariadb": "mariadbconnector",
    "oracledb": "oracledb",
    "psycopg2": "psycopg2",
    "hdbcli.dbapi": "hdbcli",
    "pytds": "pytds",
    "pyodbc": "pyodbc",
    "firebird.driver": "firebird",
    "ibm_db_dbi": "ibm_db",
    "teradatasql": None,
    "dmPython": "dmPython",
}


class PoolConfig(BaseModel):
    """Settings for one provisioned pool.

    Built by the provisioner for each connection slot and handed to a pool
    factory. ``jdbc_url`` is never empty.
    """

    jdbc_url: str = Field(min_length=1)
    username: str = ""
    password: str = ""
    driver_class_name: Optional[str] = None
    validation_query: Optional[str] = None
    sqlalchemy_name: Optional[str] = None

    # Pass-through pool tuning
    pool_size: int = 20
    max_overflow: int = 0
    pool_timeout: float = 3.0
    pool_recycle: int = 1800
    echo: bool = False

    @property
    def display_url(self) -> str:
        """JDBC URL without query string or credentials, safe for logs."""
        return redact_jdbc_url(self.jdbc_url)


PoolFactory = Callable[[PoolConfig], Engine]


def redact_jdbc_url(jdbc_url: str) -> str:
    """Drop the query string and any embedded credentials from a JDBC URL.

    Examples:
        >>> redact_jdbc_url("jdbc:oracle:thin:scott/tiger@//db:1521/XE")
        'jdbc:oracle:thin:@//db:1521/XE'
        >>> redact_jdbc_url("jdbc:mysql://nacos:secret@db:3306/nacos?useSSL=false")
        'jdbc:mysql://db:3306/nacos'
    """
    return _URL_CREDENTIALS.sub("", jdbc_url.split("?", 1)[0])


def _drivername(config: PoolConfig, prefix: str) -> str:
    """Build the ``backend+driver`` part of a SQLAlchemy URL."""
    backend = config.sqlalchemy_name
    if not backend:
        raise ProvisioningError(f"No SQLAlchemy dialect for jdbc:{prefix}: URLs")
    if "+" in backend:
        return backend

    suffix = _SQLALCHEMY_DRIVERS.get(config.driver_class_name or "")
    return f"{backend}+{suffix}" if suffix else backend


def _parse_oracle(drivername: str, rest: str) -> URL:
    """Parse ``thin:@[//]host:port/service`` and ``thin:@host:port:sid``."""
    _, at, target = rest.partition("@")
    check_argument(bool(at), "Oracle JDBC URL must contain '@'")

    if "/" in target:
        url = make_url(f"{drivername}://{target.lstrip('/')}")
        if url.database:
            # The oracle dialects reject a service_name next to a database
            url = URL.create(
                drivername,
                host=url.host,
                port=url.port,
                query={"service_name": url.database},
            )
        return url

    parts = target.split(":")
    check_argument(len(parts) == 3, "Oracle JDBC URL must be host:port:sid")
    host, port, sid = parts
    return URL.create(drivername, host=host, port=int(port), database=sid)


def _parse_network(drivername: str, rest: str) -> URL:
    """Parse ``//host:port/db`` and ``//host:port;databaseName=db``.

    Multi-host ``loadbalance:`` and ``replication:`` URLs connect to their
    first host.
    """
    rest = _SUB_PROTOCOL.sub("", rest)
    check_argument(rest.startswith("//"), "JDBC URL must continue with '//host'")
    address, *properties = rest.split(";")
    # JDBC driver properties do not map onto DB-API connect arguments
    address = address.split("?", 1)[0]

    hosts, slash, database = address[2:].partition("/")
    first_host, *other_hosts = hosts.split(",")
    if other_hosts:
        logger.warning(
            f"Multi-host JDBC URL, connecting to the first of {len(other_hosts) + 1} hosts"
        )
        address = f"//{first_host}{slash}{database}"
    url = make_url(f"{drivername}:{address}")

    options = dict(item.split("=", 1) for item in properties if "=" in item)
    database = options.get("databaseName") or options.get("database")
    if database:
        url = url.set(database=database)
    return url


def to_sqlalchemy_url(config: PoolConfig) -> URL:
    """Translate a pool's JDBC URL into a SQLAlchemy URL.

    Args:
        config: Pool configuration with a ``jdbc:<prefix>:<rest>`` URL

    Returns:
        SQLAlchemy URL carrying the pool's credentials

    Raises:
        ContractViolation: If the JDBC URL cannot be parsed
        ProvisioningError: If the dialect has no SQLAlchemy backend

    Examples:
        >>> jdbc:mysql://db:3306/nacos     -> mysql+pymysql://user:***@db:3306/nacos
        >>> jdbc:sqlite::memory:           -> sqlite+pysqlite://
        >>> jdbc:oracle:thin:@//db:1521/XE -> oracle+oracledb://user:***@db:1521/?service_name=XE
    """
    match = _JDBC_URL.match(config.jdbc_url)
    check_argument(match is not None, "JDBC URL must look like jdbc:<prefix>:<rest>")
    prefix = match.group("prefix").lower()
    rest = match.group("rest")
    drivername = _drivername(config, prefix)

    try:
        if prefix == "sqlite":
            # SQLite URLs cannot carry credentials
            database = None if rest in ("", ":memory:") else rest
            return URL.create(drivername, database=database)
        elif prefix == "oracle":
            url = _parse_oracle(drivername, rest)
        else:
            url = _parse_network(drivername, rest)
    except ContractViolation:
        raise
    except (ArgumentError, ValueError) as e:
        raise ContractViolation(f"Invalid JDBC URL {config.display_url}: {e}") from e

    return url.set(
        username=config.username or None,
        password=config.password or None,
    )


def install_validation_query(engine: Engine, query: str) -> None:
    """Run ``query`` on every pool checkout.

    A failing probe raises DisconnectionError, which makes the pool discard
    the connection and hand out a fresh one.

    Args:
        engine: SQLAlchemy engine whose pool is probed
        query: Liveness probe statement
    """
    dbapi_error = engine.dialect.loaded_dbapi.Error

    @event.listens_for(engine, "checkout")
    def validate_connection(dbapi_conn, connection_record, connection_proxy):
        cursor = dbapi_conn.cursor()
        try:
            cursor.execute(query)
            cursor.fetchall()
        except dbapi_error as e:
            logger.warning(f"Validation query failed, discarding connection: {e}")
            raise DisconnectionError(str(e)) from e
        finally:
            cursor.close()


def create_pool(config: PoolConfig) -> Engine:
    """Open a QueuePool-backed engine for one connection slot.

    Args:
        config: Pool configuration

    Returns:
        SQLAlchemy Engine; connections are opened lazily by the pool
    """
    url = to_sqlalchemy_url(config)
    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        echo=config.echo,
    )

    if config.validation_query:
        install_validation_query(engine, config.validation_query)

    return engine
