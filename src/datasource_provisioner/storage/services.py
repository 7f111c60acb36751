"""
Data source services owning the provisioned pools.

A service provisions every configured slot, elects a master pool and
reports health. The implementation is picked from the declared storage
platform by :func:`select_data_source_service`.
"""

from typing import Any, Optional

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from datasource_provisioner.config import ExternalStorageConfig
from datasource_provisioner.dialects import MYSQL
from datasource_provisioner.errors import ProvisioningError
from datasource_provisioner.logger import get_logger
from datasource_provisioner.storage.pool import redact_jdbc_url
from datasource_provisioner.storage.provisioner import DataSourceProvisioner

logger = get_logger(__name__)


class DataSourceService:
    """Base data source service.

    Subclasses set ``read_only_query`` when the database can tell whether a
    pool is writable, and ``current_time_query`` for its clock.
    """

    read_only_query: Optional[str] = None
    current_time_query: str = "SELECT CURRENT_TIMESTAMP"

    def __init__(
        self,
        config: ExternalStorageConfig,
        provisioner: Optional[DataSourceProvisioner] = None,
    ):
        """Initialize the service.

        Args:
            config: External storage settings
            provisioner: Provisioner used to open pools
        """
        self._config = config
        self._provisioner = provisioner or DataSourceProvisioner()
        self._validation_query = MYSQL.validation_query
        self._engines: list[Engine] = []
        self._urls: list[str] = []
        self._health: list[bool] = []
        self._master_index = 0

    def init(self) -> None:
        """Provision every slot and elect the master."""
        self._install(self._provision())
        self.select_master()

    def reload(self) -> None:
        """Provision a fresh batch, then replace and dispose the old one.

        The current pools stay in service if provisioning fails.
        """
        engines = self._provision()
        old_engines = self._engines
        self._install(engines)
        self.select_master()

        for engine in old_engines:
            engine.dispose()
        logger.info(f"Reloaded {len(engines)} data source(s)")

    def _provision(self) -> list[Engine]:
        return self._provisioner.build(self._config, callback=self._on_pool_opened)

    def _on_pool_opened(self, engine: Engine) -> None:
        logger.debug(f"Registered pool {engine.url!r}")

    def _install(self, engines: list[Engine]) -> None:
        self._engines = list(engines)
        self._urls = [
            redact_jdbc_url(self._config.urls[index].strip())
            for index in range(len(engines))
        ]
        self._health = [True] * len(engines)
        self._master_index = 0

    @property
    def engines(self) -> list[Engine]:
        """Provisioned pools, in slot order."""
        return list(self._engines)

    @property
    def master(self) -> Engine:
        """The pool currently elected as master."""
        if not self._engines:
            raise ProvisioningError("Data source service is not initialized")
        return self._engines[self._master_index]

    @property
    def current_db_url(self) -> str:
        """URL of the master slot, empty before initialization."""
        return self._urls[self._master_index] if self._urls else ""

    def select_master(self) -> int:
        """Elect the first writable pool as master.

        Without a ``read_only_query`` the first pool stays master. When no
        pool is writable the current master is kept.

        Returns:
            Index of the master pool
        """
        if self.read_only_query is None or not self._engines:
            return self._master_index

        for index, engine in enumerate(self._engines):
            if self._is_writable(engine, index):
                if index != self._master_index:
                    logger.info(f"Master data source is now {self._urls[index]}")
                self._master_index = index
                return index

        logger.warning(f"No writable data source found, keeping {self.current_db_url}")
        return self._master_index

    def _is_writable(self, engine: Engine, index: int) -> bool:
        try:
            with engine.connect() as connection:
                read_only = connection.execute(text(self.read_only_query)).scalar()
        except SQLAlchemyError as e:
            logger.warning(f"Read-only check failed for {self._urls[index]}: {e}")
            return False
        return read_only == 0

    def check_health(self) -> list[bool]:
        """Probe every pool with the validation query.

        Returns:
            Health flag per pool, in slot order
        """
        for index, engine in enumerate(self._engines):
            try:
                with engine.connect() as connection:
                    connection.execute(text(self._validation_query))
                self._health[index] = True
            except SQLAlchemyError as e:
                logger.warning(f"Health check failed for {self._urls[index]}: {e}")
                self._health[index] = False
        return list(self._health)

    def health(self) -> str:
        """Summarize the last health check.

        Returns:
            "UP" when every pool is healthy, otherwise "DOWN:<url>" if the
            first unhealthy pool is the master and "WARN:<url>" if not
        """
        for index, healthy in enumerate(self._health):
            if not healthy:
                state = "DOWN" if index == self._master_index else "WARN"
                return f"{state}:{self._urls[index]}"
        return "UP"

    def current_time(self) -> Any:
        """Read the current time from the master database."""
        with self.master.connect() as connection:
            return connection.execute(text(self.current_time_query)).scalar()

    def close(self) -> None:
        """Dispose of every pool."""
        for engine in self._engines:
            engine.dispose()
        self._engines = []
        self._urls = []
        self._health = []
        self._master_index = 0

    def __enter__(self) -> "DataSourceService":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


class MySQLDataSourceService(DataSourceService):
    """MySQL-family service; a pool with ``@@read_only = 0`` is writable."""

    read_only_query = "SELECT @@read_only"
    current_time_query = "SELECT CURRENT_TIMESTAMP"


class OracleDataSourceService(DataSourceService):
    """Oracle service; the first pool is always master."""

    current_time_query = "SELECT SYSTIMESTAMP FROM DUAL"


class DmDataSourceService(DataSourceService):
    """DAMENG service; the first pool is always master."""

    current_time_query = "SELECT SYSDATE"


_SERVICES: dict[str, type[DataSourceService]] = {
    "DAMENG": DmDataSourceService,
    "ORACLE": OracleDataSourceService,
    "MYSQL": MySQLDataSourceService,
}


def select_data_source_service(platform: str) -> type[DataSourceService]:
    """Select the service implementation for a storage platform.

    Args:
        platform: Declared storage platform, case-insensitive

    Returns:
        Service class; platforms without a dedicated service use the MySQL one
    """
    service_class = _SERVICES.get(platform.strip().upper())
    if service_class is None:
        logger.debug(f"No dedicated data source service for {platform}, using MySQL")
        return MySQLDataSourceService
    return service_class
