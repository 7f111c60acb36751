"""
Provisioning of pooled connections from external storage settings.
"""

from typing import Callable, Optional, Sequence

from sqlalchemy import Engine

from datasource_provisioner.config import ExternalStorageConfig, PoolSettings
from datasource_provisioner.dialects import (
    MYSQL,
    UNKNOWN,
    DialectDescriptor,
    resolve_by_product_name,
    resolve_by_url,
)
from datasource_provisioner.errors import check_argument
from datasource_provisioner.logger import get_logger
from datasource_provisioner.storage.drivers import resolve_driver_class_name
from datasource_provisioner.storage.pool import PoolConfig, PoolFactory, create_pool

logger = get_logger(__name__)

PoolCallback = Callable[[Engine], None]


def _get_or_default(values: Sequence[str], index: int) -> str:
    """Return ``values[index]``, or the first value when the list is shorter."""
    return values[index] if index < len(values) else values[0]


class DataSourceProvisioner:
    """Builds one pool per configured connection slot.

    Provisioning is a single pass that either yields every pool or none:
    when a slot fails, pools opened for earlier slots are disposed before
    the error propagates.
    """

    def __init__(
        self,
        pool_factory: Optional[PoolFactory] = None,
        pool_settings: Optional[PoolSettings] = None,
    ):
        """Initialize the provisioner.

        Args:
            pool_factory: Callable opening a pool from a PoolConfig
                (defaults to a SQLAlchemy QueuePool engine)
            pool_settings: Tuning passed through to every pool
        """
        self._pool_factory = pool_factory or create_pool
        self._pool_settings = pool_settings or PoolSettings()

    def build(
        self,
        config: ExternalStorageConfig,
        callback: Optional[PoolCallback] = None,
    ) -> list[Engine]:
        """Open a pool for each of the ``config.count`` slots.

        Args:
            config: External storage settings
            callback: Called with each pool right after it is opened

        Returns:
            Non-empty list of pools, in slot order

        Raises:
            ContractViolation: If the settings are incomplete or no pool
                was produced
        """
        config.check()

        dialect = resolve_by_product_name(config.platform)
        driver = resolve_driver_class_name(dialect)
        logger.debug(f"Platform {config.platform} resolved to {dialect.name}, driver {driver}")

        pools: list[Engine] = []
        try:
            for index in range(config.count):
                pool_config = self.build_pool_config(config, index, dialect, driver)
                pool = self._pool_factory(pool_config)
                pools.append(pool)
                logger.info(f"Opened pool {index} for {pool_config.display_url}")
                if callback is not None:
                    callback(pool)

            check_argument(len(pools) > 0, "no datasource available")
        except Exception:
            self._dispose_all(pools)
            raise

        return pools

    def build_pool_config(
        self,
        config: ExternalStorageConfig,
        index: int,
        dialect: DialectDescriptor,
        driver: Optional[str],
    ) -> PoolConfig:
        """Build the PoolConfig for slot ``index``.

        Credentials missing at ``index`` fall back to the first entry. The
        validation query is MySQL's whatever the dialect.

        Raises:
            ContractViolation: If the slot has no URL, or its URL does not
                use the jdbc scheme
        """
        check_argument(config.has_url(index), "db.url.%s is null", index)
        jdbc_url = config.urls[index].strip()

        url_dialect = resolve_by_url(jdbc_url)
        if url_dialect is not UNKNOWN and url_dialect.id != dialect.id:
            logger.warning(
                f"db.url.{index} looks like {url_dialect.name} but the platform is {dialect.name}"
            )

        settings = self._pool_settings
        return PoolConfig(
            jdbc_url=jdbc_url,
            username=_get_or_default(config.users, index).strip(),
            password=_get_or_default(config.passwords, index).strip(),
            driver_class_name=driver,
            validation_query=MYSQL.validation_query,
            sqlalchemy_name=dialect.sqlalchemy_name or url_dialect.sqlalchemy_name,
            pool_size=settings.size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.timeout_seconds,
            pool_recycle=settings.recycle_seconds,
            echo=settings.echo,
        )

    @staticmethod
    def _dispose_all(pools: Sequence[Engine]) -> None:
        """Dispose pools opened before a failed provisioning step."""
        for pool in pools:
            dispose = getattr(pool, "dispose", None)
            if dispose is None:
                continue
            try:
                dispose()
            except Exception as e:
                logger.warning(f"Could not dispose pool after failed provisioning: {e}")
