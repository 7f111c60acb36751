"""
Factory functions wiring provisioning components from the configuration.

Usage:
    from datasource_provisioner.factories import create_data_source_service

    # Service for the configured platform, pools not yet opened
    service = create_data_source_service()
    service.init()
"""

from typing import Optional

from datasource_provisioner.config import Config, get_config
from datasource_provisioner.storage.pool import PoolFactory
from datasource_provisioner.storage.provisioner import DataSourceProvisioner
from datasource_provisioner.storage.services import (
    DataSourceService,
    select_data_source_service,
)


def create_provisioner(
    config: Optional[Config] = None,
    pool_factory: Optional[PoolFactory] = None,
) -> DataSourceProvisioner:
    """Create a DataSourceProvisioner using the configured pool tuning.

    Args:
        config: Configuration, the global one when omitted
        pool_factory: Override the default SQLAlchemy pool factory

    Returns:
        Configured DataSourceProvisioner instance
    """
    config = config or get_config()
    return DataSourceProvisioner(pool_factory=pool_factory, pool_settings=config.pool)


def create_data_source_service(
    config: Optional[Config] = None,
    pool_factory: Optional[PoolFactory] = None,
) -> DataSourceService:
    """Create the data source service matching the configured platform.

    Args:
        config: Configuration, the global one when omitted
        pool_factory: Override the default SQLAlchemy pool factory

    Returns:
        Uninitialized DataSourceService; call ``init()`` to open its pools
    """
    config = config or get_config()
    service_class = select_data_source_service(config.db.platform or "")
    return service_class(
        config.db,
        provisioner=create_provisioner(config, pool_factory=pool_factory),
    )
