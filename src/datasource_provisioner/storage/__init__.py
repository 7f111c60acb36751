"""Storage layer modules for datasource provisioning."""

from datasource_provisioner.storage.drivers import (
    first_loadable,
    is_loadable,
    resolve_driver_class_name,
)
from datasource_provisioner.storage.pool import (
    PoolConfig,
    PoolFactory,
    create_pool,
    redact_jdbc_url,
    to_sqlalchemy_url,
)
from datasource_provisioner.storage.provisioner import DataSourceProvisioner
from datasource_provisioner.storage.services import (
    DataSourceService,
    DmDataSourceService,
    MySQLDataSourceService,
    OracleDataSourceService,
    select_data_source_service,
)

__all__ = [
    "DataSourceProvisioner",
    "DataSourceService",
    "DmDataSourceService",
    "MySQLDataSourceService",
    "OracleDataSourceService",
    "PoolConfig",
    "PoolFactory",
    "create_pool",
    "redact_jdbc_url",
    "first_loadable",
    "is_loadable",
    "resolve_driver_class_name",
    "select_data_source_service",
    "to_sqlalchemy_url",
]
