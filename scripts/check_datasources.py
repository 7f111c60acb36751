#!/usr/bin/env python3
"""
Provision the configured data sources and report their health.
"""

import sys

from datasource_provisioner.config import get_config, load_config_from_yaml
from datasource_provisioner.dialects import resolve_by_product_name
from datasource_provisioner.errors import ProvisioningError
from datasource_provisioner.factories import create_data_source_service
from datasource_provisioner.logger import setup_logger


def main() -> int:
    """Provision data sources and print their health."""
    import argparse

    parser = argparse.ArgumentParser(description="Check configured data sources")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    args = parser.parse_args()

    config = load_config_from_yaml(args.config) if args.config else get_config()
    setup_logger(config.logging)

    dialect = resolve_by_product_name(config.db.platform)
    print(f"Platform: {config.db.platform} -> {dialect.name} (id={dialect.id})")

    try:
        with create_data_source_service(config) as service:
            service.init()
            for index, engine in enumerate(service.engines):
                print(f"  [{index}] {engine.url!r}")
            service.check_health()
            print(f"Master: {service.current_db_url}")
            print(f"Health: {service.health()}")
    except ProvisioningError as e:
        print(f"Provisioning failed: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
