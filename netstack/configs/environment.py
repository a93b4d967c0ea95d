"""
Stack configuration loader.

Loads configuration from Pulumi stack config files.
"""

import pulumi

from netstack.configs.base import (
    ComputeSpec,
    DatabaseSpec,
    DnsSpec,
    NetworkConfig,
    SecurityConfig,
    StackConfig,
)


def get_config() -> StackConfig:
    """
    Load stack configuration from Pulumi stack config.

    Returns:
        StackConfig: Configuration object

    Raises:
        pulumi.ConfigMissingError: If required config values are missing
    """
    config = pulumi.Config()
    aws_config = pulumi.Config("aws")

    dns = config.get_object("dns")

    return StackConfig(
        environment=config.require("environment"),
        region=config.get("region") or aws_config.require("region"),
        network=NetworkConfig.from_mapping(config.require_object("network")),
        security=SecurityConfig.from_mapping(config.require_object("security")),
        compute=ComputeSpec.from_mapping(
            config.require_object("compute"),
            ssh_public_key=config.require("ssh_public_key"),
        ),
        database=DatabaseSpec.from_mapping(
            config.get_object("database") or {},
            password=config.require_secret("db_password"),
        ),
        dns=DnsSpec.from_mapping(dns) if dns else None,
    )
