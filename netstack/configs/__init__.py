"""
Configuration module for Pulumi infrastructure.

Provides type-safe configuration loading from Pulumi stack config files.
"""

from netstack.configs.base import (
    ComputeSpec,
    DatabaseSpec,
    DnsSpec,
    EgressRuleConfig,
    NetworkConfig,
    SecurityConfig,
    StackConfig,
)
from netstack.configs.environment import get_config
from netstack.configs.constants import (
    DEFAULT_TAGS,
    MAX_AVAILABILITY_ZONES,
    SUBNET_OFFSETS,
)

__all__ = [
    "ComputeSpec",
    "DatabaseSpec",
    "DnsSpec",
    "EgressRuleConfig",
    "NetworkConfig",
    "SecurityConfig",
    "StackConfig",
    "get_config",
    "DEFAULT_TAGS",
    "MAX_AVAILABILITY_ZONES",
    "SUBNET_OFFSETS",
]
