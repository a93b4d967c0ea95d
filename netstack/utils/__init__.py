"""
Utility functions for Pulumi infrastructure.

Provides naming conventions, tag factories, and logging setup.
"""

from netstack.utils.naming import ResourceNamer
from netstack.utils.tags import create_tags
from netstack.utils.logger import configure_logging, get_logger

__all__ = [
    "ResourceNamer",
    "create_tags",
    "configure_logging",
    "get_logger",
]
