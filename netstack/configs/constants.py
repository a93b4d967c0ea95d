"""
Infrastructure constants for netstack.

Contains subnet offsets, capacity limits, ports, and default tags.
"""

from typing import Final

# Address planning: subnets are 10.0.<offset + index>.0/24
SUBNET_BASE_PREFIX: Final[str] = "10.0"
SUBNET_MASK: Final[str] = "/24"
SUBNET_OFFSETS: Final[dict[str, int]] = {
    "public": 0,
    "private": 10,
}
MAX_THIRD_OCTET: Final[int] = 255

# Availability zones hosting a public/private subnet pair
MAX_AVAILABILITY_ZONES: Final[int] = 3

# Default route for the public route table
DEFAULT_ROUTE_CIDR: Final[str] = "0.0.0.0/0"

# Port configurations
PORTS: Final[dict[str, int]] = {
    "ssh": 22,
    "http": 80,
    "https": 443,
    "app": 8080,
    "mariadb": 3306,
}

# Managed policies attached to the EC2 instance role
INSTANCE_POLICY_ARNS: Final[tuple[str, ...]] = (
    "arn:aws:iam::aws:policy/AmazonSSMManagedInstanceCore",
    "arn:aws:iam::aws:policy/CloudWatchAgentServerPolicy",
)

# Database defaults
DATABASE_DEFAULTS: Final[dict[str, str | int]] = {
    "engine": "mariadb",
    "engine_version": "10.11.4",
    "parameter_group_family": "mariadb10.11",
    "instance_class": "db.t3.micro",
    "allocated_storage": 20,
    "db_name": "health",
    "username": "admin",
}

# DNS defaults
DNS_RECORD_TTL: Final[int] = 60

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Project": "netstack",
    "ManagedBy": "pulumi",
}
