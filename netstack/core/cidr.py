"""
Subnet CIDR planning.

Each subnet is a /24 inside 10.0.0.0/16 whose third octet is the tier offset
plus the subnet index. Public subnets start at 10.0.0.0/24, private subnets at
10.0.10.0/24, so the two tiers never share a block as long as fewer than ten
indices are used per tier.
"""

import enum

from netstack.configs.constants import (
    MAX_THIRD_OCTET,
    SUBNET_BASE_PREFIX,
    SUBNET_MASK,
    SUBNET_OFFSETS,
)
from netstack.core.exceptions import AddressSpaceExhausted


class SubnetTier(str, enum.Enum):
    """Routing tier of a subnet."""

    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def offset(self) -> int:
        return SUBNET_OFFSETS[self.value]


def calculate_cidr_block(index: int, tier: SubnetTier | str) -> str:
    """
    Derive the CIDR block of the subnet at ``index`` in ``tier``.

    Args:
        index: Position of the subnet's availability zone, starting at 0
        tier: Subnet tier

    Returns:
        CIDR block such as ``10.0.11.0/24``

    Raises:
        ValueError: If index is negative
        AddressSpaceExhausted: If the third octet would reach 255
    """
    tier = SubnetTier(tier)
    if index < 0:
        raise ValueError(f"Subnet index must be non-negative, got {index}")

    octet = tier.offset + index
    if octet >= MAX_THIRD_OCTET:
        raise AddressSpaceExhausted(
            "Exceeded the maximum IP range",
            index=index,
            tier=tier.value,
            details={"octet": octet},
        )
    return f"{SUBNET_BASE_PREFIX}.{octet}.0{SUBNET_MASK}"
