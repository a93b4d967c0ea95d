"""
Network plan construction.

Combines zone selection and CIDR planning into one immutable ``NetworkPlan``:
subnets for every selected zone, a public route table carrying the default
route to the internet gateway, and a private route table without one.
"""

from typing import Sequence

from netstack.configs.base import NetworkConfig
from netstack.configs.constants import SUBNET_MASK, SUBNET_OFFSETS
from netstack.core import kinds
from netstack.core.cidr import SubnetTier
from netstack.core.exceptions import InvalidNetworkConfig
from netstack.core.models import NetworkPlan, RouteRule, RouteTable
from netstack.core.zones import plan_subnets
from netstack.utils.logger import get_logger

logger = get_logger(__name__)


def _validate_network_config(network: NetworkConfig) -> None:
    if network.base_subnet_mask != SUBNET_MASK:
        raise InvalidNetworkConfig(
            f"Only {SUBNET_MASK} subnets are supported, got {network.base_subnet_mask}",
            field="base_subnet_mask",
        )

    # Public indices must stay below the first private block
    tier_width = SUBNET_OFFSETS["private"] - SUBNET_OFFSETS["public"]
    if not 1 <= network.max_availability_zones <= tier_width:
        raise InvalidNetworkConfig(
            f"max_availability_zones must be between 1 and {tier_width}",
            field="max_availability_zones",
            details={"value": network.max_availability_zones},
        )


def build_network_plan(
    zones: Sequence[str],
    network: NetworkConfig,
    region: str | None = None,
) -> NetworkPlan:
    """
    Build the address plan for the VPC.

    Args:
        zones: Availability zones of the region, in reported order
        network: VPC settings
        region: Region name, for error context

    Returns:
        NetworkPlan: Validated, immutable plan

    Raises:
        NoZonesAvailable: If ``zones`` is empty
        AddressSpaceExhausted: If a subnet falls outside the VPC range
        InvalidNetworkConfig: If the mask or zone cap is unsupported
    """
    _validate_network_config(network)
    subnets = plan_subnets(zones, cap=network.max_availability_zones, region=region)

    public = tuple(spec for spec in subnets if spec.is_public)
    private = tuple(spec for spec in subnets if not spec.is_public)

    plan = NetworkPlan(
        vpc_cidr=network.vpc_cidr,
        gateway=kinds.INTERNET_GATEWAY,
        subnets=subnets,
        route_tables=(
            RouteTable(
                tier=SubnetTier.PUBLIC,
                subnets=public,
                routes=(RouteRule(network.public_route_destination, kinds.INTERNET_GATEWAY),),
            ),
            RouteTable(tier=SubnetTier.PRIVATE, subnets=private),
        ),
    )
    logger.info(
        "Planned %d public and %d private subnets",
        len(public),
        len(private),
        extra={"zones": list(plan.availability_zones)},
    )
    return plan
