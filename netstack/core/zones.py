"""
Availability zone selection.

The first ``cap`` zones reported for the region each host one public and one
private subnet. A region with fewer zones is valid, only less redundant.
"""

from functools import reduce
from typing import Sequence

from netstack.configs.constants import MAX_AVAILABILITY_ZONES
from netstack.core.cidr import SubnetTier, calculate_cidr_block
from netstack.core.exceptions import NoZonesAvailable
from netstack.core.models import SubnetSpec
from netstack.utils.logger import get_logger

logger = get_logger(__name__)


def select_availability_zones(
    zones: Sequence[str],
    cap: int = MAX_AVAILABILITY_ZONES,
    region: str | None = None,
) -> tuple[str, ...]:
    """
    Select the zones that host subnets.

    Args:
        zones: Zone names in the order the region reports them
        cap: Maximum number of zones to use
        region: Region name, for error context only

    Returns:
        The first ``min(len(zones), cap)`` zones

    Raises:
        NoZonesAvailable: If ``zones`` is empty
    """
    if not zones:
        raise NoZonesAvailable(region=region)

    selected = tuple(zones[:cap])
    if len(selected) < cap:
        logger.warning(
            "Region offers fewer availability zones than requested",
            extra={"region": region, "available": len(selected), "requested": cap},
        )
    return selected


def _subnet_pair(index: int, zone: str) -> tuple[SubnetSpec, SubnetSpec]:
    return tuple(
        SubnetSpec(
            tier=tier,
            availability_zone=zone,
            cidr_block=calculate_cidr_block(index, tier),
            index=index,
        )
        for tier in (SubnetTier.PUBLIC, SubnetTier.PRIVATE)
    )


def plan_subnets(
    zones: Sequence[str],
    cap: int = MAX_AVAILABILITY_ZONES,
    region: str | None = None,
) -> tuple[SubnetSpec, ...]:
    """
    Produce one public and one private subnet per selected zone.

    The subnet index is the zone's position in the selected list, so the
    blocks for a given zone list never change between runs.
    """
    selected = select_availability_zones(zones, cap=cap, region=region)
    return reduce(
        lambda specs, item: specs + _subnet_pair(*item),
        enumerate(selected),
        (),
    )
