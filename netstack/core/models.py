"""
Value types of the network plan.

All types are frozen; a plan is built once per provisioning run and never
mutated afterwards.
"""

import enum
import ipaddress
from dataclasses import dataclass
from itertools import combinations
from typing import Any

from netstack.core.cidr import SubnetTier
from netstack.core.exceptions import AddressSpaceExhausted, PlanningError
from netstack.core.graph import AttributeRef


@dataclass(frozen=True)
class SubnetSpec:
    """
    One subnet of the plan.

    Attributes:
        tier: Public or private
        availability_zone: Zone hosting the subnet
        cidr_block: Block derived from (tier, index)
        index: Position of the zone in the selected zone list
    """
    tier: SubnetTier
    availability_zone: str
    cidr_block: str
    index: int

    @property
    def name(self) -> str:
        """Graph node name, e.g. ``public-subnet-0``."""
        return f"{self.tier.value}-subnet-{self.index}"

    @property
    def is_public(self) -> bool:
        return self.tier is SubnetTier.PUBLIC


@dataclass(frozen=True)
class RouteRule:
    """Route to ``destination_cidr`` through the ``gateway`` node."""
    destination_cidr: str
    gateway: str


@dataclass(frozen=True)
class RouteTable:
    """Route table of one tier and the subnets associated with it."""
    tier: SubnetTier
    subnets: tuple[SubnetSpec, ...]
    routes: tuple[RouteRule, ...] = ()

    @property
    def name(self) -> str:
        return f"{self.tier.value}-route-table"


class RuleDirection(str, enum.Enum):
    INGRESS = "ingress"
    EGRESS = "egress"


@dataclass(frozen=True)
class SecurityRule:
    """
    Security group rule.

    Either ``cidr_blocks`` or ``security_group`` (name of another security
    group node) identifies the peer.
    """
    direction: RuleDirection
    protocol: str
    from_port: int
    to_port: int
    cidr_blocks: tuple[str, ...] = ()
    security_group: str | None = None

    def __post_init__(self) -> None:
        if not self.cidr_blocks and self.security_group is None:
            raise ValueError("SecurityRule needs cidr_blocks or a security_group peer")
        if self.from_port > self.to_port:
            raise ValueError(f"Invalid port range {self.from_port}-{self.to_port}")

    def to_properties(self) -> dict[str, Any]:
        """Render as an inline ``pulumi_aws`` security group rule."""
        rule: dict[str, Any] = {
            "protocol": self.protocol,
            "from_port": self.from_port,
            "to_port": self.to_port,
        }
        if self.cidr_blocks:
            rule["cidr_blocks"] = list(self.cidr_blocks)
        if self.security_group is not None:
            rule["security_groups"] = [AttributeRef(self.security_group, "id")]
        return rule


@dataclass(frozen=True)
class NetworkPlan:
    """
    Address plan of the VPC.

    Construction fails with ``AddressSpaceExhausted`` when a subnet is not
    contained in ``vpc_cidr`` or two subnets overlap.

    Attributes:
        vpc_cidr: Address range of the VPC
        gateway: Node name of the internet gateway
        subnets: Public and private subnets, ordered by (index, tier)
        route_tables: One table per tier
    """
    vpc_cidr: str
    gateway: str
    subnets: tuple[SubnetSpec, ...]
    route_tables: tuple[RouteTable, ...]

    def __post_init__(self) -> None:
        vpc_network = ipaddress.ip_network(self.vpc_cidr)
        networks = {spec.name: ipaddress.ip_network(spec.cidr_block) for spec in self.subnets}

        for name, network in networks.items():
            if not network.subnet_of(vpc_network):
                raise AddressSpaceExhausted(
                    f"Subnet {name} ({network}) is outside VPC range {vpc_network}",
                    details={"subnet": name},
                )

        for (left, left_net), (right, right_net) in combinations(networks.items(), 2):
            if left_net.overlaps(right_net):
                raise AddressSpaceExhausted(
                    f"Subnets {left} and {right} overlap",
                    details={"subnets": [left, right]},
                )

    @property
    def public_subnets(self) -> tuple[SubnetSpec, ...]:
        return tuple(spec for spec in self.subnets if spec.tier is SubnetTier.PUBLIC)

    @property
    def private_subnets(self) -> tuple[SubnetSpec, ...]:
        return tuple(spec for spec in self.subnets if spec.tier is SubnetTier.PRIVATE)

    @property
    def availability_zones(self) -> tuple[str, ...]:
        return tuple(spec.availability_zone for spec in self.public_subnets)

    def route_table(self, tier: SubnetTier) -> RouteTable:
        table = next((table for table in self.route_tables if table.tier is tier), None)
        if table is None:
            raise PlanningError(
                f"No {tier.value} route table in the plan",
                details={"tier": tier.value},
            )
        return table
