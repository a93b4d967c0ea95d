"""
Network planning core.

Pure computation over the stack configuration and the region's zone list:
- cidr: subnet CIDR derivation per tier and index
- zones: availability zone selection and subnet pairing
- plan: immutable NetworkPlan construction
- graph / builder: resource dependency graph
"""

from netstack.core.builder import ResourceGraphBuilder
from netstack.core.cidr import SubnetTier, calculate_cidr_block
from netstack.core.exceptions import (
    AddressSpaceExhausted,
    DependencyResolutionFailure,
    InsufficientPrivateSubnets,
    InsufficientPublicSubnets,
    InvalidNetworkConfig,
    NetstackError,
    NoZonesAvailable,
    PlanningError,
)
from netstack.core.graph import AttributeRef, ResourceGraph, ResourceNode, Template
from netstack.core.kinds import ResourceKind
from netstack.core.models import NetworkPlan, RouteRule, RouteTable, SecurityRule, SubnetSpec
from netstack.core.plan import build_network_plan
from netstack.core.zones import plan_subnets, select_availability_zones

__all__ = [
    "ResourceGraphBuilder",
    "SubnetTier",
    "calculate_cidr_block",
    "AddressSpaceExhausted",
    "DependencyResolutionFailure",
    "InsufficientPrivateSubnets",
    "InsufficientPublicSubnets",
    "InvalidNetworkConfig",
    "NetstackError",
    "NoZonesAvailable",
    "PlanningError",
    "AttributeRef",
    "ResourceGraph",
    "ResourceNode",
    "Template",
    "ResourceKind",
    "NetworkPlan",
    "RouteRule",
    "RouteTable",
    "SecurityRule",
    "SubnetSpec",
    "build_network_plan",
    "plan_subnets",
    "select_availability_zones",
]
