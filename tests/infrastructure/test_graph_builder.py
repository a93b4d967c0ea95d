"""
Tests for ResourceGraphBuilder.

Validates:
1. Every node reaches the VPC root and the graph is acyclic
2. Edge rules per resource (subnets, associations, routes, database, compute, DNS)
3. Fail-fast preconditions
"""

from dataclasses import replace

import pytest

from netstack.core import kinds
from netstack.core.builder import ResourceGraphBuilder
from netstack.core.cidr import SubnetTier
from netstack.core.exceptions import (
    DependencyResolutionFailure,
    InsufficientPrivateSubnets,
    InsufficientPublicSubnets,
)
from netstack.core.graph import AttributeRef, Template
from netstack.core.kinds import ResourceKind
from netstack.core.models import NetworkPlan, RouteTable
from netstack.core.plan import build_network_plan

FOUR_ZONES = ["az-a", "az-b", "az-c", "az-d"]


@pytest.fixture
def plan(stack_config):
    return build_network_plan(FOUR_ZONES, stack_config.network)


@pytest.fixture
def graph(stack_config, plan):
    return ResourceGraphBuilder(stack_config, plan, hosted_zone_id="Z0123456789ABC").build()


class TestGraphShape:
    """Whole-graph properties."""

    def test_vpc_is_the_only_root(self, graph):
        roots = [node.name for node in graph if not node.depends_on]
        assert roots == [kinds.VPC]

    def test_every_node_reaches_vpc(self, graph):
        for node in graph.nodes[1:]:
            assert kinds.VPC in graph.dependencies(node.name, transitive=True), node.name

    def test_topological_order_covers_all_nodes(self, graph):
        order = graph.topological_order()
        assert len(order) == len(graph)
        seen = set()
        for node in order:
            assert node.depends_on <= seen
            seen.add(node.name)

    def test_node_count_with_three_zones(self, graph):
        # 3 network + 6 subnets + 2 tables + 6 associations + 1 route
        # + 2 security groups + 3 database + 6 compute + 1 dns
        assert len(graph) == 30

    def test_subnet_nodes(self, graph):
        subnets = graph.of_kind(ResourceKind.SUBNET.value)
        assert [s.name for s in subnets] == [
            "public-subnet-0", "private-subnet-0",
            "public-subnet-1", "private-subnet-1",
            "public-subnet-2", "private-subnet-2",
        ]


class TestNetworkEdges:

    def test_gateway_attachment_links_gateway_and_vpc(self, graph):
        attachment = graph[kinds.INTERNET_GATEWAY_ATTACHMENT]
        assert attachment.depends_on == {kinds.INTERNET_GATEWAY, kinds.VPC}

    def test_public_subnet_waits_for_gateway_attachment(self, graph):
        subnet = graph["public-subnet-0"]
        assert subnet.depends_on == {kinds.VPC, kinds.INTERNET_GATEWAY_ATTACHMENT}
        assert subnet.properties["map_public_ip_on_launch"] is True
        assert subnet.properties["cidr_block"] == "10.0.0.0/24"
        assert subnet.properties["availability_zone"] == "az-a"

    def test_private_subnet_depends_on_vpc_only(self, graph):
        subnet = graph["private-subnet-2"]
        assert subnet.depends_on == {kinds.VPC}
        assert subnet.properties["map_public_ip_on_launch"] is False
        assert subnet.properties["cidr_block"] == "10.0.12.0/24"

    def test_vpc_properties(self, graph, stack_config):
        vpc = graph[kinds.VPC]
        assert vpc.properties["cidr_block"] == "10.0.0.0/16"
        assert vpc.properties["tags"]["Name"] == stack_config.network.vpc_name


class TestRoutingEdges:

    def test_association_depends_on_one_subnet_and_one_table(self, graph):
        associations = graph.of_kind(ResourceKind.ROUTE_TABLE_ASSOCIATION.value)
        assert len(associations) == 6
        for association in associations:
            subnets = {d for d in association.depends_on if "subnet" in d}
            tables = {d for d in association.depends_on if d.endswith("route-table")}
            assert len(subnets) == 1
            assert len(tables) == 1
            assert association.depends_on == subnets | tables

    def test_all_public_subnets_associated_with_public_table(self, graph):
        public = [
            node for node in graph.of_kind(ResourceKind.ROUTE_TABLE_ASSOCIATION.value)
            if node.properties["route_table_id"] == AttributeRef("public-route-table")
        ]
        assert sorted(node.properties["subnet_id"].node for node in public) == [
            "public-subnet-0", "public-subnet-1", "public-subnet-2",
        ]

    def test_public_route_to_gateway(self, graph):
        route = graph[kinds.PUBLIC_ROUTE]
        assert {"public-route-table", kinds.INTERNET_GATEWAY} <= route.depends_on
        assert route.properties["destination_cidr_block"] == "0.0.0.0/0"
        assert route.properties["gateway_id"] == AttributeRef(kinds.INTERNET_GATEWAY)

    def test_single_route_in_graph(self, graph):
        assert [n.name for n in graph.of_kind(ResourceKind.ROUTE.value)] == [kinds.PUBLIC_ROUTE]


class TestSecurityGroups:

    def test_app_rules_from_config(self, graph):
        sg = graph[kinds.APP_SECURITY_GROUP]
        assert [rule["from_port"] for rule in sg.properties["ingress"]] == [22, 80, 443, 8080]
        assert all(rule["cidr_blocks"] == ("0.0.0.0/0",) for rule in sg.properties["ingress"])
        assert [rule["to_port"] for rule in sg.properties["egress"]] == [3306, 443]

    def test_database_accepts_app_group_only(self, graph):
        sg = graph[kinds.DB_SECURITY_GROUP]
        (rule,) = sg.properties["ingress"]

        assert rule["from_port"] == rule["to_port"] == 3306
        assert rule["security_groups"] == (AttributeRef(kinds.APP_SECURITY_GROUP),)
        assert "cidr_blocks" not in rule
        assert kinds.APP_SECURITY_GROUP in sg.depends_on


class TestDatabaseTier:

    def test_subnet_group_spans_private_subnets(self, graph):
        group = graph[kinds.DB_SUBNET_GROUP]
        assert group.depends_on == {"private-subnet-0", "private-subnet-1", "private-subnet-2"}

    def test_database_dependencies(self, graph):
        database = graph[kinds.DATABASE]
        assert database.depends_on == {
            kinds.DB_SUBNET_GROUP,
            kinds.DB_PARAMETER_GROUP,
            kinds.DB_SECURITY_GROUP,
        }
        assert database.properties["publicly_accessible"] is False
        assert database.properties["engine"] == "mariadb"

    def test_single_zone_subnet_group(self, stack_config):
        plan = build_network_plan(["az-a"], stack_config.network)
        graph = ResourceGraphBuilder(stack_config, plan, hosted_zone_id="Z1").build()

        assert graph[kinds.DB_SUBNET_GROUP].depends_on == {"private-subnet-0"}

    def test_no_private_subnets(self, stack_config, plan):
        table = RouteTable(SubnetTier.PUBLIC, plan.public_subnets)
        public_only = NetworkPlan(plan.vpc_cidr, plan.gateway, plan.public_subnets, (table,))

        with pytest.raises(InsufficientPrivateSubnets):
            ResourceGraphBuilder(stack_config, public_only, hosted_zone_id="Z1").build()


class TestComputeTier:

    def test_instance_dependencies(self, graph):
        instance = graph[kinds.INSTANCE]
        assert {
            kinds.INSTANCE_PROFILE,
            kinds.APP_SECURITY_GROUP,
            "public-subnet-0",
            kinds.KEY_PAIR,
        } <= instance.depends_on
        subnets = {d for d in instance.depends_on if "subnet" in d}
        assert subnets == {"public-subnet-0"}

    def test_instance_waits_for_policy_attachments(self, graph):
        policies = graph.of_kind(ResourceKind.IAM_ROLE_POLICY_ATTACHMENT.value)
        assert len(policies) == 2
        assert {p.name for p in policies} <= graph[kinds.INSTANCE].depends_on

    def test_user_data_reads_database_address(self, graph):
        user_data = graph[kinds.INSTANCE].properties["user_data"]
        assert isinstance(user_data, Template)
        assert AttributeRef(kinds.DATABASE, "address") in user_data.references()
        assert kinds.DATABASE in graph[kinds.INSTANCE].depends_on

    def test_instance_tag_from_config(self, graph, stack_config):
        tags = graph[kinds.INSTANCE].properties["tags"]
        assert tags["Name"] == stack_config.compute.instance_name

    def test_no_public_subnets(self, stack_config, plan):
        table = RouteTable(SubnetTier.PRIVATE, plan.private_subnets)
        private_only = NetworkPlan(plan.vpc_cidr, plan.gateway, plan.private_subnets, (table,))

        with pytest.raises(InsufficientPublicSubnets):
            ResourceGraphBuilder(stack_config, private_only, hosted_zone_id="Z1").build()


class TestDnsRecord:

    def test_record_points_at_instance(self, graph):
        record = graph[kinds.DNS_RECORD]
        assert record.depends_on == {kinds.INSTANCE}
        assert record.properties["records"] == (AttributeRef(kinds.INSTANCE, "public_ip"),)
        assert record.properties["zone_id"] == "Z0123456789ABC"
        assert record.properties["type"] == "A"
        assert record.properties["ttl"] == 60

    def test_missing_hosted_zone(self, stack_config, plan):
        with pytest.raises(DependencyResolutionFailure) as exc_info:
            ResourceGraphBuilder(stack_config, plan, hosted_zone_id=None).build()

        assert exc_info.value.details["resource"] == kinds.DNS_RECORD

    def test_dns_disabled(self, stack_config, plan):
        config = replace(stack_config, dns=None)
        graph = ResourceGraphBuilder(config, plan).build()
        assert kinds.DNS_RECORD not in graph
