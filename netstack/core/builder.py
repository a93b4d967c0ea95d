"""
Resource graph construction.

Build order and edges:
1. VPC (the only root) -> internet gateway -> gateway attachment
2. Subnets per zone: public subnets wait for the gateway attachment
3. Route tables -> one association per subnet -> public default route
4. Security groups: app (ingress from config) -> database (from app only)
5. Database tier: parameter group, subnet group over every private subnet,
   RDS instance
6. Compute tier: IAM role -> policy attachments / instance profile, key pair,
   EC2 instance in the first public subnet
7. DNS A record for the instance's public IP

Resources with no natural dependency (gateway, key pair, IAM role, parameter
group) are anchored on the VPC so the VPC stays the single root.

The builder is pure: it never talks to AWS. Lookup results (zones, hosted
zone id) come in through the plan and the constructor.
"""

import json

from netstack.configs.base import DatabaseSpec, StackConfig
from netstack.core import kinds
from netstack.core.cidr import SubnetTier
from netstack.core.exceptions import (
    DependencyResolutionFailure,
    InsufficientPrivateSubnets,
    InsufficientPublicSubnets,
)
from netstack.core.graph import AttributeRef, ResourceGraph, ResourceNode, Template
from netstack.core.kinds import ResourceKind
from netstack.core.models import NetworkPlan, RouteTable, RuleDirection, SecurityRule
from netstack.utils.logger import get_logger
from netstack.utils.tags import create_tags

logger = get_logger(__name__)

USER_DATA_TEMPLATE = """#!/bin/bash
echo "HOST={host}" >> /etc/environment
echo "USER={username}" >> /etc/environment
echo "DATABASE={database}" >> /etc/environment
echo "PASSWORD={password}" >> /etc/environment
echo "DATABASE_PORT={port}" >> /etc/environment
echo "DIALECT={engine}" >> /etc/environment
echo "DEFAULTUSERPATH=/opt/users.csv" >> /etc/environment
# Configure the CloudWatch Agent
sudo /opt/aws/amazon-cloudwatch-agent/bin/amazon-cloudwatch-agent-ctl \\
    -a fetch-config \\
    -m ec2 \\
    -c file:/home/admin/webapp/cloudwatch-config.json \\
    -s
source /etc/environment
"""

EC2_ASSUME_ROLE_POLICY = json.dumps({
    "Version": "2012-10-17",
    "Statement": [{
        "Effect": "Allow",
        "Principal": {"Service": "ec2.amazonaws.com"},
        "Action": "sts:AssumeRole",
    }],
})


def render_user_data(database: DatabaseSpec) -> Template:
    """EC2 bootstrap script exporting the database connection settings."""
    return Template(
        USER_DATA_TEMPLATE,
        {
            "host": AttributeRef(kinds.DATABASE, "address"),
            "username": database.username,
            "database": database.db_name,
            "password": database.password,
            "port": database.port,
            "engine": database.engine,
        },
    )


def _ref(node: str, attribute: str = "id") -> AttributeRef:
    return AttributeRef(node, attribute)


class ResourceGraphBuilder:
    """
    Assembles every resource declaration of the stack into one graph.

    Args:
        config: Stack configuration
        plan: Network address plan
        hosted_zone_id: Route53 zone id, required when ``config.dns`` is set
    """

    def __init__(
        self,
        config: StackConfig,
        plan: NetworkPlan,
        hosted_zone_id: str | None = None,
    ) -> None:
        self.config = config
        self.plan = plan
        self.hosted_zone_id = hosted_zone_id

    def build(self) -> ResourceGraph:
        """
        Build and validate the full graph.

        Raises:
            InsufficientPrivateSubnets: If the plan has no private subnet
            InsufficientPublicSubnets: If the plan has no public subnet
            DependencyResolutionFailure: If the hosted zone is missing or the
                graph is not a single-rooted DAG
        """
        self._check_preconditions()

        nodes = [
            *self._network_nodes(),
            *self._routing_nodes(),
            *self._security_group_nodes(),
            *self._database_nodes(),
            *self._compute_nodes(),
            *self._dns_nodes(),
        ]
        graph = ResourceGraph(nodes, root=kinds.VPC)
        logger.info("Built resource graph with %d resources", len(graph))
        return graph

    def _check_preconditions(self) -> None:
        if not self.plan.private_subnets:
            raise InsufficientPrivateSubnets(
                "Database tier needs at least one private subnet",
                details={"zones": list(self.plan.availability_zones)},
            )
        if not self.plan.public_subnets:
            raise InsufficientPublicSubnets(
                "Compute instance needs at least one public subnet",
                details={"zones": list(self.plan.availability_zones)},
            )
        if self.config.dns is not None and not self.hosted_zone_id:
            raise DependencyResolutionFailure(
                f"Hosted zone for {self.config.dns.zone_name} is not resolved",
                resource=kinds.DNS_RECORD,
            )

    def _tags(self, name: str, **extra: str) -> dict[str, str]:
        return create_tags(self.config.environment, name, **extra)

    def _network_nodes(self) -> list[ResourceNode]:
        network = self.config.network
        nodes = [
            ResourceNode(
                ResourceKind.VPC.value,
                kinds.VPC,
                {
                    "cidr_block": self.plan.vpc_cidr,
                    "enable_dns_hostnames": True,
                    "enable_dns_support": True,
                    "tags": self._tags(network.vpc_name),
                },
            ),
            ResourceNode(
                ResourceKind.INTERNET_GATEWAY.value,
                self.plan.gateway,
                {"tags": self._tags(network.gateway_name)},
                depends_on=frozenset({kinds.VPC}),
            ),
            ResourceNode(
                ResourceKind.INTERNET_GATEWAY_ATTACHMENT.value,
                kinds.INTERNET_GATEWAY_ATTACHMENT,
                {
                    "internet_gateway_id": _ref(self.plan.gateway),
                    "vpc_id": _ref(kinds.VPC),
                },
            ),
        ]

        for spec in self.plan.subnets:
            # Public subnets are only usable once the gateway is attached
            extra_deps = {kinds.INTERNET_GATEWAY_ATTACHMENT} if spec.is_public else set()
            nodes.append(ResourceNode(
                ResourceKind.SUBNET.value,
                spec.name,
                {
                    "vpc_id": _ref(kinds.VPC),
                    "availability_zone": spec.availability_zone,
                    "cidr_block": spec.cidr_block,
                    "map_public_ip_on_launch": spec.is_public,
                    "tags": self._tags(
                        f"{spec.tier.value.capitalize()}Subnet{spec.index}",
                        Tier=spec.tier.value,
                    ),
                },
                depends_on=frozenset(extra_deps),
            ))
        return nodes

    def _routing_nodes(self) -> list[ResourceNode]:
        nodes: list[ResourceNode] = []
        for table in self.plan.route_tables:
            nodes.append(ResourceNode(
                ResourceKind.ROUTE_TABLE.value,
                table.name,
                {
                    "vpc_id": _ref(kinds.VPC),
                    "tags": self._tags(f"{table.tier.value}RouteTable"),
                },
            ))
            nodes.extend(self._association_nodes(table))

        public_table = self.plan.route_table(SubnetTier.PUBLIC)
        for position, route in enumerate(public_table.routes):
            name = kinds.PUBLIC_ROUTE if position == 0 else f"{kinds.PUBLIC_ROUTE}-{position}"
            nodes.append(ResourceNode(
                ResourceKind.ROUTE.value,
                name,
                {
                    "route_table_id": _ref(public_table.name),
                    "destination_cidr_block": route.destination_cidr,
                    "gateway_id": _ref(route.gateway),
                },
                depends_on=frozenset({kinds.INTERNET_GATEWAY_ATTACHMENT}),
            ))
        return nodes

    def _association_nodes(self, table: RouteTable) -> list[ResourceNode]:
        return [
            ResourceNode(
                ResourceKind.ROUTE_TABLE_ASSOCIATION.value,
                f"{table.tier.value}-route-table-association-{spec.index}",
                {
                    "subnet_id": _ref(spec.name),
                    "route_table_id": _ref(table.name),
                },
            )
            for spec in table.subnets
        ]

    def app_security_rules(self) -> tuple[SecurityRule, ...]:
        security = self.config.security
        ingress = tuple(
            SecurityRule(
                direction=RuleDirection.INGRESS,
                protocol=security.protocol,
                from_port=port,
                to_port=port,
                cidr_blocks=(security.ingress_cidr,),
            )
            for port in security.ingress_ports
        )
        egress = tuple(
            SecurityRule(
                direction=RuleDirection.EGRESS,
                protocol=rule.protocol,
                from_port=rule.port,
                to_port=rule.port,
                cidr_blocks=(rule.cidr,),
            )
            for rule in security.egress
        )
        return ingress + egress

    def database_security_rules(self) -> tuple[SecurityRule, ...]:
        port = self.config.database.port
        return (
            SecurityRule(
                direction=RuleDirection.INGRESS,
                protocol="tcp",
                from_port=port,
                to_port=port,
                security_group=kinds.APP_SECURITY_GROUP,
            ),
        )

    def _security_group_node(
        self,
        name: str,
        description: str,
        rules: tuple[SecurityRule, ...],
    ) -> ResourceNode:
        return ResourceNode(
            ResourceKind.SECURITY_GROUP.value,
            name,
            {
                "vpc_id": _ref(kinds.VPC),
                "description": description,
                "ingress": [r.to_properties() for r in rules if r.direction is RuleDirection.INGRESS],
                "egress": [r.to_properties() for r in rules if r.direction is RuleDirection.EGRESS],
                "tags": self._tags(name),
            },
        )

    def _security_group_nodes(self) -> list[ResourceNode]:
        return [
            self._security_group_node(
                kinds.APP_SECURITY_GROUP,
                "Application instance access",
                self.app_security_rules(),
            ),
            self._security_group_node(
                kinds.DB_SECURITY_GROUP,
                "Database access from the application",
                self.database_security_rules(),
            ),
        ]

    def _database_nodes(self) -> list[ResourceNode]:
        database = self.config.database
        return [
            ResourceNode(
                ResourceKind.DB_PARAMETER_GROUP.value,
                kinds.DB_PARAMETER_GROUP,
                {
                    "family": database.parameter_group_family,
                    "tags": self._tags(kinds.DB_PARAMETER_GROUP),
                },
                depends_on=frozenset({kinds.VPC}),
            ),
            ResourceNode(
                ResourceKind.DB_SUBNET_GROUP.value,
                kinds.DB_SUBNET_GROUP,
                {
                    "subnet_ids": [_ref(spec.name) for spec in self.plan.private_subnets],
                    "tags": self._tags(kinds.DB_SUBNET_GROUP),
                },
            ),
            ResourceNode(
                ResourceKind.DB_INSTANCE.value,
                kinds.DATABASE,
                {
                    "allocated_storage": database.allocated_storage,
                    "engine": database.engine,
                    "engine_version": database.engine_version,
                    "instance_class": database.instance_class,
                    "multi_az": database.multi_az,
                    "parameter_group_name": _ref(kinds.DB_PARAMETER_GROUP, "name"),
                    "db_name": database.db_name,
                    "username": database.username,
                    "password": database.password,
                    "port": database.port,
                    "db_subnet_group_name": _ref(kinds.DB_SUBNET_GROUP, "name"),
                    "publicly_accessible": False,
                    "vpc_security_group_ids": [_ref(kinds.DB_SECURITY_GROUP)],
                    "skip_final_snapshot": not self.config.is_production,
                    "tags": self._tags(kinds.DATABASE),
                },
            ),
        ]

    def _compute_nodes(self) -> list[ResourceNode]:
        compute = self.config.compute
        policy_nodes = [
            ResourceNode(
                ResourceKind.IAM_ROLE_POLICY_ATTACHMENT.value,
                f"{kinds.INSTANCE_ROLE}-policy-{position}",
                {
                    "role": _ref(kinds.INSTANCE_ROLE, "name"),
                    "policy_arn": policy_arn,
                },
            )
            for position, policy_arn in enumerate(compute.managed_policy_arns)
        ]
        # Single-instance placement in the first public subnet
        subnet = self.plan.public_subnets[0]

        return [
            ResourceNode(
                ResourceKind.IAM_ROLE.value,
                kinds.INSTANCE_ROLE,
                {
                    "assume_role_policy": EC2_ASSUME_ROLE_POLICY,
                    "tags": self._tags(kinds.INSTANCE_ROLE),
                },
                depends_on=frozenset({kinds.VPC}),
            ),
            *policy_nodes,
            ResourceNode(
                ResourceKind.IAM_INSTANCE_PROFILE.value,
                kinds.INSTANCE_PROFILE,
                {
                    "role": _ref(kinds.INSTANCE_ROLE, "name"),
                    "tags": self._tags(kinds.INSTANCE_PROFILE),
                },
            ),
            ResourceNode(
                ResourceKind.KEY_PAIR.value,
                kinds.KEY_PAIR,
                {
                    "public_key": compute.ssh_public_key,
                    "tags": self._tags(kinds.KEY_PAIR),
                },
                depends_on=frozenset({kinds.VPC}),
            ),
            ResourceNode(
                ResourceKind.INSTANCE.value,
                kinds.INSTANCE,
                {
                    "ami": compute.ami_id,
                    "instance_type": compute.instance_type,
                    "iam_instance_profile": _ref(kinds.INSTANCE_PROFILE, "name"),
                    "vpc_security_group_ids": [_ref(kinds.APP_SECURITY_GROUP)],
                    "subnet_id": _ref(subnet.name),
                    "key_name": _ref(kinds.KEY_PAIR, "key_name"),
                    "associate_public_ip_address": True,
                    "root_block_device": {
                        "volume_size": compute.root_volume_size,
                        "volume_type": compute.root_volume_type,
                        "delete_on_termination": True,
                    },
                    "disable_api_termination": False,
                    "user_data": render_user_data(self.config.database),
                    "tags": self._tags(compute.instance_name),
                },
                depends_on=frozenset(node.name for node in policy_nodes),
            ),
        ]

    def _dns_nodes(self) -> list[ResourceNode]:
        dns = self.config.dns
        if dns is None:
            return []
        return [
            ResourceNode(
                ResourceKind.DNS_RECORD.value,
                kinds.DNS_RECORD,
                {
                    "zone_id": self.hosted_zone_id,
                    "name": dns.domain_name,
                    "type": "A",
                    "ttl": dns.ttl,
                    "records": [_ref(kinds.INSTANCE, "public_ip")],
                },
            ),
        ]
