"""
Stack configuration dataclasses.

Provides a type-safe configuration structure loaded from Pulumi stack configs.
Structured values arrive as plain mappings (``pulumi.Config.require_object``)
and are converted with each dataclass's ``from_mapping``.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from netstack.configs.constants import (
    DATABASE_DEFAULTS,
    DEFAULT_ROUTE_CIDR,
    DNS_RECORD_TTL,
    INSTANCE_POLICY_ARNS,
    MAX_AVAILABILITY_ZONES,
    PORTS,
    SUBNET_MASK,
)


@dataclass(frozen=True)
class NetworkConfig:
    """
    VPC-level network settings.

    Attributes:
        vpc_cidr: Address range of the VPC
        vpc_name: Name tag of the VPC
        gateway_name: Name tag of the internet gateway
        public_route_destination: Destination of the public default route
        base_subnet_mask: Prefix length of every subnet (only /24 is supported)
        max_availability_zones: Cap on zones hosting a public/private subnet pair
    """
    vpc_cidr: str
    vpc_name: str
    gateway_name: str
    public_route_destination: str = DEFAULT_ROUTE_CIDR
    base_subnet_mask: str = SUBNET_MASK
    max_availability_zones: int = MAX_AVAILABILITY_ZONES

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NetworkConfig":
        return cls(
            vpc_cidr=data["vpc_cidr"],
            vpc_name=data["vpc_name"],
            gateway_name=data["gateway_name"],
            public_route_destination=data.get("public_route_destination", DEFAULT_ROUTE_CIDR),
            base_subnet_mask=data.get("base_subnet_mask", SUBNET_MASK),
            max_availability_zones=int(data.get("max_availability_zones", MAX_AVAILABILITY_ZONES)),
        )


@dataclass(frozen=True)
class EgressRuleConfig:
    """Outbound rule for the application security group."""
    protocol: str
    port: int
    cidr: str = DEFAULT_ROUTE_CIDR


def _default_egress() -> tuple[EgressRuleConfig, ...]:
    return (
        EgressRuleConfig(protocol="tcp", port=PORTS["mariadb"]),
        EgressRuleConfig(protocol="tcp", port=PORTS["https"]),
    )


@dataclass(frozen=True)
class SecurityConfig:
    """
    Application security group rules.

    Attributes:
        protocol: Protocol of every ingress rule
        ingress_cidr: Source range allowed by every ingress rule
        ingress_ports: Ports opened to ``ingress_cidr`` (ssh, http, https, app)
        egress: Outbound rules
    """
    protocol: str
    ingress_cidr: str
    ingress_ports: tuple[int, ...]
    egress: tuple[EgressRuleConfig, ...] = field(default_factory=_default_egress)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SecurityConfig":
        egress = data.get("egress")
        return cls(
            protocol=data.get("protocol", "tcp"),
            ingress_cidr=data["ingress_cidr"],
            ingress_ports=tuple(int(port) for port in data.get(
                "ingress_ports",
                (PORTS["ssh"], PORTS["http"], PORTS["https"], PORTS["app"]),
            )),
            egress=(
                tuple(
                    EgressRuleConfig(
                        protocol=rule.get("protocol", "tcp"),
                        port=int(rule["port"]),
                        cidr=rule.get("cidr", DEFAULT_ROUTE_CIDR),
                    )
                    for rule in egress
                )
                if egress is not None
                else _default_egress()
            ),
        )


@dataclass(frozen=True)
class ComputeSpec:
    """
    EC2 instance settings.

    Attributes:
        ami_id: Machine image of the instance
        instance_type: EC2 instance type
        root_volume_size: Root volume size in GB
        root_volume_type: Root volume type (gp2, gp3, ...)
        instance_name: Name tag of the instance
        ssh_public_key: Public key registered as the instance key pair
        managed_policy_arns: Managed policies attached to the instance role
    """
    ami_id: str
    instance_type: str
    root_volume_size: int
    root_volume_type: str
    instance_name: str
    ssh_public_key: str
    managed_policy_arns: tuple[str, ...] = INSTANCE_POLICY_ARNS

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], ssh_public_key: str) -> "ComputeSpec":
        return cls(
            ami_id=data["ami_id"],
            instance_type=data.get("instance_type", "t2.micro"),
            root_volume_size=int(data.get("root_volume_size", 25)),
            root_volume_type=data.get("root_volume_type", "gp2"),
            instance_name=data["instance_name"],
            ssh_public_key=ssh_public_key,
            managed_policy_arns=tuple(data.get("managed_policy_arns", INSTANCE_POLICY_ARNS)),
        )


@dataclass(frozen=True)
class DatabaseSpec:
    """RDS instance settings. ``password`` may be a ``pulumi.Output`` secret."""
    password: Any
    engine: str = str(DATABASE_DEFAULTS["engine"])
    engine_version: str = str(DATABASE_DEFAULTS["engine_version"])
    parameter_group_family: str = str(DATABASE_DEFAULTS["parameter_group_family"])
    instance_class: str = str(DATABASE_DEFAULTS["instance_class"])
    allocated_storage: int = int(DATABASE_DEFAULTS["allocated_storage"])
    db_name: str = str(DATABASE_DEFAULTS["db_name"])
    username: str = str(DATABASE_DEFAULTS["username"])
    port: int = PORTS["mariadb"]
    multi_az: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], password: Any) -> "DatabaseSpec":
        known = {name for name in cls.__dataclass_fields__ if name != "password"}
        return cls(password=password, **{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class DnsSpec:
    """Route53 A record pointing at the instance."""
    domain_name: str
    zone_name: str
    ttl: int = DNS_RECORD_TTL

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DnsSpec":
        domain_name = data["domain_name"]
        return cls(
            domain_name=domain_name,
            zone_name=data.get("zone_name", domain_name),
            ttl=int(data.get("ttl", DNS_RECORD_TTL)),
        )


@dataclass(frozen=True)
class StackConfig:
    """
    Complete configuration for one provisioning run.

    Attributes:
        environment: Deployment environment (dev, staging, prod)
        region: AWS region hosting the stack
        network: VPC settings
        security: Application security group rules
        compute: EC2 instance settings
        database: RDS instance settings
        dns: Optional DNS record settings
    """
    environment: str
    region: str
    network: NetworkConfig
    security: SecurityConfig
    compute: ComputeSpec
    database: DatabaseSpec
    dns: DnsSpec | None = None

    @property
    def is_production(self) -> bool:
        """Check if this is a production environment."""
        return self.environment == "prod"
