"""
Pulumi implementation of the provisioning engine.

Every declaration becomes a ``pulumi_aws`` resource parented to one
``netstack:network:Topology`` component, so ``pulumi stack`` shows the whole
topology as a single tree. Dependency hints map to ``ResourceOptions.depends_on``
and Pulumi schedules independent branches in parallel.
"""

from typing import Any, Mapping, Sequence

import pulumi
import pulumi_aws as aws

from netstack.core.kinds import ResourceKind
from netstack.utils.naming import ResourceNamer

RESOURCE_TYPES: dict[str, type[pulumi.CustomResource]] = {
    ResourceKind.VPC.value: aws.ec2.Vpc,
    ResourceKind.INTERNET_GATEWAY.value: aws.ec2.InternetGateway,
    ResourceKind.INTERNET_GATEWAY_ATTACHMENT.value: aws.ec2.InternetGatewayAttachment,
    ResourceKind.SUBNET.value: aws.ec2.Subnet,
    ResourceKind.ROUTE_TABLE.value: aws.ec2.RouteTable,
    ResourceKind.ROUTE_TABLE_ASSOCIATION.value: aws.ec2.RouteTableAssociation,
    ResourceKind.ROUTE.value: aws.ec2.Route,
    ResourceKind.SECURITY_GROUP.value: aws.ec2.SecurityGroup,
    ResourceKind.KEY_PAIR.value: aws.ec2.KeyPair,
    ResourceKind.INSTANCE.value: aws.ec2.Instance,
    ResourceKind.DB_PARAMETER_GROUP.value: aws.rds.ParameterGroup,
    ResourceKind.DB_SUBNET_GROUP.value: aws.rds.SubnetGroup,
    ResourceKind.DB_INSTANCE.value: aws.rds.Instance,
    ResourceKind.IAM_ROLE.value: aws.iam.Role,
    ResourceKind.IAM_ROLE_POLICY_ATTACHMENT.value: aws.iam.RolePolicyAttachment,
    ResourceKind.IAM_INSTANCE_PROFILE.value: aws.iam.InstanceProfile,
    ResourceKind.DNS_RECORD.value: aws.route53.Record,
}


class TopologyComponent(pulumi.ComponentResource):
    """Parent of every resource declared for the stack."""

    def __init__(
        self,
        name: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("netstack:network:Topology", name, None, opts)


class PulumiEngine:
    """
    Provisioning engine backed by the Pulumi runtime.

    Args:
        namer: Maps node names to logical Pulumi resource names
        region: Region for a dedicated AWS provider; the stack's default
            provider is used when omitted
        opts: Options for the parent component
    """

    def __init__(
        self,
        namer: ResourceNamer,
        region: str | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        self.namer = namer
        self.component = TopologyComponent(namer.prefix, opts)
        self.provider = (
            aws.Provider(
                namer.name("aws"),
                region=region,
                opts=pulumi.ResourceOptions(parent=self.component),
            )
            if region
            else None
        )

    def declare_resource(
        self,
        kind: str,
        name: str,
        properties: Mapping[str, Any],
        depends_on: Sequence[Any],
    ) -> pulumi.CustomResource:
        resource_type = RESOURCE_TYPES.get(kind)
        if resource_type is None:
            raise ValueError(f"Unsupported resource kind: {kind}")

        pulumi.log.debug(f"Declaring {kind} {name}")
        return resource_type(
            self.namer.name(name),
            **properties,
            opts=pulumi.ResourceOptions(
                parent=self.component,
                provider=self.provider,
                depends_on=list(depends_on),
            ),
        )

    def attribute(self, handle: pulumi.CustomResource, name: str) -> pulumi.Output[Any]:
        return getattr(handle, name)

    def interpolate(self, text: str, values: Mapping[str, Any]) -> pulumi.Output[str]:
        return pulumi.Output.all(**values).apply(lambda resolved: text.format(**resolved))

    def _invoke_opts(self) -> pulumi.InvokeOptions | None:
        return pulumi.InvokeOptions(provider=self.provider) if self.provider else None

    async def lookup_availability_zones(self, region: str) -> list[str]:
        zones = aws.get_availability_zones_output(state="available", opts=self._invoke_opts())
        names = await zones.names.future()
        pulumi.log.info(f"Availability zones in {region}: {names}")
        return list(names or [])

    async def lookup_hosted_zone(self, domain_name: str) -> str:
        zone = aws.route53.get_zone_output(
            name=domain_name,
            private_zone=False,
            opts=self._invoke_opts(),
        )
        return await zone.zone_id.future()

    def finish(self, outputs: Mapping[str, Any]) -> None:
        """Register the component's outputs once the stack is declared."""
        self.component.register_outputs(dict(outputs))
