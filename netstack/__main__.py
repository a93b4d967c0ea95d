"""
Pulumi program entry point for the netstack topology.

1. Configuration
2. Availability zone and hosted zone lookups
3. Network plan -> resource graph -> declarations
4. Exports

The provisioning coroutine is handed to Pulumi as an awaitable input, so the
Pulumi runtime drives the lookups on its own event loop.
"""

import pulumi

from netstack.configs.environment import get_config
from netstack.core import kinds
from netstack.engine.pulumi_engine import PulumiEngine
from netstack.provisioner import provision
from netstack.utils.logger import configure_logging
from netstack.utils.naming import ResourceNamer


def main() -> None:
    """Deploy the netstack topology."""
    configure_logging()
    config = get_config()
    namer = ResourceNamer(project="netstack", environment=config.environment)
    engine = PulumiEngine(namer, region=config.region)

    stack = pulumi.Output.from_input(provision(engine, config))

    outputs = {
        "vpc_id": stack.apply(lambda result: result.resources[kinds.VPC].id),
        "public_subnet_ids": stack.apply(lambda result: pulumi.Output.all(
            *(result.resources[spec.name].id for spec in result.plan.public_subnets)
        )),
        "private_subnet_ids": stack.apply(lambda result: pulumi.Output.all(
            *(result.resources[spec.name].id for spec in result.plan.private_subnets)
        )),
        "instance_public_ip": stack.apply(lambda result: result.resources[kinds.INSTANCE].public_ip),
        "database_endpoint": stack.apply(lambda result: result.resources[kinds.DATABASE].endpoint),
    }
    if config.dns is not None:
        outputs["dns_name"] = config.dns.domain_name

    engine.finish(outputs)

    # Export to Pulumi stack
    for key, value in outputs.items():
        pulumi.export(key, value)


# Execute
main()
