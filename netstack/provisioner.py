"""
Provisioning run orchestration.

1. Resolve the availability zones and the hosted zone (concurrently)
2. Build the network plan and the resource graph (pure, synchronous)
3. Emit every declaration to the engine

Nothing is declared unless steps 1 and 2 succeed completely. There are no
retries here; transient provider errors belong to the engine.
"""

import asyncio
from dataclasses import dataclass
from typing import Sequence

from netstack.configs.base import StackConfig
from netstack.core.builder import ResourceGraphBuilder
from netstack.core.exceptions import DependencyResolutionFailure, NetstackError
from netstack.core.graph import ResourceGraph
from netstack.core.models import NetworkPlan
from netstack.core.plan import build_network_plan
from netstack.engine.emitter import DeclarationEmitter, EmittedStack
from netstack.engine.protocol import ProvisioningEngine
from netstack.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProvisionResult:
    """Outcome of a provisioning run."""
    plan: NetworkPlan
    graph: ResourceGraph
    resources: EmittedStack


async def resolve_lookups(
    engine: ProvisioningEngine,
    config: StackConfig,
) -> tuple[list[str], str | None]:
    """
    Fetch the region's zones and, when DNS is configured, the hosted zone id.

    Raises:
        DependencyResolutionFailure: If a lookup fails
        asyncio.CancelledError: If the run is cancelled during a lookup
    """
    async def hosted_zone() -> str | None:
        if config.dns is None:
            return None
        return await engine.lookup_hosted_zone(config.dns.zone_name)

    lookups = [
        asyncio.ensure_future(engine.lookup_availability_zones(config.region)),
        asyncio.ensure_future(hosted_zone()),
    ]
    try:
        zones, zone_id = await asyncio.gather(*lookups)
    except NetstackError:
        raise
    except Exception as exc:
        logger.exception("Lookup failed", extra={"region": config.region})
        raise DependencyResolutionFailure(
            f"Lookup failed: {exc}",
            details={"region": config.region, "error_type": type(exc).__name__},
        ) from exc
    finally:
        # A failed lookup leaves its sibling running
        for task in lookups:
            if not task.done():
                task.cancel()

    return list(zones), zone_id


def plan_stack(
    config: StackConfig,
    zones: Sequence[str],
    hosted_zone_id: str | None = None,
) -> tuple[NetworkPlan, ResourceGraph]:
    """Build the network plan and the resource graph without side effects."""
    plan = build_network_plan(zones, config.network, region=config.region)
    graph = ResourceGraphBuilder(config, plan, hosted_zone_id=hosted_zone_id).build()
    return plan, graph


async def provision(engine: ProvisioningEngine, config: StackConfig) -> ProvisionResult:
    """
    Run one provisioning pass against ``engine``.

    Args:
        engine: Provisioning engine receiving the declarations
        config: Stack configuration

    Returns:
        ProvisionResult: Plan, graph and declared resource handles
    """
    zones, hosted_zone_id = await resolve_lookups(engine, config)
    plan, graph = plan_stack(config, zones, hosted_zone_id)
    resources = DeclarationEmitter(engine).emit(graph)
    return ProvisionResult(plan=plan, graph=graph, resources=resources)
