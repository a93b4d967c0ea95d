"""
Tests for the provisioning run.

Validates:
1. Lookups feed the plan and the DNS record
2. All-or-nothing: no declaration when a lookup or planning step fails
3. Cancellation during a lookup aborts the run
"""

import asyncio
from dataclasses import replace

import pytest

from netstack.core import kinds
from netstack.core.exceptions import (
    AddressSpaceExhausted,
    DependencyResolutionFailure,
    NoZonesAvailable,
)
from netstack.provisioner import plan_stack, provision, resolve_lookups


class TestResolveLookups:

    @pytest.mark.asyncio
    async def test_fetches_zones_and_hosted_zone(self, fake_engine, stack_config):
        zones, zone_id = await resolve_lookups(fake_engine, stack_config)

        assert zones == list(fake_engine.zones)
        assert zone_id == fake_engine.hosted_zone_id
        assert ("zones", "us-east-1") in fake_engine.lookups
        assert ("hosted_zone", "dev.example.com") in fake_engine.lookups

    @pytest.mark.asyncio
    async def test_skips_hosted_zone_without_dns(self, fake_engine, stack_config):
        _, zone_id = await resolve_lookups(fake_engine, replace(stack_config, dns=None))

        assert zone_id is None
        assert [kind for kind, _ in fake_engine.lookups] == ["zones"]

    @pytest.mark.asyncio
    async def test_lookup_error_wrapped(self, make_engine, stack_config):
        engine = make_engine(hosted_zone_error=RuntimeError("zone not found"))

        with pytest.raises(DependencyResolutionFailure) as exc_info:
            await resolve_lookups(engine, stack_config)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.details["error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_failed_lookup_cancels_the_other(self, fake_engine, stack_config):
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def failing_zones(region):
            await started.wait()
            raise ConnectionError("throttled")

        async def slow_hosted_zone(domain_name):
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        fake_engine.lookup_availability_zones = failing_zones
        fake_engine.lookup_hosted_zone = slow_hosted_zone

        with pytest.raises(DependencyResolutionFailure):
            await resolve_lookups(fake_engine, stack_config)

        await asyncio.wait_for(cancelled.wait(), timeout=1)
        assert cancelled.is_set()


class TestProvision:

    @pytest.mark.asyncio
    async def test_four_zones(self, fake_engine, stack_config):
        result = await provision(fake_engine, stack_config)

        assert [s.cidr_block for s in result.plan.public_subnets] == [
            "10.0.0.0/24", "10.0.1.0/24", "10.0.2.0/24",
        ]
        assert [s.cidr_block for s in result.plan.private_subnets] == [
            "10.0.10.0/24", "10.0.11.0/24", "10.0.12.0/24",
        ]
        assert len(fake_engine.declared) == len(result.graph)
        assert set(result.resources) == {node.name for node in result.graph}

    @pytest.mark.asyncio
    async def test_hosted_zone_reaches_record(self, fake_engine, stack_config):
        await provision(fake_engine, stack_config)

        record = fake_engine.handle(kinds.DNS_RECORD)
        assert record.properties["zone_id"] == fake_engine.hosted_zone_id
        assert record.properties["name"] == "dev.example.com"

    @pytest.mark.asyncio
    async def test_single_zone(self, make_engine, stack_config):
        engine = make_engine(zones=("az-a",))
        result = await provision(engine, stack_config)

        assert len(result.plan.public_subnets) == 1
        assert len(result.plan.private_subnets) == 1
        group = engine.handle(kinds.DB_SUBNET_GROUP)
        assert group.properties["subnet_ids"] == ["private-subnet-0.id"]

    @pytest.mark.asyncio
    async def test_no_zones_declares_nothing(self, make_engine, stack_config):
        engine = make_engine(zones=())

        with pytest.raises(NoZonesAvailable):
            await provision(engine, stack_config)

        assert engine.declared == []

    @pytest.mark.asyncio
    async def test_failed_zone_lookup_declares_nothing(self, make_engine, stack_config):
        engine = make_engine(zone_error=ConnectionError("throttled"))

        with pytest.raises(DependencyResolutionFailure):
            await provision(engine, stack_config)

        assert engine.declared == []

    @pytest.mark.asyncio
    async def test_failed_hosted_zone_lookup_declares_nothing(self, make_engine, stack_config):
        engine = make_engine(hosted_zone_error=LookupError("no such zone"))

        with pytest.raises(DependencyResolutionFailure):
            await provision(engine, stack_config)

        assert engine.declared == []

    @pytest.mark.asyncio
    async def test_planning_error_declares_nothing(self, fake_engine, stack_config):
        network = replace(stack_config.network, vpc_cidr="10.0.0.0/22")

        with pytest.raises(AddressSpaceExhausted):
            await provision(fake_engine, replace(stack_config, network=network))

        assert fake_engine.declared == []

    @pytest.mark.asyncio
    async def test_cancelled_lookup_declares_nothing(self, fake_engine, stack_config):
        started = asyncio.Event()

        async def never_resolves(region):
            started.set()
            await asyncio.Event().wait()

        fake_engine.lookup_availability_zones = never_resolves
        task = asyncio.ensure_future(provision(fake_engine, stack_config))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert fake_engine.declared == []


class TestPlanStack:

    def test_is_pure(self, stack_config):
        first_plan, first_graph = plan_stack(stack_config, ["az-a", "az-b"], "Z1")
        second_plan, second_graph = plan_stack(stack_config, ["az-a", "az-b"], "Z1")

        assert first_plan == second_plan
        assert [n.name for n in first_graph.topological_order()] == [
            n.name for n in second_graph.topological_order()
        ]
