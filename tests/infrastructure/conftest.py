"""Pytest fixtures for infrastructure tests."""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from netstack.configs.base import (
    ComputeSpec,
    DatabaseSpec,
    DnsSpec,
    NetworkConfig,
    SecurityConfig,
    StackConfig,
)


@pytest.fixture(scope="session", autouse=True)
def add_project_to_path():
    """Add the project root to the Python path for imports."""
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))
    yield
    sys.path.remove(str(project_root))


@pytest.fixture
def package_root():
    """Return the netstack package directory."""
    return Path(__file__).parent.parent.parent / "netstack"


@pytest.fixture
def python_files_in_package(package_root):
    """Return all Python files in the netstack package."""
    return [f for f in package_root.rglob("*.py") if "__pycache__" not in str(f)]


@dataclass
class FakeHandle:
    """Resource handle returned by FakeEngine."""
    kind: str
    name: str
    properties: dict[str, Any]
    depends_on: list["FakeHandle"]


@dataclass
class FakeEngine:
    """In-memory provisioning engine recording every declaration."""
    zones: tuple[str, ...] = ("us-east-1a", "us-east-1b", "us-east-1c", "us-east-1d")
    hosted_zone_id: str = "Z0123456789ABC"
    zone_error: BaseException | None = None
    hosted_zone_error: BaseException | None = None
    declared: list[FakeHandle] = field(default_factory=list)
    lookups: list[tuple[str, str]] = field(default_factory=list)

    def declare_resource(self, kind, name, properties, depends_on):
        handle = FakeHandle(kind, name, dict(properties), list(depends_on))
        self.declared.append(handle)
        return handle

    def attribute(self, handle, name):
        return f"{handle.name}.{name}"

    def interpolate(self, text, values):
        return text.format(**values)

    async def lookup_availability_zones(self, region):
        self.lookups.append(("zones", region))
        if self.zone_error is not None:
            raise self.zone_error
        return list(self.zones)

    async def lookup_hosted_zone(self, domain_name):
        self.lookups.append(("hosted_zone", domain_name))
        if self.hosted_zone_error is not None:
            raise self.hosted_zone_error
        return self.hosted_zone_id

    @property
    def names(self) -> list[str]:
        return [handle.name for handle in self.declared]

    def handle(self, name: str) -> FakeHandle:
        return next(handle for handle in self.declared if handle.name == name)


@pytest.fixture
def make_engine():
    """Factory for FakeEngine instances."""
    return FakeEngine


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def network_config():
    return NetworkConfig(
        vpc_cidr="10.0.0.0/16",
        vpc_name="main-vpc",
        gateway_name="main-igw",
    )


@pytest.fixture
def stack_config(network_config):
    """Complete stack configuration with DNS enabled."""
    return StackConfig(
        environment="dev",
        region="us-east-1",
        network=network_config,
        security=SecurityConfig(
            protocol="tcp",
            ingress_cidr="0.0.0.0/0",
            ingress_ports=(22, 80, 443, 8080),
        ),
        compute=ComputeSpec(
            ami_id="ami-0123456789abcdef0",
            instance_type="t2.micro",
            root_volume_size=25,
            root_volume_type="gp2",
            instance_name="webapp-instance",
            ssh_public_key="ssh-ed25519 AAAAexample",
        ),
        database=DatabaseSpec(password="not-a-real-password"),
        dns=DnsSpec(domain_name="dev.example.com", zone_name="dev.example.com"),
    )
