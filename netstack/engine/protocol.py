"""
Boundary to the external provisioning engine.

The planning core never creates cloud resources itself. It hands declarations
to an engine that owns state, credentials, diffing and scheduling.
"""

from typing import Any, Mapping, Protocol, Sequence


class ProvisioningEngine(Protocol):
    """Resource declaration and lookup contract of the provisioning engine."""

    def declare_resource(
        self,
        kind: str,
        name: str,
        properties: Mapping[str, Any],
        depends_on: Sequence[Any],
    ) -> Any:
        """
        Register a desired resource.

        Args:
            kind: Resource type token
            name: Logical resource name, unique per stack
            properties: Resource arguments with deferred values already resolved
            depends_on: Handles of resources that must exist first

        Returns:
            Resource handle usable as input to later declarations
        """
        ...

    def attribute(self, handle: Any, name: str) -> Any:
        """Deferred attribute of a declared resource, known after provisioning."""
        ...

    def interpolate(self, text: str, values: Mapping[str, Any]) -> Any:
        """Deferred ``text.format(**values)`` once every value is known."""
        ...

    async def lookup_availability_zones(self, region: str) -> list[str]:
        """Available zone names of ``region``, in provider order."""
        ...

    async def lookup_hosted_zone(self, domain_name: str) -> str:
        """Id of the public hosted zone named ``domain_name``."""
        ...
