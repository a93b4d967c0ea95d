"""
Declaration emitter.

Walks a ResourceGraph in dependency order and submits every node to the
provisioning engine exactly once. Deferred references in node properties are
replaced here, and only here, by the engine's own deferred values.
"""

from types import MappingProxyType
from typing import Any, Mapping

from netstack.core.exceptions import DependencyResolutionFailure
from netstack.core.graph import AttributeRef, ResourceGraph, ResourceNode, Template
from netstack.engine.protocol import ProvisioningEngine
from netstack.utils.logger import get_logger

logger = get_logger(__name__)

EmittedStack = Mapping[str, Any]


class DeclarationEmitter:
    """
    Translates graph nodes into engine declarations.

    Each declaration carries the handles of its dependencies so the engine's
    scheduler can create independent branches in parallel.
    """

    def __init__(self, engine: ProvisioningEngine) -> None:
        self.engine = engine

    def emit(self, graph: ResourceGraph) -> EmittedStack:
        """
        Declare every node of ``graph``.

        Returns:
            Read-only mapping of node name to engine handle
        """
        handles: dict[str, Any] = {}
        for node in graph.topological_order():
            handles[node.name] = self._declare(node, handles)

        logger.info("Declared %d resources", len(handles))
        return MappingProxyType(handles)

    def _declare(self, node: ResourceNode, handles: Mapping[str, Any]) -> Any:
        if node.name in handles:
            raise DependencyResolutionFailure("Resource declared twice", resource=node.name)

        properties = {key: self._resolve(value, handles, node) for key, value in node.properties.items()}
        depends_on = [handles[name] for name in sorted(node.depends_on)]

        logger.debug(
            "Declaring %s",
            node.name,
            extra={"kind": node.kind, "depends_on": sorted(node.depends_on)},
        )
        return self.engine.declare_resource(node.kind, node.name, properties, depends_on)

    def _resolve(self, value: Any, handles: Mapping[str, Any], node: ResourceNode) -> Any:
        if isinstance(value, AttributeRef):
            if value.node not in handles:
                raise DependencyResolutionFailure(
                    f"Reference to undeclared resource {value.node}",
                    resource=node.name,
                )
            return self.engine.attribute(handles[value.node], value.attribute)
        if isinstance(value, Template):
            resolved = {key: self._resolve(item, handles, node) for key, item in value.values}
            return self.engine.interpolate(value.text, resolved)
        if isinstance(value, Mapping):
            return {key: self._resolve(item, handles, node) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._resolve(item, handles, node) for item in value]
        return value
