"""
Resource dependency graph.

A ``ResourceGraph`` is an immutable set of ``ResourceNode`` declarations plus
the "must exist before" edges between them. Nodes refer to each other by name
only; a reference is used for ordering and never to reach into the other node.

Values that only exist once the engine has provisioned a resource (an
instance's public IP, a database address) are written into properties as
``AttributeRef`` or ``Template`` placeholders. The emitter is the single place
where they are swapped for the engine's deferred values.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from netstack.core.exceptions import DependencyResolutionFailure


@dataclass(frozen=True)
class AttributeRef:
    """Deferred attribute ``attribute`` of the resource declared as ``node``."""
    node: str
    attribute: str = "id"

    def __str__(self) -> str:
        return f"${{{self.node}.{self.attribute}}}"


@dataclass(frozen=True, init=False)
class Template:
    """
    Text with ``{placeholders}`` filled once all values are known.

    Values are usually ``AttributeRef``s; any other value (plain or already
    deferred by the engine) is passed through unchanged.

    Example:
        Template("HOST={host}", {"host": AttributeRef("database", "address")})
    """
    text: str
    values: tuple[tuple[str, Any], ...]

    def __init__(self, text: str, values: Mapping[str, Any]) -> None:
        object.__setattr__(self, "text", text)
        object.__setattr__(self, "values", tuple(sorted(values.items())))

    def references(self) -> tuple[AttributeRef, ...]:
        return tuple(value for _, value in self.values if isinstance(value, AttributeRef))


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def find_references(value: Any) -> set[str]:
    """Collect the node names referenced anywhere inside ``value``."""
    if isinstance(value, AttributeRef):
        return {value.node}
    if isinstance(value, Template):
        return {ref.node for ref in value.references()}
    if isinstance(value, Mapping):
        return set().union(*(find_references(item) for item in value.values()))
    if isinstance(value, (list, tuple)):
        return set().union(*(find_references(item) for item in value))
    return set()


@dataclass(frozen=True)
class ResourceNode:
    """
    One resource declaration.

    Attributes:
        kind: Engine resource type token
        name: Unique node name within the graph
        properties: Resource arguments, possibly holding deferred references.
            Frozen on construction: nested mappings become read-only and
            lists become tuples.
        depends_on: Names of nodes that must be declared first
    """
    kind: str
    name: str
    properties: Mapping[str, Any] = field(default_factory=dict)
    depends_on: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _freeze(self.properties))
        object.__setattr__(
            self,
            "depends_on",
            frozenset(self.depends_on) | frozenset(find_references(dict(self.properties))),
        )
        if self.name in self.depends_on:
            raise DependencyResolutionFailure(
                "Resource cannot depend on itself",
                resource=self.name,
            )


class ResourceGraph:
    """
    Immutable, validated dependency graph with a single root.

    Validation on construction:
    - node names are unique
    - every dependency names a node of the graph
    - ``root`` is the only node without dependencies
    - the graph is acyclic and every node reaches ``root``
    """

    def __init__(self, nodes: Iterable[ResourceNode], root: str) -> None:
        ordered: dict[str, ResourceNode] = {}
        for node in nodes:
            if node.name in ordered:
                raise DependencyResolutionFailure("Duplicate resource name", resource=node.name)
            ordered[node.name] = node
        self._nodes = MappingProxyType(ordered)
        self._root = root
        self._order = self._validate()

    @property
    def root(self) -> ResourceNode:
        return self._nodes[self._root]

    @property
    def nodes(self) -> tuple[ResourceNode, ...]:
        """Nodes in declaration order."""
        return tuple(self._nodes.values())

    def __getitem__(self, name: str) -> ResourceNode:
        return self._nodes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[ResourceNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def of_kind(self, kind: str) -> tuple[ResourceNode, ...]:
        return tuple(node for node in self if node.kind == kind)

    def dependencies(self, name: str, transitive: bool = False) -> frozenset[str]:
        """
        Names of the nodes ``name`` depends on.

        Args:
            name: Node name
            transitive: Include dependencies of dependencies
        """
        direct = self._nodes[name].depends_on
        if not transitive:
            return direct

        visited: set[str] = set()
        to_visit = list(direct)
        while to_visit:
            current = to_visit.pop()
            if current in visited:
                continue
            visited.add(current)
            to_visit.extend(self._nodes[current].depends_on - visited)
        return frozenset(visited)

    def dependents(self, name: str) -> frozenset[str]:
        """Names of the nodes that directly depend on ``name``."""
        return frozenset(node.name for node in self if name in node.depends_on)

    def topological_order(self) -> tuple[ResourceNode, ...]:
        """Nodes ordered so that each appears after all of its dependencies."""
        return self._order

    def _validate(self) -> tuple[ResourceNode, ...]:
        if self._root not in self._nodes:
            raise DependencyResolutionFailure("Root resource is not declared", resource=self._root)

        for node in self:
            missing = node.depends_on - self._nodes.keys()
            if missing:
                raise DependencyResolutionFailure(
                    f"Unknown dependencies: {', '.join(sorted(missing))}",
                    resource=node.name,
                )

        roots = [node.name for node in self if not node.depends_on]
        if roots != [self._root]:
            raise DependencyResolutionFailure(
                f"Expected {self._root} as the only root, found {roots}",
                resource=self._root,
            )

        # Layered ordering: each pass takes every node whose dependencies are done
        order: list[ResourceNode] = []
        done: set[str] = set()
        remaining = list(self._nodes.values())
        while remaining:
            ready = [node for node in remaining if node.depends_on <= done]
            if not ready:
                raise DependencyResolutionFailure(
                    "Circular dependency detected",
                    details={"resources": sorted(node.name for node in remaining)},
                )
            order.extend(ready)
            done.update(node.name for node in ready)
            remaining = [node for node in remaining if node.name not in done]

        for node in order[1:]:
            if self._root not in self.dependencies(node.name, transitive=True):
                raise DependencyResolutionFailure(
                    "Resource is not connected to the root",
                    resource=node.name,
                )
        return tuple(order)
