"""
Resource naming conventions for consistent AWS resource names.

Follows pattern: {project}-{environment}-{resource}
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceNamer:
    """
    Generates consistent resource names for AWS resources.

    Attributes:
        project: Project identifier
        environment: Deployment environment (dev, staging, prod)
    """
    project: str
    environment: str

    @property
    def prefix(self) -> str:
        return f"{self.project}-{self.environment}"

    def name(self, resource: str) -> str:
        """
        Generate a physical resource name from a graph node name.

        Args:
            resource: Node name (e.g., 'vpc', 'public-subnet-0')

        Returns:
            Formatted resource name
        """
        return f"{self.prefix}-{resource}"
