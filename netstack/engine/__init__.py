"""
Boundary to the provisioning engine.

- protocol: ProvisioningEngine contract
- emitter: DeclarationEmitter, graph -> engine declarations
- pulumi_engine: PulumiEngine, the pulumi_aws implementation
"""

from netstack.engine.emitter import DeclarationEmitter, EmittedStack
from netstack.engine.protocol import ProvisioningEngine

__all__ = [
    "DeclarationEmitter",
    "EmittedStack",
    "ProvisioningEngine",
]
