"""Service layer exports."""

from src.juris.services.namespace_registry import NamespaceRegistry, ResolvedNamespace
from src.juris.services.schema_provisioner import ProvisioningReport, SchemaProvisioner
from src.juris.services.tenant_context_gate import TenantContext, TenantContextGate
from src.juris.services.tenant_service import TenantService

__all__ = [
    "NamespaceRegistry",
    "ProvisioningReport",
    "ResolvedNamespace",
    "SchemaProvisioner",
    "TenantContext",
    "TenantContextGate",
    "TenantService",
]
