"""Domain layer for reinftrack application."""

_SERVICES = {
    "CompanyService": "reinftrack.domain.company",
    "DepartmentService": "reinftrack.domain.department",
    "ProvisioningService": "reinftrack.domain.provisioning",
    "RegimeService": "reinftrack.domain.period",
    "WorkflowService": "reinftrack.domain.workflow",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain.entities; load them
# lazily so importing an entity never drags the services in.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
