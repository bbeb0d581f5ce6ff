"""Domain layer for cadsync application.

Services are imported lazily so that the database layer can import the
entities without pulling the services (and the database layer) back in.
"""

_EXPORTS = {
    "PaymentRequestService": "cadsync.domain.payment_request",
    "ReconciliationService": "cadsync.domain.reconciliation",
    "CadastralRegistryService": "cadsync.domain.registry",
    "FormCatalogService": "cadsync.domain.forms",
    "SyncEngine": "cadsync.domain.engine",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module

        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
