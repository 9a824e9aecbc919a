"""Domain layer for lexledger.

Services are imported lazily: database.base imports domain.entities, and the
services import database.base.
"""

_SERVICES = {
    "AccountService": "lexledger.domain.account",
    "TransactionService": "lexledger.domain.transaction",
    "TrustService": "lexledger.domain.trust",
    "MaintenanceService": "lexledger.domain.maintenance",
    "SettingsService": "lexledger.domain.settings",
    "PracticeService": "lexledger.domain.practice",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
