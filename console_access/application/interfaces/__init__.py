"""Application interfaces (ports): collaborator protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from console_access.infrastructure or console_access.api.
"""

from console_access.application.interfaces.services import (
    IAccountDirectory,
    IGrantStore,
    IMenuCatalog,
)

__all__ = [
    "IAccountDirectory",
    "IGrantStore",
    "IMenuCatalog",
]
