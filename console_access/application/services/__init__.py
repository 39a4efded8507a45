"""Application services: matrix initialization, local edits, bulk save."""

from console_access.application.services import matrix_mutator
from console_access.application.services.bulk_save_coordinator import (
    BulkSaveCoordinator,
    reconcile_from_response,
    serialize,
)
from console_access.application.services.matrix_initializer import (
    MatrixInitializer,
    build_matrix,
)

__all__ = [
    "BulkSaveCoordinator",
    "MatrixInitializer",
    "build_matrix",
    "matrix_mutator",
    "reconcile_from_response",
    "serialize",
]
