"""Local edits to a permission matrix.

Pure, synchronous functions: each returns a new matrix and never contacts
the grant store or touches persisted ids. Selection queries are recomputed
from the matrix on every call.
"""

from console_access.domain.entities import PermissionMatrix
from console_access.domain.enums import PermissionKind


def is_menu_fully_selected(matrix: PermissionMatrix, menu_id: int) -> bool:
    """True when Create, Read, Update and Delete are all granted on the menu."""
    return matrix.entry(menu_id).all_selected


def is_matrix_fully_selected(matrix: PermissionMatrix) -> bool:
    """True when every menu is fully selected. An empty matrix is never fully selected."""
    return len(matrix) > 0 and all(entry.all_selected for entry in matrix)


def toggle_kind(matrix: PermissionMatrix, menu_id: int, kind: PermissionKind) -> PermissionMatrix:
    """Flip the status of exactly one (menu, kind) grant."""
    entry = matrix.entry(menu_id)
    current = entry.grant(kind).status
    return matrix.with_entry(entry.with_status(kind, not current))


def set_kind(
    matrix: PermissionMatrix, menu_id: int, kind: PermissionKind, status: bool
) -> PermissionMatrix:
    """Set one (menu, kind) grant to an explicit status. No-op when already set."""
    entry = matrix.entry(menu_id)
    if entry.grant(kind).status == status:
        return matrix
    return matrix.with_entry(entry.with_status(kind, status))


def toggle_all_kinds_for_menu(matrix: PermissionMatrix, menu_id: int) -> PermissionMatrix:
    """Clear all four kinds if they are all granted, otherwise grant all four."""
    entry = matrix.entry(menu_id)
    return matrix.with_entry(entry.with_all(not entry.all_selected))


def toggle_all_menus(matrix: PermissionMatrix) -> PermissionMatrix:
    """Clear every kind on every menu if the matrix is fully selected, otherwise grant everything."""
    if not len(matrix):
        return matrix
    target = not is_matrix_fully_selected(matrix)
    return matrix.with_entries(entry.with_all(target) for entry in matrix)
