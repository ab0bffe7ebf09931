"""Pydantic schemas package."""
from permkeys.schemas.declarations import (
    DeclarationFileSchema,
    ModuleDeclarationSchema,
    PermissionDeclarationSchema,
)

__all__ = [
    "DeclarationFileSchema",
    "ModuleDeclarationSchema",
    "PermissionDeclarationSchema",
]
