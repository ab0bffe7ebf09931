# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
from pydantic import BaseModel, ConfigDict, Field, model_validator


class PermissionDeclarationSchema(BaseModel):
    """Schema for one permission entry in a declaration manifest."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    member: str = Field(min_length=1)
    description: str | None = None
    region: str | None = None
    ref: str | None = None  # "Module.Member", only inside aggregates


class ModuleDeclarationSchema(BaseModel):
    """Schema for a permission module declaration."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = Field(min_length=1)
    display_name: str | None = Field(default=None, alias="displayName")
    aggregate: bool = False
    permissions: list[PermissionDeclarationSchema] = []

    @model_validator(mode="after")
    def check_references(self) -> "ModuleDeclarationSchema":
        for perm in self.permissions:
            if self.aggregate and not perm.ref:
                raise ValueError(
                    f"Aggregate entry '{perm.member}' must reference "
                    "another module's entry with 'ref'"
                )
            if not self.aggregate and perm.ref:
                raise ValueError(
                    f"Entry '{perm.member}' uses 'ref' but module "
                    f"'{self.name}' is not an aggregate"
                )
        return self


class DeclarationFileSchema(BaseModel):
    """Schema for a manifest file holding several modules."""

    model_config = ConfigDict(extra="forbid")

    modules: list[ModuleDeclarationSchema]
