# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import pytest

from permkeys.config import Settings
from permkeys.generator import PermissionKeyGenerator
from permkeys.keys.base import AggregateModule, PermissionModule
from permkeys.keys.registry import KeyRegistry


@pytest.fixture
def administration() -> PermissionModule:
    """Administration module with two regions."""
    module = PermissionModule(name="Administration", display_name="Administration")
    module.add("Security", "User, Role Management and Permissions")
    module.add("RolesView", "Roles: Access to view Roles.", region_label="Roles")
    module.add("RolesEdit", "Roles: Access to edit/modify Roles.", region_label="Roles")
    module.add("UsersEdit", "Users: Access to edit/modify Users.", region_label="Users")
    module.add("Edit", "Administration: General edit access.")
    return module


@pytest.fixture
def supported_person() -> PermissionModule:
    """SupportedPerson module sharing the 'Edit' member name."""
    module = PermissionModule(name="SupportedPerson", display_name="Supported Person")
    module.add("View", "Supported Person: Access to view supported persons.")
    module.add("Edit", "Supported Person: Access to edit supported persons.")
    module.add("Delete", "Supported Person: Access to delete supported persons.")
    return module


@pytest.fixture
def combined() -> AggregateModule:
    """Aggregate re-exporting one key of each source module."""
    aggregate = AggregateModule(name="Combined", display_name="Cross-module keys")
    aggregate.add("SupportedPersonDelete", "SupportedPerson.Delete")
    aggregate.add("RolesEdit", "Administration.RolesEdit")
    return aggregate


@pytest.fixture
def registry(administration, supported_person, combined) -> KeyRegistry:
    """Registry with the aggregate discovered between the source modules."""
    return KeyRegistry([administration, combined, supported_person])


@pytest.fixture
def output_dir(tmp_path):
    """Output directory for generated files (not created yet)."""
    return tmp_path / "generated"


@pytest.fixture
def settings(output_dir) -> Settings:
    """Settings writing into the temporary output directory."""
    return Settings(output_directory=output_dir, root_namespace="App.PermissionKeys")


@pytest.fixture
def generator(settings) -> PermissionKeyGenerator:
    """Generator using the temporary settings."""
    return PermissionKeyGenerator(settings)
