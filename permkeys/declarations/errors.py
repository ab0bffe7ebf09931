# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only


class DeclarationError(Exception):
    """Error reading or validating a permission declaration source."""

    pass
