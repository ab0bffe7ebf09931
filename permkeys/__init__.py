# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission key generator.

Mirrors server-side permission declarations into client-side modules
that carry the same ``Module:Member`` keys.
"""

__version__ = "0.1.0"
