#
# Copyright 2024 zhlinh and flavorgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Error types raised while resolving build variants.

Every configuration fault is deterministic, so none of these is retried:
the first one raised aborts the whole configuration pass.
"""

from typing import Iterable, Optional, Tuple


class FlavorgoError(Exception):
    """Base class for all configuration errors."""


class ConfigMissingError(FlavorgoError):
    """Raised when a required configuration source is absent or unreadable."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        if reason is None:
            message = f"Required configuration file not found: {path}"
        else:
            message = f"Cannot read configuration from {path}: {reason}"
        super().__init__(message)


class VersionFieldMissingError(FlavorgoError):
    """Raised when a required metadata key is absent or not numeric."""

    def __init__(self, key: str, value: Optional[str] = None):
        self.key = key
        self.value = value
        if value is None:
            message = f"Required metadata key '{key}' is missing"
        else:
            message = f"Metadata key '{key}' must be an integer, got '{value}'"
        super().__init__(message)


class DuplicateVariantCodeError(FlavorgoError):
    """Raised when two resolved variants share (applicationId, versionCode)."""

    def __init__(self, collisions: Iterable[Tuple[str, int, Tuple[str, ...]]]):
        self.collisions = list(collisions)
        details = "; ".join(
            f"{app_id}@{code}: {', '.join(flavors)}"
            for app_id, code, flavors in self.collisions
        )
        super().__init__(f"Variants share applicationId and versionCode: {details}")


class InvalidProjectError(FlavorgoError):
    """Raised when FLAVORGO.toml cannot be parsed or names an unknown kind."""
