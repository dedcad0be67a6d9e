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

"""Build variant resolution for multi-flavor, multi-ABI Android projects."""

from .errors import (
    ConfigMissingError,
    DuplicateVariantCodeError,
    FlavorgoError,
    InvalidProjectError,
    VersionFieldMissingError,
)
from .matrix import BuildPlan, ResolvedVariant, VariantMatrixBuilder, resolve_build_plan
from .project import AppProject, PluginProject, ProjectConfig, load_project_config

__all__ = [
    'AppProject',
    'BuildPlan',
    'ConfigMissingError',
    'DuplicateVariantCodeError',
    'FlavorgoError',
    'InvalidProjectError',
    'PluginProject',
    'ProjectConfig',
    'ResolvedVariant',
    'VariantMatrixBuilder',
    'VersionFieldMissingError',
    'load_project_config',
    'resolve_build_plan',
]
