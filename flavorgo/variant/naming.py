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

"""Output artifact naming."""

from typing import Optional

from flavorgo.variant.project import ProjectKind

RELEASE_MARKER = "-release"
OSS_MARKER = "-oss"


def default_output_file_name(module_name: str, flavor_name: str, build_type: str,
                             abi: Optional[str] = None, extension: str = "apk") -> str:
    """
    Return the file name the Android Gradle plugin would pick.

    Examples:
        app-oss-release.apk
        app-fdroidArm64-arm64-v8a-release.apk
    """
    parts = [module_name, flavor_name]
    if abi:
        parts.append(abi)
    parts.append(build_type)
    return "-".join(parts) + "." + extension


def transform_output_file_name(default_name: str, project: ProjectKind, version_name: str) -> str:
    """
    Stamp the project name and version into an output file name.

    Substitutions run in this order and each replaces every occurrence:
    1. base-name token -> "<prefix>-<version>"
    2. "-release" removed
    3. "-oss" removed

    Args:
        default_name: Platform default file name (e.g. app-release.apk)
        project: Project kind, providing the token and the prefix
        version_name: Resolved version name, flavor suffix included

    Returns:
        Final artifact file name
    """
    name = default_name.replace(project.output_token, f"{project.output_prefix}-{version_name}")
    name = name.replace(RELEASE_MARKER, "")
    name = name.replace(OSS_MARKER, "")
    return name
