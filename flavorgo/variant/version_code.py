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
Version code allocation.

Each logical release owns VERSION_CODE_SCALE consecutive codes. The
universal flavor takes the top one so stores always prefer it as the
upgrade; split architectures take the codes below it in declared order.

Note:
    The scheme has exactly VERSION_CODE_SCALE - 1 codes of headroom. A
    sixth flavor in the group would land on the previous release's
    universal code.
"""

from dataclasses import dataclass
from typing import Dict, Iterable

from flavorgo.variant.metadata import Metadata
from flavorgo.variant.project import Flavor, ProjectKind

VERSION_CODE_SCALE = 5


@dataclass(frozen=True)
class VersionSpec:
    base_code: int
    skip_offset: int
    flavor_delta: int = 0
    scale: int = VERSION_CODE_SCALE

    @property
    def adjusted_base(self) -> int:
        return adjust_base_code(self.base_code, self.skip_offset, self.scale)

    @property
    def final_code(self) -> int:
        return self.adjusted_base + self.flavor_delta


def adjust_base_code(raw_code: int, skip_offset: int, scale: int = VERSION_CODE_SCALE) -> int:
    """
    Spread a raw release number over the code space.

    Codes up to skip_offset predate the scheme and stay where they are.
    """
    return (raw_code - skip_offset) * scale + skip_offset


def version_spec(project: ProjectKind, metadata: Metadata, flavor: Flavor) -> VersionSpec:
    """Build the VersionSpec of one flavor from project metadata."""
    return VersionSpec(
        base_code=metadata.require_int(project.version_code_key),
        skip_offset=project.skip_offset,
        flavor_delta=flavor.version_code_delta,
    )


def allocate_version_codes(project: ProjectKind, metadata: Metadata,
                           flavors: Iterable[Flavor]) -> Dict[str, int]:
    """
    Compute the final version code of every flavor.

    Raises:
        VersionFieldMissingError: If the version key is absent or not numeric
    """
    return {
        flavor.name: version_spec(project, metadata, flavor).final_code
        for flavor in flavors
    }


def version_name(project: ProjectKind, metadata: Metadata, flavor: Flavor) -> str:
    return metadata.require(project.version_name_key) + flavor.version_name_suffix
