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
Variant matrix resolution.

This is the entry point external tooling calls once per configured
project. One pass:
1. Selects the target ABI from the invoked task names
2. Resolves the signing identity (shared by the whole matrix)
3. Detects whether store publishing can be enabled
4. Resolves version code, version name, ABIs and output file name for
   every flavor
5. Checks that no two variants share (applicationId, versionCode)

Either every variant resolves or the pass raises and nothing is emitted.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flavorgo.variant.abi import enabled_architectures, select_target_abi
from flavorgo.variant.errors import DuplicateVariantCodeError
from flavorgo.variant.naming import default_output_file_name, transform_output_file_name
from flavorgo.variant.project import (
    FLAVORS,
    AndroidSettings,
    Flavor,
    ProjectConfig,
    ProjectKind,
)
from flavorgo.variant.signing import (
    PublishingConfig,
    SigningConfigs,
    SigningIdentity,
    resolve_publishing,
    resolve_signing_identity,
)
from flavorgo.variant.version_code import version_name, version_spec

BUILD_TYPES = ("release", "debug")


@dataclass(frozen=True)
class ResolvedVariant:
    flavor: str
    build_type: str
    application_id: str
    version_code: int
    version_name: str
    enabled_architectures: Tuple[str, ...]
    signing_identity: SigningIdentity
    output_file_name: str

    @property
    def name(self) -> str:
        """Gradle variant name, e.g. fdroidArm64Release."""
        return self.flavor + self.build_type[:1].upper() + self.build_type[1:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "flavor": self.flavor,
            "build_type": self.build_type,
            "application_id": self.application_id,
            "version_code": self.version_code,
            "version_name": self.version_name,
            "enabled_architectures": list(self.enabled_architectures),
            "signing_identity": self.signing_identity.name,
            "output_file_name": self.output_file_name,
        }


@dataclass(frozen=True)
class BuildPlan:
    project: ProjectKind
    build_type: str
    target_abi: Optional[str]
    signing_identity: SigningIdentity
    publishing: PublishingConfig
    android: AndroidSettings
    variants: Tuple[ResolvedVariant, ...]

    def variant(self, flavor: str) -> Optional[ResolvedVariant]:
        for resolved in self.variants:
            if resolved.flavor == flavor:
                return resolved
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": {"name": self.project.name, "kind": self.project.kind},
            "build_type": self.build_type,
            "target_abi": self.target_abi,
            "signing": self.signing_identity.to_dict(),
            "publishing": self.publishing.to_dict(),
            "android": self.android.to_dict(),
            "variants": [v.to_dict() for v in self.variants],
        }


def check_unique_codes(variants: Sequence[ResolvedVariant]) -> None:
    """
    Raise DuplicateVariantCodeError if two variants could not both be published.
    """
    seen = defaultdict(list)
    for resolved in variants:
        seen[(resolved.application_id, resolved.version_code)].append(resolved.flavor)
    collisions = [
        (app_id, code, tuple(flavors))
        for (app_id, code), flavors in seen.items()
        if len(flavors) > 1
    ]
    if collisions:
        raise DuplicateVariantCodeError(collisions)


class VariantMatrixBuilder:
    """Resolve every (flavor, enabled architectures) pair of a project."""

    def __init__(self, config: ProjectConfig, flavors: Sequence[Flavor] = FLAVORS,
                 architectures: Optional[Sequence[str]] = None):
        self.config = config
        self.flavors = tuple(flavors)
        # split flavors pinned to a filtered-out ABI drop out of every pass
        if architectures is None:
            architectures = config.android.architectures
        self.architectures = tuple(architectures)
        self.signing_configs = SigningConfigs()

    def _flavor_architectures(self, flavor: Flavor, selected: Tuple[str, ...]) -> Tuple[str, ...]:
        if flavor.is_universal:
            return selected
        return tuple(abi for abi in selected if abi == flavor.abi)

    def _resolve_variant(self, flavor: Flavor, build_type: str, abis: Tuple[str, ...],
                         identity: SigningIdentity) -> ResolvedVariant:
        project = self.config.project
        metadata = self.config.metadata
        resolved_name = version_name(project, metadata, flavor)
        # per-ABI outputs carry the ABI in the default name
        split_abi = abis[0] if len(abis) == 1 else None
        default_name = default_output_file_name(
            project.module_name, flavor.name, build_type, split_abi
        )
        return ResolvedVariant(
            flavor=flavor.name,
            build_type=build_type,
            application_id=project.application_id(metadata),
            version_code=version_spec(project, metadata, flavor).final_code,
            version_name=resolved_name,
            enabled_architectures=abis,
            signing_identity=identity,
            output_file_name=transform_output_file_name(default_name, project, resolved_name),
        )

    def build(self, task_names: Sequence[str] = (), build_type: str = "release") -> BuildPlan:
        """
        Resolve the build plan for one invocation.

        Args:
            task_names: Task names passed to the build, in order
            build_type: "release" or "debug"

        Returns:
            BuildPlan holding one ResolvedVariant per flavor left enabled

        Raises:
            ConfigMissingError: If the metadata file does not exist
            VersionFieldMissingError: If a required metadata key is missing
            DuplicateVariantCodeError: If two variants share a version code
        """
        if build_type not in BUILD_TYPES:
            raise ValueError(f"Invalid build type: {build_type}. Must be one of {list(BUILD_TYPES)}")

        target_abi = select_target_abi(list(task_names))
        selected = enabled_architectures(self.architectures, target_abi)

        if build_type == "release":
            identity = resolve_signing_identity(
                self.config.keystore_path,
                self.config.local_properties,
                self.config.environ,
                self.signing_configs,
            )
        else:
            identity = self.signing_configs.select("debug")

        variants: List[ResolvedVariant] = []
        for flavor in self.flavors:
            abis = self._flavor_architectures(flavor, selected)
            if not abis:
                # pinned to an ABI this invocation excludes
                continue
            variants.append(self._resolve_variant(flavor, build_type, abis, identity))

        check_unique_codes(variants)

        return BuildPlan(
            project=self.config.project,
            build_type=build_type,
            target_abi=target_abi,
            signing_identity=identity,
            publishing=resolve_publishing(self.config.project_dir, self.config.environ),
            android=self.config.android,
            variants=tuple(variants),
        )


def resolve_build_plan(config: ProjectConfig, task_names: Sequence[str] = (),
                       build_type: str = "release") -> BuildPlan:
    return VariantMatrixBuilder(config).build(task_names, build_type)
