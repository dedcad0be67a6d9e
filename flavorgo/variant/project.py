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
Project descriptor handling for flavorgo.

Reads FLAVORGO.toml from the project root and selects the project kind
(app or plugin) once, at configuration start.

Configuration structure:
    [project]
    name = "myapp"                  # Project name (default: directory name)
    kind = "app"                    # app or plugin
    display_name = "MyApp"          # App output file prefix (default: name)
    metadata = "project.properties" # Versioned metadata file
    keystore = "release.keystore"   # Release keystore, relative to root

    [plugin]
    application_id_prefix = "com.example.plugin"  # default: PACKAGE_NAME.plugin

    [android]
    compile_sdk = 30
    min_sdk = 21
    target_sdk = 30
    build_tools = "30.0.3"
    ndk_version = "21.4.7075529"
    abi_filters = ["armeabi-v7a", "arm64-v8a", "x86", "x86_64"]
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from flavorgo.variant.errors import InvalidProjectError
from flavorgo.variant.metadata import Metadata, MetadataStore

PROJECT_FILE = "FLAVORGO.toml"
DEFAULT_METADATA_FILE = "project.properties"
DEFAULT_KEYSTORE_FILE = "release.keystore"

KIND_APP = "app"
KIND_PLUGIN = "plugin"

# Split architectures in declared order; the first one is the primary.
ARCHITECTURES = ("arm64-v8a", "armeabi-v7a", "x86_64", "x86")


@dataclass(frozen=True)
class Flavor:
    """A product flavor of the "vendor" dimension."""
    name: str
    version_name_suffix: str = ""
    version_code_delta: int = 0
    abi: Optional[str] = None  # None means universal

    @property
    def is_universal(self) -> bool:
        return self.abi is None


# Universal flavor first, then one flavor per split architecture, each one
# code below the previous. With a scale of 5 this uses every slot.
FLAVORS = (
    Flavor("oss"),
    Flavor("fdroidArm64", "-arm64", -1, "arm64-v8a"),
    Flavor("fdroidArm", "-arm", -2, "armeabi-v7a"),
    Flavor("fdroidX64", "-x64", -3, "x86_64"),
    Flavor("fdroidX86", "-x86", -4, "x86"),
)


@dataclass(frozen=True)
class AppProject:
    """The main application module."""
    name: str
    display_name: str

    kind = KIND_APP
    skip_offset = 40
    module_name = "app"
    version_code_key = "VERSION_CODE"
    version_name_key = "VERSION_NAME"

    @property
    def output_token(self) -> str:
        return self.module_name

    @property
    def output_prefix(self) -> str:
        return self.display_name

    def application_id(self, metadata: Metadata) -> str:
        return metadata.require("PACKAGE_NAME")


@dataclass(frozen=True)
class PluginProject:
    """A plugin module, versioned by its own <NAME>_VERSION keys."""
    name: str
    application_id_prefix: Optional[str] = None

    kind = KIND_PLUGIN
    skip_offset = 0

    @property
    def module_name(self) -> str:
        return self.name

    @property
    def version_code_key(self) -> str:
        return f"{self.name.upper()}_VERSION"

    @property
    def version_name_key(self) -> str:
        return f"{self.name.upper()}_VERSION_NAME"

    @property
    def output_token(self) -> str:
        return self.name

    @property
    def output_prefix(self) -> str:
        return f"{self.name}-plugin"

    def application_id(self, metadata: Metadata) -> str:
        prefix = self.application_id_prefix
        if not prefix:
            prefix = metadata.require("PACKAGE_NAME") + ".plugin"
        return f"{prefix}.{self.name.lower()}"


ProjectKind = Union[AppProject, PluginProject]


@dataclass(frozen=True)
class AndroidSettings:
    compile_sdk: int = 30
    min_sdk: int = 21
    target_sdk: int = 30
    build_tools: str = "30.0.3"
    ndk_version: str = "21.4.7075529"
    abi_filters: Tuple[str, ...] = ("armeabi-v7a", "arm64-v8a", "x86", "x86_64")

    @property
    def architectures(self) -> Tuple[str, ...]:
        """The filtered ABIs, in split declaration order."""
        return tuple(abi for abi in ARCHITECTURES if abi in self.abi_filters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compile_sdk": self.compile_sdk,
            "min_sdk": self.min_sdk,
            "target_sdk": self.target_sdk,
            "build_tools": self.build_tools,
            "ndk_version": self.ndk_version,
            "abi_filters": list(self.abi_filters),
        }


@dataclass
class ProjectConfig:
    """
    Everything one configuration pass needs, built once per process.

    The metadata store lives here instead of in module globals so that
    every consumer receives the same lazily loaded metadata explicitly.
    """
    project_dir: str
    project: ProjectKind
    store: MetadataStore
    keystore_path: str
    android: AndroidSettings = field(default_factory=AndroidSettings)
    environ: Any = None

    def __post_init__(self):
        if self.environ is None:
            self.environ = os.environ

    @property
    def metadata(self) -> Metadata:
        return self.store.metadata()

    @property
    def local_properties(self) -> Metadata:
        return self.store.local_properties()


def _select_kind(project_data: Dict[str, Any], plugin_data: Dict[str, Any],
                 default_name: str) -> ProjectKind:
    name = project_data.get("name", default_name)
    if not isinstance(name, str) or not name:
        raise InvalidProjectError(f"[project] name must be a non-empty string, got {name!r}")

    kind = str(project_data.get("kind", KIND_APP)).lower()
    if kind == KIND_APP:
        return AppProject(name=name, display_name=project_data.get("display_name", name))
    if kind == KIND_PLUGIN:
        return PluginProject(
            name=name,
            application_id_prefix=plugin_data.get("application_id_prefix"),
        )
    raise InvalidProjectError(
        f"Unknown project kind: {kind}. Must be one of {[KIND_APP, KIND_PLUGIN]}"
    )


def _android_settings(android_data: Dict[str, Any]) -> AndroidSettings:
    defaults = AndroidSettings()
    try:
        settings = AndroidSettings(
            compile_sdk=int(android_data.get("compile_sdk", defaults.compile_sdk)),
            min_sdk=int(android_data.get("min_sdk", defaults.min_sdk)),
            target_sdk=int(android_data.get("target_sdk", defaults.target_sdk)),
            build_tools=str(android_data.get("build_tools", defaults.build_tools)),
            ndk_version=str(android_data.get("ndk_version", defaults.ndk_version)),
            abi_filters=tuple(android_data.get("abi_filters", defaults.abi_filters)),
        )
    except (TypeError, ValueError) as e:
        raise InvalidProjectError(f"Invalid [android] settings: {e}") from e

    unknown = [abi for abi in settings.abi_filters if abi not in ARCHITECTURES]
    if unknown or not settings.abi_filters:
        raise InvalidProjectError(
            f"Invalid [android] abi_filters: {list(settings.abi_filters)}. "
            f"Must be a non-empty subset of {list(ARCHITECTURES)}"
        )
    return settings


def load_project_config(project_dir: Optional[str] = None, environ=None) -> ProjectConfig:
    """
    Load FLAVORGO.toml and build the configuration for one pass.

    Args:
        project_dir: Project root (default: current working directory)
        environ: Environment mapping (default: os.environ)

    Returns:
        ProjectConfig with a fresh, not yet loaded MetadataStore

    Raises:
        InvalidProjectError: If FLAVORGO.toml is malformed
    """
    project_dir = os.path.abspath(project_dir or os.getcwd())
    config_file = os.path.join(project_dir, PROJECT_FILE)

    toml_data = {}
    if os.path.isfile(config_file):
        try:
            with open(config_file, "rb") as f:
                toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise InvalidProjectError(f"Error reading {PROJECT_FILE}: {e}") from e
    else:
        print(f"   ⚠️  Warning: {PROJECT_FILE} not found at {config_file}")
        print("   ⚠️  Using default configuration values")

    project_data = toml_data.get("project", {})
    project = _select_kind(
        project_data,
        toml_data.get("plugin", {}),
        os.path.basename(project_dir),
    )
    metadata_file = project_data.get("metadata", DEFAULT_METADATA_FILE)
    keystore = project_data.get("keystore", DEFAULT_KEYSTORE_FILE)

    return ProjectConfig(
        project_dir=project_dir,
        project=project,
        store=MetadataStore(project_dir, metadata_file, environ),
        keystore_path=os.path.join(project_dir, keystore),
        android=_android_settings(toml_data.get("android", {})),
        environ=environ,
    )
