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
Signing identity and publishing resolution.

Secrets are looked up in local overrides first and in the environment
second:
    KEYSTORE_PASS   keystore password
    ALIAS_NAME      key alias
    ALIAS_PASS      key password

Release signing is used only when KEYSTORE_PASS resolves. Otherwise the
release build type falls back to the debug identity.
"""

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

RELEASE = "release"
DEBUG = "debug"

KEYSTORE_PASS = "KEYSTORE_PASS"
ALIAS_NAME = "ALIAS_NAME"
ALIAS_PASS = "ALIAS_PASS"

PUBLISHER_CREDENTIALS_ENV = "ANDROID_PUBLISHER_CREDENTIALS"
SERVICE_ACCOUNT_FILE = "service_account_credentials.json"


@dataclass(frozen=True)
class SigningIdentity:
    name: str
    store_location: str
    store_password: Optional[str]
    key_alias: Optional[str]
    key_password: Optional[str]

    @property
    def is_debug(self) -> bool:
        return self.name == DEBUG

    def to_dict(self) -> Dict[str, Optional[str]]:
        # passwords are never printed
        return {
            "name": self.name,
            "store_location": self.store_location,
            "key_alias": self.key_alias,
        }


# Android's well-known debug keystore.
DEBUG_SIGNING_IDENTITY = SigningIdentity(
    name=DEBUG,
    store_location=os.path.join("~", ".android", "debug.keystore"),
    store_password="android",
    key_alias="androiddebugkey",
    key_password="android",
)


class SigningConfigs:
    """Named signing identities available to the build, plus the chosen one."""

    def __init__(self):
        self._configs = {DEBUG: DEBUG_SIGNING_IDENTITY}
        self.selected = None

    def create(self, identity: SigningIdentity) -> SigningIdentity:
        self._configs[identity.name] = identity
        return identity

    def get(self, name: str) -> Optional[SigningIdentity]:
        return self._configs.get(name)

    def names(self):
        return list(self._configs)

    def select(self, name: str) -> SigningIdentity:
        self.selected = self._configs[name]
        return self.selected


def lookup_secret(key: str, local_properties: Mapping[str, str],
                  environ: Mapping[str, str]) -> Optional[str]:
    value = local_properties.get(key)
    if value is not None:
        return value
    return environ.get(key)


def resolve_signing_identity(keystore_path: str, local_properties: Mapping[str, str],
                             environ: Optional[Mapping[str, str]] = None,
                             configs: Optional[SigningConfigs] = None) -> SigningIdentity:
    """
    Choose the identity release artifacts are signed with.

    Alias and key password are not validated here: when only the keystore
    password resolves they are passed through as None.

    Args:
        keystore_path: Location of the release keystore
        local_properties: Machine-local overrides
        environ: Environment mapping (default: os.environ)
        configs: Registry to record the choice in (default: a new one)

    Returns:
        The release identity, or DEBUG_SIGNING_IDENTITY
    """
    if environ is None:
        environ = os.environ
    if configs is None:
        configs = SigningConfigs()

    store_password = lookup_secret(KEYSTORE_PASS, local_properties, environ)
    if store_password is None:
        print(f"   ⚠️  Warning: {KEYSTORE_PASS} not set, release builds use the debug key")
        return configs.select(DEBUG)

    configs.create(SigningIdentity(
        name=RELEASE,
        store_location=keystore_path,
        store_password=store_password,
        key_alias=lookup_secret(ALIAS_NAME, local_properties, environ),
        key_password=lookup_secret(ALIAS_PASS, local_properties, environ),
    ))
    return configs.select(RELEASE)


@dataclass(frozen=True)
class PublishingConfig:
    enabled: bool = False
    credentials_file: Optional[str] = None
    track: str = "beta"
    default_to_app_bundles: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "enabled": self.enabled,
            "credentials_file": self.credentials_file,
            "track": self.track,
            "default_to_app_bundles": self.default_to_app_bundles,
        }


def resolve_publishing(project_dir: str,
                       environ: Optional[Mapping[str, str]] = None) -> PublishingConfig:
    """
    Detect whether the store publishing step can be enabled.

    A service account file in the project root wins; otherwise the mere
    presence of ANDROID_PUBLISHER_CREDENTIALS enables publishing and the
    publisher reads the credentials itself.
    """
    if environ is None:
        environ = os.environ
    credentials_file = os.path.join(project_dir, SERVICE_ACCOUNT_FILE)
    if os.path.isfile(credentials_file):
        return PublishingConfig(enabled=True, credentials_file=credentials_file)
    if PUBLISHER_CREDENTIALS_ENV in environ:
        return PublishingConfig(enabled=True)
    return PublishingConfig()
