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

import os
import sys
import argparse

from flavorgo.utils.context.namespace import CliNameSpace
from flavorgo.utils.context.context import CliContext
from flavorgo.utils.context.command import CliCommand
from flavorgo.variant.errors import FlavorgoError
from flavorgo.variant.matrix import VariantMatrixBuilder
from flavorgo.variant.project import FLAVORS, PROJECT_FILE
from flavorgo.variant.version_code import allocate_version_codes


class Check(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to check the project configuration.

        Verifies that FLAVORGO.toml and the metadata file can be read, that
        every flavor gets a distinct version code, and reports which signing
        identity and publishing setup a release build would use.

        Examples:
            flavorgo check                          # Check current directory
            flavorgo check --project-dir ./plugin   # Check another project
        """

    def cli(self) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="flavorgo check",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--project-dir",
            type=str,
            default=None,
            help="Project root containing FLAVORGO.toml (default: current directory)",
        )
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        input_argv = [x for x in sys.argv[1:] if x != module_name]
        args, unknown = parser.parse_known_args(input_argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if args.project_dir:
            context.project_dir = args.project_dir

        print("=" * 70)
        print("Checking project configuration")
        print("=" * 70)

        try:
            config = context.project_config()
            project = config.project
            print(f"✓ {PROJECT_FILE}: {project.name} ({project.kind})")

            metadata = config.metadata
            print(f"✓ Metadata: {metadata.source} ({len(metadata)} keys)")

            codes = allocate_version_codes(project, metadata, FLAVORS)
            for flavor, code in codes.items():
                print(f"    {flavor:<14} versionCode {code}")

            plan = VariantMatrixBuilder(config).build()
        except FlavorgoError as e:
            print(f"✗ ERROR: {e}")
            sys.exit(1)

        print(f"✓ Variants: {len(plan.variants)} resolved, version codes distinct")

        signing = plan.signing_identity
        if signing.is_debug:
            print("⚠️  Signing: release builds fall back to the debug key")
        else:
            print(f"✓ Signing: release keystore {signing.store_location}")
            if not os.path.isfile(os.path.expanduser(signing.store_location)):
                print("⚠️  Release keystore file does not exist")
            if signing.key_alias is None:
                print("⚠️  ALIAS_NAME is not set")

        if plan.publishing.enabled:
            source = plan.publishing.credentials_file or "$ANDROID_PUBLISHER_CREDENTIALS"
            print(f"✓ Publishing: enabled ({source})")
        else:
            print("    Publishing: disabled (no publisher credentials)")
