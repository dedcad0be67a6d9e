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
import json
import argparse

from flavorgo.utils.context.namespace import CliNameSpace
from flavorgo.utils.context.context import CliContext
from flavorgo.utils.context.command import CliCommand
from flavorgo.variant.errors import FlavorgoError
from flavorgo.variant.matrix import BUILD_TYPES, BuildPlan, VariantMatrixBuilder


class Resolve(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to resolve the build variant matrix.

        Task names are the ones passed to the Gradle invocation. A single
        task naming an architecture (arm64, arm, x64, x86) narrows the
        ABI split to that architecture; several tasks never narrow.

        Examples:
            flavorgo resolve                              # Full matrix
            flavorgo resolve assembleFdroidArm64Release   # arm64-v8a only
            flavorgo resolve assembleRelease check        # Full matrix
            flavorgo resolve --build-type debug --json    # Machine readable
        """

    def cli(self) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="flavorgo resolve",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "tasks",
            nargs="*",
            default=[],
            help="Invoked task names, in order",
        )
        parser.add_argument(
            "--build-type",
            type=str,
            choices=list(BUILD_TYPES),
            default="release",
            help="Build type to resolve (default: release)",
        )
        parser.add_argument(
            "--project-dir",
            type=str,
            default=None,
            help="Project root containing FLAVORGO.toml (default: current directory)",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the build plan as JSON",
        )
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        input_argv = [x for x in sys.argv[1:] if x != module_name]
        # task names may sit on either side of the options
        args, unknown = parser.parse_known_intermixed_args(input_argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if args.project_dir:
            context.project_dir = args.project_dir
        try:
            config = context.project_config()
            plan = VariantMatrixBuilder(config).build(args.tasks, args.build_type)
        except FlavorgoError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

        if args.json:
            print(json.dumps(plan.to_dict(), indent=2))
        else:
            self.print_plan(plan)

    def print_plan(self, plan: BuildPlan):
        project = plan.project
        print("=" * 70)
        print(f"Project: {project.name} ({project.kind})")
        print(f"Build type: {plan.build_type}")
        if plan.target_abi:
            print(f"Target ABI: {plan.target_abi} (narrowed by task name)")
        else:
            print("Target ABI: all")
        signing = plan.signing_identity
        print(f"Signing: {signing.name} ({signing.store_location})")
        if plan.publishing.enabled:
            print(f"Publishing: enabled, track '{plan.publishing.track}'")
        else:
            print("Publishing: disabled")
        print("=" * 70)

        for variant in plan.variants:
            print(f"\n{variant.name}")
            print(f"  applicationId: {variant.application_id}")
            print(f"  versionCode:   {variant.version_code}")
            print(f"  versionName:   {variant.version_name}")
            print(f"  ABIs:          {', '.join(variant.enabled_architectures)}")
            print(f"  output:        {variant.output_file_name}")
