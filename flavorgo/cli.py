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
import importlib
import argparse

from flavorgo.utils.context.namespace import CliNameSpace
from flavorgo.utils.context.context import CliContext
from flavorgo.utils.context.command import CliCommand

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """FLAVORGO - Android Build Variant Resolver

Resolves the build plan of a multi-flavor, multi-architecture Android
project: version codes, version names, ABI splits, signing identity and
output file names, driven by project metadata and the invoked tasks.

USAGE:
    flavorgo <command> [options]

COMMANDS:
    resolve     Resolve the variant matrix for the given task names
    check       Check project configuration, signing and publishing

EXAMPLES:
    flavorgo resolve                          # Full matrix, release build
    flavorgo resolve assembleFdroidArm64Release
    flavorgo resolve --build-type debug --json
    flavorgo check                            # Validate configuration

For more information on a specific command:
    flavorgo <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith("_") and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def _parser(self, add_help: bool, nargs=None) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="flavorgo",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs=nargs,
            choices=self.get_command_list(),
        )
        return parser

    def cli(self) -> CliNameSpace:
        # help for the main command only, not for "flavorgo resolve --help"
        if len(sys.argv) == 2 and sys.argv[1] in ['--help', '-h']:
            self._parser(add_help=True).print_help()
            sys.exit(0)

        parser = self._parser(add_help=False, nargs='?')
        # parse only known args - this will NOT consume --help if present
        args, unknown = parser.parse_known_args(sys.argv[1:2], namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self._parser(add_help=True).print_help()
            sys.exit(1)

        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{args.subcommand}")
        klass = getattr(module, args.subcommand.capitalize())
        sub_cmd = klass()
        sub_cmd.exec(context, sub_cmd.cli())


def main():
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli())


if __name__ == "__main__":
    main()
