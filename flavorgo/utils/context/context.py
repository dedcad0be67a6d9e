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
from typing import Optional

from flavorgo.variant.project import ProjectConfig, load_project_config


# This context data class to save the context of the command
class CliContext:
    def __init__(self, project_dir: Optional[str] = None, environ=None):
        self.project_dir = project_dir
        self.environ = environ
        self._config = None

    def project_config(self) -> ProjectConfig:
        """Load the project configuration once and reuse it afterwards."""
        if self._config is None:
            self._config = load_project_config(self.project_dir or os.getcwd(), self.environ)
        return self._config
