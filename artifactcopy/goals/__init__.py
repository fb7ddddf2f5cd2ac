# Copyright 2024 The artifactcopy development team

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# This file contains the base representation for goals run as build steps

import argparse
import importlib
import os
import typing as T

from ..copylib import CopyException
from ..coredata import GoalOption, resolve_goal_options

if T.TYPE_CHECKING:
    from ..project import Project

# Goal name -> module in this package
GOALS = {
    'copy-file': 'copyfile',
}


class GoalState:
    """Object passed to all goals.

    Goals should only reach the project and their option values through
    this object.
    """

    def __init__(self, project: 'Project', options: T.Dict[str, T.Any],
                 workdir: T.Optional[str] = None) -> None:
        self.project = project
        self.options = options
        self.workdir = workdir if workdir is not None else os.getcwd()

    def get_option(self, name: str) -> T.Any:
        try:
            return self.options[name]
        except KeyError:
            raise CopyException(f'Goal has no option named {name!r}')


class Goal:

    """Base class for goals.

    Subclasses set ``name``, ``option_prefix`` and ``options`` and
    implement ``execute``.
    """

    name = ''
    option_prefix = ''
    description = ''
    # Whether independent invocations may run in parallel
    thread_safe = False
    options = {}  # type: T.Dict[str, GoalOption[T.Any]]

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        for n, o in self.options.items():
            o.add_to_argparse(n, parser)

    def resolve_options(self, args: argparse.Namespace) -> T.Dict[str, T.Any]:
        return resolve_goal_options(self.option_prefix, self.options, args)

    def execute(self, state: GoalState) -> None:
        raise NotImplementedError(f'Goal {self.name} does not implement execute')


def get_goal(name: str) -> Goal:
    try:
        module_name = GOALS[name]
    except KeyError:
        raise CopyException(f'Unknown goal {name!r}')
    module = importlib.import_module('artifactcopy.goals.' + module_name)
    return module.initialize()
