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

import os
import typing as T
from collections import OrderedDict

from . import Goal, GoalState
from .. import copier
from ..coredata import GoalOption, UserBooleanOption, UserStringOption


class CopyFileGoal(Goal):

    name = 'copy-file'
    option_prefix = 'copy_file'
    description = 'Copy a file or the main artifact to a location'
    thread_safe = True
    options = OrderedDict([
        ('source_file', GoalOption(UserStringOption, 'Source file to copy. If not set, the main artifact will be copied', None)),
        ('dest_file',   GoalOption(UserStringOption, 'Destination location of the copied file. Required, unless skip is set', None)),
        ('overwrite',   GoalOption(UserBooleanOption, 'Overwrite a file if it exists in the dest_file location, otherwise give an error', True)),
        ('skip',        GoalOption(UserBooleanOption, 'Skip goal execution', False)),
    ])  # type: T.Dict[str, GoalOption[T.Any]]

    def _path(self, state: GoalState, value: T.Optional[str]) -> T.Optional[str]:
        if value is None:
            return None
        return os.path.join(state.workdir, os.path.expanduser(value))

    def request(self, state: GoalState) -> copier.CopyRequest:
        return copier.CopyRequest(
            source_file=self._path(state, state.get_option('source_file')),
            dest_file=self._path(state, state.get_option('dest_file')),
            overwrite=state.get_option('overwrite'),
            skip=state.get_option('skip'),
        )

    def execute(self, state: GoalState) -> None:
        copier.execute(self.request(state), state.project.artifact_path)


def initialize(*args: T.Any, **kwargs: T.Any) -> CopyFileGoal:
    return CopyFileGoal(*args, **kwargs)
