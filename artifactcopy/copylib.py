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

"""A library of random helper functionality."""

import os
import typing as T

from . import mlog

if T.TYPE_CHECKING:
    PathLike = T.Union[str, 'os.PathLike[str]']

class CopyException(Exception):
    '''Exceptions thrown by artifactcopy'''

    def __init__(self, *args: object, help: T.Optional[str] = None) -> None:
        super().__init__(*args)
        self.help = help

class OptionException(CopyException):
    '''A goal option was given a value that cannot be used'''

class ProjectException(CopyException):
    '''The project description could not be loaded'''

class MissingDestinationError(CopyException):
    '''No destination was given and the goal is not skipped'''

class MissingArtifactError(CopyException):
    '''No source was given and the project has no built artifact'''

class DestinationExistsError(CopyException):
    '''The destination exists and overwriting is disabled'''

    def __init__(self, dest: str) -> None:
        super().__init__(f'Destination file {dest} already exists and overwrite is disabled')
        self.dest = dest

class CopyIOError(CopyException):
    '''Filesystem failure while preparing or performing a copy'''

    def __init__(self, source: str, dest: str, cause: OSError) -> None:
        super().__init__(f'Failed to copy {source} to {dest}: {cause}')
        self.source = source
        self.dest = dest
        self.cause = cause

def canonical_path(path: 'PathLike') -> str:
    # Resolves symlinks and '..'. Paths that do not exist yet resolve as
    # far as they can.
    try:
        return os.path.realpath(os.path.abspath(path))
    except (OSError, ValueError):
        return os.path.abspath(path)

def expand_arguments(args: T.Iterable[str]) -> T.Optional[T.List[str]]:
    expanded_args = []  # type: T.List[str]
    for arg in args:
        if not arg.startswith('@'):
            expanded_args.append(arg)
            continue

        args_file = arg[1:]
        try:
            with open(args_file, encoding='utf-8') as f:
                extended_args = f.read().split()
            expanded_args += extended_args
        except OSError as e:
            mlog.error('Expanding command line arguments:', args_file, 'not found')
            mlog.exception(e)
            return None
    return expanded_args
