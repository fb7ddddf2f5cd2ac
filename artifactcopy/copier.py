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

"""Copy a single file, usually the main build artifact, to a location.

There is no locking here. Concurrent calls are fine as long as each one
targets its own destination; calls sharing a destination race and the
last replace wins.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import typing as T
from dataclasses import dataclass

from . import mlog
from .copylib import (
    CopyIOError, DestinationExistsError, MissingArtifactError,
    MissingDestinationError, canonical_path,
)

if T.TYPE_CHECKING:
    from .copylib import PathLike

    ArtifactPathProvider = T.Callable[[], T.Optional[PathLike]]


@dataclass(frozen=True)
class CopyRequest:

    source_file: T.Optional[PathLike] = None
    dest_file: T.Optional[PathLike] = None
    overwrite: bool = True
    skip: bool = False


def resolve_source(request: CopyRequest, artifact_path_provider: ArtifactPathProvider) -> str:
    if request.source_file is not None:
        return os.fspath(request.source_file)
    source = artifact_path_provider()
    if source is None:
        raise MissingArtifactError(
            'The main artifact has not been built yet, cannot copy it.',
            help='Either run this goal after the main artifact is built (in or after the package phase),'
                 " or specify the 'source_file' parameter")
    return os.fspath(source)


def _copy_replacing(source: str, dest: str) -> None:
    with open(source, 'rb') as fsrc:
        # Stage next to the destination so os.replace stays on one filesystem.
        fd, tmp = tempfile.mkstemp(prefix='.' + os.path.basename(dest) + '.',
                                   suffix='.tmp', dir=os.path.dirname(dest))
        try:
            with os.fdopen(fd, 'wb') as fdst:
                shutil.copyfileobj(fsrc, fdst)
            shutil.copymode(source, tmp)
            os.replace(tmp, dest)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise


def _copy_exclusive(source: str, dest: str) -> None:
    # Open the source first: a missing source must not leave an empty
    # destination behind.
    with open(source, 'rb') as fsrc:
        try:
            fdst = open(dest, 'xb')
        except FileExistsError:
            raise DestinationExistsError(dest) from None
        try:
            with fdst:
                shutil.copyfileobj(fsrc, fdst)
            shutil.copymode(source, dest)
        except BaseException:
            os.unlink(dest)
            raise


def execute(request: CopyRequest, artifact_path_provider: ArtifactPathProvider) -> None:
    if request.skip:
        mlog.log('Goal is skipped')
        return

    source = resolve_source(request, artifact_path_provider)
    if request.dest_file is None:
        raise MissingDestinationError('The dest_file parameter is not set but is required')
    dest = os.path.abspath(request.dest_file)

    try:
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        mlog.log('Copying', mlog.bold(canonical_path(source)), 'to', mlog.bold(canonical_path(dest)))
        if request.overwrite:
            if os.path.exists(dest) and os.path.samefile(source, dest):
                mlog.warning('Source and destination are the same file, nothing to copy')
                return
            _copy_replacing(source, dest)
        else:
            _copy_exclusive(source, dest)
    except OSError as e:
        raise CopyIOError(source, os.fspath(request.dest_file), e) from e
