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

"""Helper script to copy one file from other build steps.

Same semantics as the copy-file goal, without the project context or
option handling: both paths are required.
"""

from __future__ import annotations

import argparse
import typing as T

from .. import copier, mlog
from ..copylib import CopyException

if T.TYPE_CHECKING:
    from typing_extensions import Protocol

    class Args(Protocol):
        source: str
        dest: str
        no_overwrite: bool


def _no_artifact() -> None:
    return None


def run(raw_args: T.List[str]) -> int:
    parser = argparse.ArgumentParser(prog='artifactcopy --internal copy')
    parser.add_argument('source')
    parser.add_argument('dest')
    parser.add_argument('--no-overwrite', action='store_true',
                        help='fail instead of replacing an existing destination')
    args: Args = parser.parse_args(raw_args)

    request = copier.CopyRequest(args.source, args.dest, overwrite=not args.no_overwrite)
    try:
        copier.execute(request, _no_artifact)
    except CopyException as e:
        mlog.exception(e)
        return 1
    return 0
