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

"""The project context the build host hands to goals.

The host writes a description of the project into the build directory,
``<builddir>/artifactcopy-info/intro-project.json``::

    {
        "name": "app",
        "version": "1.2",
        "artifact": {"name": "app.jar", "file": "target/app.jar"}
    }

``artifact.file`` is null (or missing) until the main artifact has been
built. Relative paths are relative to the build directory.
"""

import json
import os
import typing as T

from . import mlog
from .copylib import ProjectException

INFO_DIR = 'artifactcopy-info'
PROJECT_INFO_FILE = 'intro-project.json'


class Artifact:
    def __init__(self, name: str, file: T.Optional[str] = None) -> None:
        self.name = name
        self.file = file

    def __repr__(self) -> str:
        return f'<Artifact {self.name!r}: {self.file!r}>'


class Project:
    def __init__(self, name: str, version: str = 'undefined',
                 build_dir: T.Optional[str] = None,
                 artifact: T.Optional[Artifact] = None) -> None:
        self.name = name
        self.version = version
        self.build_dir = build_dir if build_dir is not None else os.getcwd()
        self.artifact = artifact if artifact is not None else Artifact(name)

    def artifact_path(self) -> T.Optional[str]:
        if self.artifact.file is None:
            return None
        return os.path.join(self.build_dir, self.artifact.file)

    def __repr__(self) -> str:
        return f'<Project {self.name!r} {self.version!r} in {self.build_dir!r}>'


def get_infodir(builddir: T.Optional[str] = None) -> str:
    if builddir is not None:
        return os.path.join(builddir, INFO_DIR)
    return INFO_DIR


def get_info_file(infodir: str) -> str:
    return os.path.join(infodir, PROJECT_INFO_FILE)


def _from_dict(data: T.Any, build_dir: str, fname: str) -> Project:
    if not isinstance(data, dict):
        raise ProjectException(f'{fname} does not contain a JSON object')
    artifact_data = data.get('artifact') or {}
    if not isinstance(artifact_data, dict):
        raise ProjectException(f'"artifact" in {fname} must be an object')
    name = str(data.get('name', os.path.basename(os.path.abspath(build_dir))))
    file = artifact_data.get('file')
    if file is not None and not isinstance(file, str):
        raise ProjectException(f'"artifact.file" in {fname} must be a string or null')
    artifact = Artifact(str(artifact_data.get('name', name)), file)
    return Project(name, str(data.get('version', 'undefined')), build_dir, artifact)


def load_project_file(fname: str, build_dir: T.Optional[str] = None) -> Project:
    if build_dir is None:
        build_dir = os.path.dirname(os.path.abspath(fname))
    try:
        with open(fname, encoding='utf-8') as fp:
            data = json.load(fp)
    except json.JSONDecodeError as e:
        raise ProjectException(f'Malformed project description {fname}: {e}')
    except OSError as e:
        raise ProjectException(f'Could not read project description {fname}: {e}')
    project = _from_dict(data, os.path.abspath(build_dir), fname)
    mlog.debug('Loaded', repr(project), 'with', repr(project.artifact))
    return project


def load_project(build_dir: str) -> Project:
    fname = get_info_file(get_infodir(build_dir))
    if not os.path.isfile(fname):
        # Nothing has been built here yet
        mlog.debug('No project description at', fname)
        return Project(os.path.basename(os.path.abspath(build_dir)), build_dir=os.path.abspath(build_dir))
    return load_project_file(fname, build_dir)
