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

from pathlib import Path
from unittest import TestCase
import os
import tempfile
import typing as T

import artifactcopy.mlog
from artifactcopy.project import INFO_DIR, PROJECT_INFO_FILE


class BaseCopyTests(TestCase):

    def setUp(self):
        super().setUp()
        self.maxDiff = None
        self._tmpdir = tempfile.TemporaryDirectory()
        self.workdir = self._tmpdir.name
        # Keep test output clean; tests that check output patch mlog.log
        artifactcopy.mlog.disable()

    def tearDown(self):
        artifactcopy.mlog.enable()
        artifactcopy.mlog.set_verbose()
        artifactcopy.mlog.shutdown()
        self._tmpdir.cleanup()
        super().tearDown()

    def path(self, *parts: str) -> str:
        return os.path.join(self.workdir, *parts)

    def write(self, relpath: str, data: bytes) -> str:
        p = Path(self.path(relpath))
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        return str(p)

    def read(self, relpath: str) -> bytes:
        return Path(self.path(relpath)).read_bytes()

    def write_project(self, builddir: str, artifact_file: T.Optional[str],
                      name: str = 'app') -> str:
        infodir = Path(builddir, INFO_DIR)
        infodir.mkdir(parents=True, exist_ok=True)
        fname = infodir / PROJECT_INFO_FILE
        artifact = 'null' if artifact_file is None else '"{}"'.format(artifact_file.replace('\\', '\\\\'))
        fname.write_text('{"name": "%s", "version": "1.0", "artifact": {"name": "%s.jar", "file": %s}}'
                         % (name, name, artifact), encoding='utf-8')
        return str(fname)

    def assertNotExists(self, path: str) -> None:
        self.assertFalse(os.path.lexists(path), f'{path} should not exist')
