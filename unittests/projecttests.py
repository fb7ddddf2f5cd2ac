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

from artifactcopy import project
from artifactcopy.copylib import ProjectException

from .baseclass import BaseCopyTests


class ProjectTests(BaseCopyTests):

    def test_artifact_path_relative_to_builddir(self):
        self.write_project(self.workdir, 'target/app.jar')
        p = project.load_project(self.workdir)
        self.assertEqual(p.name, 'app')
        self.assertEqual(p.version, '1.0')
        self.assertEqual(p.artifact.name, 'app.jar')
        self.assertEqual(p.artifact_path(), os.path.join(os.path.abspath(self.workdir), 'target/app.jar'))

    def test_absolute_artifact_path(self):
        artifact = self.path('elsewhere', 'app.jar')
        self.write_project(self.path('build'), artifact)
        p = project.load_project(self.path('build'))
        self.assertEqual(p.artifact_path(), artifact)

    def test_artifact_not_built(self):
        self.write_project(self.workdir, None)
        self.assertIsNone(project.load_project(self.workdir).artifact_path())

    def test_no_description(self):
        p = project.load_project(self.workdir)
        self.assertEqual(p.name, os.path.basename(self.workdir))
        self.assertIsNone(p.artifact_path())

    def test_malformed_description(self):
        os.makedirs(project.get_infodir(self.workdir))
        with open(project.get_info_file(project.get_infodir(self.workdir)), 'w', encoding='utf-8') as f:
            f.write('{"name": ')
        with self.assertRaises(ProjectException):
            project.load_project(self.workdir)

    def test_wrong_types(self):
        for content in ['[]', '{"artifact": 3}', '{"artifact": {"file": 3}}']:
            fname = self.write('desc.json', content.encode())
            with self.subTest(content=content):
                with self.assertRaises(ProjectException):
                    project.load_project_file(fname)

    def test_explicit_file_defaults_to_its_directory(self):
        fname = self.write('conf/desc.json', b'{"name": "lib", "artifact": {"file": "lib.so"}}')
        p = project.load_project_file(fname)
        self.assertEqual(p.artifact.name, 'lib')
        self.assertEqual(p.version, 'undefined')
        self.assertEqual(p.artifact_path(), os.path.join(self.path('conf'), 'lib.so'))

    def test_explicit_file_with_builddir(self):
        fname = self.write('conf/desc.json', b'{"artifact": {"file": "lib.so"}}')
        p = project.load_project_file(fname, self.path('build'))
        self.assertEqual(p.artifact_path(), os.path.join(self.path('build'), 'lib.so'))

    def test_unreadable_file(self):
        with self.assertRaises(ProjectException):
            project.load_project_file(self.path('missing.json'))
