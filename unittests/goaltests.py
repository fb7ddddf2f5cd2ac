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
import unittest

from artifactcopy.copylib import CopyException, MissingArtifactError, MissingDestinationError
from artifactcopy.goals import GOALS, Goal, GoalState, get_goal
from artifactcopy.goals.copyfile import CopyFileGoal
from artifactcopy.project import Artifact, Project

from .baseclass import BaseCopyTests


def options(**kwargs):
    values = {'source_file': None, 'dest_file': None, 'overwrite': True, 'skip': False}
    values.update(kwargs)
    return values


class GoalRegistryTests(unittest.TestCase):

    def test_get_goal(self):
        goal = get_goal('copy-file')
        self.assertIsInstance(goal, CopyFileGoal)
        self.assertEqual(goal.name, 'copy-file')
        self.assertTrue(goal.thread_safe)

    def test_every_registered_goal_loads(self):
        for name in GOALS:
            with self.subTest(name=name):
                self.assertEqual(get_goal(name).name, name)

    def test_unknown_goal(self):
        with self.assertRaises(CopyException):
            get_goal('copy-tree')

    def test_base_goal_is_abstract(self):
        with self.assertRaises(NotImplementedError):
            Goal().execute(GoalState(Project('p'), {}))

    def test_unknown_option(self):
        state = GoalState(Project('p'), options())
        with self.assertRaises(CopyException):
            state.get_option('dest')


class CopyFileGoalTests(BaseCopyTests):

    def state(self, artifact_file=None, **kwargs):
        p = Project('app', '1.0', self.workdir, Artifact('app.jar', artifact_file))
        return GoalState(p, options(**kwargs), workdir=self.workdir)

    def test_copies_main_artifact(self):
        self.write('target/app.jar', b'artifact')
        CopyFileGoal().execute(self.state('target/app.jar', dest_file='dist/app.jar'))
        self.assertEqual(self.read('dist/app.jar'), b'artifact')

    def test_paths_relative_to_workdir(self):
        self.write('src.txt', b'hello')
        state = self.state(source_file='src.txt', dest_file='out/dst.txt')
        request = CopyFileGoal().request(state)
        self.assertEqual(request.source_file, os.path.join(self.workdir, 'src.txt'))
        self.assertEqual(request.dest_file, os.path.join(self.workdir, 'out/dst.txt'))
        CopyFileGoal().execute(state)
        self.assertEqual(self.read('out/dst.txt'), b'hello')

    def test_artifact_not_built(self):
        with self.assertRaises(MissingArtifactError):
            CopyFileGoal().execute(self.state(None, dest_file='dist/app.jar'))

    def test_missing_destination(self):
        self.write('target/app.jar', b'artifact')
        with self.assertRaises(MissingDestinationError):
            CopyFileGoal().execute(self.state('target/app.jar'))

    def test_skip(self):
        CopyFileGoal().execute(self.state(None, skip=True))
        self.assertEqual(os.listdir(self.workdir), [])

    def test_request_carries_flags(self):
        request = CopyFileGoal().request(self.state(dest_file='x', overwrite=False, skip=True))
        self.assertFalse(request.overwrite)
        self.assertTrue(request.skip)
        self.assertIsNone(request.source_file)
