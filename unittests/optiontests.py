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

import argparse
import unittest

from artifactcopy.coredata import (
    GoalOption, UserBooleanOption, UserStringOption, create_options_dict,
    register_builtin_arguments, resolve_goal_options,
)
from artifactcopy.copylib import OptionException
from artifactcopy.goals.copyfile import CopyFileGoal

from .baseclass import BaseCopyTests


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    register_builtin_arguments(parser)
    CopyFileGoal().add_arguments(parser)
    return parser


class UserOptionTests(unittest.TestCase):

    def test_boolean_values(self):
        opt = UserBooleanOption('An option', True)
        self.assertEqual(opt.description, 'An option')
        self.assertTrue(opt.value)
        for raw, expected in [('true', True), ('FALSE', False), ('True', True), (False, False)]:
            with self.subTest(raw=raw):
                opt.set_value(raw)
                self.assertEqual(opt.value, expected)

    def test_boolean_rejects_garbage(self):
        opt = UserBooleanOption('An option', False)
        with self.assertRaises(OptionException):
            opt.set_value('yes')
        with self.assertRaises(OptionException):
            opt.set_value(1)

    def test_string_unset(self):
        self.assertIsNone(UserStringOption('A path', None).value)
        self.assertIsNone(UserStringOption('A path', '').value)
        self.assertEqual(UserStringOption('A path', 'a/b').value, 'a/b')
        with self.assertRaises(OptionException):
            UserStringOption('A path', 3)

    def test_goal_option_default(self):
        opt = GoalOption(UserBooleanOption, 'Skip goal execution', False)
        self.assertFalse(opt.init_option().value)
        self.assertTrue(opt.init_option('true').value)

    def test_argparse_names(self):
        self.assertEqual(GoalOption.argparse_name_to_arg('dest_file'), '--dest-file')

    def test_create_options_dict(self):
        self.assertEqual(create_options_dict(['a.b=c', 'x.y=1=2']), {'a.b': 'c', 'x.y': '1=2'})
        with self.assertRaises(OptionException):
            create_options_dict(['novalue'])


class ResolveOptionsTests(BaseCopyTests):

    def resolve(self, args):
        goal = CopyFileGoal()
        return resolve_goal_options(goal.option_prefix, goal.options, make_parser().parse_args(args))

    def test_defaults(self):
        self.assertEqual(self.resolve([]), {
            'source_file': None,
            'dest_file': None,
            'overwrite': True,
            'skip': False,
        })

    def test_d_options(self):
        values = self.resolve(['-Dcopy_file.dest_file=out/app.jar',
                               '-Dcopy_file.overwrite=false',
                               '-Dcopy_file.skip=true'])
        self.assertEqual(values['dest_file'], 'out/app.jar')
        self.assertFalse(values['overwrite'])
        self.assertTrue(values['skip'])

    def test_flags(self):
        values = self.resolve(['--source-file', 'a.jar', '--dest-file', 'b.jar', '--skip'])
        self.assertEqual(values['source_file'], 'a.jar')
        self.assertEqual(values['dest_file'], 'b.jar')
        self.assertTrue(values['skip'])

    def test_flag_and_d_option_conflict(self):
        with self.assertRaises(OptionException) as cm:
            self.resolve(['--dest-file', 'b.jar', '-Dcopy_file.dest_file=c.jar'])
        self.assertIn('Pick one', str(cm.exception))

    def test_unknown_option(self):
        with self.assertRaises(OptionException):
            self.resolve(['-Dcopy_file.dest=b.jar'])

    def test_bad_boolean(self):
        with self.assertRaises(OptionException):
            self.resolve(['-Dcopy_file.overwrite=maybe'])

    def test_options_file(self):
        fname = self.path('options.ini')
        with open(fname, 'w', encoding='utf-8') as f:
            f.write('[options]\n'
                    'copy_file.dest_file = from-file.jar\n'
                    'copy_file.overwrite = false\n')
        values = self.resolve(['--options-file', fname])
        self.assertEqual(values['dest_file'], 'from-file.jar')
        self.assertFalse(values['overwrite'])

    def test_d_option_beats_options_file(self):
        fname = self.path('options.ini')
        with open(fname, 'w', encoding='utf-8') as f:
            f.write('[options]\ncopy_file.dest_file = from-file.jar\n')
        values = self.resolve(['--options-file', fname, '-Dcopy_file.dest_file=from-d.jar'])
        self.assertEqual(values['dest_file'], 'from-d.jar')

    def test_missing_options_file(self):
        with self.assertRaises(OptionException):
            self.resolve(['--options-file', self.path('nope.ini')])

    def test_options_file_without_section(self):
        fname = self.path('options.ini')
        with open(fname, 'w', encoding='utf-8') as f:
            f.write('[properties]\nunrelated = 1\n')
        self.assertEqual(self.resolve(['--options-file', fname])['dest_file'], None)
