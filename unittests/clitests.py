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

import io
import os
from contextlib import redirect_stdout
from unittest import mock

from artifactcopy import acmain, mlog
from artifactcopy.coredata import version
from artifactcopy.scripts import copy as copy_script

from .baseclass import BaseCopyTests


class CommandLineTests(BaseCopyTests):

    def run_cli(self, *args):
        return acmain.run(list(args))

    def test_copy_file_explicit_paths(self):
        src = self.write('a/app.jar', b'0123456789')
        dest = self.path('b', 'c', 'app-out.jar')
        self.assertEqual(self.run_cli('copy-file', '-C', self.workdir,
                                      '--source-file', src, '--dest-file', dest), 0)
        self.assertEqual(self.read('b/c/app-out.jar'), b'0123456789')

    def test_copy_file_main_artifact(self):
        self.write('target/app.jar', b'artifact')
        self.write_project(self.workdir, 'target/app.jar')
        dest = self.path('dist', 'app.jar')
        self.assertEqual(self.run_cli('copy-file', '-C', self.workdir, '-Dcopy_file.dest_file=' + dest), 0)
        self.assertEqual(self.read('dist/app.jar'), b'artifact')

    def test_project_file(self):
        self.write('target/app.jar', b'artifact')
        desc = self.write('desc.json', b'{"artifact": {"file": "target/app.jar"}}')
        dest = self.path('dist', 'app.jar')
        self.assertEqual(self.run_cli('copy-file', '--project-file', desc, '--dest-file', dest), 0)
        self.assertEqual(self.read('dist/app.jar'), b'artifact')

    def test_missing_artifact_reports_help(self):
        self.write_project(self.workdir, None)
        mlog.enable()
        out = io.StringIO()
        with redirect_stdout(out):
            ret = self.run_cli('copy-file', '-C', self.workdir, '--dest-file', self.path('x.jar'))
        self.assertEqual(ret, 1)
        self.assertIn('has not been built yet', out.getvalue())
        self.assertIn("specify the 'source_file' parameter", out.getvalue())

    def test_missing_destination(self):
        src = self.write('a.jar', b'a')
        self.assertEqual(self.run_cli('copy-file', '-C', self.workdir, '--source-file', src), 1)

    def test_destination_exists(self):
        src = self.write('a.jar', b'X')
        dest = self.write('b.jar', b'Y')
        ret = self.run_cli('copy-file', '-C', self.workdir, '--source-file', src,
                           '--dest-file', dest, '-Dcopy_file.overwrite=false')
        self.assertEqual(ret, 1)
        self.assertEqual(self.read('b.jar'), b'Y')

    def test_skip(self):
        self.assertEqual(self.run_cli('copy-file', '-C', self.workdir, '--skip'), 0)
        self.assertEqual(os.listdir(self.workdir), [])

    def test_option_error(self):
        self.assertEqual(self.run_cli('copy-file', '-C', self.workdir, '-Dcopy_file.bogus=1'), 1)

    def test_log_file(self):
        src = self.write('a.jar', b'a')
        logdir = self.path('logs')
        ret = self.run_cli('copy-file', '-C', self.workdir, '--log-dir', logdir,
                           '--source-file', src, '--dest-file', self.path('b.jar'))
        self.assertEqual(ret, 0)
        with open(os.path.join(logdir, mlog.log_fname), encoding='utf-8') as f:
            content = f.read()
        self.assertIn('Copying', content)
        self.assertNotIn('\033[', content)

    def test_quiet(self):
        src = self.write('a.jar', b'a')
        mlog.enable()
        out = io.StringIO()
        with redirect_stdout(out):
            ret = self.run_cli('copy-file', '-q', '-C', self.workdir,
                               '--source-file', src, '--dest-file', self.path('b.jar'))
        self.assertEqual(ret, 0)
        self.assertEqual(out.getvalue(), '')

    def test_nested_prefix(self):
        src = self.write('a.jar', b'a')
        mlog.enable()
        out = io.StringIO()
        with redirect_stdout(out):
            self.run_cli('copy-file', '-C', self.workdir,
                         '--source-file', src, '--dest-file', self.path('b.jar'))
        self.assertTrue(out.getvalue().startswith('[copy-file] Copying'))

    def test_response_file(self):
        src = self.write('a.jar', b'resp')
        rsp = self.write('args.rsp', '--source-file {} --dest-file {}'.format(src, self.path('r.jar')).encode())
        self.assertEqual(self.run_cli('copy-file', '-C', self.workdir, '@' + rsp), 0)
        self.assertEqual(self.read('r.jar'), b'resp')

    def test_goals_command(self):
        mlog.enable()
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(self.run_cli('goals'), 0)
        self.assertIn('copy-file', out.getvalue())
        self.assertIn('thread-safe', out.getvalue())

    def test_version(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit):
            self.run_cli('--version')
        self.assertEqual(out.getvalue().strip(), version)

    def test_unexpected_exception(self):
        with mock.patch('artifactcopy.copier.execute', side_effect=RuntimeError('boom')), \
                mock.patch('traceback.print_exc') as print_exc:
            ret = self.run_cli('copy-file', '-C', self.workdir, '--skip')
        self.assertEqual(ret, 2)
        print_exc.assert_called_once_with()

    def test_force_backtrace(self):
        with mock.patch.dict(os.environ, {'ARTIFACTCOPY_FORCE_BACKTRACE': '1'}):
            with self.assertRaises(Exception):
                self.run_cli('copy-file', '-C', self.workdir)


class InternalScriptTests(BaseCopyTests):

    def test_internal_copy(self):
        src = self.write('a.bin', b'internal')
        dest = self.path('x', 'y.bin')
        self.assertEqual(acmain.run(['--internal', 'copy', src, dest]), 0)
        self.assertEqual(self.read('x/y.bin'), b'internal')

    def test_internal_copy_no_overwrite(self):
        src = self.write('a.bin', b'new')
        dest = self.write('b.bin', b'old')
        self.assertEqual(copy_script.run([src, dest, '--no-overwrite']), 1)
        self.assertEqual(self.read('b.bin'), b'old')

    def test_internal_copy_missing_source(self):
        self.assertEqual(copy_script.run([self.path('nope'), self.path('out')]), 1)

    def test_internal_copy_error_reported_once(self):
        with mock.patch('artifactcopy.mlog.exception') as exception, \
                mock.patch('artifactcopy.mlog.error') as error:
            ret = acmain.run(['--internal', 'copy', self.path('nope'), self.path('out')])
        self.assertEqual(ret, 1)
        exception.assert_called_once()
        error.assert_not_called()

    def test_unknown_script(self):
        self.assertEqual(acmain.run(['--internal', 'no_such_script']), 1)
