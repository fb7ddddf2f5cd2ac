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
import stat
import tempfile
import threading
from unittest import mock

from artifactcopy import copier
from artifactcopy.copier import CopyRequest
from artifactcopy.copylib import (
    CopyIOError, DestinationExistsError, MissingArtifactError,
    MissingDestinationError, canonical_path,
)

from .baseclass import BaseCopyTests


def no_artifact():
    return None


class CopierTests(BaseCopyTests):

    def test_copy_creates_parent_directories(self):
        src = self.write('a/app.jar', b'0123456789')
        dest = self.path('b', 'c', 'app-out.jar')
        copier.execute(CopyRequest(src, dest), no_artifact)
        self.assertTrue(os.path.isdir(self.path('b', 'c')))
        self.assertEqual(self.read('b/c/app-out.jar'), b'0123456789')

    def test_copy_is_byte_exact(self):
        data = bytes(range(256)) * 4096 + b'\r\n\x00tail'
        src = self.write('in/blob.bin', data)
        dest = self.path('out', 'blob.bin')
        copier.execute(CopyRequest(src, dest), no_artifact)
        self.assertEqual(self.read('out/blob.bin'), data)

    def test_empty_file(self):
        src = self.write('empty', b'')
        dest = self.path('copy')
        copier.execute(CopyRequest(src, dest), no_artifact)
        self.assertEqual(self.read('copy'), b'')

    def test_skip_does_nothing(self):
        provider = mock.Mock(return_value=None)
        dest = self.path('never', 'here.jar')
        for request in [CopyRequest(skip=True),
                        CopyRequest(self.path('missing'), dest, skip=True),
                        CopyRequest(None, dest, overwrite=False, skip=True)]:
            with self.subTest(request=request):
                copier.execute(request, provider)
                self.assertNotExists(self.path('never'))
        provider.assert_not_called()

    def test_skip_logs(self):
        with mock.patch('artifactcopy.mlog.log') as log:
            copier.execute(CopyRequest(skip=True), no_artifact)
        log.assert_called_once_with('Goal is skipped')

    def test_missing_destination(self):
        src = self.write('a/app.jar', b'x')
        before = sorted(os.listdir(self.workdir))
        with self.assertRaises(MissingDestinationError):
            copier.execute(CopyRequest(src, None), no_artifact)
        self.assertEqual(sorted(os.listdir(self.workdir)), before)

    def test_missing_artifact(self):
        with self.assertRaises(MissingArtifactError) as cm:
            copier.execute(CopyRequest(None, self.path('dest.jar')), no_artifact)
        self.assertIn('has not been built yet', str(cm.exception))
        self.assertIn("specify the 'source_file' parameter", cm.exception.help)
        self.assertNotExists(self.path('dest.jar'))

    def test_missing_artifact_reported_before_missing_destination(self):
        with self.assertRaises(MissingArtifactError):
            copier.execute(CopyRequest(), no_artifact)

    def test_artifact_provider_used_when_no_source(self):
        src = self.write('target/app.jar', b'artifact')
        dest = self.path('dist', 'app.jar')
        provider = mock.Mock(return_value=src)
        copier.execute(CopyRequest(None, dest), provider)
        provider.assert_called_once_with()
        self.assertEqual(self.read('dist/app.jar'), b'artifact')

    def test_explicit_source_wins_over_artifact(self):
        src = self.write('explicit.txt', b'explicit')
        provider = mock.Mock(return_value=self.write('artifact.txt', b'artifact'))
        copier.execute(CopyRequest(src, self.path('out.txt')), provider)
        provider.assert_not_called()
        self.assertEqual(self.read('out.txt'), b'explicit')

    def test_overwrite_replaces_existing(self):
        src = self.write('src.jar', b'new content')
        dest = self.write('dest/app.jar', b'old content that is longer')
        copier.execute(CopyRequest(src, dest, overwrite=True), no_artifact)
        self.assertEqual(self.read('dest/app.jar'), b'new content')
        # no staging files left behind
        self.assertEqual(os.listdir(self.path('dest')), ['app.jar'])

    def test_no_overwrite_keeps_existing(self):
        src = self.write('src.jar', b'X')
        dest = self.write('dest/app.jar', b'Y')
        with self.assertRaises(DestinationExistsError) as cm:
            copier.execute(CopyRequest(src, dest, overwrite=False), no_artifact)
        self.assertEqual(cm.exception.dest, dest)
        self.assertEqual(self.read('dest/app.jar'), b'Y')

    def test_no_overwrite_to_new_file(self):
        src = self.write('src.jar', b'X')
        dest = self.path('dest', 'app.jar')
        copier.execute(CopyRequest(src, dest, overwrite=False), no_artifact)
        self.assertEqual(self.read('dest/app.jar'), b'X')

    def test_missing_source_is_io_error(self):
        src = self.path('does-not-exist.jar')
        dest = self.path('out', 'app.jar')
        for overwrite in [True, False]:
            with self.subTest(overwrite=overwrite):
                with self.assertRaises(CopyIOError) as cm:
                    copier.execute(CopyRequest(src, dest, overwrite=overwrite), no_artifact)
                self.assertIsInstance(cm.exception.__cause__, FileNotFoundError)
                self.assertIs(cm.exception.cause, cm.exception.__cause__)
                self.assertEqual(cm.exception.source, src)
                self.assertEqual(cm.exception.dest, dest)
                self.assertIn('Failed to copy', str(cm.exception))
                self.assertNotExists(dest)
                self.assertEqual(os.listdir(self.path('out')), [])

    def test_directory_source_is_io_error(self):
        os.makedirs(self.path('adir'))
        with self.assertRaises(CopyIOError):
            copier.execute(CopyRequest(self.path('adir'), self.path('out')), no_artifact)
        self.assertNotExists(self.path('out'))

    def test_parent_is_a_file(self):
        src = self.write('src', b'data')
        self.write('blocker', b'')
        with self.assertRaises(CopyIOError):
            copier.execute(CopyRequest(src, self.path('blocker', 'dest')), no_artifact)

    def test_failed_overwrite_leaves_destination(self):
        src = self.write('src', b'new')
        dest = self.write('dest', b'old')
        with mock.patch('shutil.copyfileobj', side_effect=OSError(28, 'No space left on device')):
            with self.assertRaises(CopyIOError):
                copier.execute(CopyRequest(src, dest), no_artifact)
        self.assertEqual(self.read('dest'), b'old')
        self.assertEqual(sorted(os.listdir(self.workdir)), ['dest', 'src'])

    def test_missing_source_creates_no_staging_file(self):
        dest = self.path('out', 'app.jar')
        with mock.patch('tempfile.mkstemp', wraps=tempfile.mkstemp) as mkstemp:
            for _ in range(5):
                with self.assertRaises(CopyIOError):
                    copier.execute(CopyRequest(self.path('missing.jar'), dest), no_artifact)
        mkstemp.assert_not_called()
        self.assertEqual(os.listdir(self.path('out')), [])

    def test_failed_overwrite_closes_staging_file(self):
        src = self.write('src', b'new')
        dest = self.write('dest', b'old')
        opened = []
        real_mkstemp = tempfile.mkstemp

        def recording_mkstemp(*args, **kwargs):
            fd, tmp = real_mkstemp(*args, **kwargs)
            opened.append(fd)
            return fd, tmp

        with mock.patch('tempfile.mkstemp', side_effect=recording_mkstemp), \
                mock.patch('shutil.copyfileobj', side_effect=OSError(28, 'No space left on device')):
            with self.assertRaises(CopyIOError):
                copier.execute(CopyRequest(src, dest), no_artifact)
        self.assertEqual(len(opened), 1)
        with self.assertRaises(OSError):
            os.fstat(opened[0])

    def test_failed_exclusive_copy_removes_partial_file(self):
        src = self.write('src', b'new')
        dest = self.path('dest')
        with mock.patch('shutil.copyfileobj', side_effect=OSError(28, 'No space left on device')):
            with self.assertRaises(CopyIOError):
                copier.execute(CopyRequest(src, dest, overwrite=False), no_artifact)
        self.assertNotExists(dest)

    def test_permission_bits_follow_source(self):
        if os.name == 'nt':
            self.skipTest('POSIX permission bits only')
        src = self.write('tool.sh', b'#!/bin/sh\n')
        os.chmod(src, 0o755)
        dest = self.path('bin', 'tool.sh')
        copier.execute(CopyRequest(src, dest), no_artifact)
        self.assertEqual(stat.S_IMODE(os.stat(dest).st_mode), 0o755)

    def test_relative_destination(self):
        src = self.write('src.txt', b'rel')
        old = os.getcwd()
        os.chdir(self.workdir)
        try:
            copier.execute(CopyRequest(src, os.path.join('rel', 'out.txt')), no_artifact)
        finally:
            os.chdir(old)
        self.assertEqual(self.read('rel/out.txt'), b'rel')

    def test_logs_canonical_paths(self):
        src = self.write('a/app.jar', b'x')
        dest = self.path('b', '..', 'c', 'app.jar')
        with mock.patch('artifactcopy.mlog.log') as log:
            copier.execute(CopyRequest(src, dest), no_artifact)
        args = [str(a.text) if hasattr(a, 'text') else a for a in log.call_args[0]]
        self.assertEqual(args, ['Copying', canonical_path(src), 'to', canonical_path(self.path('c', 'app.jar'))])
        self.assertNotIn('..', args[3])

    def test_concurrent_distinct_destinations(self):
        src = self.write('src.bin', b'abc' * 10000)
        errors = []

        def worker(i):
            try:
                copier.execute(CopyRequest(src, self.path('out', f'{i}.bin')), no_artifact)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(errors, [])
        for i in range(8):
            self.assertEqual(self.read(f'out/{i}.bin'), b'abc' * 10000)

    def test_request_is_immutable(self):
        request = CopyRequest('a', 'b')
        self.assertTrue(request.overwrite)
        self.assertFalse(request.skip)
        with self.assertRaises(AttributeError):
            request.skip = True

    def test_same_file_with_overwrite_is_a_noop(self):
        src = self.write('app.jar', b'same')
        with mock.patch('artifactcopy.mlog.warning') as warning:
            copier.execute(CopyRequest(src, self.path('.', 'app.jar')), no_artifact)
        warning.assert_called_once()
        self.assertEqual(self.read('app.jar'), b'same')
        self.assertEqual(os.listdir(self.workdir), ['app.jar'])

    def test_same_file_without_overwrite_still_conflicts(self):
        src = self.write('app.jar', b'same')
        with self.assertRaises(DestinationExistsError):
            copier.execute(CopyRequest(src, src, overwrite=False), no_artifact)
        self.assertEqual(self.read('app.jar'), b'same')
