#!/usr/bin/env python3

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

import sys

if sys.version_info < (3, 7):
    raise SystemExit('ERROR: Tried to install artifactcopy with an unsupported Python version: \n{}'
                     '\nartifactcopy requires Python 3.7 or greater'.format(sys.version))

from artifactcopy.coredata import version
from setuptools import setup

entries = {'console_scripts': ['artifactcopy=artifactcopy.acmain:main']}
packages = ['artifactcopy',
            'artifactcopy.goals',
            'artifactcopy.scripts']

if __name__ == '__main__':
    setup(name='artifactcopy',
          version=version,
          description='Build step goal that copies a file or the main build artifact',
          license='Apache-2.0',
          python_requires='>=3.7',
          packages=packages,
          entry_points=entries,
          extras_require={'test': ['pytest']},)
