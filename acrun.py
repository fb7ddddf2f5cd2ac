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
from pathlib import Path

# If we're run uninstalled, add the script directory to sys.path to ensure that
# we always import the correct artifactcopy modules even if PYTHONPATH is mangled
acrun_exe = Path(sys.argv[0]).resolve()
if (acrun_exe.parent / 'artifactcopy').is_dir():
    sys.path.insert(0, str(acrun_exe.parent))

if __name__ == '__main__':
    from artifactcopy import acmain
    sys.exit(acmain.main())
