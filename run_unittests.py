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

import pytest

def main() -> int:
    root = Path(__file__).resolve().parent
    pytest_args = ['-v', str(root / 'unittests')] + sys.argv[1:]
    return pytest.main(pytest_args)

if __name__ == '__main__':
    sys.exit(main())
