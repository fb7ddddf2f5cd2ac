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

import os.path
import sys
import importlib
import traceback
import argparse
import shutil
import typing as T

from . import coredata, mlog, project
from .copylib import CopyException, expand_arguments
from .goals import GOALS, GoalState, get_goal

if T.TYPE_CHECKING:
    from .goals import Goal


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-C', dest='builddir', default=None,
                        help='Build directory holding the project description (default: current directory).')
    parser.add_argument('--project-file', default=None,
                        help='Load the project description from this file instead of the build directory.')
    parser.add_argument('--log-dir', default=None,
                        help='Also write the log to a file in this directory.')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Only print errors.')
    coredata.register_builtin_arguments(parser)


def load_project(options: argparse.Namespace) -> project.Project:
    if options.project_file:
        return project.load_project_file(options.project_file, options.builddir)
    return project.load_project(options.builddir or os.getcwd())


def run_goal(goal: 'Goal', options: argparse.Namespace) -> int:
    if options.quiet:
        mlog.set_quiet()
    if options.log_dir:
        mlog.initialize(options.log_dir)
    goal_options = goal.resolve_options(options)
    state = GoalState(load_project(options), goal_options)
    warnings_before = mlog.log_warnings_counter
    with mlog.nested(goal.name):
        goal.execute(state)
    warnings = mlog.log_warnings_counter - warnings_before
    if warnings:
        mlog.log(mlog.yellow('WARNING:'), 'Goal', mlog.bold(goal.name), f'finished with {warnings} warning(s)')
    return 0


class CommandLineParser:
    def __init__(self) -> None:
        self.term_width = shutil.get_terminal_size().columns
        self.formatter = lambda prog: argparse.HelpFormatter(prog, max_help_position=int(self.term_width / 2), width=self.term_width)

        self.commands = {}  # type: T.Dict[str, argparse.ArgumentParser]
        self.parser = argparse.ArgumentParser(prog='artifactcopy', formatter_class=self.formatter)
        self.parser.add_argument('-v', '--version', action='version', version=coredata.version)
        self.subparsers = self.parser.add_subparsers(title='Commands', dest='command')
        for name in GOALS:
            goal = get_goal(name)
            self.add_command(name, self.goal_arguments(goal), self.goal_runner(goal),
                             help_msg=goal.description)
        self.add_command('goals', lambda parser: None, self.run_goals_command,
                         help_msg='List the available goals')
        self.add_command('help', self.add_help_arguments, self.run_help_command,
                         help_msg='Print help of a subcommand')

    def add_command(self, name: str, add_arguments_func: T.Callable[[argparse.ArgumentParser], None],
                    run_func: T.Callable[[argparse.Namespace], int], help_msg: str) -> None:
        p = self.subparsers.add_parser(name, help=help_msg, formatter_class=self.formatter)
        add_arguments_func(p)
        p.set_defaults(run_func=run_func)
        self.commands[name] = p

    @staticmethod
    def goal_arguments(goal: 'Goal') -> T.Callable[[argparse.ArgumentParser], None]:
        def add_arguments(parser: argparse.ArgumentParser) -> None:
            add_common_arguments(parser)
            goal.add_arguments(parser)
        return add_arguments

    @staticmethod
    def goal_runner(goal: 'Goal') -> T.Callable[[argparse.Namespace], int]:
        return lambda options: run_goal(goal, options)

    def run_goals_command(self, options: argparse.Namespace) -> int:
        for name in GOALS:
            goal = get_goal(name)
            extra = ' (thread-safe)' if goal.thread_safe else ''
            mlog.log(mlog.bold(name), '-', goal.description + extra)
        return 0

    def add_help_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('command', nargs='?', choices=list(self.commands.keys()))

    def run_help_command(self, options: argparse.Namespace) -> int:
        if options.command:
            self.commands[options.command].print_help()
        else:
            self.parser.print_help()
        return 0

    def run(self, args: T.List[str]) -> int:
        expanded = expand_arguments(args)
        if expanded is None:
            return 1
        options = self.parser.parse_args(expanded)
        if not getattr(options, 'run_func', None):
            self.parser.print_help()
            return 1

        try:
            return options.run_func(options)
        except CopyException as e:
            mlog.exception(e)
            logfile = mlog.shutdown()
            if logfile is not None:
                mlog.log("\nA full log can be found at", mlog.bold(logfile))
            if os.environ.get('ARTIFACTCOPY_FORCE_BACKTRACE'):
                raise
            return 1
        except Exception:
            if os.environ.get('ARTIFACTCOPY_FORCE_BACKTRACE'):
                raise
            traceback.print_exc()
            return 2
        finally:
            mlog.shutdown()
            mlog.set_verbose()


def run_script_command(script_name: str, script_args: T.List[str]) -> int:
    try:
        module = importlib.import_module('artifactcopy.scripts.' + script_name)
    except ModuleNotFoundError as e:
        mlog.exception(e)
        return 1

    return module.run(script_args)


def run(original_args: T.List[str]) -> int:
    args = original_args[:]

    # Internal helpers called from other build steps skip argparse.
    if len(args) >= 2 and args[0] == '--internal':
        return run_script_command(args[1], args[2:])

    return CommandLineParser().run(args)


def main() -> int:
    return run(sys.argv[1:])


if __name__ == '__main__':
    sys.exit(main())
