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
import configparser
import os
import typing as T
from collections import OrderedDict

from .copylib import OptionException

version = '1.0.0'

_T = T.TypeVar('_T')


class UserOption(T.Generic[_T]):
    def __init__(self, description: str):
        super().__init__()
        self.description = description

    # Check that the input is a valid value and return the
    # "cleaned" or "native" version. For example the Boolean
    # option could take the string "true" and return True.
    def validate_value(self, value: T.Any) -> T.Optional[_T]:
        raise RuntimeError('Derived option class did not override validate_value.')

    def set_value(self, newvalue: T.Any) -> None:
        self.value = self.validate_value(newvalue)

class UserStringOption(UserOption[str]):
    def __init__(self, description: str, value: T.Any):
        super().__init__(description)
        self.set_value(value)

    def validate_value(self, value: T.Any) -> T.Optional[str]:
        # None means "not set"; path options have no default
        if value is None:
            return None
        if not isinstance(value, str):
            raise OptionException('Value "%s" for string option is not a string.' % str(value))
        if not value:
            return None
        return value

class UserBooleanOption(UserOption[bool]):
    def __init__(self, description: str, value: T.Any) -> None:
        super().__init__(description)
        self.set_value(value)

    def validate_value(self, value: T.Any) -> bool:
        if isinstance(value, bool):
            return value
        if not isinstance(value, str):
            raise OptionException('Value {} cannot be converted to a boolean'.format(value))
        if value.lower() == 'true':
            return True
        if value.lower() == 'false':
            return False
        raise OptionException('Value %s is not boolean (true or false).' % value)


_U = T.TypeVar('_U', bound=UserOption[T.Any])

class GoalOption(T.Generic[_U]):

    """Declaration of one goal parameter.

    The goal name and the parameter name together form the option key,
    e.g. ``copy_file.dest_file``. Every parameter can be set with
    ``-Dkey=value`` or with its own ``--flag``.
    """

    def __init__(self, opt_type: T.Type[_U], description: str, default: T.Any):
        self.opt_type = opt_type
        self.description = description
        self.default = default

    def init_option(self, value: T.Optional[T.Any] = None) -> _U:
        """Create an instance of opt_type and return it."""
        if value is None:
            value = self.default
        return self.opt_type(self.description, value)

    def _argparse_action(self) -> T.Optional[str]:
        # If the type is a boolean, the presence of the argument in --foo form
        # is to enable it. Disabling happens by using -Dfoo=false.
        if isinstance(self.default, bool):
            return 'store_true'
        return None

    @staticmethod
    def argparse_name_to_arg(name: str) -> str:
        return '--' + name.replace('_', '-')

    def add_to_argparse(self, name: str, parser: argparse.ArgumentParser) -> None:
        kwargs = OrderedDict()  # type: T.Dict[str, T.Any]

        b = self._argparse_action()
        h = self.description
        if not b:
            default = self.default if self.default is not None else 'none'
            h = '{} (default: {}).'.format(h.rstrip('.'), default)
            kwargs['metavar'] = name.upper()
        else:
            kwargs['action'] = b
        kwargs['default'] = argparse.SUPPRESS
        kwargs['dest'] = name

        parser.add_argument(self.argparse_name_to_arg(name), help=h, **kwargs)


class OptionsFileParser(configparser.ConfigParser):
    def __init__(self) -> None:
        # We don't want ':' as key delimiter, option keys are dotted names
        super().__init__(delimiters=['='], interpolation=None)

    def optionxform(self, optionstr: str) -> str:
        # Don't call str.lower() on keys
        return optionstr


def read_options_file(filename: str) -> T.Dict[str, str]:
    if not os.path.isfile(filename):
        raise OptionException(f'Options file {filename} does not exist.')
    config = OptionsFileParser()
    try:
        config.read(filename, encoding='utf-8')
    except configparser.Error as e:
        raise OptionException(f'Malformed options file {filename}: {e}')
    if not config.has_section('options'):
        return {}
    return dict(config['options'].items())


def create_options_dict(options: T.List[str]) -> T.Dict[str, str]:
    result = OrderedDict()  # type: T.Dict[str, str]
    for o in options:
        try:
            (key, value) = o.split('=', 1)
        except ValueError:
            raise OptionException('Option {!r} must have a value separated by equals sign.'.format(o))
        result[key.strip()] = value
    return result


def option_key(goal_prefix: str, name: str) -> str:
    return f'{goal_prefix}.{name}'


def resolve_goal_options(goal_prefix: str,
                         goal_options: T.Mapping[str, GoalOption[T.Any]],
                         args: argparse.Namespace) -> T.Dict[str, T.Any]:
    """Merge every source of goal option values into {name: value}.

    Lowest to highest precedence: the declared default, the options file,
    -D arguments and finally the dedicated --flag arguments.
    """
    values = {}  # type: T.Dict[str, T.Any]
    options_file = getattr(args, 'options_file', None)
    if options_file:
        values.update(read_options_file(options_file))
    d_values = create_options_dict(getattr(args, 'projectoptions', []))
    values.update(d_values)

    for name in goal_options:
        value = getattr(args, name, None)
        if value is not None:
            key = option_key(goal_prefix, name)
            if key in d_values:
                raise OptionException(
                    'Got argument {0} as both -D{0} and {1}. Pick one.'.format(
                        key, GoalOption.argparse_name_to_arg(name)))
            values[key] = value

    known = {option_key(goal_prefix, n) for n in goal_options}
    for key in values:
        if key not in known:
            raise OptionException('Unknown option {!r} for goal {!r}.'.format(key, goal_prefix))

    resolved = {}  # type: T.Dict[str, T.Any]
    for name, opt in goal_options.items():
        resolved[name] = opt.init_option(values.get(option_key(goal_prefix, name))).value
    return resolved


def register_builtin_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-D', action='append', dest='projectoptions', default=[], metavar="option",
                        help='Set the value of an option, can be used several times to set multiple options.')
    parser.add_argument('--options-file', default=None,
                        help='Read option values from the [options] section of an ini file.')
