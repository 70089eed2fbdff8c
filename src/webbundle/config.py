# -*- coding: utf8 -*-
# The MIT License (MIT)
#
# Copyright (c) 2018  Niklas Rosenstein
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Configuration of the manifest processor. Options are read from a TOML file
and flattened to `section:key` names, for example

```toml
[webbundle]
symbolicNamePrefix = "com.example.generated_"
importPackage = "javax.servlet; version=3.0"
```

is available as the options `webbundle:symbolicNamePrefix` and
`webbundle:importPackage`.
"""

import dataclasses
import typing as t

import toml

from . import constants
from .errors import ConfigError

DEFAULT_CONFIG_FILE = 'webbundle.toml'
SECTION = 'webbundle'

_OPTION_FIELDS = {
  'symbolicNamePrefix': 'symbolic_name_prefix',
  'importPackage': 'import_package',
  'manifestVersion': 'manifest_version',
}


@dataclasses.dataclass
class Config:
  symbolic_name_prefix: str = constants.DEFAULT_SYMBOLICNAME_PREFIX
  import_package: str = constants.DEFAULT_IMPORT_PACKAGE
  manifest_version: str = constants.DEFAULT_MANIFEST_VERSION

  @classmethod
  def from_options(cls, options: t.Dict[str, t.Any]) -> 'Config':
    """
    Creates a #Config from flattened `section:key` *options*. Raises a
    #ConfigError for unknown options and non-string values.
    """

    kwargs = {}
    for key, value in options.items():
      section, _, name = key.partition(':')
      if section != SECTION or name not in _OPTION_FIELDS:
        raise ConfigError('unknown option {!r}'.format(key))
      if not isinstance(value, str):
        raise ConfigError('option {!r} expects a string, got {}'
                          .format(key, type(value).__name__))
      kwargs[_OPTION_FIELDS[name]] = value
    return cls(**kwargs)


def flatten_options(data: t.Dict[str, t.Any]) -> t.Dict[str, t.Any]:
  options = {}
  for section, values in data.items():
    if not isinstance(values, dict):
      raise ConfigError('expected a [{}] table, got a {}'
                        .format(section, type(values).__name__))
    for key, value in values.items():
      options[section + ':' + key] = value
  return options


def read_options(filename: str) -> t.Dict[str, t.Any]:
  try:
    with open(filename) as fp:
      data = toml.load(fp)
  except toml.TomlDecodeError as exc:
    raise ConfigError('{}: {}'.format(filename, exc))
  except OSError as exc:
    raise ConfigError('could not read {}: {}'.format(filename, exc.strerror or exc))
  return flatten_options(data)


def load_config(filename: t.Optional[str] = None,
                overrides: t.Optional[t.Dict[str, t.Any]] = None) -> Config:
  """
  Loads the configuration from *filename* (if specified) and applies the
  `section:key` *overrides* on top.
  """

  options = read_options(filename) if filename else {}
  options.update(overrides or {})
  return Config.from_options(options)
