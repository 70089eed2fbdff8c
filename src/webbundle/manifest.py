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
A model of the JAR manifest (`META-INF/MANIFEST.MF`) with a parser and a
writer for its text format.

A manifest consists of a main section followed by zero or more per-entry
sections. Every section is a sequence of `Name: value` headers; sections are
separated by blank lines and the per-entry sections start with a `Name`
header that holds the entry path. Lines longer than 72 bytes are continued on
the next line which starts with a single space.
"""

import collections.abc
import copy
import io
import re
import typing as t

from .constants import MANIFEST_VERSION
from .errors import ManifestFormatError

MAX_LINE_BYTES = 72
LINE_SEPARATOR = '\r\n'

_NEWLINE_REGEX = re.compile(r'\r\n|\r|\n')
_HEADER_NAME_REGEX = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]{0,69}$')
_ILLEGAL_VALUE_CHARS = ('\r', '\n', '\0')


def is_valid_header_name(name: str) -> bool:
  return bool(_HEADER_NAME_REGEX.match(name))


class Attributes(collections.abc.MutableMapping):
  """
  An ordered mapping of header names to string values. Names are compared
  case-insensitively but keep the spelling they were first inserted with.
  Replacing the value of an existing header keeps its position.
  """

  def __init__(self, iterable=None):
    self._data = {}
    if iterable is not None:
      self.update(iterable)

  def __repr__(self):
    return 'Attributes({!r})'.format(dict(self.items()))

  def __len__(self):
    return len(self._data)

  def __iter__(self):
    return (key for key, _ in self._data.values())

  def __contains__(self, key):
    return isinstance(key, str) and key.lower() in self._data

  def __getitem__(self, key):
    return self._data[key.lower()][1]

  def __setitem__(self, key, value):
    if not isinstance(value, str):
      raise TypeError('header {!r} expects a str value, got {}'
                      .format(key, type(value).__name__))
    if any(char in value for char in _ILLEGAL_VALUE_CHARS):
      raise ManifestFormatError('header {!r} has a line break or NUL in its value'.format(key))
    if key.lower() not in self._data and not is_valid_header_name(key):
      raise ManifestFormatError('invalid header name {!r}'.format(key))
    try:
      spelling = self._data[key.lower()][0]
    except KeyError:
      spelling = key
    self._data[key.lower()] = (spelling, value)

  def __delitem__(self, key):
    del self._data[key.lower()]

  def __eq__(self, other):
    if isinstance(other, Attributes):
      return list(self.items()) == list(other.items())
    if isinstance(other, collections.abc.Mapping):
      return dict(self.items()) == dict(other.items())
    return NotImplemented

  def copy(self):
    return Attributes(self.items())


class Manifest:
  """
  The main #Attributes and the per-entry #Attributes of a JAR manifest.
  """

  def __init__(self, main: Attributes = None,
               entries: t.Dict[str, Attributes] = None):
    self.main = main if main is not None else Attributes()
    self.entries = entries if entries is not None else {}

  def __repr__(self):
    return 'Manifest(main={!r}, entries={!r})'.format(self.main, self.entries)

  def __eq__(self, other):
    if isinstance(other, Manifest):
      return self.main == other.main and self.entries == other.entries
    return NotImplemented

  def copy(self) -> 'Manifest':
    return copy.deepcopy(self)

  def to_bytes(self) -> bytes:
    fp = io.StringIO()
    write_manifest(fp, self)
    return fp.getvalue().encode('utf8')


def _iter_headers(lines, lineno):
  """
  Joins continuation lines and yields `(lineno, name, value)` tuples.
  """

  current = None
  for line in lines:
    if line.startswith(' '):
      if current is None:
        raise ManifestFormatError('line {}: continuation line without header'.format(lineno))
      current[1] += line[1:]
    else:
      if current is not None:
        yield current[0], current[1]
      current = [lineno, line]
    lineno += 1
  if current is not None:
    yield current[0], current[1]


def _parse_section(lines, lineno):
  for header_lineno, line in _iter_headers(lines, lineno):
    name, sep, value = line.partition(': ')
    if not sep:
      if line.endswith(':'):
        name, value = line[:-1], ''
      else:
        raise ManifestFormatError('line {}: invalid header {!r}'.format(header_lineno, line))
    if not name:
      raise ManifestFormatError('line {}: empty header name'.format(header_lineno))
    yield header_lineno, name, value


def _split_sections(text):
  """
  Yields `(lineno, lines)` for every section in the manifest *text*.
  """

  section, start = [], 1
  for lineno, line in enumerate(_NEWLINE_REGEX.split(text), 1):
    if line:
      if not section:
        start = lineno
      section.append(line)
    elif section:
      yield start, section
      section = []
  if section:
    yield start, section


def parse_manifest(data: t.Union[bytes, str]) -> Manifest:
  """
  Parses the text of a JAR manifest. Raises a #ManifestFormatError if the
  text is not a valid manifest.
  """

  if isinstance(data, bytes):
    try:
      data = data.decode('utf8')
    except UnicodeDecodeError as exc:
      raise ManifestFormatError('manifest is not valid UTF-8: {}'.format(exc))

  manifest = Manifest()
  # A manifest that starts with a blank line has an empty main section.
  if _NEWLINE_REGEX.match(data):
    sections = iter([(1, [])] + list(_split_sections(data)))
  else:
    sections = _split_sections(data)

  for index, (lineno, lines) in enumerate(sections):
    headers = list(_parse_section(lines, lineno))
    if index == 0:
      for _, name, value in headers:
        manifest.main[name] = value
      continue
    first_lineno, first_name, entry_name = headers[0]
    if first_name.lower() != 'name':
      raise ManifestFormatError('line {}: entry section does not start with a '
                                'Name header'.format(first_lineno))
    attrs = manifest.entries.setdefault(entry_name, Attributes())
    for _, name, value in headers[1:]:
      attrs[name] = value

  return manifest


def _wrap_line(line):
  """
  Splits a header line into chunks that fit into #MAX_LINE_BYTES once
  encoded, without splitting a multi-byte character.
  """

  chunks = []
  current, size = '', 0
  limit = MAX_LINE_BYTES
  for char in line:
    char_size = len(char.encode('utf8'))
    if size + char_size > limit:
      chunks.append(current)
      # Continuation lines start with a space.
      current, size = ' ', 1
    current += char
    size += char_size
  chunks.append(current)
  return chunks


def _write_section(fp, items):
  for name, value in items:
    for chunk in _wrap_line('{}: {}'.format(name, value)):
      fp.write(chunk)
      fp.write(LINE_SEPARATOR)
  fp.write(LINE_SEPARATOR)


def write_manifest(fp, manifest: Manifest):
  """
  Writes *manifest* in JAR manifest format into the text file object *fp*.
  `Manifest-Version` always comes first in the main section.
  """

  main = list(manifest.main.items())
  main.sort(key=lambda x: x[0].lower() != MANIFEST_VERSION.lower())
  _write_section(fp, main)
  for entry_name, attrs in manifest.entries.items():
    _write_section(fp, [('Name', entry_name)] + list(attrs.items()))
