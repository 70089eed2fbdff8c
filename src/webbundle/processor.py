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
Computes the manifest of a Web Application Bundle from a web archive.

When a deployer installs an archive through a `webbundle:` locator, the
original `MANIFEST.MF` is combined with

- the headers already present in the manifest (developer supplied data),
- the parameters from the query part of the locator (deployer supplied data),
- information found in the archive itself, e.g. every jar in `WEB-INF/lib/`
  is added to the `Bundle-ClassPath`.

A deployer value always wins over a developer value, which wins over the
default. Archives that are already bundles may only have their
`Web-ContextPath` customized.
"""

import enum
import itertools
import logging
import threading
import typing as t

from . import constants as c
from .archive import ArchiveEntry, WebArchive, open_archive, split_locator
from .classpath import derive_classpath
from .config import Config
from .errors import InvalidCustomizationError, MissingRequiredParameterError
from .manifest import Attributes, Manifest, is_valid_header_name
from .query import canonicalize

log = logging.getLogger(__name__)

Params = t.Dict[str, t.Optional[str]]


class ArchiveKind(enum.Enum):
  #: The manifest already declares bundle headers.
  WAB = 'wab'
  #: A plain web archive, all bundle headers are derived.
  PLAIN = 'plain'


class SymbolicNameGenerator:
  """
  Generates unique symbolic names by appending an increasing number to a
  prefix. Numbers are never handed out twice, also not across threads.
  """

  def __init__(self, prefix: str = c.DEFAULT_SYMBOLICNAME_PREFIX, start: int = 0):
    self.prefix = prefix
    self._counter = itertools.count(start)
    self._lock = threading.Lock()

  def __repr__(self):
    return 'SymbolicNameGenerator(prefix={!r})'.format(self.prefix)

  def next(self) -> str:
    with self._lock:
      return self.prefix + str(next(self._counter))


def is_wab(main_attributes: Attributes) -> bool:
  return any(name in main_attributes for name in c.SUPPORTED_QUERY_PARAM_NAMES)


def classify(main_attributes: Attributes) -> ArchiveKind:
  """
  Decides on the original manifest alone whether the archive is a WAB.
  """

  return ArchiveKind.WAB if is_wab(main_attributes) else ArchiveKind.PLAIN


def resolve_attribute(key: str, params: Params, attrs: Attributes,
                      default: t.Optional[str]) -> None:
  """
  Sets the header *key* in *attrs* to the deployer value from *params*, or
  else the developer value already in *attrs*, or else *default*. Nothing is
  written if the result is #None or equal to the developer value.
  """

  deployer_value = params.get(key)
  developer_value = attrs.get(key)
  final_value = default
  if deployer_value is not None:
    final_value = deployer_value
  elif developer_value is not None:
    final_value = developer_value
  if final_value is not None and final_value != developer_value:
    attrs[key] = final_value


def process_context_path(params: Params, attrs: Attributes) -> None:
  context_path = params.get(c.WEB_CONTEXT_PATH)
  if context_path is None:
    raise MissingRequiredParameterError(c.WEB_CONTEXT_PATH)
  if not context_path.startswith('/'):
    context_path = '/' + context_path
  attrs[c.WEB_CONTEXT_PATH] = context_path


def check_param_values(params: Params) -> None:
  # Every value is written on a single manifest line.
  for name, value in params.items():
    if value is not None and any(char in value for char in '\r\n\0'):
      raise InvalidCustomizationError('parameter {!r} has a line break or NUL in its value'.format(name))


def apply_passthrough_params(params: Params, attrs: Attributes) -> None:
  """
  Writes parameters that are not one of the supported header names directly
  into *attrs*. Parameters without a value and names that are not valid
  header names are ignored.
  """

  for name, value in params.items():
    if name in c.SUPPORTED_QUERY_PARAM_NAMES or value is None:
      continue
    if not is_valid_header_name(name):
      log.warning('Ignoring parameter {!r}, it is not a valid header name'.format(name))
      continue
    log.debug('Applying parameter {}={}'.format(name, value))
    attrs[name] = value


def is_signature_attribute(name: str) -> bool:
  # Signature related per-entry attributes are x-Digest-y, x-Digest and Magic.
  return name.endswith('-Digest') or '-Digest-' in name or name == 'Magic'


def strip_signatures(manifest: Manifest) -> None:
  for attrs in manifest.entries.values():
    for name in list(attrs):
      if is_signature_attribute(name):
        del attrs[name]


class ManifestProcessor:
  """
  Turns the manifest of a web archive into the manifest of a Web Application
  Bundle. One processor can be used for any number of archives, also
  concurrently. The symbolic names it generates are unique per processor.
  """

  def __init__(self, config: t.Optional[Config] = None,
               name_generator: t.Optional[SymbolicNameGenerator] = None):
    self.config = config or Config()
    if name_generator is None:
      name_generator = SymbolicNameGenerator(self.config.symbolic_name_prefix)
    self.name_generator = name_generator

  def process(self, locator: str, query: t.Optional[str] = None) -> Manifest:
    """
    Reads the archive behind *locator* and returns the new manifest. If
    *query* is #None, the query part of the locator is used.
    """

    location, locator_query = split_locator(locator)
    if query is None:
      query = locator_query
    with open_archive(location) as archive:
      return self.process_archive(archive, query)

  def process_archive(self, archive: WebArchive, query: t.Optional[str] = None) -> Manifest:
    manifest = archive.manifest.copy()
    params = canonicalize(query)
    check_param_values(params)
    kind = classify(archive.manifest.main)
    log.debug('{} is a {} archive'.format(archive.locator, kind.value))
    if kind == ArchiveKind.WAB:
      self._process_wab(params, manifest)
    else:
      self._process_plain(params, manifest, archive.entries())
    log.debug('New manifest of the bundle:\n{}'.format(manifest.to_bytes().decode('utf8')))
    return manifest

  def _process_wab(self, params: Params, manifest: Manifest) -> None:
    # A WAB may only have its Web-ContextPath customized and no other header
    # may be modified. The context path is mandatory, so it must be the one
    # and only parameter.
    if set(params) != {c.WEB_CONTEXT_PATH}:
      raise InvalidCustomizationError(
        'Only {} can be customized for an archive that is already a bundle, '
        'got {}'.format(c.WEB_CONTEXT_PATH, ', '.join(sorted(params)) or 'no parameters'))
    process_context_path(params, manifest.main)

  def _process_plain(self, params: Params, manifest: Manifest,
                     entries: t.Iterable[ArchiveEntry]) -> None:
    attrs = manifest.main
    process_context_path(params, attrs)
    resolve_attribute(c.BUNDLE_MANIFESTVERSION, params, attrs, self.config.manifest_version)
    resolve_attribute(c.BUNDLE_SYMBOLICNAME, params, attrs, self.name_generator.next())
    resolve_attribute(c.BUNDLE_VERSION, params, attrs, None)
    resolve_attribute(c.BUNDLE_CLASSPATH, params, attrs, derive_classpath(entries))
    resolve_attribute(c.IMPORT_PACKAGE, params, attrs, self.config.import_package)
    apply_passthrough_params(params, attrs)

    # Until imports are computed from the class files, everything is
    # imported dynamically.
    attrs[c.DYNAMICIMPORT_PACKAGE] = '*'

    strip_signatures(manifest)


_default_processor = None
_default_processor_lock = threading.Lock()


def default_processor() -> ManifestProcessor:
  global _default_processor
  with _default_processor_lock:
    if _default_processor is None:
      _default_processor = ManifestProcessor()
    return _default_processor


def process_manifest(locator: str, query: t.Optional[str] = None) -> Manifest:
  """
  Shortcut for #ManifestProcessor.process() with a shared processor.
  """

  return default_processor().process(locator, query)
