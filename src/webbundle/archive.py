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
Access to the web archive behind a locator. The archive is opened once per
processing call and its entries are visited in archive order.
"""

import contextlib
import io
import logging
import os
import tempfile
import typing as t
import urllib.parse
import urllib.request
import zipfile
import zlib

import requests

from .constants import MANIFEST_NAME
from .errors import ArchiveReadError, ManifestFormatError, NestedArchiveReadError
from .manifest import Manifest, parse_manifest

log = logging.getLogger(__name__)

WEBBUNDLE_SCHEME = 'webbundle:'

# Archives fetched over HTTP are kept in memory up to this size.
SPOOL_MAX_SIZE = 16 * 1024 * 1024

# Raised by zipfile and zlib for broken, encrypted or unsupported entries.
_READ_ERRORS = (OSError, EOFError, RuntimeError, NotImplementedError,
                zipfile.BadZipFile, zlib.error, ManifestFormatError)


def split_locator(locator: str) -> t.Tuple[str, t.Optional[str]]:
  """
  Strips the `webbundle:` scheme from *locator* and separates the query
  part. Returns a tuple of the archive location and the raw query, which is
  #None if the locator has no query.
  """

  if locator.lower().startswith(WEBBUNDLE_SCHEME):
    locator = locator[len(WEBBUNDLE_SCHEME):]
  location, sep, query = locator.partition('?')
  return location, (query if sep else None)


def _read_manifest(zfile, name):
  for info in zfile.infolist():
    if info.filename.upper() == MANIFEST_NAME:
      return parse_manifest(zfile.read(info))
  log.debug('{}: no {}'.format(name, MANIFEST_NAME))
  return Manifest()


class ArchiveEntry:
  """
  An entry of a #WebArchive. The content can be read with #open().
  """

  def __init__(self, archive: 'WebArchive', info: zipfile.ZipInfo):
    self._archive = archive
    self._info = info

  def __repr__(self):
    return 'ArchiveEntry({!r})'.format(self.name)

  @property
  def name(self) -> str:
    return self._info.filename

  @property
  def is_dir(self) -> bool:
    return self._info.is_dir()

  def open(self) -> t.IO[bytes]:
    return self._archive._zipfile.open(self._info)

  def read_manifest(self) -> Manifest:
    """
    Opens this entry as a nested JAR and returns its manifest. Raises a
    #NestedArchiveReadError if the entry can not be read as a JAR.
    """

    try:
      with self.open() as fp:
        data = io.BytesIO(fp.read())
      with zipfile.ZipFile(data) as nested:
        return _read_manifest(nested, self.name)
    except _READ_ERRORS as exc:
      raise NestedArchiveReadError(self.name, exc) from exc


class WebArchive:
  """
  Wraps a JAR/WAR file object. The original manifest is read once when the
  archive is created.
  """

  def __init__(self, fp: t.IO[bytes], locator: str = '<stream>'):
    self.locator = locator
    try:
      self._zipfile = zipfile.ZipFile(fp)
      self.manifest = _read_manifest(self._zipfile, locator)
    except _READ_ERRORS as exc:
      raise ArchiveReadError(locator, exc) from exc

  def __repr__(self):
    return 'WebArchive({!r})'.format(self.locator)

  def __enter__(self):
    return self

  def __exit__(self, *args):
    self.close()

  def close(self):
    self._zipfile.close()

  def entries(self) -> t.Iterator[ArchiveEntry]:
    for info in self._zipfile.infolist():
      yield ArchiveEntry(self, info)


def _fetch(url, stack):
  log.debug('Fetching archive from {}'.format(url))
  response = stack.enter_context(requests.get(url, stream=True))
  response.raise_for_status()
  fp = stack.enter_context(tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE))
  for chunk in response.iter_content(2048):
    fp.write(chunk)
  fp.seek(0)
  return fp


def _open_location(location, stack):
  scheme = urllib.parse.urlparse(location).scheme.lower()
  if scheme in ('http', 'https'):
    return _fetch(location, stack)
  if scheme == 'file':
    path = urllib.request.url2pathname(urllib.parse.urlparse(location).path)
  else:
    path = location
  return stack.enter_context(open(os.path.expanduser(path), 'rb'))


@contextlib.contextmanager
def open_archive(location: str) -> t.Iterator[WebArchive]:
  """
  Opens the archive at *location*, which may be a filesystem path, a `file:`
  URL or an `http(s):` URL. The archive and the underlying stream are closed
  when the context exits, no matter how.
  """

  with contextlib.ExitStack() as stack:
    try:
      fp = _open_location(location, stack)
    except (OSError, requests.RequestException) as exc:
      raise ArchiveReadError(location, exc) from exc
    archive = stack.enter_context(WebArchive(fp, location))
    yield archive
