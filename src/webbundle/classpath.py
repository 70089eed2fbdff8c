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
Derives the `Bundle-ClassPath` of a web archive from the jars in its
`WEB-INF/lib/` directory and the `Class-Path` references of those jars.
"""

import logging
import typing as t
import urllib.parse

from nr.stream import Stream

from .archive import ArchiveEntry
from .constants import CLASS_PATH, DEFAULT_BUNDLE_CLASSPATH, JAR_EXT, LIB_DIR
from .errors import NestedArchiveReadError

log = logging.getLogger(__name__)


class ClasspathScan:
  """
  The jar names found while walking the entries of an archive.

  all_jar_names:
    Every non-directory entry that ends with `.jar`, anywhere in the archive.

  library_jars:
    The jars directly inside `WEB-INF/lib/` and the entries they reference
    via their `Class-Path` header, in the order they were discovered.
  """

  def __init__(self):
    self.all_jar_names = set()
    self.library_jars = []

  def __repr__(self):
    return 'ClasspathScan(library_jars={!r})'.format(self.library_jars)

  def add_library(self, name: str):
    if name not in self.library_jars:
      self.library_jars.append(name)


def is_library_jar(name: str) -> bool:
  """
  Returns #True if *name* is a jar located directly in `WEB-INF/lib/`.
  Jars in subdirectories of the lib directory are not library jars.
  """

  if not name.endswith(JAR_EXT) or not name.startswith(LIB_DIR):
    return False
  return '/' not in name[len(LIB_DIR):]


def resolve_class_path(entry_name: str, class_path: str) -> t.List[str]:
  """
  Resolves the space separated URI references of a `Class-Path` header
  relative to the entry that declares it.
  """

  return [urllib.parse.urljoin(entry_name, ref) for ref in class_path.split()]


def _add_referenced_jars(scan, entry):
  try:
    class_path = entry.read_manifest().main.get(CLASS_PATH)
  except NestedArchiveReadError as exc:
    log.warning('Skipping Class-Path of {}: {}'.format(entry.name, exc.reason))
    return
  if not class_path:
    return
  log.debug('jar {} has a Class-Path entry of {}'.format(entry.name, class_path))
  # Only one level deep, references of referenced jars are not followed.
  for referenced_name in resolve_class_path(entry.name, class_path):
    log.info('Resolved Class-Path {} to entry name {}'.format(class_path, referenced_name))
    scan.add_library(referenced_name)


def scan_entries(entries: t.Iterable[ArchiveEntry]) -> ClasspathScan:
  """
  Walks *entries* once, in order, and collects the jar names that are
  relevant for the bundle classpath.
  """

  scan = ClasspathScan()
  for entry in entries:
    if entry.is_dir or not entry.name.endswith(JAR_EXT):
      continue
    scan.all_jar_names.add(entry.name)
    if is_library_jar(entry.name):
      scan.add_library(entry.name)
      _add_referenced_jars(scan, entry)
  return scan


def to_classpath(scan: ClasspathScan) -> str:
  """
  Joins the library jars of *scan* that exist in the archive, prefixed with
  `WEB-INF/classes`.
  """

  def exists(name):
    if name in scan.all_jar_names:
      return True
    log.info('Excluding {}, as there is no jar by this name in the war'.format(name))
    return False

  jars = list(Stream(scan.library_jars).filter(exists))
  return ','.join([DEFAULT_BUNDLE_CLASSPATH] + jars)


def derive_classpath(entries: t.Iterable[ArchiveEntry]) -> str:
  cp = to_classpath(scan_entries(entries))
  log.debug('cp = {}'.format(cp))
  return cp
