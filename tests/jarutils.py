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
Helpers to build JAR and WAR archives in memory.
"""

import io
import struct
import zipfile

from webbundle.archive import WebArchive
from webbundle.manifest import Attributes, Manifest


def make_manifest(main=None, entries=None):
  main = Attributes(main or {})
  main.setdefault('Manifest-Version', '1.0')
  return Manifest(main, {k: Attributes(v) for k, v in (entries or {}).items()})


def make_jar(files=(), manifest=None, compression=zipfile.ZIP_STORED):
  """
  Returns the bytes of a zip archive. *files* is a sequence of `(name, data)`
  tuples written in that order after the manifest. A name ending with a
  slash is written as a directory entry.
  """

  fp = io.BytesIO()
  with zipfile.ZipFile(fp, 'w', compression) as zfile:
    if manifest is not None:
      zfile.writestr('META-INF/MANIFEST.MF', manifest.to_bytes())
    for name, data in files:
      zfile.writestr(name, data)
  return fp.getvalue()


def lib_jar(class_path=None):
  main = {'Class-Path': class_path} if class_path else {}
  return make_jar([('com/example/A.class', b'\xca\xfe\xba\xbe')], make_manifest(main))


def open_war(files=(), manifest=None):
  if manifest is None:
    manifest = make_manifest()
  return WebArchive(io.BytesIO(make_jar(files, manifest)), 'test.war')


def mark_first_entry_encrypted(data):
  """
  Sets the encryption flag in the central directory record of the first
  entry of the zip archive *data*.
  """

  data = bytearray(data)
  index = data.index(b'PK\x01\x02')
  data[index + 8] |= 0x1
  return bytes(data)


def corrupt_first_entry(data):
  """
  Overwrites the first bytes of the first entry's compressed data.
  """

  data = bytearray(data)
  name_length, extra_length = struct.unpack('<HH', data[26:30])
  start = 30 + name_length + extra_length
  data[start:start + 6] = b'\xff' * 6
  return bytes(data)
