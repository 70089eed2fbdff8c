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

import io
import pytest

from webbundle.errors import ManifestFormatError
from webbundle.manifest import Attributes, Manifest, parse_manifest, write_manifest


class TestAttributes:

  def test_case_insensitive_keys(self):
    attrs = Attributes()
    attrs['Bundle-ClassPath'] = 'a'
    assert 'bundle-classpath' in attrs
    assert attrs['BUNDLE-CLASSPATH'] == 'a'
    attrs['bundle-classpath'] = 'b'
    assert list(attrs.items()) == [('Bundle-ClassPath', 'b')]

  def test_replacing_keeps_position(self):
    attrs = Attributes([('A', '1'), ('B', '2'), ('C', '3')])
    attrs['b'] = '4'
    assert list(attrs) == ['A', 'B', 'C']
    assert attrs['B'] == '4'
    del attrs['a']
    assert list(attrs) == ['B', 'C']

  def test_rejects_non_string_values(self):
    with pytest.raises(TypeError):
      Attributes()['A'] = None

  def test_copy_is_independent(self):
    attrs = Attributes([('A', '1')])
    other = attrs.copy()
    other['A'] = '2'
    assert attrs['A'] == '1'


def test_parse_manifest():
  manifest = parse_manifest(
    b'Manifest-Version: 1.0\r\n'
    b'Class-Path: a.jar\r\n'
    b'  b.jar\r\n'
    b'\r\n'
    b'Name: WEB-INF/classes/A.class\r\n'
    b'SHA-256-Digest: abc=\r\n'
    b'\r\n')
  assert list(manifest.main.items()) == [
    ('Manifest-Version', '1.0'), ('Class-Path', 'a.jar b.jar')]
  assert list(manifest.entries) == ['WEB-INF/classes/A.class']
  assert manifest.entries['WEB-INF/classes/A.class']['SHA-256-Digest'] == 'abc='


def test_parse_manifest_lf_and_missing_trailing_newline():
  manifest = parse_manifest('Manifest-Version: 1.0\nEmpty:\n\nName: a\nX: y')
  assert manifest.main['Empty'] == ''
  assert manifest.entries['a']['X'] == 'y'


def test_parse_empty_manifest():
  assert parse_manifest(b'') == Manifest()


def test_parse_invalid_header():
  with pytest.raises(ManifestFormatError):
    parse_manifest('Manifest-Version 1.0\n')


def test_parse_entry_section_without_name():
  with pytest.raises(ManifestFormatError):
    parse_manifest('Manifest-Version: 1.0\n\nX-Digest: abc\n')


def test_write_manifest_wraps_long_lines():
  value = ','.join('WEB-INF/lib/library-{}.jar'.format(i) for i in range(10))
  manifest = Manifest(Attributes([('Bundle-ClassPath', value), ('Manifest-Version', '1.0')]))
  data = manifest.to_bytes()
  lines = data.split(b'\r\n')
  assert lines[0] == b'Manifest-Version: 1.0'
  assert all(len(line) <= 72 for line in lines)
  assert all(line.startswith(b' ') for line in lines[2:-2])
  assert parse_manifest(data).main['Bundle-ClassPath'] == value


def test_write_manifest_does_not_split_characters():
  manifest = Manifest(Attributes([('Bundle-Name', 'ä' * 50)]))
  data = manifest.to_bytes()
  assert all(len(line) <= 72 for line in data.split(b'\r\n'))
  assert parse_manifest(data).main['Bundle-Name'] == 'ä' * 50


def test_write_manifest_entries():
  manifest = Manifest(Attributes([('Manifest-Version', '1.0')]),
                      {'a/b.txt': Attributes([('X', 'y')])})
  fp = io.StringIO()
  write_manifest(fp, manifest)
  assert fp.getvalue() == 'Manifest-Version: 1.0\r\n\r\nName: a/b.txt\r\nX: y\r\n\r\n'


@pytest.mark.parametrize('value', ['/app\r\nBundle-Version: 9.9', 'a\nb', 'a\rb', 'a\0b'])
def test_attributes_reject_line_breaks(value):
  attrs = Attributes([('Web-ContextPath', '/old')])
  with pytest.raises(ManifestFormatError):
    attrs['Web-ContextPath'] = value
  assert attrs['Web-ContextPath'] == '/old'


@pytest.mark.parametrize('name', ['', 'has space', 'a:b', '-leading', 'x' * 71])
def test_attributes_reject_invalid_names(name):
  with pytest.raises(ManifestFormatError):
    Attributes()[name] = 'value'


def test_attributes_accept_header_names():
  attrs = Attributes()
  attrs['SHA-256-Digest'] = 'a'
  attrs['X_Custom'] = 'b'
  attrs['x' * 70] = 'c'
  assert len(attrs) == 3
