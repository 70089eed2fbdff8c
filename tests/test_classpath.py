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

import logging

from jarutils import lib_jar, open_war
from webbundle.classpath import derive_classpath, is_library_jar, resolve_class_path, scan_entries


def classpath_of(files):
  with open_war(files) as archive:
    return derive_classpath(archive.entries())


def test_is_library_jar():
  assert is_library_jar('WEB-INF/lib/a.jar')
  assert not is_library_jar('WEB-INF/lib/sub/a.jar')
  assert not is_library_jar('WEB-INF/lib/a.zip')
  assert not is_library_jar('lib/a.jar')


def test_resolve_class_path():
  assert resolve_class_path('WEB-INF/lib/a.jar', 'b.jar') == ['WEB-INF/lib/b.jar']
  assert resolve_class_path('WEB-INF/lib/a.jar', '../../b.jar ../c.jar') == ['b.jar', 'WEB-INF/c.jar']


def test_no_libraries():
  assert classpath_of([('index.jsp', b'')]) == 'WEB-INF/classes'


def test_nested_directory_jars_are_not_libraries():
  files = [
    ('WEB-INF/lib/', b''),
    ('WEB-INF/lib/a.jar', lib_jar()),
    ('WEB-INF/lib/sub/b.jar', lib_jar()),
  ]
  assert classpath_of(files) == 'WEB-INF/classes,WEB-INF/lib/a.jar'
  with open_war(files) as archive:
    scan = scan_entries(archive.entries())
  assert scan.all_jar_names == {'WEB-INF/lib/a.jar', 'WEB-INF/lib/sub/b.jar'}


def test_directory_entries_are_ignored():
  assert classpath_of([('WEB-INF/lib/x.jar/', b'')]) == 'WEB-INF/classes'


def test_referenced_jar_included_if_present():
  files = [
    ('WEB-INF/lib/a.jar', lib_jar('../../b.jar')),
    ('b.jar', lib_jar()),
  ]
  assert classpath_of(files) == 'WEB-INF/classes,WEB-INF/lib/a.jar,b.jar'


def test_referenced_jar_excluded_if_missing(caplog):
  caplog.set_level(logging.INFO, logger='webbundle')
  files = [('WEB-INF/lib/a.jar', lib_jar('../../b.jar'))]
  assert classpath_of(files) == 'WEB-INF/classes,WEB-INF/lib/a.jar'
  assert 'Excluding b.jar' in caplog.text


def test_discovery_order_without_duplicates():
  files = [
    ('WEB-INF/lib/z.jar', lib_jar('c.jar b.jar')),
    ('WEB-INF/lib/b.jar', lib_jar()),
    ('WEB-INF/lib/c.jar', lib_jar()),
    ('WEB-INF/lib/a.jar', lib_jar()),
  ]
  assert classpath_of(files) == \
    'WEB-INF/classes,WEB-INF/lib/z.jar,WEB-INF/lib/c.jar,WEB-INF/lib/b.jar,WEB-INF/lib/a.jar'


def test_references_are_resolved_one_level_deep():
  files = [
    ('WEB-INF/lib/a.jar', lib_jar('../other/c.jar')),
    ('WEB-INF/other/c.jar', lib_jar('d.jar')),
    ('WEB-INF/other/d.jar', lib_jar()),
  ]
  assert classpath_of(files) == 'WEB-INF/classes,WEB-INF/lib/a.jar,WEB-INF/other/c.jar'


def test_unreadable_library_jar_is_skipped(caplog):
  files = [
    ('WEB-INF/lib/broken.jar', b'this is not a zip file'),
    ('WEB-INF/lib/a.jar', lib_jar()),
  ]
  assert classpath_of(files) == 'WEB-INF/classes,WEB-INF/lib/broken.jar,WEB-INF/lib/a.jar'
  assert 'Skipping Class-Path of WEB-INF/lib/broken.jar' in caplog.text


def test_library_jar_without_manifest():
  from jarutils import make_jar
  files = [('WEB-INF/lib/a.jar', make_jar([('A.class', b'')]))]
  assert classpath_of(files) == 'WEB-INF/classes,WEB-INF/lib/a.jar'


def test_encrypted_library_manifest_is_skipped(caplog):
  from jarutils import mark_first_entry_encrypted
  files = [
    ('WEB-INF/lib/a.jar', mark_first_entry_encrypted(lib_jar('b.jar'))),
    ('WEB-INF/lib/c.jar', lib_jar()),
  ]
  assert classpath_of(files) == 'WEB-INF/classes,WEB-INF/lib/a.jar,WEB-INF/lib/c.jar'
  assert 'Skipping Class-Path of WEB-INF/lib/a.jar' in caplog.text
