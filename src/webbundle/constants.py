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
Header names and default values used when deriving a Web Application Bundle
manifest from a plain web archive.
"""

MANIFEST_VERSION = 'Manifest-Version'
BUNDLE_SYMBOLICNAME = 'Bundle-SymbolicName'
BUNDLE_VERSION = 'Bundle-Version'
BUNDLE_MANIFESTVERSION = 'Bundle-ManifestVersion'
BUNDLE_CLASSPATH = 'Bundle-ClassPath'
IMPORT_PACKAGE = 'Import-Package'
DYNAMICIMPORT_PACKAGE = 'DynamicImport-Package'
WEB_CONTEXT_PATH = 'Web-ContextPath'
CLASS_PATH = 'Class-Path'

MANIFEST_NAME = 'META-INF/MANIFEST.MF'

# The headers that can be customized with query parameters. The presence of
# any of them in the original manifest makes the archive a WAB.
SUPPORTED_QUERY_PARAM_NAMES = (
  BUNDLE_SYMBOLICNAME,
  BUNDLE_VERSION,
  BUNDLE_MANIFESTVERSION,
  IMPORT_PACKAGE,
  WEB_CONTEXT_PATH,
)

DEFAULT_MANIFEST_VERSION = '2'
DEFAULT_IMPORT_PACKAGE = (
  'javax.servlet; javax.servlet.http; version=2.5, '
  'javax.servlet.jsp; javax.servlet.jsp.tagext;'
  'javax.el; javax.servlet.jsp.el; version=2.1'
)
DEFAULT_SYMBOLICNAME_PREFIX = 'org.glassfish.fighterfish.autogenerated_'

# Always present, otherwise the framework defaults Bundle-ClassPath to "."
# when there are no library jars. Must not end with a slash.
DEFAULT_BUNDLE_CLASSPATH = 'WEB-INF/classes'
LIB_DIR = 'WEB-INF/lib/'
JAR_EXT = '.jar'
