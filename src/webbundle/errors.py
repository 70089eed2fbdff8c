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
Exceptions raised while turning a web archive manifest into a bundle manifest.
"""


class WebBundleError(RuntimeError):
  pass


class InvalidCustomizationError(WebBundleError):
  """
  Raised when an archive that is already a Web Application Bundle is given
  override parameters other than `Web-ContextPath`.
  """


class MissingRequiredParameterError(WebBundleError):
  """
  Raised when the mandatory `Web-ContextPath` parameter is not supplied.
  """

  def __init__(self, name):
    super().__init__('missing required parameter: {}'.format(name))
    self.name = name


class ArchiveReadError(WebBundleError):
  """
  Raised when the primary archive can not be opened or read. The original
  exception is available as `__cause__`.
  """

  def __init__(self, locator, reason):
    super().__init__('could not read archive {!r}: {}'.format(locator, reason))
    self.locator = locator
    self.reason = reason


class NestedArchiveReadError(WebBundleError):
  """
  Raised when the manifest of a library jar inside the archive can not be
  read. This is the only error that is recovered from locally.
  """

  def __init__(self, entry_name, reason):
    super().__init__('could not read nested archive {!r}: {}'.format(entry_name, reason))
    self.entry_name = entry_name
    self.reason = reason


class ManifestFormatError(WebBundleError):
  pass


class ConfigError(WebBundleError):
  pass
