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
Reads the deployer supplied override parameters from the query part of a
`webbundle:` locator.
"""

import logging
import re
import typing as t
import urllib.parse

from .constants import SUPPORTED_QUERY_PARAM_NAMES

log = logging.getLogger(__name__)

# Characters that may appear in the query component of a URI, non-ASCII
# characters other than controls and spaces, plus the percent sign which must
# be followed by two hex digits.
_QUERY_REGEX = re.compile(r"^(?:[A-Za-z0-9\-._~!$&'()*+,;=:@/?\[\]]|[^\x00-\x9F\s]|%[0-9A-Fa-f]{2})*$")


def decode_query(encoded_query: t.Optional[str]) -> t.Optional[str]:
  """
  Percent-decodes *encoded_query*. If the string is not a valid URI query
  (e.g. it contains spaces or a broken escape sequence), it is assumed to be
  decoded already and returned unchanged. Some callers pass decoded queries,
  so this never fails.
  """

  if encoded_query is None:
    return None
  log.debug('encodedQuery = {}'.format(encoded_query))
  if _QUERY_REGEX.match(encoded_query):
    decoded_query = urllib.parse.unquote(encoded_query)
  else:
    log.info('Assuming query {!r} is already decoded'.format(encoded_query))
    decoded_query = encoded_query
  log.debug('decodedQuery = {}'.format(decoded_query))
  return decoded_query


def canonical_name(name: str) -> str:
  """
  Returns the canonical spelling of a supported parameter *name*, compared
  case-insensitively. Other names are returned unchanged.
  """

  for supported_name in SUPPORTED_QUERY_PARAM_NAMES:
    if supported_name.lower() == name.lower():
      return supported_name
  return name


def read_query_params(query: t.Optional[str]) -> t.Dict[str, t.Optional[str]]:
  """
  Parses a decoded query string into a dictionary. Parameters are separated
  by `&`, names and values by the first `=`. A parameter without a value maps
  to #None. The last occurrence of a parameter wins.
  """

  params = {}
  if query is None:
    return params
  log.debug('Input query params = {}'.format(query))
  for token in query.split('&'):
    if not token:
      continue
    name, _, value = token.partition('=')
    params[canonical_name(name)] = value or None
  log.debug('Canonicalized query params = {}'.format(params))
  return params


def canonicalize(raw_query: t.Optional[str]) -> t.Dict[str, t.Optional[str]]:
  """
  Decodes and parses the raw query of a locator.
  """

  return read_query_params(decode_query(raw_query))
