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

import argparse
import contextlib
import logging
import os
import sys

from .config import DEFAULT_CONFIG_FILE, load_config
from .errors import WebBundleError
from .processor import ManifestProcessor


@contextlib.contextmanager
def open_cli_file(filename):
  if not filename:
    yield sys.stdout.buffer
  else:
    with open(filename, 'wb') as fp:
      yield fp


def configure_logging(verbose, quiet):
  level = logging.INFO
  if quiet:
    level = logging.WARNING
  elif verbose:
    level = logging.DEBUG
  handler = logging.StreamHandler(sys.stderr)
  handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
  logger = logging.getLogger('webbundle')
  logger.handlers[:] = [handler]
  logger.setLevel(level)


def get_argument_parser(prog=None):
  parser = argparse.ArgumentParser(
    prog=prog,
    description='Compute the OSGi Web Application Bundle manifest of a web archive.')

  parser.add_argument(
    'locator',
    help='Path or URL of the web archive. A "webbundle:" prefix is accepted '
         'and a query part (?Web-ContextPath=/app&...) is used as the '
         'override parameters.')

  parser.add_argument(
    '-Q', '--query',
    default=None,
    metavar='QUERY',
    help='Override parameters, e.g. "Web-ContextPath=/app&Bundle-Version=1.0". '
         'Takes precedence over the query part of the locator.')

  parser.add_argument(
    '-o', '--output',
    default=None,
    metavar='FILE',
    help='Write the manifest to FILE instead of stdout.')

  parser.add_argument(
    '--config-file',
    default=None,
    metavar='PATH',
    help='Load the specified configuration file. Defaults to "{}" in the '
         'current directory if the file exists.'.format(DEFAULT_CONFIG_FILE))

  parser.add_argument(
    '-O', '--option',
    dest='options',
    action='append',
    default=[],
    metavar='K=V',
    help='Override an option value, e.g. webbundle:symbolicNamePrefix=com.example_')

  parser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='Log the input and output of every processing step.')

  parser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='Only log warnings and errors.')

  return parser


def main(argv=None, prog=None):
  parser = get_argument_parser(prog)
  args = parser.parse_args(argv)
  configure_logging(args.verbose, args.quiet)

  if not args.config_file and os.path.isfile(DEFAULT_CONFIG_FILE):
    args.config_file = DEFAULT_CONFIG_FILE

  cmdline_options = {}
  for opt in args.options:
    key, sep, value = opt.partition('=')
    if not sep:
      parser.error('invalid --option argument: {!r}'.format(opt))
    cmdline_options[key] = value

  try:
    config = load_config(args.config_file, cmdline_options)
    manifest = ManifestProcessor(config).process(args.locator, args.query)
  except WebBundleError as exc:
    print('fatal: {}'.format(exc), file=sys.stderr)
    return 1

  with open_cli_file(args.output) as fp:
    fp.write(manifest.to_bytes())
  return 0


if __name__ == '__main__':
  sys.exit(main())
