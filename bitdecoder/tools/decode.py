#   Copyright (C) 2008-2010 Henry Ludemann
#
#   This file is part of the bitdecoder library.
#
#   The bitdecoder library is free software; you can redistribute it
#   and/or modify it under the terms of the GNU Lesser General Public
#   License as published by the Free Software Foundation; either
#   version 2.1 of the License, or (at your option) any later version.
#
#   The bitdecoder library is distributed in the hope that it will be
#   useful, but WITHOUT ANY WARRANTY; without even the implied warranty
#   of MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
#   Lesser General Public License for more details.
#
#   You should have received a copy of the GNU Lesser General Public
#   License along with this library; if not, see
#   <http://www.gnu.org/licenses/>.

import getopt
import importlib
import importlib.util
import logging
import os.path
import sys

import bitdecoder
from bitdecoder.builder import SpecBuilder
from bitdecoder.cursor import BitCursor
import bitdecoder.output.xmlout as xmlout
from bitdecoder.spec import Spec

class LoadError(Exception):
    """Failed to load the spec to decode with."""
    def __init__(self, name, reason):
        self.name = name
        self.reason = reason

    def __str__(self):
        return "Cannot load spec '%s': %s" % (self.name, self.reason)

def _import(module_name):
    if module_name.endswith('.py'):
        if not os.path.exists(module_name):
            raise ImportError("No such file '%s'" % module_name)
        name = os.path.splitext(os.path.basename(module_name))[0]
        module_spec = importlib.util.spec_from_file_location(name, module_name)
        module = importlib.util.module_from_spec(module_spec)
        module_spec.loader.exec_module(module)
        return module
    return importlib.import_module(module_name)

def load_spec(text):
    """Load a spec given '<module>:<attribute>'.

    The module can be an importable module name, or the path to a python
    file. The attribute must be a Spec or a SpecBuilder.
    """
    module_name, sep, attribute = text.rpartition(':')
    if not sep or not module_name or not attribute:
        raise LoadError(text, "expected '<module>:<attribute>'")
    try:
        module = _import(module_name)
    except ImportError as ex:
        raise LoadError(text, str(ex))
    try:
        result = getattr(module, attribute)
    except AttributeError:
        raise LoadError(text, "'%s' has no attribute '%s'" % (module_name, attribute))

    if isinstance(result, SpecBuilder):
        result = result.build()
    if not isinstance(result, Spec):
        raise LoadError(text, "'%s' isn't a spec" % attribute)
    return result

def usage(program):
    print('Decode standard input to xml given a bitdecoder spec.')
    print('Usage:')
    print('   %s [options] <module>:<attribute>' % program)
    print()
    print('Arguments:')
    print('   module -- The module (or python file) holding the spec.')
    print('   attribute -- The name of the Spec (or SpecBuilder) in the module.')
    print()
    print('Options:')
    print('  -f <filename>     Decode from filename instead of stdin.')
    print('  -h, --help        Print this help.')
    print('  -l                Log status messages.')
    print('  --offset=<n>      Start decoding at byte n.')
    print('  -q                Quiet output. Only errors will be printed to stderr.')
    print('  -V                Print the version of bitdecoder.')

def _parse_args(argv):
    verbose = True
    filename = None
    offset = 0
    try:
        opts, args = getopt.getopt(argv[1:], 'f:hlqV', ['help', 'offset='])
    except getopt.GetoptError as ex:
        sys.exit("%s\nSee '%s -h' for correct usage." % (ex, argv[0]))
    for opt, arg in opts:
        if opt == '-f':
            filename = arg
        elif opt in ['-h', '--help']:
            usage(argv[0])
            sys.exit(0)
        elif opt == '--offset':
            try:
                offset = int(arg, 0)
            except ValueError:
                sys.exit("Invalid offset '%s'!" % arg)
        elif opt == '-q':
            verbose = False
        elif opt == "-l":
            logging.basicConfig(level=logging.INFO)
        elif opt == '-V':
            print(bitdecoder.__version__)
            sys.exit(0)
        else:
            assert 0, 'Unhandled option %s!' % opt

    if len(args) != 1:
        sys.exit("Expected a single spec! See '%s -h' for more info." % argv[0])

    return (args[0], filename, offset, verbose)


def main(argv=None):
    if argv is None:
        argv = sys.argv
    spec_name, filename, offset, verbose = _parse_args(argv)
    try:
        spec = load_spec(spec_name)
    except LoadError as ex:
        sys.exit(str(ex))

    if filename is None:
        data = sys.stdin.buffer.read()
    else:
        with open(filename, 'rb') as binary:
            data = binary.read()
    logging.info("Decoding %i bytes from byte %i using %s", len(data), offset, spec)

    try:
        cursor = BitCursor(data, offset)
        tree = spec.decode(cursor)
    except bitdecoder.DecodeError as ex:
        sys.exit("%s: %s" % (spec, ex))

    if verbose:
        xmlout.to_file(tree, sys.stdout, name=spec.name)

    if not cursor.is_exhausted():
        # Only display the first 8 bytes; more isn't particularly useful.
        remaining = data[cursor.get_byte_index():]
        if len(remaining) > 8:
            sys.stderr.write('Over 8 bytes undecoded!\n')
        else:
            sys.stderr.write('Data is still undecoded!\n')
        if not cursor.is_aligned():
            sys.stderr.write('(stopped at bit %i) ' % cursor.get_bit_index())
        sys.stderr.write(remaining[:8].hex() + '\n')

if __name__ == '__main__':
    main()
