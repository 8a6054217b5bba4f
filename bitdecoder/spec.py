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

"""
The bitdecoder.spec module defines the Spec class, which runs a list of
decode steps against a cursor.

A decode step is a callable taking (cursor, tree), that may read from the
cursor and store values in the tree. It returns True if decoding should
continue with the next step, or False to stop decoding the spec (keeping the
values decoded so far).
"""

import logging

import bitdecoder
from bitdecoder.cursor import BitCursor
from bitdecoder.tree import NamedTree

class DecodeAssertionError(bitdecoder.DecodeError):
    """A check added to a spec failed while decoding."""
    def __init__(self, message):
        self.message = message

    def __str__(self):
        return "Assertion failed: %s" % self.message


class Spec(object):
    """
    An immutable list of decode steps, with an optional name.

    A spec is created by a bitdecoder.builder.SpecBuilder, and can be used for
    any number of decodes.
    """
    def __init__(self, steps, name=None):
        self._steps = tuple(steps)
        for step in self._steps:
            assert callable(step), "Decode step '%s' isn't callable!" % step
        self._name = name or None

    @property
    def name(self):
        return self._name

    @property
    def steps(self):
        return self._steps

    def has_name(self):
        return self._name is not None

    @staticmethod
    def builder(name=None):
        """ Shortcut to bitdecoder.builder.SpecBuilder(name) """
        from bitdecoder.builder import SpecBuilder
        return SpecBuilder(name)

    def decode(self, source, offset=0):
        """Decode into a new NamedTree.

        source -- A bytes-like buffer, or a BitCursor to continue reading from.
        offset -- The byte to start from when 'source' is a buffer.
        """
        if isinstance(source, BitCursor):
            if offset != 0:
                raise ValueError('Cannot use an offset when decoding from a cursor!')
            cursor = source
        else:
            cursor = BitCursor(source, offset)
        tree = NamedTree()
        self.decode_into(cursor, tree)
        return tree

    def decode_into(self, cursor, tree):
        """Run the decode steps, storing values in an existing tree.

        Returns True if all steps ran, or False if a step stopped the decode.
        """
        for i, step in enumerate(self._steps):
            if not step(cursor, tree):
                logging.debug("%s stopped after step %i of %i at byte %i",
                        self, i + 1, len(self._steps), cursor.get_byte_index())
                return False
        return True

    def __str__(self):
        if self._name is None:
            return 'unnamed spec'
        return "spec '%s'" % self._name

    def __repr__(self):
        return "%s(%r, %i steps)" % (self.__class__.__name__, self._name, len(self._steps))
