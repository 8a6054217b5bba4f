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
Trees of named values produced by decoding.

A field that wasn't decoded is absent from the tree; this is different from
a field that was decoded with a value of None.
"""

class _Tree(object):
    """Read access common to mutable and frozen trees."""
    def __init__(self, items=()):
        self._children = dict(items)

    def get(self, name, default=None):
        return self._children.get(name, default)

    def __getitem__(self, name):
        return self._children[name]

    def __contains__(self, name):
        return name in self._children

    def __iter__(self):
        return iter(self._children)

    def __len__(self):
        return len(self._children)

    def keys(self):
        return self._children.keys()

    def items(self):
        return self._children.items()

    def lookup(self, path):
        """Get a value using a dotted path through nested trees.

        For example, 'header.length' returns the 'length' value of the nested
        'header' tree. Raises KeyError if any part of the path is absent.
        """
        if path in self._children:
            return self._children[path]
        value = self
        for name in path.split('.'):
            if not isinstance(value, _Tree):
                raise KeyError(path)
            try:
                value = value._children[name]
            except KeyError:
                raise KeyError(path)
        return value

    def to_dict(self):
        """Convert to (possibly nested) plain dictionaries."""
        result = {}
        for name, value in self._children.items():
            if isinstance(value, _Tree):
                value = value.to_dict()
            result[name] = value
        return result

    def __eq__(self, other):
        if not isinstance(other, _Tree):
            return NotImplemented
        return self._children == other._children

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__,
                ', '.join('%s=%r' % (name, value) for name, value in self._children.items()))


class FrozenTree(_Tree):
    """A read-only snapshot of a NamedTree."""


class NamedTree(_Tree):
    """
    An ordered collection of named values.

    Values are either plain values (integers, bytes, booleans, ...) or nested
    NamedTree instances.
    """
    def __init__(self, items=()):
        _Tree.__init__(self, items)
        self._last_modified = None
        for name in self._children:
            self._last_modified = name

    def put(self, name, value):
        """Store a value, replacing any previous value with the same name."""
        self._children[name] = value
        self._last_modified = name

    def get_last_modified(self):
        """The name of the value most recently stored, or None."""
        return self._last_modified

    def get_immutable(self):
        """Return a FrozenTree holding the values stored so far.

        Nested trees are frozen too, so nothing in the snapshot can be
        changed.
        """
        items = []
        for name, value in self._children.items():
            if isinstance(value, NamedTree):
                value = value.get_immutable()
            items.append((name, value))
        return FrozenTree(items)
