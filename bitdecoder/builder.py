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
The bitdecoder.builder module contains the SpecBuilder class, used to put
together a bitdecoder.spec.Spec.

Most builder methods take functions that are called while decoding. These
can be:

 * A callable taking the cursor, eg: BitCursor.read_byte
 * A callable taking the cursor and the tree decoded so far
 * Expression text (see bitdecoder.expression), eg: '${length} - 2'

Methods that decode a sub-spec accept a built Spec, another SpecBuilder, or
a callable that adds steps to a new (unnamed) builder.
"""

import inspect

import bitdecoder.expression as expr
from bitdecoder.spec import DecodeAssertionError, Spec


def _check_name(name):
    if not isinstance(name, str):
        raise TypeError("Expected a name; got %r" % (name,))
    if not name:
        raise ValueError('Empty name!')

def _positional_args(function):
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        # Some builtins don't have a signature; give them everything.
        return 2
    count = 0
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return 2
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD) \
                and param.default is param.empty:
            count += 1
    return count

def _function(value, is_condition=False):
    """Convert a decode-time function to one taking (cursor, tree)."""
    if isinstance(value, str):
        if is_condition:
            expression = expr.compile_condition(value)
        else:
            expression = expr.compile(value)
        return lambda cursor, tree: expression.evaluate(tree)
    if not callable(value):
        raise TypeError("Expected a callable or expression text; got %r" % (value,))

    count = _positional_args(value)
    if count == 1:
        return lambda cursor, tree: value(cursor)
    if count == 2:
        return value
    raise TypeError("%r should take (cursor) or (cursor, tree); it takes %i arguments" % (value, count))

def _spec(decoder):
    """Get a Spec from a spec, builder, or function that populates a builder."""
    if decoder is None or isinstance(decoder, Spec):
        return decoder
    if isinstance(decoder, SpecBuilder):
        return decoder.build()
    if callable(decoder):
        builder = SpecBuilder()
        decoder(builder)
        return builder.build()
    raise TypeError("Cannot create a spec from %r" % (decoder,))

def _decode_child(spec, cursor, tree):
    if spec.has_name():
        tree.put(spec.name, spec.decode(cursor))
    else:
        spec.decode_into(cursor, tree)


class SpecBuilder(object):
    """
    Collects decode steps for a bitdecoder.spec.Spec.

    All of the 'add' methods return the builder, so calls can be chained. The
    steps run in the order they were added.
    """
    def __init__(self, name=None, steps=()):
        self._name = name or None
        self._steps = list(steps)

    def set_name(self, name):
        """Set the name of the spec; an empty name means it is unnamed."""
        self._name = name or None
        return self

    def should_continue(self, step):
        """Add a step that decides whether the rest of the spec is decoded.

        Decoding of this spec stops (without an error) if the step returns a
        false value.
        """
        self._steps.append(_function(step, True))
        return self

    def add_special_parameter(self, decoder):
        """Add a step with full access to the cursor and the (mutable) tree."""
        decoder = _function(decoder)
        def step(cursor, tree):
            decoder(cursor, tree)
            return True
        return self.should_continue(step)

    def read_data(self, reader):
        """Add a step that reads from the cursor without storing anything."""
        return self.add_special_parameter(lambda cursor, tree: reader(cursor))

    def add_parameter(self, name, decoder, condition=None):
        """Store the result of 'decoder' under 'name'.

        The decoder is given a read-only view of the values decoded so far.
        If 'condition' is given and false, the value is left out of the tree.
        """
        _check_name(name)
        decoder = _function(decoder)
        if condition is not None:
            condition = _function(condition, True)
        def step(cursor, tree):
            snapshot = tree.get_immutable()
            if condition is None or condition(cursor, snapshot):
                tree.put(name, decoder(cursor, snapshot))
        return self.add_special_parameter(step)

    def discard_bytes(self, amount):
        """Skip to the end of the current byte, then skip 'amount' bytes.

        amount -- An integer, or a function returning the number of bytes.
        """
        if isinstance(amount, int):
            count = amount
            amount = lambda cursor, tree: count
        amount = _function(amount)
        def step(cursor, tree):
            cursor.finish_byte()
            cursor.read_bytes(amount(cursor, tree))
        return self.add_special_parameter(step)

    def add_choice_parameters(self, predicate, when_true=None, when_false=None, name=None, namer=None):
        """Decode one of two sub-specs depending on 'predicate'.

        If a chosen sub-spec is named, its values are stored in a nested tree
        under that name; otherwise they are added to this tree. A missing
        option decodes nothing.

        name -- If set, the result of the predicate is stored under this name.
        namer -- Converts the predicate result into the value to store (for
            example, a more readable label).
        """
        if name is not None:
            _check_name(name)
        elif namer is not None:
            raise ValueError('A namer needs a name to store its value under!')
        predicate = _function(predicate, True)
        when_true = _spec(when_true)
        when_false = _spec(when_false)
        def step(cursor, tree):
            result = bool(predicate(cursor, tree))
            if name is not None:
                tree.put(name, result if namer is None else namer(result))
            choice = when_true if result else when_false
            if choice is not None:
                _decode_child(choice, cursor, tree)
        return self.add_special_parameter(step)

    def add_nested_parameter(self, decoder, name=None, condition=None):
        """Decode a sub-spec into its own tree.

        The tree is stored under 'name', or the sub-spec's name. If there is
        neither, the sub-spec's values are added directly to this tree.
        If 'condition' is given and false, nothing is decoded or stored.
        """
        spec = _spec(decoder)
        if name is not None:
            _check_name(name)
        else:
            name = spec.name

        if name is not None:
            return self.add_parameter(name, lambda cursor, tree: spec.decode(cursor), condition)
        if condition is None:
            return self.import_parameters(spec)

        condition = _function(condition, True)
        def step(cursor, tree):
            if condition(cursor, tree.get_immutable()):
                spec.decode_into(cursor, tree)
        return self.add_special_parameter(step)

    def merge(self, other):
        """Add all of the steps from another builder."""
        if not isinstance(other, SpecBuilder):
            raise TypeError("Can only merge with a SpecBuilder; got %r" % (other,))
        self._steps.extend(other._steps)
        return self

    def apply(self, fragment):
        """Call 'fragment' with this builder, to add a reusable set of steps."""
        fragment(self)
        return self

    def import_parameters(self, spec):
        """Decode all of the steps of 'spec' directly into this tree.

        The imported spec stopping early doesn't stop this spec.
        """
        spec = _spec(spec)
        return self.add_special_parameter(spec.decode_into)

    def assert_reader(self, check, message):
        """Fail the decode if 'check(cursor)' is false."""
        def step(cursor, tree):
            if not check(cursor):
                raise DecodeAssertionError(message)
        return self.add_special_parameter(step)

    def assert_data(self, check, message):
        """Fail the decode if the decoded values don't pass 'check'.

        check -- Either a function that is given a lookup function (name to
            value, or None), or condition expression text.
        """
        if isinstance(check, str):
            expression = expr.compile_condition(check)
            test = expression.evaluate
        else:
            test = lambda tree: check(tree.get)
        def step(cursor, tree):
            if not test(tree):
                raise DecodeAssertionError(message)
        return self.add_special_parameter(step)

    def assert_previous_parameter(self, check, message):
        """Fail the decode if the most recently stored value fails 'check'."""
        def step(cursor, tree):
            if not check(tree.get(tree.get_last_modified())):
                raise DecodeAssertionError(message)
        return self.add_special_parameter(step)

    def copy(self):
        """Create an independent builder with the same name and steps."""
        return SpecBuilder(self._name, self._steps)

    def build(self):
        return Spec(self._steps, self._name)

    def __repr__(self):
        return "%s(%r, %i steps)" % (self.__class__.__name__, self._name, len(self._steps))
