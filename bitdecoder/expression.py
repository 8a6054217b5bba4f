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
Textual expressions that reference previously decoded values.

Integer expressions look like '${length} * 8 - len{header}'. Conditions add
comparisons and boolean operators, eg: '${version} >= 2 and ${flags} & 0x1'.
"""

from functools import reduce
import operator

import bitdecoder

# A list of supported operators, in order of precedence
_operators = [
        [
            ('*', operator.mul),
            ('/', operator.floordiv),
            ('%', operator.mod),
        ],
        [
            ('+', operator.add),
            ('-', operator.sub),
        ],
        [
            ('<<', operator.lshift),
            ('>>', operator.rshift),
        ],
        [
            ('&', operator.and_),
        ],
        [
            ('|', operator.or_),
        ],
    ]

# Longer comparisons come first so '<=' isn't parsed as '<'.
_comparisons = [
        ('==', operator.eq),
        ('!=', operator.ne),
        ('<=', operator.le),
        ('>=', operator.ge),
        ('<', operator.lt),
        ('>', operator.gt),
    ]


class UndecodedReferenceError(bitdecoder.DecodeError):
    """
    Raised when an expression references a value that hasn't been decoded.
    """
    def __init__(self, name):
        self.name = name

    def __str__(self):
        return "Expression references '%s', but it hasn't been decoded!" % self.name

class ExpressionError(Exception):
    def __init__(self, ex):
        self.error = ex

    def __str__(self):
        return str(self.error)


def _lookup(context, name):
    try:
        lookup = context.lookup
    except AttributeError:
        lookup = context.__getitem__
    try:
        return lookup(name)
    except KeyError:
        raise UndecodedReferenceError(name)


class Expression(object):
    """
    An object that returns a value given the values decoded so far.
    """
    def evaluate(self, context):
        raise NotImplementedError


class Delayed(Expression):
    """
    Class to delay the operation of an integer operation.

    This is because some parts of an expression may not be accessible until
    the expression is used (for example, an expression object that
    references the decoded value of another field).
    """
    def __init__(self, op, left, right):
        self.op = op
        assert isinstance(left, Expression)
        assert isinstance(right, Expression)
        self.left = left
        self.right = right

    def evaluate(self, context):
        return self.op(self.left.evaluate(context), self.right.evaluate(context))

    def __str__(self):
        lookup = dict((op, name) for name, op in _comparisons)
        for ops in _operators:
            lookup.update((op, name) for name, op in ops)
        return '(%s %s %s)' % (self.left, lookup[self.op], self.right)


class Constant(Expression):
    def __init__(self, value):
        self.value = value

    def evaluate(self, context):
        return self.value

    def __str__(self):
        return str(self.value)


class ValueResult(Expression):
    """
    Object returning the decoded value of a named entry.

    Bytes values are converted to a big endian integer.
    """
    def __init__(self, name):
        assert isinstance(name, str)
        self.name = name

    def evaluate(self, context):
        value = _lookup(context, self.name)
        if isinstance(value, (bytes, bytearray)):
            value = int.from_bytes(value, 'big')
        return value

    def __str__(self):
        return '${%s}' % self.name


class LengthResult(Expression):
    """
    Object returning the length of a decoded value (eg: a number of bytes).
    """
    def __init__(self, name):
        assert isinstance(name, str)
        self.name = name

    def evaluate(self, context):
        return len(_lookup(context, self.name))

    def __str__(self):
        return "len{%s}" % self.name


class Not(Expression):
    def __init__(self, expression):
        self.expression = expression

    def evaluate(self, context):
        return not self.expression.evaluate(context)

    def __str__(self):
        return 'not %s' % self.expression


class BooleanAnd(Expression):
    """All of the child expressions must be true.

    Evaluation stops at the first false child, so later children can
    reference values that only exist when earlier children are true.
    """
    def __init__(self, children):
        self.children = list(children)

    def evaluate(self, context):
        return all(child.evaluate(context) for child in self.children)

    def __str__(self):
        return '(%s)' % ' and '.join(str(c) for c in self.children)


class BooleanOr(Expression):
    def __init__(self, children):
        self.children = list(children)

    def evaluate(self, context):
        return any(child.evaluate(context) for child in self.children)

    def __str__(self):
        return '(%s)' % ' or '.join(str(c) for c in self.children)


def _half(op):
    """
    Create a handler to handle half of a binary expression.

    The handler returns a callable object that takes the second half
    of the binary expression.
    """
    def handler(s,l,t):
        return lambda left: Delayed(op, left, t[1])
    return handler

def _collapse(s,l,t):
    """
    Collapse a series of half binary expressions into one.
    """
    # Note that here we are assuming the first item is complete, and
    # the rest of the items are 'half' expressions.
    result = t[0]
    for next in t[1:]:
        result = next(result)
    return result

def _join(klass):
    """Create a handler joining 'a op b op c' into a single klass instance."""
    def handler(s,l,t):
        children = t[0::2]
        if len(children) == 1:
            return children[0]
        return klass(children)
    return handler

def _int_expression():
    from pyparsing import Word, alphanums, nums, Forward, ZeroOrMore, Combine, CaselessLiteral, srange
    entry_name = Word(alphanums + ' _+:.-')
    integer = Word(nums).add_parse_action(lambda s,l,t: [Constant(int(t[0]))])
    hex = Combine(CaselessLiteral("0x") + Word(srange("[0-9a-fA-F]"))).add_parse_action(lambda s,l,t:[Constant(int(t[0][2:], 16))])
    named_reference = ('${' + entry_name + '}').add_parse_action(lambda s,l,t:ValueResult(t[1].strip()))
    length_reference = ('len{' + entry_name + '}').add_parse_action(lambda s,l,t:LengthResult(t[1].strip()))

    expression = Forward()
    factor = hex | integer | named_reference | length_reference | ('(' + expression + ')').add_parse_action(lambda s,l,t:t[1])

    entry = factor
    for ops in _operators:
        op_parse = reduce(operator.or_,
                [(character + entry).add_parse_action(_half(op)) for character, op in ops])
        entry = (entry + ZeroOrMore(op_parse)).add_parse_action(_collapse)
    expression <<= entry
    return expression

def _condition_expression():
    from pyparsing import Forward, Literal, ZeroOrMore, Optional, CaselessKeyword

    integer = _int_expression()
    operators = dict(_comparisons)
    comparator = reduce(operator.or_, [Literal(name) for name, op in _comparisons])
    def compare(s,l,t):
        if len(t) == 1:
            # An integer on its own is true if it is non-zero.
            return t[0]
        return Delayed(operators[t[1]], t[0], t[2])
    comparison = (integer + Optional(comparator + integer)).add_parse_action(compare)

    condition = Forward()
    not_ = Literal('!') | CaselessKeyword('not')
    factor = Forward()
    factor <<= (not_ + factor).add_parse_action(lambda s,l,t:Not(t[1])) | \
            comparison | ('(' + condition + ')').add_parse_action(lambda s,l,t:t[1])

    and_ = Literal('&&') | CaselessKeyword('and')
    and_expression = (factor + ZeroOrMore(and_ + factor)).add_parse_action(_join(BooleanAnd))
    or_ = Literal('||') | CaselessKeyword('or')
    condition <<= (and_expression + ZeroOrMore(or_ + and_expression)).add_parse_action(_join(BooleanOr))
    return condition

def _parse(grammar, text):
    from pyparsing import StringEnd, ParseBaseException
    complete = grammar + StringEnd()
    try:
        return complete.parse_string(text)[0]
    except ParseBaseException as ex:
        raise ExpressionError(ex)

def compile(text):
    """
    Compile an integer expression.

    text -- The expression text, eg: '${length} - 2'.
    return -- An Expression instance
    """
    return _parse(_int_expression(), text)

def compile_condition(text):
    """
    Compile a boolean expression.

    text -- The expression text, eg: '${type} == 3 or not ${flag}'.
    return -- An Expression instance; its result should be treated as a
        boolean.
    """
    return _parse(_condition_expression(), text)
