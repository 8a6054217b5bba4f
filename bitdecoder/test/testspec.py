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

#!/usr/bin/env python
import unittest

from bitdecoder.cursor import BitCursor, BadOffsetError, ExhaustedError
from bitdecoder.spec import Spec
from bitdecoder.tree import NamedTree

def _field(name, reader):
    def step(cursor, tree):
        tree.put(name, reader(cursor))
        return True
    return step

class TestSpec(unittest.TestCase):
    def test_steps_run_in_order(self):
        spec = Spec([_field('a', BitCursor.read_byte), _field('b', BitCursor.read_byte)])
        tree = spec.decode(b'\x01\x02')
        self.assertEqual(['a', 'b'], list(tree))
        self.assertEqual(1, tree['a'])
        self.assertEqual(2, tree['b'])

    def test_false_step_stops_decode(self):
        calls = []
        def stop(cursor, tree):
            calls.append('stop')
            return False
        def never(cursor, tree):
            calls.append('never')
            return True
        spec = Spec([_field('a', BitCursor.read_byte), stop, never])
        tree = spec.decode(b'\x01\x02')
        self.assertEqual(['stop'], calls)
        self.assertEqual(1, tree['a'])
        self.assertEqual(1, len(tree))

    def test_decode_into_result(self):
        tree = NamedTree()
        self.assertTrue(Spec([_field('a', BitCursor.read_bit)]).decode_into(BitCursor(b'\x80'), tree))
        self.assertEqual(True, tree['a'])
        self.assertFalse(Spec([lambda c, t: False]).decode_into(BitCursor(b'\x80'), tree))

    def test_decode_with_offset(self):
        spec = Spec([_field('a', BitCursor.read_byte)])
        self.assertEqual(3, spec.decode(b'\x01\x02\x03', 2)['a'])
        self.assertRaises(BadOffsetError, spec.decode, b'\x01', 3)

    def test_decode_from_cursor(self):
        spec = Spec([_field('a', BitCursor.read_byte)])
        cursor = BitCursor(b'\x01\x02')
        self.assertEqual(1, spec.decode(cursor)['a'])
        self.assertEqual(2, spec.decode(cursor)['a'])
        self.assertRaises(ExhaustedError, spec.decode, cursor)

    def test_offset_with_cursor(self):
        spec = Spec([_field('a', BitCursor.read_byte)])
        self.assertRaises(ValueError, spec.decode, BitCursor(b'\x01\x02'), 1)

    def test_each_decode_gets_a_new_tree(self):
        spec = Spec([_field('a', BitCursor.read_byte)])
        first = spec.decode(b'\x01')
        second = spec.decode(b'\x02')
        self.assertFalse(first is second)
        self.assertEqual(1, first['a'])
        self.assertEqual(2, second['a'])

    def test_empty_spec(self):
        spec = Spec([])
        self.assertEqual(0, len(spec.decode(b'')))

    def test_steps_are_frozen(self):
        steps = [_field('a', BitCursor.read_byte)]
        spec = Spec(steps)
        steps.append(_field('b', BitCursor.read_byte))
        self.assertEqual(1, len(spec.steps))
        self.assertEqual(['a'], list(spec.decode(b'\x01\x02')))

    def test_name(self):
        self.assertFalse(Spec([]).has_name())
        self.assertFalse(Spec([], '').has_name())
        spec = Spec([], 'header')
        self.assertTrue(spec.has_name())
        self.assertEqual('header', spec.name)
        self.assertEqual("spec 'header'", str(spec))

if __name__ == "__main__":
    unittest.main()
