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
The bitdecoder.cursor module contains the BitCursor class, and all errors
related to reading from it.
"""

import logging

import bitdecoder

class CursorError(bitdecoder.DecodeError):
    """Base class for all cursor errors."""
    def __str__(self):
        return 'Cursor error!'

class BitWidthError(CursorError):
    """A read asked for more bits than the method supports."""
    def __init__(self, requested, maximum):
        self.requested = requested
        self.maximum = maximum

    def __str__(self):
        return "Asked for %i bits, but can only read between 0 and %i bits!" % (self.requested, self.maximum)

class NegativeLengthError(BitWidthError):
    """A negative amount of bytes was requested."""
    def __init__(self, requested):
        BitWidthError.__init__(self, requested, None)
        assert self.requested < 0

    def __str__(self):
        return "Cursor asked for %i bytes!" % self.requested

class NotEnoughDataError(CursorError):
    """Not enough data was available to fulfill the request."""
    def __init__(self, requested_length, available_length):
        self.requested = requested_length
        self.available = available_length

    def __str__(self):
        return "Asked for %i bits, but only have %i bits available!" % (self.requested, self.available)

class BadOffsetError(NotEnoughDataError):
    """The cursor was asked to start outside of its buffer."""
    def __init__(self, offset, length):
        NotEnoughDataError.__init__(self, offset * 8, length * 8)
        self.offset = offset
        self.length = length

    def __str__(self):
        return "Cannot start reading at byte %i of a %i byte buffer!" % (self.offset, self.length)

class CursorStateError(CursorError):
    """The cursor is not in a state that allows the operation."""
    def __str__(self):
        return 'Invalid cursor state!'

class ExhaustedError(CursorStateError):
    """A read was attempted after the cursor ran out of data."""
    def __init__(self, byte_index):
        self.byte_index = byte_index

    def __str__(self):
        return "Cursor is exhausted at byte %i; no more data can be read!" % self.byte_index

class NotAlignedError(CursorStateError):
    """A byte aligned operation was attempted part way through a byte."""
    def __init__(self, byte_index, bit_index):
        self.byte_index = byte_index
        self.bit_index = bit_index

    def __str__(self):
        return "Expected to be on a byte boundary, but cursor is at bit %i of byte %i!" % (self.bit_index, self.byte_index)


_MASKS = [(1 << i) - 1 for i in range(9)]

def _check_width(bits, maximum):
    if bits < 0 or bits > maximum:
        raise BitWidthError(bits, maximum)

def _check_count(count):
    if count < 0:
        raise NegativeLengthError(count)


class BitCursor(object):
    """
    Reads bits and bytes from a fixed buffer.

    Bits are read most significant first. The cursor only ever moves forward;
    once the end of the buffer is reached the cursor is 'exhausted', and all
    further reads will fail.
    """
    def __init__(self, buffer, offset=0):
        """Construct a cursor.

        buffer -- A bytes, bytearray or memoryview instance. The contents are
            copied, so later changes to the buffer aren't seen by the cursor.
        offset -- The byte to start reading from. If equal to the length of
            the buffer, the cursor starts out exhausted.
        """
        if not isinstance(buffer, (bytes, bytearray, memoryview)):
            raise TypeError("Unknown data source '%s'" % type(buffer))
        self._buffer = bytes(buffer)
        if offset < 0 or offset > len(self._buffer):
            raise BadOffsetError(offset, len(self._buffer))

        self._byte_index = offset
        self._bit_index = 0
        self._current_byte = None
        self._exhausted = False
        self._properties = {}
        self._load_byte()

    def _load_byte(self):
        if self._byte_index >= len(self._buffer):
            self._exhausted = True
            self._current_byte = None
        else:
            self._current_byte = self._buffer[self._byte_index]

    def _next_byte(self):
        assert self._bit_index == 8, 'Moving to the next byte from bit %i!' % self._bit_index
        self._check_exhausted()
        self._byte_index += 1
        self._bit_index = 0
        self._load_byte()

    def _check_exhausted(self):
        if self._exhausted:
            raise ExhaustedError(self._byte_index)

    def _read(self, bits):
        """Read up to 8 bits, crossing into the next byte if needed."""
        assert 0 <= bits <= 8
        if bits == 0:
            return 0
        self._check_exhausted()
        diff = 8 - self._bit_index
        if diff >= bits:
            value = self._current_byte >> (diff - bits)
            self._bit_index += bits
        else:
            offset = bits - diff
            value = self._current_byte << offset
            self._bit_index += diff
            self._next_byte()
            if self._exhausted:
                raise NotEnoughDataError(bits, diff)
            value |= self._current_byte >> (8 - offset)
            self._bit_index += offset

        # Move to the next byte as soon as this one is finished, so the
        # current byte is always one that still has bits to read.
        if self._bit_index == 8:
            self._next_byte()
        return value & _MASKS[bits]

    def _read_wide(self, bits):
        value = 0
        for i in range(bits // 8):
            value = (value << 8) | self._read(8)
        remainder = bits % 8
        if remainder:
            value = (value << remainder) | self._read(remainder)
        return value

    def get_bit_index(self):
        """The number of bits already read from the current byte."""
        return self._bit_index

    def get_byte_index(self):
        """The index of the byte currently being read."""
        return self._byte_index

    def get_current_byte(self):
        """The value of the byte currently being read, or None if exhausted."""
        return self._current_byte

    def is_exhausted(self):
        return self._exhausted

    def is_aligned(self):
        return self._bit_index == 0

    def remaining_bits(self):
        if self._exhausted:
            return 0
        return (len(self._buffer) - self._byte_index) * 8 - self._bit_index

    def set_property(self, name, value):
        """Store a value on the cursor for use by later decode steps."""
        self._properties[name] = value

    def get_property(self, name, default=None):
        return self._properties.get(name, default)

    def read_bit(self):
        """Read a single bit, returning True if it is set."""
        return self._read(1) == 1

    def read_few_bits(self, bits):
        """Read up to 6 bits."""
        _check_width(bits, 6)
        return self._read(bits)

    def read_byte(self):
        """Read the next 8 bits as an unsigned integer."""
        return self._read(8)

    def read_short_bits(self, bits):
        """Read up to 12 bits."""
        _check_width(bits, 12)
        return self._read_wide(bits)

    def read_bits(self, bits):
        """Read up to 24 bits."""
        _check_width(bits, 24)
        return self._read_wide(bits)

    def read_many_bits(self, bits):
        """Read up to 48 bits."""
        _check_width(bits, 48)
        return self._read_wide(bits)

    def read_bytes(self, count):
        """Read 'count' bytes, returning a bytes instance.

        Fails before reading anything if the buffer doesn't hold enough data.
        """
        _check_count(count)
        if count * 8 > self.remaining_bits():
            self._check_exhausted()
            raise NotEnoughDataError(count * 8, self.remaining_bits())
        return bytes(self._read(8) for i in range(count))

    def finish_byte(self):
        """Skip any unread bits of the current byte."""
        if self._bit_index == 0:
            return
        self._check_exhausted()
        self._bit_index = 8
        self._next_byte()

    def _peek(self, count, strict):
        _check_count(count)
        self._check_exhausted()
        if self._bit_index != 0:
            if strict:
                raise NotAlignedError(self._byte_index, self._bit_index)
            logging.warning("Peeking %i bytes at byte %i while at bit %i; "
                    "the unread bits of the current byte are included.",
                    count, self._byte_index, self._bit_index)
        end = self._byte_index + count
        if end > len(self._buffer):
            raise NotEnoughDataError(count * 8, (len(self._buffer) - self._byte_index) * 8)
        return self._buffer[self._byte_index:end]

    def peek_bytes(self, count):
        """Return the next 'count' bytes without reading them.

        The peek starts at the current byte even when part of it has already
        been read (a warning is logged).
        """
        return self._peek(count, False)

    def peek_aligned_bytes(self, count):
        """Return the next 'count' bytes without reading them.

        Raises NotAlignedError if the cursor is part way through a byte.
        """
        return self._peek(count, True)

    def is_next_byte_match(self, value):
        """Read the next byte if it equals 'value'.

        Returns False (and leaves the cursor untouched) if the byte doesn't
        match, or if the cursor is exhausted.
        """
        if self._exhausted:
            return False
        if self.peek_aligned_bytes(1)[0] == value:
            self.read_byte()
            return True
        return False

    def __repr__(self):
        return "BitCursor(byte %i, bit %i of %i bytes)" % (self._byte_index,
                self._bit_index, len(self._buffer))
