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

import io
import xml.sax.saxutils
import xml.sax.xmlreader

from bitdecoder.tree import FrozenTree, NamedTree

def escape_name(name):
    if not name:
        return "_hidden"
    if '0' <= name[0] <= '9':
        name = '_' + name
    return name.replace(' ', '-').replace('(', '_').replace(')', '_').replace(':', '_').replace('/', '_')

def _escape_char(character):
    # The list of 'safe' xml characters is from http://www.w3.org/TR/REC-xml/#NT-Char
    ordinal = ord(character)
    if ordinal >= 0x20:
        return character
    if ordinal in [0x9, 0xa, 0xd]:
        return character
    return '?'

def xml_strip(text):
    """Replace chracters that cannot be represented in xml."""
    return ''.join(_escape_char(char) for char in text)

def _print_whitespace(handler, offset):
    handler.ignorableWhitespace('\n')
    handler.ignorableWhitespace(' ' * offset)

def _value_text(value):
    if isinstance(value, (bytes, bytearray)):
        return value.hex()
    return xml_strip(str(value))

def _write_children(handler, children, offset):
    for name, value in children:
        _print_whitespace(handler, offset)
        _write_entry(handler, name, value, offset)

def _write_entry(handler, name, value, offset):
    element = escape_name(name)
    handler.startElement(element, xml.sax.xmlreader.AttributesImpl({}))
    if isinstance(value, (NamedTree, FrozenTree)):
        children = list(value.items())
    elif isinstance(value, (list, tuple)):
        children = [('item', item) for item in value]
    else:
        children = None

    if children is None:
        # Plain values are kept on the same line as their element.
        if value is not None:
            handler.characters(_value_text(value))
    elif children:
        _write_children(handler, children, offset + 4)
        _print_whitespace(handler, offset)
    handler.endElement(element)

def to_file(tree, output, encoding="utf-8", name=None):
    """Write a decoded tree as xml.

    tree -- The bitdecoder.tree.NamedTree to write.
    output -- A text file object.
    name -- The name of the top level element; defaults to 'decoded'.
    """
    handler = xml.sax.saxutils.XMLGenerator(output, encoding)
    _write_entry(handler, name or 'decoded', tree, 0)
    handler.ignorableWhitespace('\n')

def to_string(tree, name=None):
    buffer = io.StringIO()
    to_file(tree, buffer, name=name)
    return buffer.getvalue()
