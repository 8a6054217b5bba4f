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
Bitdecoder is a library for decoding binary data into named values.

A decoder is described by a bitdecoder.spec.Spec, which is an immutable list
of decode steps. Specs are put together using a
bitdecoder.builder.SpecBuilder:

 * add_parameter stores the result of reading from the cursor
 * add_choice_parameters decodes one of two sub-specs
 * add_nested_parameter decodes a sub-spec into its own tree
 * assert_reader / assert_data / assert_previous_parameter validate the data

A built spec can be used to:

 * Decode bytes into a bitdecoder.tree.NamedTree (bitdecoder.spec)
 * Write the decoded tree as xml (bitdecoder.output.xmlout)
 * Decode files from the command line (bitdecoder.tools.decode)

Package Organization
====================
bitdecoder contains the following subpackages and modules:

.. packagetree:: bitdecoder
   :style: UML
"""

__version__ = "0.2.0"

class DecodeError(Exception):
    """ An error raised when decoding fails """
