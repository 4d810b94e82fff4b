#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Aliases

mypy aliases, documenting also coding input conventions.
"""

from typing import Any, Callable, Tuple, Union

# Octets are a sequence of eight-bit bytes or a hex-string (not text string)
#
# hex-strings are strings that can be converted to bytes using bytes.fromhex,
# e.g.:
# "deadbeef"
# "dead beef"
# "af2bdbe1aa9b6ec1e2ade1d694f41fc71a831d0268e9891562113d8a62add1bf"
#
# use detsig.utils.bytes_from_octets to convert Octets to bytes
#
# Octets are used for message digests, extra entropy (k')
# and HMAC-DRBG buffers
Octets = Union[bytes, str]

# bytes or text string (not hex-string)
#
# this is for messages to be hashed before signing
#    if isinstance(msg, str):
#        msg = msg.encode()
String = Union[bytes, str]

# hex-string or bytes representation of an int
# e.g. "0x6FAB034934E4C0FC9AE67F5B5659A9D7D1FEFD187EE09FD4"
Integer = Union[bytes, str, int]

# Hash digest constructor, e.g. hashlib.sha256
# (see detsig.hashes.hash_f for the name based alternative)
HashF = Callable[[], Any]

# Elliptic curve point in affine coordinates.
# Public keys are exchanged as plain (x, y) tuples,
# the external EC provider point classes never leak out of detsig.ec
Point = Tuple[int, int]
