#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Assorted conversion utilities.

The octet/integer conversions of RFC 6979 section 2.3 are included:

* bits2int    -> int_from_bits
* int2octets  -> octets_from_int
* bits2octets -> octets_from_bits

https://tools.ietf.org/html/rfc6979#section-2.3
"""

from collections.abc import Iterable as IterableCollection
from typing import Iterable, Optional, Union

from detsig.alias import Integer, Octets
from detsig.exceptions import DetSigValueError, InvalidInputError

NoneOneOrMoreInt = Optional[Union[int, Iterable[int]]]


def bytes_from_octets(octets: Octets, out_size: NoneOneOrMoreInt = None) -> bytes:
    """Return bytes from a hex-string, stripping leading/trailing spaces.

    If the input is not a string, then it goes untouched.
    Optionally, it also ensures required output size.
    """

    if isinstance(octets, str):  # hex string
        octets = bytes.fromhex(octets)

    if (
        out_size is None
        or isinstance(out_size, int)
        and len(octets) == out_size
        or isinstance(out_size, IterableCollection)
        and len(octets) in out_size
    ):
        return octets

    err_msg = f"invalid size: {len(octets)} bytes instead of {out_size}"
    raise DetSigValueError(err_msg)


def int_from_integer(i: Integer) -> int:
    """Return an int from many possible integer representations.

    Allowed integer representations are:

    * 3735928559
    * -3735928559
    * "0xdeadbeef"
    * "-0xdeadbeef"
    * "deadbeef"
    * b'\xde\xad\xbe\xef'
    """

    if isinstance(i, int):
        return i

    if isinstance(i, str):
        i = i.strip().lower()
        if i.startswith("0x") or i.startswith("-0x"):
            return int(i, 16)
        i = bytes.fromhex(i)

    # must be bytes
    return int.from_bytes(i, "big", signed=False)


def hex_string(i: Integer) -> str:
    """Return a hex-string from many positive integer representations.

    Negative integers are not allowed.

    The resulting hex-string has an even number of hex-digits and
    includes a space every four bytes (i.e. every eight hex-digits).
    """

    int_ = int_from_integer(i)
    if int_ < 0:
        raise DetSigValueError(f"negative integer: {int_}")
    a_str = hex(int_)[2:]
    if len(a_str) % 2 != 0:
        a_str = "0" + a_str

    indx = list(reversed(range(len(a_str), 0, -8)))
    lresult = [(a_str[max(0, i - 8) : i]) for i in indx]
    result = " ".join(lresult)
    return result.upper()


def _short_repr(i: int) -> str:
    return f"'{hex_string(i)}'" if i > 0xFFFFFFFF else f"{i}"


def int_from_bits(octets: Octets, nlen: int) -> int:
    """Return the leftmost nlen bits (RFC 6979 bits2int).

    Take as input a sequence of blen bits and calculate a
    non-negative integer i that is less than 2^nlen according to
    https://tools.ietf.org/html/rfc6979#section-2.3.2.
    No modular reduction is performed: excess bits are shifted away.

    int_from_bits is not the reverse of octets_from_int, even
    for input sequences of length nlen: octets_from_int will add some
    bits on the left, while int_from_bits will discard some bits on the
    right. octets_from_int is the reverse of int_from_bits only when
    nlen is a multiple of 8 and bit sequences already have length nlen.
    See https://tools.ietf.org/html/rfc6979#section-2.3.5.
    """

    octets = bytes_from_octets(octets)
    i = int.from_bytes(octets, byteorder="big", signed=False)

    blen = len(octets) * 8  # bits
    n = (blen - nlen) if blen >= nlen else 0
    return i >> n


def octets_from_int(x: int, n_size: int) -> bytes:
    """Return the n_size bytes big-endian encoding of x (RFC 6979 int2octets).

    https://tools.ietf.org/html/rfc6979#section-2.3.3
    """

    if x < 0:
        raise DetSigValueError(f"negative integer: {x}")
    if x.bit_length() > n_size * 8:
        err_msg = f"integer too large for {n_size} bytes: {_short_repr(x)}"
        raise DetSigValueError(err_msg)
    return x.to_bytes(n_size, byteorder="big", signed=False)


def octets_from_bits(octets: Octets, n: int, n_size: int) -> bytes:
    """Return octets folded into n_size bytes (RFC 6979 bits2octets).

    The leftmost bits are converted with int_from_bits, then reduced
    with a single conditional subtraction of n:
    z1 is less than 2^nlen, hence z1 - n is already less than n.

    https://tools.ietf.org/html/rfc6979#section-2.3.4
    """

    z1 = int_from_bits(octets, n.bit_length())
    z2 = z1 - n if z1 >= n else z1
    return octets_from_int(z2, n_size)


def int_from_prv_key(prv_key: Integer, n: int) -> int:
    "Return a private key as int, ensuring it is in the [1, n-1] range."

    q = int_from_integer(prv_key)
    if not 0 < q < n:
        raise InvalidInputError(f"private key not in 1..n-1: {_short_repr(q)}")
    return q
