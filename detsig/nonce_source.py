#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Pluggable sources of signature nonces.

The signer only needs something that hands out one nonce at a time:
NonceSource is that capability.
Two implementations are available:

* detsig.rfc6979.DeterministicNonceGenerator,
  the RFC 6979 HMAC-DRBG derived sequence
* FixedNonceSource, a pre-supplied ordered sequence of nonces,
  useful to reproduce reference vectors computed with given nonces
  or to plug externally computed nonces into the signer

A finite FixedNonceSource is also the way to bound
the number of signing attempts: once exhausted it raises
NonceSourceExhaustedError.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator

from detsig.alias import Integer
from detsig.exceptions import NonceSourceExhaustedError
from detsig.utils import int_from_integer


class NonceSource(ABC):
    """Abstract source of nonces.

    It is also an iterator: iteration stops when the source is exhausted.
    """

    @abstractmethod
    def next(self) -> int:
        "Return the next nonce, advancing the source."

    @property
    def is_deterministic(self) -> bool:
        return True

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        try:
            return self.next()
        except NonceSourceExhaustedError:
            raise StopIteration from None


class FixedNonceSource(NonceSource):
    "Nonce source returning the given nonces in order."

    def __init__(self, nonces: Iterable[Integer]) -> None:
        self._nonces = iter(nonces)
        # number of nonces handed out so far
        self.drawn = 0

    def next(self) -> int:
        try:
            nonce = next(self._nonces)
        except StopIteration:
            err_msg = f"nonce source exhausted after {self.drawn} nonces"
            raise NonceSourceExhaustedError(err_msg) from None
        self.drawn += 1
        return int_from_integer(nonce)
