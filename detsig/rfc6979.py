#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Deterministic generation of the ephemeral key following RFC 6979.

https://tools.ietf.org/html/rfc6979

DSA and ECDSA need to produce, for each signature generation,
a fresh random value (ephemeral key, hereafter designated as nonce).
For effective security, nonce must be chosen randomly and uniformly
from a set of modular integers, using a cryptographically secure
process. Even slight biases in that process may be turned into
attacks on the signature schemes.

The need for a cryptographically secure source of randomness proves
to be a hindrance and makes implementations harder to test.
Moreover, reusing the same ephemeral key for a different message
signed with the same private key reveals the private key!

RFC 6979 turns DSA and ECDSA into deterministic schemes by using a
deterministic process for generating the nonce.
The process fulfills the cryptographic characteristics in order to
maintain the properties of verifiability and unforgeability
expected from signature schemes; namely, for whoever does not know
the signature private key, the mapping from input messages to the
corresponding nonce values is computationally indistinguishable from
what a randomly and uniformly chosen function (from the set of
messages to the set of possible nonce values) would return.

An optional extra entropy k' (RFC 6979 section 3.6) can be mixed
into the HMAC-DRBG state: signatures are then diversified across
independent implementations, yet reproducible given the same k'.
"""

import hmac
import logging
from hashlib import sha256
from typing import TYPE_CHECKING, Iterator, Optional, Union

from detsig.alias import HashF, Integer, Octets
from detsig.exceptions import InvalidInputError, UninitializedStateError
from detsig.hashes import digest_size, hash_f
from detsig.nonce_source import NonceSource
from detsig.utils import (
    bytes_from_octets,
    int_from_bits,
    int_from_integer,
    int_from_prv_key,
    octets_from_bits,
    octets_from_int,
)

if TYPE_CHECKING:
    from detsig.params import NonceParams

logger = logging.getLogger(__name__)


class DeterministicNonceGenerator(NonceSource):
    """RFC 6979 section 3.2 nonce generator, with section 3.6 extra entropy.

    The generator must be keyed with init() before use;
    then each next() call returns the following nonce k
    of an infinite sequence, with 0 < k < n guaranteed.
    The sequence can only be restarted with a new init():
    there is no way to seek or rewind.

    The (K, V) HMAC-DRBG state is private to the instance:
    use one generator per signature and never share it.
    """

    def __init__(self, hf: Union[HashF, str]) -> None:
        self.hf = hash_f(hf)
        self.hf_size = digest_size(self.hf)

        self.n: Optional[int] = None
        self.nlen = 0
        self.n_size = 0

        # HMAC-DRBG state
        self._k = b""
        self._v = b""

    @classmethod
    def from_params(cls, params: "NonceParams") -> "DeterministicNonceGenerator":
        "Return a generator keyed with the NonceParams configuration."
        params.assert_valid()
        return cls(params.hash_algorithm).init(
            params.curve_order, params.private_key, params.digest, params.extra_entropy
        )

    def _hmac(self, key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, self.hf).digest()

    def init(
        self,
        n: Integer,
        prv_key: Integer,
        msg_hash: Octets,
        extra_entropy: Optional[Octets] = None,
    ) -> "DeterministicNonceGenerator":
        """Key the generator, discarding any previous state.

        n is the group order, prv_key the private key in [1, n-1],
        msg_hash the message digest (of any length: it is
        converted with bits2octets), extra_entropy the optional k'.
        """

        if n is None:
            raise InvalidInputError("missing group order")
        if prv_key is None:
            raise InvalidInputError("missing private key")
        if msg_hash is None:
            raise InvalidInputError("missing message digest")

        n = int_from_integer(n)
        if n < 2:
            raise InvalidInputError(f"invalid group order: {n}")
        q = int_from_prv_key(prv_key, n)
        msg_hash = bytes_from_octets(msg_hash)
        k_prime = b"" if extra_entropy is None else bytes_from_octets(extra_entropy)

        self.n = n
        self.nlen = n.bit_length()
        self.n_size = (self.nlen + 7) // 8

        # the private key as n_size bytes
        x = octets_from_int(q, self.n_size)
        # the message digest folded into n_size bytes
        m = octets_from_bits(msg_hash, n, self.n_size)
        # k' is just appended, if any
        bprvbm = x + m + k_prime

        v = b"\x01" * self.hf_size  # 3.2.b
        k = b"\x00" * self.hf_size  # 3.2.c

        k = self._hmac(k, v + b"\x00" + bprvbm)  # 3.2.d
        v = self._hmac(k, v)  # 3.2.e
        k = self._hmac(k, v + b"\x01" + bprvbm)  # 3.2.f
        v = self._hmac(k, v)  # 3.2.g

        self._k, self._v = k, v
        return self

    def next(self) -> int:
        "Return the next nonce of the sequence."

        if self.n is None:
            raise UninitializedStateError("nonce generator used before init()")

        while True:  # 3.2.h
            t = b""  # 3.2.h.1
            while len(t) < self.n_size:  # 3.2.h.2
                self._v = self._hmac(self._k, self._v)
                t += self._v[: self.n_size - len(t)]
            # The following line would introduce a bias
            # nonce = int.from_bytes(t, 'big') % n
            # In general, taking a uniformly random integer (like those
            # obtained from a hash function in the random oracle model)
            # modulo the group order n would produce a biased result.
            nonce = int_from_bits(t, self.nlen)  # 3.2.h.3
            if 0 < nonce < self.n:
                return nonce
            logger.debug("nonce candidate out of range, reseeding")
            self._k = self._hmac(self._k, self._v + b"\x00")
            self._v = self._hmac(self._k, self._v)


def generate_nonces(
    n: Integer,
    prv_key: Integer,
    msg_hash: Octets,
    hf: Union[HashF, str] = sha256,
    extra_entropy: Optional[Octets] = None,
) -> Iterator[int]:
    """Return the lazy, infinite sequence of RFC 6979 nonces.

    Inputs are validated immediately, not at the first iteration.
    """
    return DeterministicNonceGenerator(hf).init(n, prv_key, msg_hash, extra_entropy)


def rfc6979_(
    msg_hash: Octets,
    prv_key: Integer,
    n: Integer,
    hf: Union[HashF, str] = sha256,
    extra_entropy: Optional[Octets] = None,
) -> int:
    """Return a deterministic ephemeral key following RFC 6979.

    see https://tools.ietf.org/html/rfc6979 section 3.2
    """
    return DeterministicNonceGenerator(hf).init(n, prv_key, msg_hash, extra_entropy).next()
