#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic Curve Digital Signature Algorithm (ECDSA) with RFC 6979 nonces.

The nonce k is drawn from a NonceSource: by default the
RFC 6979 deterministic generator keyed with private key and
message digest (and optional extra entropy k'),
so that the same (private key, message digest, hash function, k')
always yields the same signature.

The ECDSA equations themselves are computed by the external
EC provider (see detsig.ec); here only the orchestration happens:
draw a nonce, try it, draw the following one if the nonce is rejected
because it would lead to r = 0 or s = 0.

No 'lower-s' normalization is performed:
signatures are exactly those of SEC 1 v.2 section 4.1.3
and of the RFC 6979 appendix A test vectors.
"""

import logging
from dataclasses import InitVar, dataclass, field
from hashlib import sha256
from typing import Optional, Tuple, Union

from detsig import ec as ec_
from detsig.alias import HashF, Integer, Octets, Point, String
from detsig.ec import Curve, secp256k1
from detsig.exceptions import (
    DetSigRuntimeError,
    DetSigValueError,
    InvalidInputError,
    NonceRejectedError,
)
from detsig.hashes import digest_size, hash_f, reduce_to_hlen
from detsig.nonce_source import NonceSource
from detsig.params import SignParams
from detsig.rfc6979 import DeterministicNonceGenerator
from detsig.utils import bytes_from_octets, hex_string, int_from_bits, int_from_prv_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sig:
    "ECDSA signature (r, s) over the curve ec."

    # scalar, 0 < r < ec.n (ec.n is the curve order)
    r: int
    # scalar, 0 < s < ec.n (ec.n is the curve order)
    s: int
    ec: Curve = field(default_factory=lambda: secp256k1)
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        ec_.assert_curve(self.ec)
        for name, scalar in (("r", self.r), ("s", self.s)):
            if not 0 < scalar < self.ec.order:
                err_msg = f"scalar {name} not in 1..n-1: "
                err_msg += f"'{hex_string(scalar)}'" if scalar > 0xFFFFFFFF else f"{scalar}"
                raise DetSigValueError(err_msg)


def gen_keys(prv_key: Optional[Integer] = None, ec: Curve = secp256k1) -> Tuple[int, Point]:
    """Return a private/public (int, Point) key-pair."""
    return ec_.gen_keys(prv_key, ec)


def challenge_(msg_hash: Octets, ec: Curve, hf: HashF = sha256) -> int:
    "Return the integer e of SEC 1 v.2 section 4.1.3 step 5."

    # the message msg_hash: a hf_len array
    hf_len = digest_size(hf)
    msg_hash = bytes_from_octets(msg_hash, hf_len)

    # leftmost ec.nlen bits %= ec.n
    return int_from_bits(msg_hash, ec.order.bit_length()) % ec.order


def sign_(
    msg_hash: Octets,
    prv_key: Integer,
    ec: Curve = secp256k1,
    hf: Union[HashF, str] = sha256,
    extra_entropy: Optional[Octets] = None,
    nonce_source: Optional[NonceSource] = None,
) -> Sig:
    """Sign a hf_len bytes message digest according to ECDSA.

    If no nonce source is provided, the RFC 6979 deterministic
    nonce generator is used, mixing in the optional extra entropy.
    Nonces rejected by the signature primitive are skipped:
    no bound is set on the number of attempts,
    inject a finite FixedNonceSource if one is needed.
    Extra entropy only feeds the default generator:
    it cannot be combined with an injected nonce source.
    """

    ec_.assert_curve(ec)
    hf = hash_f(hf)
    if msg_hash is None:
        raise InvalidInputError("missing message digest")
    if prv_key is None:
        raise InvalidInputError("missing private key")
    if nonce_source is not None and extra_entropy is not None:
        err_msg = "extra entropy and nonce source are mutually exclusive"
        raise InvalidInputError(err_msg)

    # the challenge
    c = challenge_(msg_hash, ec, hf)  # 4, 5

    # the secret key q: an integer in the range 1..n-1.
    q = int_from_prv_key(prv_key, ec.order)

    if nonce_source is None:
        nonce_source = DeterministicNonceGenerator(hf).init(
            ec.order, q, msg_hash, extra_entropy
        )

    attempt = 0
    while True:
        attempt += 1
        nonce = nonce_source.next()  # 1
        if not 0 < nonce < ec.order:
            raise InvalidInputError(f"nonce not in 1..n-1 at attempt {attempt}")
        try:
            r, s = ec_.sign_raw(ec, q, c, nonce)  # 2, 3, 6
        except NonceRejectedError:
            logger.debug("nonce rejected by the signature primitive (attempt %d)", attempt)
            continue
        return Sig(r, s, ec)


def sign(
    msg: String,
    prv_key: Integer,
    ec: Curve = secp256k1,
    hf: Union[HashF, str] = sha256,
    extra_entropy: Optional[Octets] = None,
    nonce_source: Optional[NonceSource] = None,
) -> Sig:
    """ECDSA signature with RFC 6979 deterministic nonce.

    The message msg is first processed by hf, yielding the value

        msg_hash = hf(msg),

    a sequence of bits of length *hf_len*.

    Normally, hf is chosen such that its output length *hf_len* is
    roughly equal to *nlen*, the bit-length of the group order *n*,
    since the overall security of the signature scheme will depend on
    the smallest of *hf_len* and *nlen*; however, the ECDSA standard
    supports all combinations of *hf_len* and *nlen*.

    See https://tools.ietf.org/html/rfc6979#section-3.2
    """
    hf = hash_f(hf)
    msg_hash = reduce_to_hlen(msg, hf)
    return sign_(msg_hash, prv_key, ec, hf, extra_entropy, nonce_source)


def _sig_and_curve(sig: Union[Sig, Tuple[int, int]], ec: Optional[Curve]) -> Tuple[int, int, Curve]:
    if sig is None:
        raise InvalidInputError("missing signature")
    if isinstance(sig, Sig):
        if ec is not None and ec != sig.ec:
            raise InvalidInputError("not the same curve in signature and input")
        ec_.assert_curve(sig.ec)
        return sig.r, sig.s, sig.ec
    ec_.assert_curve(ec)
    r, s = sig
    return r, s, ec


def assert_as_valid_(
    msg_hash: Octets,
    key: Union[Integer, Point],
    sig: Union[Sig, Tuple[int, int]],
    ec: Optional[Curve] = None,
    hf: Union[HashF, str] = sha256,
) -> None:
    # Test/dev helper: it raises Errors,
    # while verify_ returns False for invalid signatures

    r, s, ec = _sig_and_curve(sig, ec)
    hf = hash_f(hf)
    c = challenge_(msg_hash, ec, hf)  # 2, 3
    Q = ec_.point_from_key(key, ec)
    if not ec_.verify_raw(ec, Q, c, r, s):
        raise DetSigRuntimeError("signature verification failed")


def verify_(
    msg_hash: Octets,
    key: Union[Integer, Point],
    sig: Union[Sig, Tuple[int, int]],
    ec: Optional[Curve] = None,
    hf: Union[HashF, str] = sha256,
) -> bool:
    """ECDSA signature verification (SEC 1 v.2 section 4.1.4).

    key is either the public key point
    or the private key (the public key is then derived from it).
    If sig is a plain (r, s) pair, the curve ec must be provided.

    A signature not matching message digest and key
    makes the function return False;
    malformed inputs (e.g. missing key or curve) raise.
    """
    try:
        assert_as_valid_(msg_hash, key, sig, ec, hf)
    except DetSigRuntimeError:
        return False
    return True


def verify(
    msg: String,
    key: Union[Integer, Point],
    sig: Union[Sig, Tuple[int, int]],
    ec: Optional[Curve] = None,
    hf: Union[HashF, str] = sha256,
) -> bool:
    """ECDSA signature verification (SEC 1 v.2 section 4.1.4)."""
    hf = hash_f(hf)
    msg_hash = reduce_to_hlen(msg, hf)
    return verify_(msg_hash, key, sig, ec, hf)


def sign_from_params(params: SignParams) -> Sig:
    "Deterministic ECDSA signature driven by a SignParams configuration."
    params.assert_valid()
    return sign_(
        params.digest,
        params.private_key,
        params.ec,
        params.hash_algorithm,
        params.extra_entropy,
    )
