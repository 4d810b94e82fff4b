#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `detsig.dsa` module."

import hashlib
import json
import logging
from os import path

import pytest

from detsig import dsa
from detsig import ec as ec_
from detsig.ec import curve_from_name, mult, secp192r1, secp256k1, secp256r1
from detsig.exceptions import (
    DetSigValueError,
    InvalidInputError,
    NonceSourceExhaustedError,
    SigningPrimitiveError,
)
from detsig.nonce_source import FixedNonceSource
from detsig.rfc6979 import rfc6979_

# source: https://tools.ietf.org/html/rfc6979 section A.2.3
X192 = 0x6FAB034934E4C0FC9AE67F5B5659A9D7D1FEFD187EE09FD4
K192 = 0x32B1B6D7D42A05CB449065727A84804FB1A3E34D8F261496
R192 = 0x4B0B8CE98A92866A2820E20AA6B75B56382E0F9BFD5ECB55
S192 = 0xCCDB006926EA9565CBADC840829D8C384E06DE1F1E381B85
SAMPLE = hashlib.sha256(b"sample").digest()
# first nonce for the SAMPLE digest with extra entropy b"seed"
K192_SEED = 4830800096749421487574146045941468563494616714024501709549


def test_rfc6979_tv() -> None:
    fname = "rfc6979.json"
    filename = path.join(path.dirname(__file__), "_data", fname)
    with open(filename, "r", encoding="ascii") as file_:
        test_dict = json.load(file_)

    for ec_name in test_dict:
        ec = curve_from_name(ec_name)
        test_vectors = test_dict[ec_name]
        for x, hf_name, msg, k, r, s in test_vectors:
            x = int(x, 16)
            hf = getattr(hashlib, hf_name)
            msg_hash = hf(msg.encode()).digest()
            # test RFC6979 implementation
            k2 = rfc6979_(msg_hash, x, ec.order, hf)
            assert int(k, 16) == k2
            # test RFC6979 usage in DSA
            sig = dsa.sign_(msg_hash, x, ec, hf, nonce_source=FixedNonceSource([k2]))
            assert int(r, 16) == sig.r
            assert int(s, 16) == sig.s
            # test that RFC6979 is the default nonce for DSA
            sig = dsa.sign_(msg_hash, x, ec, hf)
            assert int(r, 16) == sig.r
            assert int(s, 16) == sig.s
            assert sig == dsa.sign(msg, x, ec, hf)
            # test signature validity
            U = mult(x, ec)
            assert dsa.verify(msg, U, sig, hf=hf)
            assert dsa.verify_(msg_hash, x, sig, hf=hf)
            dsa.assert_as_valid_(msg_hash, U, sig, hf=hf)


def test_p192_sha256_sample() -> None:
    sig = dsa.sign_(SAMPLE, X192, secp192r1, hashlib.sha256)
    assert (sig.r, sig.s) == (R192, S192)
    assert sig.ec == secp192r1
    assert dsa.verify_(SAMPLE, X192, sig)
    assert dsa.verify_(SAMPLE, X192, (R192, S192), secp192r1)
    assert dsa.verify_(SAMPLE, mult(X192, secp192r1), (R192, S192), secp192r1)


def test_signature() -> None:
    msg = "Satoshi Nakamoto".encode()

    q, Q = dsa.gen_keys(0x1)
    sig = dsa.sign(msg, q)
    dsa.assert_as_valid_(hashlib.sha256(msg).digest(), Q, sig)
    assert dsa.verify(msg, Q, sig)
    assert dsa.verify(msg, q, sig)

    # https://bitcointalk.org/index.php?topic=285142.40
    # Deterministic Usage of DSA and ECDSA (RFC 6979)
    r = 0x934B1EA10A4B3C1757E2B0C017D0B6143CE3C9A7E6A4A49860D7A6AB210EE3D8
    s = 0x2442CE9D2B916064108014783E923EC36B49743E2FFA1C4496F01A512AAFD9E5
    assert sig.r == r
    # no 'lower-s' normalization
    assert sig.s in (s, secp256k1.order - s)

    # malleability
    malleated_sig = dsa.Sig(sig.r, sig.ec.order - sig.s)
    assert dsa.verify(msg, Q, malleated_sig)

    msg_fake = "Craig Wright".encode()
    assert not dsa.verify(msg_fake, Q, sig)
    with pytest.raises(RuntimeError, match="signature verification failed"):
        dsa.assert_as_valid_(hashlib.sha256(msg_fake).digest(), Q, sig)

    _, Q_fake = dsa.gen_keys()
    assert not dsa.verify(msg, Q_fake, sig)


def test_round_trip() -> None:
    for ec in (secp192r1, secp256r1, secp256k1):
        for hf in (hashlib.sha1, hashlib.sha256, hashlib.sha512):
            q, Q = dsa.gen_keys(ec=ec)
            msg_hash = hf(b"round trip").digest()
            sig = dsa.sign_(msg_hash, q, ec, hf)
            assert sig == dsa.sign_(msg_hash, q, ec, hf)
            assert dsa.verify_(msg_hash, Q, sig, hf=hf)
            assert dsa.verify_(msg_hash, q, sig, hf=hf)


def test_extra_entropy() -> None:
    sig = dsa.sign_(SAMPLE, X192, secp192r1, extra_entropy=b"seed")
    nonce_source = FixedNonceSource([K192_SEED])
    assert sig == dsa.sign_(SAMPLE, X192, secp192r1, nonce_source=nonce_source)
    assert sig == dsa.sign_(SAMPLE, X192, secp192r1, extra_entropy="73656564")
    assert (sig.r, sig.s) != (R192, S192)
    assert dsa.verify_(SAMPLE, X192, sig)


def test_tampering() -> None:
    ec = secp256r1
    q, Q = dsa.gen_keys(0xC9AFA9D845BA75166B5C215767B1D6934E50C3DB36E89B127B8A622B120F6721, ec)
    msg_hash = hashlib.sha256(b"tampering").digest()
    sig = dsa.sign_(msg_hash, q, ec)
    assert dsa.verify_(msg_hash, Q, sig)

    for i in range(ec.order.bit_length()):
        assert not dsa.verify_(msg_hash, Q, (sig.r ^ (1 << i), sig.s), ec)
        assert not dsa.verify_(msg_hash, Q, (sig.r, sig.s ^ (1 << i)), ec)

    h = int.from_bytes(msg_hash, "big")
    for i in range(len(msg_hash) * 8):
        tampered = (h ^ (1 << i)).to_bytes(len(msg_hash), "big")
        assert not dsa.verify_(tampered, Q, sig)


def test_digest_truncation() -> None:
    # SHA-256 digests are truncated to the 192 leftmost bits for P-192:
    # the rightmost 64 bits do not take part in the signature
    sig = dsa.sign_(SAMPLE, X192, secp192r1)
    h = int.from_bytes(SAMPLE, "big")
    tampered = (h ^ 1).to_bytes(32, "big")
    assert dsa.verify_(tampered, X192, sig)
    tampered = (h ^ (1 << 64)).to_bytes(32, "big")
    assert not dsa.verify_(tampered, X192, sig)


def _zero_s_msg_hash(q: int, nonce: int) -> bytes:
    # message digest making s = 0 for the given nonce on secp256r1
    ec = secp256r1
    r = mult(nonce, ec)[0] % ec.order
    c = -r * q % ec.order
    return c.to_bytes(32, "big")


def test_rejected_nonce_retry(caplog: pytest.LogCaptureFixture) -> None:
    ec = secp256r1
    q = 0x1234
    bad_nonce = 0xC0FFEE
    good_nonce = 0xBADC0FFEE
    msg_hash = _zero_s_msg_hash(q, bad_nonce)

    nonce_source = FixedNonceSource([bad_nonce, good_nonce])
    with caplog.at_level(logging.DEBUG, logger="detsig.dsa"):
        sig = dsa.sign_(msg_hash, q, ec, nonce_source=nonce_source)
    assert nonce_source.drawn == 2
    assert "nonce rejected by the signature primitive (attempt 1)" in caplog.text

    expected = dsa.sign_(msg_hash, q, ec, nonce_source=FixedNonceSource([good_nonce]))
    assert sig == expected
    assert dsa.verify_(msg_hash, q, sig)

    # a finite nonce source bounds the number of attempts
    err_msg = "nonce source exhausted after 1 nonces"
    with pytest.raises(NonceSourceExhaustedError, match=err_msg):
        dsa.sign_(msg_hash, q, ec, nonce_source=FixedNonceSource([bad_nonce]))


def test_invalid_injected_nonce() -> None:
    for nonce in (0, secp256k1.order):
        err_msg = "nonce not in 1..n-1 at attempt 1"
        with pytest.raises(InvalidInputError, match=err_msg):
            dsa.sign_(SAMPLE, 1, nonce_source=FixedNonceSource([nonce]))


def test_signing_primitive_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken_sign_raw(ec, q, c, nonce):
        raise SigningPrimitiveError("signature primitive failure: malformed curve")

    monkeypatch.setattr(ec_, "sign_raw", _broken_sign_raw)
    with pytest.raises(SigningPrimitiveError, match="malformed curve"):
        dsa.sign_(SAMPLE, X192, secp192r1)


def test_invalid_inputs() -> None:
    with pytest.raises(InvalidInputError, match="missing message digest"):
        dsa.sign_(None, X192, secp192r1)  # type: ignore
    with pytest.raises(InvalidInputError, match="missing private key"):
        dsa.sign_(SAMPLE, None, secp192r1)  # type: ignore
    with pytest.raises(InvalidInputError, match="missing curve"):
        dsa.sign_(SAMPLE, X192, None)  # type: ignore
    with pytest.raises(InvalidInputError, match="missing hash function"):
        dsa.sign_(SAMPLE, X192, secp192r1, None)  # type: ignore
    with pytest.raises(InvalidInputError, match="private key not in 1..n-1: "):
        dsa.sign_(SAMPLE, 0, secp192r1)
    with pytest.raises(DetSigValueError, match="invalid size: 6 bytes instead of 32"):
        dsa.sign_(b"sample", X192, secp192r1)
    err_msg = "extra entropy and nonce source are mutually exclusive"
    with pytest.raises(InvalidInputError, match=err_msg):
        dsa.sign_(
            SAMPLE,
            X192,
            secp192r1,
            extra_entropy=b"seed",
            nonce_source=FixedNonceSource([K192]),
        )
    with pytest.raises(InvalidInputError, match="unknown hash function: "):
        dsa.sign(b"sample", X192, secp192r1, "shake_128")

    sig = dsa.sign_(SAMPLE, X192, secp192r1)
    with pytest.raises(InvalidInputError, match="missing public and private key"):
        dsa.verify_(SAMPLE, None, sig)  # type: ignore
    with pytest.raises(InvalidInputError, match="missing curve"):
        dsa.verify_(SAMPLE, X192, (sig.r, sig.s))
    with pytest.raises(InvalidInputError, match="missing signature"):
        dsa.verify_(SAMPLE, X192, None)  # type: ignore
    with pytest.raises(InvalidInputError, match="not the same curve"):
        dsa.verify_(SAMPLE, X192, sig, secp256r1)
    with pytest.raises(DetSigValueError, match="invalid size: "):
        dsa.verify_(SAMPLE[:-1], X192, sig)


def test_sig() -> None:
    sig = dsa.Sig(R192, S192, secp192r1)
    assert sig == dsa.Sig(R192, S192, secp192r1, check_validity=False)
    assert dsa.Sig(1, 1).ec == secp256k1

    with pytest.raises(DetSigValueError, match="scalar r not in 1..n-1: "):
        dsa.Sig(0, S192, secp192r1)
    with pytest.raises(DetSigValueError, match="scalar s not in 1..n-1: "):
        dsa.Sig(R192, secp192r1.order, secp192r1)
    with pytest.raises(InvalidInputError, match="missing curve"):
        dsa.Sig(R192, S192, None)  # type: ignore

    # invalid scalars are not a valid signature, not an error
    sig_invalid = dsa.Sig(0, S192, secp192r1, check_validity=False)
    assert not dsa.verify_(SAMPLE, X192, sig_invalid)
