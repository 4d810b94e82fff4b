#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic curve primitives, delegated to python-ecdsa.

detsig does not implement curve arithmetic: domain parameters,
scalar multiplication, and the raw ECDSA sign/verify equations
are provided by the ecdsa package.
This module is the only one touching it:
curves are ecdsa.curves.Curve instances,
while points are exchanged as plain affine (x, y) tuples.
"""

import secrets
from typing import Dict, Tuple, Union

from ecdsa import curves as _curves
from ecdsa import ellipticcurve
from ecdsa.curves import NIST192p, NIST256p, SECP256k1, Curve
from ecdsa.ecdsa import Private_key, Public_key, RSZeroError, Signature

from detsig.alias import Integer, Point
from detsig.exceptions import (
    DetSigValueError,
    InvalidInputError,
    NonceRejectedError,
    SigningPrimitiveError,
)
from detsig.utils import hex_string, int_from_prv_key

secp256k1 = SECP256k1
secp256r1 = NIST256p
secp192r1 = NIST192p

# short Weierstrass curves only, indexed by (lowercase)
# python-ecdsa name and OpenSSL name, e.g.
# "nist256p" and "prime256v1"
CURVES: Dict[str, Curve] = {}
for _ec in _curves.curves:
    if not isinstance(_ec.curve, ellipticcurve.CurveFp):
        continue
    CURVES[_ec.name.lower()] = _ec
    if _ec.openssl_name:
        CURVES[_ec.openssl_name.lower()] = _ec


def curve_from_name(name: str) -> Curve:
    "Return the curve with the given python-ecdsa or OpenSSL name."
    ec = CURVES.get(name.strip().lower())
    if ec is None:
        raise InvalidInputError(f"unknown curve: {name}")
    return ec


def assert_curve(ec: Curve) -> None:
    if ec is None:
        raise InvalidInputError("missing curve")
    if not isinstance(ec, Curve) or not isinstance(ec.curve, ellipticcurve.CurveFp):
        raise InvalidInputError(f"not a short Weierstrass curve: {ec!r}")


def mult(q: int, ec: Curve) -> Point:
    "Return the affine point q*G."
    Q = ec.generator * q
    return Q.x(), Q.y()


def gen_keys(prv_key: Union[Integer, None] = None, ec: Curve = secp256k1) -> Tuple[int, Point]:
    "Return a private/public (int, Point) key-pair."
    if prv_key is None:
        # q in the range [1, ec.n-1]
        q = 1 + secrets.randbelow(ec.order - 1)
    else:
        q = int_from_prv_key(prv_key, ec.order)
    return q, mult(q, ec)


def point_from_key(key: Union[Integer, Point], ec: Curve) -> Point:
    """Return a public key point from a private or public key.

    A tuple is a public key in affine coordinates,
    anything else is a private key.
    """

    if key is None:
        raise InvalidInputError("missing public and private key")

    if isinstance(key, tuple):
        if len(key) != 2:
            raise DetSigValueError(f"not an affine point: {key!r}")
        x, y = key
        if not ec.curve.contains_point(x, y):
            err_msg = "point not on curve: "
            err_msg += f"('{hex_string(x)}', '{hex_string(y)}')"
            raise DetSigValueError(err_msg)
        return x, y

    return mult(int_from_prv_key(key, ec.order), ec)


def sign_raw(ec: Curve, q: int, c: int, nonce: int) -> Tuple[int, int]:
    """Return the ECDSA (r, s) scalars of challenge c with the given nonce.

    NonceRejectedError is raised if the nonce leads to r = 0 or s = 0;
    any other failure of the EC provider is a SigningPrimitiveError.
    """

    try:
        pub_key = Public_key(ec.generator, ec.generator * q)
        sig = Private_key(pub_key, q).sign(c, nonce)
    except RSZeroError as err:
        raise NonceRejectedError(f"nonce rejected: {err}") from err
    except (ArithmeticError, AssertionError, RuntimeError, TypeError, ValueError) as err:
        raise SigningPrimitiveError(f"signature primitive failure: {err}") from err
    return sig.r, sig.s


def verify_raw(ec: Curve, Q: Point, c: int, r: int, s: int) -> bool:
    "Return True if (r, s) is a valid ECDSA signature of c for Q."

    point = ellipticcurve.Point(ec.curve, Q[0], Q[1], ec.order)
    pub_key = Public_key(ec.generator, point)
    return bool(pub_key.verifies(c, Signature(r, s)))
