#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Hash based helper functions."""

import hashlib
from typing import Union

from detsig.alias import HashF, String
from detsig.exceptions import DetSigTypeError, InvalidInputError


def hash_f(hf: Union[HashF, str, None]) -> HashF:
    """Return a hash digest constructor.

    The hash function can be provided as a hashlib-like constructor
    (e.g. hashlib.sha256), returned untouched,
    or as an algorithm name (e.g. "sha256", "SHA-384", "sha3-256").
    Extendable-output functions (e.g. shake_128) have no fixed
    digest size and are not accepted.
    """

    if hf is None:
        raise InvalidInputError("missing hash function")

    if isinstance(hf, str):
        hf_name = hf.strip().lower()
        # "sha3-256" is sha3_256, while "sha-256" is sha256
        candidates = (hf_name, hf_name.replace("-", "_"), hf_name.replace("-", ""))
        for candidate in candidates:
            constructor = getattr(hashlib, candidate, None)
            if candidate in hashlib.algorithms_available and callable(constructor):
                break
        else:
            raise InvalidInputError(f"unknown hash function: {hf}")
        if not constructor().digest_size:
            raise InvalidInputError(f"unknown hash function: {hf}")
        return constructor

    if not callable(hf):
        raise DetSigTypeError(f"not a hash function: {hf!r}")
    if not getattr(hf(), "digest_size", 0):
        raise InvalidInputError(f"not a fixed size hash function: {hf!r}")
    return hf


def hash_name(hf: HashF) -> str:
    "Return the name of the hash function built by the constructor."
    return str(hf().name)


def digest_size(hf: HashF) -> int:
    "Return the output size in bytes of the hash function."
    return int(hf().digest_size)


def reduce_to_hlen(msg: String, hf: HashF = hashlib.sha256) -> bytes:
    "Return the hf digest of the message, i.e. the value to be signed."
    if isinstance(msg, str):
        msg = msg.encode()
    h = hf()
    h.update(msg)
    return bytes(h.digest())
