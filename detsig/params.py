#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Configuration surface of nonce generation and signing.

Parameters can be provided programmatically or as dict/JSON
(thanks to dataclasses_json), e.g.:

    {
        "curve": "NIST192p",
        "private_key": "0x6FAB034934E4C0FC9AE67F5B5659A9D7D1FEFD187EE09FD4",
        "digest_bytes": "af2bdbe1aa9b6ec1e2ade1d694f41fc71a831d0268e9891562113d8a62add1bf",
        "hash_algorithm": "sha256",
        "extra_entropy": null
    }

Integers are hex-strings, bytes are hex-encoded.
The private key is accepted as input, but it is never serialized:
to_dict and to_json drop it, repr hides it.
"""

from dataclasses import InitVar, dataclass, field
from typing import Dict, Optional

from dataclasses_json import DataClassJsonMixin, config
from dataclasses_json.core import Json

from detsig.ec import Curve, curve_from_name
from detsig.exceptions import InvalidInputError
from detsig.hashes import hash_f
from detsig.rfc6979 import DeterministicNonceGenerator
from detsig.utils import bytes_from_octets, int_from_integer, int_from_prv_key


def _hex_from_int(i: Optional[int]) -> Optional[str]:
    return None if i is None else hex(i)


def _int_from_hex(i: Optional[str]) -> Optional[int]:
    return None if i is None else int_from_integer(i)


def _hex_from_bytes(b: Optional[bytes]) -> Optional[str]:
    return None if b is None else b.hex()


def _bytes_from_hex(b: Optional[str]) -> Optional[bytes]:
    return None if b is None else bytes_from_octets(b)


_INT = config(encoder=_hex_from_int, decoder=_int_from_hex)
_BYTES = config(encoder=_hex_from_bytes, decoder=_bytes_from_hex)


@dataclass
class NonceParams(DataClassJsonMixin):
    "Inputs of the RFC 6979 nonce generation."

    curve_order: Optional[int] = field(default=None, metadata=_INT)
    private_key: Optional[int] = field(default=None, repr=False, metadata=_INT)
    digest: Optional[bytes] = field(
        default=None,
        metadata=config(
            field_name="digest_bytes",
            encoder=_hex_from_bytes,
            decoder=_bytes_from_hex,
        ),
    )
    hash_algorithm: Optional[str] = None
    extra_entropy: Optional[bytes] = field(default=None, metadata=_BYTES)
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def _missing_fields(self) -> list:
        required = ("curve_order", "private_key", "digest", "hash_algorithm")
        return [name for name in required if getattr(self, name) is None]

    def assert_valid(self) -> None:
        missing = self._missing_fields()
        if missing:
            raise InvalidInputError(f"missing required field(s): {', '.join(missing)}")
        if self.curve_order < 2:
            raise InvalidInputError(f"invalid group order: {self.curve_order}")
        int_from_prv_key(self.private_key, self.curve_order)
        hash_f(self.hash_algorithm)

    def to_dict(self, encode_json=False) -> Dict[str, Json]:
        result = super().to_dict(encode_json)
        result.pop("private_key", None)
        return result

    def nonce_generator(self) -> DeterministicNonceGenerator:
        "Return a new generator keyed with these parameters."
        return DeterministicNonceGenerator.from_params(self)


@dataclass
class SignParams(NonceParams):
    """Inputs of the deterministic ECDSA signature.

    The group order is the curve one:
    it can be omitted, but must match the curve if provided.
    """

    curve: Optional[str] = None

    def __post_init__(self, check_validity: bool) -> None:
        if self.curve is not None and self.curve_order is None:
            self.curve_order = curve_from_name(self.curve).order
        super().__post_init__(check_validity)

    def _missing_fields(self) -> list:
        missing = super()._missing_fields()
        if self.curve is None:
            missing.insert(0, "curve")
        return missing

    def assert_valid(self) -> None:
        super().assert_valid()
        if self.curve_order != self.ec.order:
            err_msg = f"group order does not match curve {self.curve}"
            raise InvalidInputError(err_msg)

    @property
    def ec(self) -> Curve:
        return curve_from_name(self.curve)
