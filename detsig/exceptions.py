#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

The three base classes are only meant to discriminate between Exceptions
being raised by detsig from those raised by other codebase;
users are usually better off just dealing with the regular
ValueError, TypeError, and RuntimeError
from which the detsig versions are derived.

The specialized classes mark the few conditions callers
may want to handle on their own.
"""


class DetSigValueError(ValueError):
    pass


class DetSigTypeError(TypeError):
    pass


class DetSigRuntimeError(RuntimeError):
    pass


class InvalidInputError(DetSigValueError):
    "A required input is missing or out of range."


class UninitializedStateError(DetSigRuntimeError):
    "A nonce has been requested from a generator that was never keyed."


class NonceSourceExhaustedError(DetSigRuntimeError):
    "A fixed nonce source has no values left."


class NonceRejectedError(DetSigRuntimeError):
    "The signature primitive refused the nonce (r = 0 or s = 0)."


class SigningPrimitiveError(DetSigRuntimeError):
    "The external signature primitive failed."
