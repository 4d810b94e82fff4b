#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

import hashlib

from detsig import dsa
from detsig.ec import mult, secp192r1 as ec
from detsig.rfc6979 import generate_nonces

print("\n*** EC:")
print(ec)

print("\n0. Message to be signed")
msg1 = "sample"
print(msg1)
msg_hash1 = hashlib.sha256(msg1.encode()).digest()

print("1. Key generation")
q = 0x6FAB034934E4C0FC9AE67F5B5659A9D7D1FEFD187EE09FD4
Q = mult(q, ec)
print(f"prvkey:    {hex(q).upper()}")
print(f"PubKey: {hex(Q[0]).upper()} {hex(Q[1]).upper()}")

print("2. Deterministic nonces")
nonces = generate_nonces(ec.order, q, msg_hash1)
for i in range(3):
    print(f"    k{i}:    {hex(next(nonces)).upper()}")

print("3. Sign message")
sig1 = dsa.sign(msg1, q, ec)
print(f"    r1:    {hex(sig1.r).upper()}")
print(f"    s1:    {hex(sig1.s).upper()}")

print("4. Verify signature")
print(dsa.verify(msg1, Q, sig1))

print("\n** Same message, same signature")
print(dsa.sign(msg1, q, ec) == sig1)

print("\n** Extra entropy: another, still deterministic, signature")
sig2 = dsa.sign(msg1, q, ec, extra_entropy=b"seed")
print(f"    r2:    {hex(sig2.r).upper()}")
print(f"    s2:    {hex(sig2.s).upper()}")
print(dsa.verify(msg1, Q, sig2))
print(dsa.sign(msg1, q, ec, extra_entropy=b"seed") == sig2)

print("\n0. Another message to sign")
msg2 = "test"
print(msg2)

print("3. Sign message")
sig3 = dsa.sign(msg2, q, ec)
print(f"    r3:    {hex(sig3.r).upper()}")
print(f"    s3:    {hex(sig3.s).upper()}")

print("4. Verify signature")
print(dsa.verify(msg2, Q, sig3))
print(dsa.verify(msg1, Q, sig3))
