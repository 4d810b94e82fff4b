#!/usr/bin/env python3

# Copyright (C) The detsig developers
#
# This file is part of detsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of detsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the detsig package."

name = "detsig"
__version__ = "2026.10.18"
__author__ = "The detsig developers"
__author_email__ = "devs@detsig.org"
__copyright__ = "Copyright (C) 2026 The detsig developers"
__license__ = "MIT License"
