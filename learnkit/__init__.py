################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Classical machine learning models on NumPy data matrices."""

__version__ = "0.1.0"
