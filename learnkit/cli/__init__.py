################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of learnkit
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Command line entry points."""
