# SPDX-FileCopyrightText: 2019-2025 Contributors to scanbox
#
# SPDX-License-Identifier: GPL-3.0-or-later
