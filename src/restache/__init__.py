# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""restache: compile Mustache-flavored HTML templates into JSX components."""

__version__ = "0.1.0"
