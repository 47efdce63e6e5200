# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the restache documentation."""

project = "restache"
author = "Restache Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"

html_theme = "alabaster"
