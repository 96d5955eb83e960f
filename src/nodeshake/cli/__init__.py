# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Command line interface for nodeshake."""
