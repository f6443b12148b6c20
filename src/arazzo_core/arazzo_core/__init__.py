# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Command line surface of arazzo-check: configuration, logging and commands."""

__version__ = "0.1.0"
