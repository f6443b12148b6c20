# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.


class SpecLoadError(ValueError):
    """An Arazzo or OpenAPI document could not be read, parsed or accepted."""
