# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Validation and flow-graph engine for Arazzo workflow documents.

Subpackages
-----------
spec          Arazzo / OpenAPI models, loaders and the multi-source resolver.
expressions   Runtime expression grammar ($inputs, $steps, $response, $statusCode).
graph         Flow graph model, builder, structural validator and exporters.
validation    Four-phase Arazzo / OpenAPI consistency validation.
"""

__version__ = "0.1.0"
