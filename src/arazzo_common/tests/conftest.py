# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import copy
from typing import Any, Dict, List, Optional

import pytest

from arazzo_common.spec import OpenApiResolver, parse_arazzo, parse_openapi

USERS_OPENAPI: Dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Users API", "version": "1.0.0"},
    "paths": {
        "/login": {
            "post": {
                "operationId": "login",
                "requestBody": {"content": {"application/json": {}}},
                "responses": {"200": {"description": "ok"}},
            }
        },
        "/users": {
            "get": {
                "operationId": "listUsers",
                "parameters": [{"name": "limit", "in": "query"}],
            },
            "post": {"operationId": "createUser"},
        },
        "/users/{id}": {
            "parameters": [{"name": "id", "in": "path", "required": True}],
            "get": {
                "operationId": "getUser",
                "parameters": [{"$ref": "#/components/parameters/Authorization"}],
            },
            "delete": {"operationId": "deleteUser"},
        },
    },
    "components": {
        "parameters": {
            "Authorization": {"name": "Authorization", "in": "header", "required": True},
        }
    },
}


@pytest.fixture
def openapi_data() -> Dict[str, Any]:
    return copy.deepcopy(USERS_OPENAPI)


@pytest.fixture
def openapi_doc(openapi_data):
    return parse_openapi(openapi_data)


@pytest.fixture
def resolver(openapi_doc):
    r = OpenApiResolver()
    r.add_spec("users", openapi_doc)
    return r


@pytest.fixture
def make_spec():
    """Build an ArazzoSpec with one workflow ``wf`` made of *steps*."""

    def _make(
        steps: List[Dict[str, Any]],
        inputs: Optional[Dict[str, Any]] = None,
        outputs: Optional[Dict[str, Any]] = None,
        extra_workflows: Optional[List[Dict[str, Any]]] = None,
        components: Optional[Dict[str, Any]] = None,
    ):
        workflow: Dict[str, Any] = {"workflowId": "wf", "steps": steps}
        if inputs is not None:
            workflow["inputs"] = inputs
        if outputs is not None:
            workflow["outputs"] = outputs
        doc: Dict[str, Any] = {
            "arazzo": "1.0.0",
            "info": {"title": "Test", "version": "1.0.0"},
            "sourceDescriptions": [{"name": "users", "url": "users.yaml", "type": "openapi"}],
            "workflows": [workflow] + list(extra_workflows or []),
        }
        if components is not None:
            doc["components"] = components
        return parse_arazzo(doc)

    return _make
