import pytest
import yaml

from core.coverage_model import CoverageModel


@pytest.fixture
def items_contract():
    return {
        "openapi": "3.0.0",
        "paths": {
            "/items": {
                "get": {"responses": {"200": {"description": "ok"}}},
            },
        },
    }


@pytest.fixture
def users_contract():
    return {
        "openapi": "3.0.0",
        "info": {"title": "Users", "version": "1.0.0"},
        "paths": {
            "/users": {
                "get": {"responses": {"200": {"description": "list"}}},
                "post": {"responses": {"201": {"description": "created"}, "400": {"description": "bad"}}},
            },
            "/users/{id}": {
                "parameters": [{"name": "id", "in": "path", "required": True}],
                "get": {"responses": {"200": {"description": "user"}, "404": {"description": "missing"}}},
                "delete": {"responses": {"204": {"description": "deleted"}}},
            },
            "/{proxy+}": {
                "x-amazon-apigateway-any-method": {"responses": {"200": {}}},
                "get": {"responses": {"200": {"description": "proxied"}}},
            },
        },
    }


@pytest.fixture
def users_contract_file(tmp_path, users_contract):
    contract_path = tmp_path / "users.yaml"
    contract_path.write_text(yaml.safe_dump(users_contract), encoding="utf-8")
    return contract_path


@pytest.fixture
def model(users_contract):
    coverage = CoverageModel()
    coverage.register_contract(users_contract)
    return coverage
