"""Shared pytest fixtures for the auditparse test suite."""

import json

import pytest

from auditparse.config import ParserConfig

REFERENCE_LINE = (
    '{"requestReceivedTimestamp":"2024-01-15T10:30:00Z",'
    '"user":{"username":"admin","uid":"123"},"verb":"create",'
    '"objectRef":{"resource":"pods","namespace":"default","name":"test-pod"},'
    '"responseStatus":{"code":201,"message":"Created"}}'
)


def make_k8s_event(**overrides) -> dict:
    """A Kubernetes-style audit event in the primary producer's layout."""
    event = {
        "kind": "Event",
        "apiVersion": "audit.k8s.io/v1",
        "requestReceivedTimestamp": "2024-01-15T10:30:00.123456Z",
        "verb": "delete",
        "requestURI": "/api/v1/namespaces/prod/secrets/db-creds",
        "userAgent": "kubectl/v1.29.0",
        "sourceIPs": ["10.0.0.5", "10.0.0.6"],
        "user": {
            "username": "alice",
            "uid": "u-42",
            "groups": ["system:authenticated", "devs"],
            "extra": {"scopes": ["user:full"]},
        },
        "impersonatedUser": {"username": "bob"},
        "objectRef": {
            "resource": "secrets",
            "namespace": "prod",
            "name": "db-creds",
            "apiGroup": "core",
            "apiVersion": "v1",
        },
        "responseStatus": {"code": 403, "message": "Forbidden", "reason": "RBAC"},
        "annotations": {
            "authentication.openshift.io/decision": "allow",
            "authorization.k8s.io/decision": "forbid",
        },
        "headers": {"X-Request-Id": "req-1"},
    }
    event.update(overrides)
    return event


@pytest.fixture
def reference_line() -> str:
    return REFERENCE_LINE


@pytest.fixture
def k8s_event() -> dict:
    return make_k8s_event()


@pytest.fixture
def k8s_line(k8s_event) -> str:
    return json.dumps(k8s_event)


@pytest.fixture
def config() -> ParserConfig:
    return ParserConfig()


@pytest.fixture
def basic_config() -> ParserConfig:
    return ParserConfig(fallback_policy="basic", enable_permissive_json=False)
