"""Round trips against a local HTTP registry using the real requests transport."""

from __future__ import annotations

import socket

import pytest
import requests

from conftest import TEST_SCHEMA
from schemaregistry import (
    LATEST_VERSION,
    MEDIA_TYPE,
    APIError,
    Compatibility,
    Config,
    ErrorCode,
    SchemaRegistryClient,
    SubjectSchema,
    TransportError,
)


@pytest.fixture
def session():
    # Keep proxy settings from the environment away from loopback requests
    http_session = requests.Session()
    http_session.trust_env = False
    yield http_session
    http_session.close()


@pytest.fixture
def client(local_registry, session):
    return SchemaRegistryClient(local_registry.url, session=session, timeout_seconds=5)


def test_register_subject_schema(local_registry, client) -> None:
    local_registry.route("POST", "/subjects/frames-value/versions", 200, {"id": 1})

    assert client.register_subject_schema("frames-value", TEST_SCHEMA) == 1

    request = local_registry.received[0]
    assert request.method == "POST"
    assert request.path == "/subjects/frames-value/versions"
    assert request.headers["content-type"] == MEDIA_TYPE
    assert request.json() == {"schema": TEST_SCHEMA}


def test_check_subject_schema_ok(local_registry, client) -> None:
    record = {"subject": "frames-value", "id": 1, "version": 2, "schema": TEST_SCHEMA}
    local_registry.route("POST", "/subjects/frames-value", 200, record)

    result = client.check_subject_schema("frames-value", TEST_SCHEMA)

    assert result == SubjectSchema(**record)
    assert local_registry.received[0].headers["content-type"] == MEDIA_TYPE


def test_check_subject_schema_subject_not_found(local_registry, client) -> None:
    local_registry.route(
        "POST",
        "/subjects/frames-value",
        404,
        {"error_code": 40401, "message": "Subject not found"},
    )

    with pytest.raises(APIError) as exc_info:
        client.check_subject_schema("frames-value", TEST_SCHEMA)

    assert exc_info.value.error_code is ErrorCode.SUBJECT_NOT_FOUND
    assert exc_info.value.message == "Subject not found"
    assert exc_info.value.status_code == 404


def test_check_subject_schema_internal_error(local_registry, client) -> None:
    local_registry.route(
        "POST",
        "/subjects/frames-value",
        500,
        {"error_code": 500, "message": "Internal Server Error"},
    )

    with pytest.raises(APIError) as exc_info:
        client.check_subject_schema("frames-value", TEST_SCHEMA)

    assert exc_info.value.code == 500
    assert exc_info.value.message == "Internal Server Error"


def test_get_subject_version_latest(local_registry, client) -> None:
    local_registry.route(
        "GET",
        "/subjects/frames-value/versions/latest",
        200,
        {"subject": "frames-value", "id": 1, "version": 3, "schema": TEST_SCHEMA},
    )

    assert client.get_subject_version("frames-value", LATEST_VERSION) == TEST_SCHEMA


def test_subject_config_round_trip(local_registry, client) -> None:
    local_registry.route("PUT", "/config/frames-value", 200, {"compatibility": "NONE"})

    assert client.set_subject_config("frames-value", Config(Compatibility.NONE)) == Config(
        Compatibility.NONE
    )
    assert local_registry.received[0].json() == {"compatibility": "NONE"}


def test_connection_refused_is_transport_error(session) -> None:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()

    client = SchemaRegistryClient(f"http://127.0.0.1:{port}", session=session, timeout_seconds=2)
    with pytest.raises(TransportError) as exc_info:
        client.get_subjects()

    assert exc_info.value.method == "GET"
    assert exc_info.value.url == f"http://127.0.0.1:{port}/subjects"
