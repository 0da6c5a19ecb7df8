"""Integration tests exercising static file serving over HTTP."""

from __future__ import annotations

import json
import os
import socket
from typing import TYPE_CHECKING

import pytest
import requests

from tests.utils.http import read_http_response
from tests.utils.site import CARGO_TOML, INDEX_HTML, PNG_BYTES

pytestmark = pytest.mark.integration

if TYPE_CHECKING:
    from tests.conftest import ServerProcessInfo


def test_existing_file_is_served(base_url: str) -> None:
    """GET /Cargo.toml returns the exact file bytes."""

    response = requests.get(f"{base_url}/Cargo.toml", timeout=5)
    assert response.status_code == 200
    assert response.content == CARGO_TOML
    assert response.headers["Content-Length"] == str(len(CARGO_TOML))


def test_missing_file_is_not_found(base_url: str) -> None:
    """GET /does_not_exist.txt returns a plain-text 404."""

    response = requests.get(f"{base_url}/does_not_exist.txt", timeout=5)
    assert response.status_code == 404
    assert response.headers["Content-Type"] == "text/plain"
    assert response.text == "Not Found"


def test_nested_image_has_image_mime_type(base_url: str) -> None:
    """Assets in subdirectories carry their extension's MIME type."""

    response = requests.get(f"{base_url}/assets/logo.png", timeout=5)
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "image/png"
    assert response.content == PNG_BYTES


def test_root_serves_index_document(base_url: str) -> None:
    """GET / answers with the base directory's index.html."""

    root = requests.get(f"{base_url}/", timeout=5)
    direct = requests.get(f"{base_url}/index.html", timeout=5)
    assert root.status_code == 200
    assert root.headers["Content-Type"] == "text/html"
    assert root.content == direct.content == INDEX_HTML


@pytest.mark.parametrize("path", ["/docs", "/docs/"])
def test_directory_with_index_matches_index(base_url: str, path: str) -> None:
    """Directory paths with or without trailing slash serve their index."""

    response = requests.get(f"{base_url}{path}", timeout=5)
    direct = requests.get(f"{base_url}/docs/index.html", timeout=5)
    assert response.status_code == 200
    assert response.content == direct.content
    assert response.headers["Content-Type"] == direct.headers["Content-Type"]


def test_directory_without_index_lists_entries(
    base_url: str, server_process: "ServerProcessInfo"
) -> None:
    """Directories without an index return their entry names, one per line."""

    response = requests.get(f"{base_url}/assets/", timeout=5)
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/plain"
    expected = set(os.listdir(server_process["directory"] / "assets"))
    assert set(response.text.splitlines()) == expected


def test_percent_encoded_names_are_decoded(
    base_url: str, server_process: "ServerProcessInfo"
) -> None:
    """Escaped characters in the URL map onto the real file name."""

    (server_process["directory"] / "release notes.txt").write_text("v0.1.0\n")
    response = requests.get(f"{base_url}/release%20notes.txt", timeout=5)
    assert response.status_code == 200
    assert response.text == "v0.1.0\n"


def test_method_is_not_differentiated(base_url: str) -> None:
    """Non-GET methods are answered like GET."""

    response = requests.post(f"{base_url}/Cargo.toml", data=b"ignored", timeout=5)
    assert response.status_code == 200
    assert response.content == CARGO_TOML


def test_head_returns_headers_without_body(
    server_process: "ServerProcessInfo",
) -> None:
    """HEAD mirrors GET headers but sends no body."""

    host, port = server_process["host"], server_process["port"]
    with socket.create_connection((host, port), timeout=5) as sock:
        sock.sendall(b"HEAD /Cargo.toml HTTP/1.1\r\nHost: test\r\n\r\n")
        head = read_http_response(sock, head=True)
        sock.sendall(b"GET /Cargo.toml HTTP/1.1\r\nHost: test\r\n\r\n")
        get = read_http_response(sock)

    assert head.status_code == 200
    assert head.headers["content-length"] == str(len(CARGO_TOML))
    assert get.body == CARGO_TOML


def test_repeated_requests_are_byte_identical(base_url: str) -> None:
    """Identical requests against an unchanged tree give identical bodies."""

    first = requests.get(f"{base_url}/assets/", timeout=5)
    second = requests.get(f"{base_url}/assets/", timeout=5)
    assert first.status_code == second.status_code == 200
    assert first.content == second.content


def test_keep_alive_serves_multiple_requests(
    server_process: "ServerProcessInfo",
) -> None:
    """One connection carries several requests until the client closes it."""

    host, port = server_process["host"], server_process["port"]
    with socket.create_connection((host, port), timeout=5) as sock:
        sock.sendall(b"GET /Cargo.toml HTTP/1.1\r\nHost: test\r\n\r\n")
        first = read_http_response(sock)
        sock.sendall(b"GET /missing HTTP/1.1\r\nHost: test\r\n\r\n")
        second = read_http_response(sock)
        sock.sendall(
            b"GET /index.html HTTP/1.1\r\nHost: test\r\nConnection: close\r\n\r\n"
        )
        third = read_http_response(sock)
        assert sock.recv(1) == b""

    assert [first.status_code, second.status_code, third.status_code] == [
        200,
        404,
        200,
    ]
    assert third.headers["connection"] == "close"


def test_request_id_is_echoed(base_url: str) -> None:
    """Caller-supplied X-Request-ID flows back in the response."""

    response = requests.get(
        f"{base_url}/Cargo.toml", headers={"X-Request-ID": "trace-me"}, timeout=5
    )
    assert response.headers["X-Request-ID"] == "trace-me"


def test_access_log_records_each_request(
    base_url: str, server_process: "ServerProcessInfo"
) -> None:
    """Served requests are written to the log destination as JSON events."""

    requests.get(f"{base_url}/does_not_exist.txt", timeout=5)

    entries = [
        json.loads(line)
        for line in server_process["log_file"].read_text().splitlines()
        if line.strip()
    ]
    served = [entry for entry in entries if entry.get("event") == "request_served"]
    assert any(
        entry["path"] == "/does_not_exist.txt" and entry["status_code"] == 404
        for entry in served
    )


def test_http_1_0_request_closes_after_response(
    server_process: "ServerProcessInfo",
) -> None:
    """HTTP/1.0 clients that do not ask for keep-alive get one response."""

    host, port = server_process["host"], server_process["port"]
    with socket.create_connection((host, port), timeout=5) as sock:
        sock.sendall(b"GET /Cargo.toml HTTP/1.0\r\n\r\n")
        response = read_http_response(sock)
        assert sock.recv(1) == b""

    assert response.status_code == 200
    assert response.headers["connection"] == "close"
    assert response.body == CARGO_TOML


def test_trailing_slash_after_file_is_not_found(base_url: str) -> None:
    """/Cargo.toml/ names a directory and is not served as the file."""

    response = requests.get(f"{base_url}/Cargo.toml/", timeout=5)
    assert response.status_code == 404
