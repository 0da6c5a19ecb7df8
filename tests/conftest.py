"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Generator, TypedDict

import pytest

from tests.utils.http import reserve_port, wait_for_port
from tests.utils.process import HOST, PROJECT_ROOT, server_command, server_env
from tests.utils.site import populate_site

if TYPE_CHECKING:
    from _pytest.tmpdir import TempPathFactory


class ServerProcessInfo(TypedDict):
    """Metadata describing a running server fixture instance."""

    base_url: str
    host: str
    port: int
    directory: Path
    process: subprocess.Popen[str]
    log_file: Path


def _launch_server(
    directory: Path, log_file: Path
) -> Generator[ServerProcessInfo, None, None]:
    port = reserve_port(HOST)
    args = server_command(directory, port, "--log-destination", str(log_file))

    with subprocess.Popen(
        args,
        cwd=PROJECT_ROOT,
        env=server_env(),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    ) as process:
        try:
            wait_for_port(HOST, port)
        except Exception:
            # If startup failed, print stdout/stderr to help debug
            process.terminate()
            stdout, stderr = process.communicate(timeout=5)
            print(f"\nServer stdout:\n{stdout}")
            print(f"\nServer stderr:\n{stderr}")
            raise

        yield {
            "base_url": f"http://{HOST}:{port}",
            "host": HOST,
            "port": port,
            "directory": directory,
            "process": process,
            "log_file": log_file,
        }

        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Expose the repository root path to tests."""

    return PROJECT_ROOT


@pytest.fixture(name="site_directory")
def _site_directory(tmp_path_factory: "TempPathFactory") -> Path:
    """A populated base directory, separate from the server log location."""

    return populate_site(tmp_path_factory.mktemp("site"))


@pytest.fixture(name="server_process")
def _server_process(
    site_directory: Path,
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the file server in a background process for integration tests."""

    log_file = tmp_path_factory.mktemp("logs") / "server.log"
    yield from _launch_server(site_directory, log_file)


@pytest.fixture()
def base_url(server_process: ServerProcessInfo) -> str:
    """Expose the running server base URL to integration tests."""

    return server_process["base_url"]
