"""Shared fixtures for the utilkit test suite."""

from __future__ import annotations

import logging
import socket
import sys

import pytest
import structlog

from utilkit.core import store
from utilkit.core.contracts import GlobalConfig, UploadFile


@pytest.fixture(autouse=True)
def _block_network_for_offline(request, monkeypatch):
    """Block outbound connections in tests marked as offline.

    Every operation is pure; an offline test that reaches the network is a bug.
    """
    if "offline" in [m.name for m in request.node.iter_markers()]:

        def _blocked(*_args, **_kwargs):
            raise RuntimeError("Offline test attempted to open a network connection")

        monkeypatch.setattr(socket, "create_connection", _blocked)


@pytest.fixture(autouse=True)
def _isolated_store(monkeypatch):
    """Start every test from an empty global configuration."""
    monkeypatch.setattr(store, "_CURRENT", GlobalConfig())


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Send log events to stderr at WARNING and above; stdout stays for command output."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
    yield
    structlog.reset_defaults()


def pytest_configure(config):
    config.addinivalue_line("markers", "offline: mark test as offline (no network)")


MEGABYTE = 1024 * 1024


def _upload(**overrides) -> UploadFile:
    defaults = {"name": "avatar.png", "size": 200 * 1024, "type": "image/png"}
    defaults.update(overrides)
    return UploadFile(**defaults)


@pytest.fixture()
def png_upload() -> UploadFile:
    return _upload()


@pytest.fixture()
def oversized_upload() -> UploadFile:
    return _upload(name="huge.png", size=6 * MEGABYTE)


@pytest.fixture()
def pdf_upload() -> UploadFile:
    return _upload(name="report.pdf", type="application/pdf")
