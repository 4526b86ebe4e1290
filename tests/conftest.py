"""Pytest configuration and shared fixtures."""

import os
import socket

import pytest
from hypothesis import settings

settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")


@pytest.fixture
def pipe():
    """A (read_fd, write_fd) pair, closed after the test if still open."""
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


@pytest.fixture
def socket_pair():
    """Connected sockets standing in for the two ends of a session."""
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


@pytest.fixture
def free_port():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]
