"""Shared fixtures: an in-memory redis server and a recording backend."""
from io import StringIO

import pytest
import redis
import wrapt

from klog.backends import Backend, BackendKind, ConsoleBackend
from klog._logger import Logger

#
# global mocks, patches, stubs
#


class FakeRedisServer:
    """Sorted sets kept in memory, toggled up or down by tests."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.up = True
        self.zsets = {}
        self.commands = []


server = FakeRedisServer()


@wrapt.patch_function_wrapper(redis.Redis, 'execute_command')
def patch_redis_execute_command(wrapped, instance, args, kwargs):
    """Serve PING and ZADD from memory."""
    if not server.up:
        raise redis.ConnectionError('Connection refused')
    command, *rest = args
    server.commands.append((command, *rest))
    if command == 'PING':
        return True
    if command == 'ZADD':
        key, *pieces = rest
        zset = server.zsets.setdefault(key, {})
        added = 0
        for score, member in zip(pieces[::2], pieces[1::2]):
            added += member not in zset
            zset[member] = float(score)
        return added
    raise NotImplementedError(command)


class RecordingBackend(Backend):
    """Backend keeping every payload it receives."""

    kind = BackendKind.CONSOLE

    def __init__(self, plain=False):
        self.plain = plain
        self.writes = []
        self.closed = False

    def write(self, data):
        self.writes.append(data)
        return len(data)

    def close(self):
        self.closed = True


@pytest.fixture
def redis_server():
    server.reset()
    yield server
    server.reset()


@pytest.fixture
def recorder():
    return RecordingBackend()


@pytest.fixture
def stream():
    return StringIO()


@pytest.fixture
def logger(stream):
    """Uncolored INFO logger writing to an in-memory console."""
    return Logger(backend=ConsoleBackend(stream), color=False)
