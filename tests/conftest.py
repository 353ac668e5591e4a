import logging
import os
import tempfile

# Keep tests away from the real user configuration
os.environ.setdefault("PAPERUPDATER_CONFIG_DIR", tempfile.mkdtemp(prefix="paperupdater-test-"))

import pytest

from fakes import FakeMetadataClient, make_build


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI runs install their own root handlers; drop them afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def jar_bytes() -> bytes:
    return b"PK\x03\x04 paper server jar build 10"


@pytest.fixture
def client(jar_bytes) -> FakeMetadataClient:
    fake = FakeMetadataClient(["1.19.4", "1.20", "1.20.1"])
    fake.publish(make_build("1.20", 10, b"older version jar"), b"older version jar")
    fake.publish(make_build("1.20.1", 10, jar_bytes), jar_bytes)
    return fake


@pytest.fixture
def server_dir(tmp_path):
    directory = tmp_path / "server"
    directory.mkdir()
    return directory
