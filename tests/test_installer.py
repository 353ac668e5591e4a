"""Tests for artifact installation."""

from pathlib import Path

import pytest

from paperupdater.exceptions import DownloadError, IntegrityMismatchError, IOFailureError, ValidationError
from paperupdater.installer import ArtifactInstaller, sha256_file
from paperupdater.models import BuildMetadata, UpdateAction, UpdateDecision, VersionRecord

from fakes import FakeMetadataClient, failing_download, make_build, sha256_hex

OLD_JAR = b"old server jar contents"


@pytest.fixture
def destination(server_dir: Path) -> Path:
    path = server_dir / "server.jar"
    path.write_bytes(OLD_JAR)
    return path


def _download(target) -> UpdateDecision:
    return UpdateDecision(target=target, action=UpdateAction.DOWNLOAD)


def _leftovers(directory: Path):
    return sorted(p.name for p in directory.iterdir() if p.name != "server.jar")


def test_skip_returns_current_record_without_network(client, destination: Path) -> None:
    current = VersionRecord("1.20.1", 10, sha256_hex(OLD_JAR))
    decision = UpdateDecision(
        target=client.builds["1.20.1"], action=UpdateAction.SKIP, current=current
    )

    result = ArtifactInstaller(client).install(decision, destination)

    assert result is current
    assert client.downloaded_urls == []
    assert destination.read_bytes() == OLD_JAR


def test_download_replaces_destination(client, destination: Path, jar_bytes: bytes) -> None:
    target = client.builds["1.20.1"]

    record = ArtifactInstaller(client, chunk_size=5).install(_download(target), destination)

    assert destination.read_bytes() == jar_bytes
    assert record.minecraft_version == "1.20.1"
    assert record.build_number == 10
    assert record.sha256 == sha256_hex(jar_bytes)
    assert _leftovers(destination.parent) == []


def test_creates_destination_when_missing(client, server_dir: Path, jar_bytes: bytes) -> None:
    destination = server_dir / "server.jar"
    ArtifactInstaller(client).install(_download(client.builds["1.20.1"]), destination)
    assert destination.read_bytes() == jar_bytes


def test_expected_digest_is_compared_case_insensitively(destination: Path) -> None:
    data = b"jar bytes"
    fake = FakeMetadataClient(["1.20"])
    target = fake.publish(make_build("1.20", 3, data, expected_sha256=sha256_hex(data).upper()), data)

    record = ArtifactInstaller(fake).install(_download(target), destination)

    assert destination.read_bytes() == data
    assert record.sha256 == sha256_hex(data)


def test_mismatch_leaves_destination_untouched(destination: Path) -> None:
    fake = FakeMetadataClient(["1.20"])
    target = fake.publish(make_build("1.20", 3, b"x", expected_sha256="0" * 64), b"tampered bytes")

    with pytest.raises(IntegrityMismatchError) as excinfo:
        ArtifactInstaller(fake).install(_download(target), destination)

    assert excinfo.value.expected == "0" * 64
    assert excinfo.value.actual == sha256_hex(b"tampered bytes")
    assert destination.read_bytes() == OLD_JAR
    assert _leftovers(destination.parent) == []


def test_interrupted_download_leaves_destination_untouched(client, destination: Path) -> None:
    client.download_error = failing_download()

    with pytest.raises(DownloadError):
        ArtifactInstaller(client).install(_download(client.builds["1.20.1"]), destination)

    assert destination.read_bytes() == OLD_JAR
    assert _leftovers(destination.parent) == []


def test_failed_rename_is_io_failure(client, destination: Path, monkeypatch) -> None:
    def broken_replace(src, dst):
        raise PermissionError("permission denied")

    monkeypatch.setattr("paperupdater.installer.os.replace", broken_replace)

    with pytest.raises(IOFailureError):
        ArtifactInstaller(client).install(_download(client.builds["1.20.1"]), destination)

    assert destination.read_bytes() == OLD_JAR
    assert _leftovers(destination.parent) == []


def test_termination_before_rename_keeps_destination(client, destination: Path, monkeypatch) -> None:
    def killed(src, dst):
        raise KeyboardInterrupt

    monkeypatch.setattr("paperupdater.installer.os.replace", killed)

    with pytest.raises(KeyboardInterrupt):
        ArtifactInstaller(client).install(_download(client.builds["1.20.1"]), destination)

    assert destination.read_bytes() == OLD_JAR


def test_missing_directory_is_io_failure(client, tmp_path: Path) -> None:
    destination = tmp_path / "missing" / "server.jar"
    with pytest.raises(IOFailureError):
        ArtifactInstaller(client).install(_download(client.builds["1.20.1"]), destination)


def test_progress_callback_receives_totals(client, destination: Path, jar_bytes: bytes) -> None:
    progress = []
    ArtifactInstaller(client, chunk_size=8).install(
        _download(client.builds["1.20.1"]), destination,
        progress_callback=lambda done, total: progress.append((done, total)),
    )
    assert progress[-1] == (len(jar_bytes), len(jar_bytes))


def test_sha256_file(tmp_path: Path) -> None:
    path = tmp_path / "data.bin"
    path.write_bytes(b"abc" * 1000)
    assert sha256_file(path, chunk_size=7) == sha256_hex(b"abc" * 1000)


def test_unrecordable_target_leaves_destination_untouched(destination: Path) -> None:
    data = b"jar bytes"
    fake = FakeMetadataClient(["1.20 beta"])
    target = fake.publish(BuildMetadata(
        minecraft_version="1.20 beta",
        build_number=3,
        download_filename="paper.jar",
        expected_sha256=sha256_hex(data),
    ), data)

    with pytest.raises(ValidationError):
        ArtifactInstaller(fake).install(_download(target), destination)

    assert destination.read_bytes() == OLD_JAR
    assert _leftovers(destination.parent) == []
