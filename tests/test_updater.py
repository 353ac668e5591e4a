"""End-to-end update runs against the fake build API."""

from pathlib import Path

import pytest

from paperupdater.exceptions import IntegrityMismatchError, VersionNotFoundError
from paperupdater.history import VersionHistoryStore
from paperupdater.models import UpdateAction, VersionRecord
from paperupdater.updater import ServerUpdater

from fakes import FakeMetadataClient, make_build, sha256_hex


def _updater(client, server_dir: Path) -> ServerUpdater:
    return ServerUpdater(client, server_dir / "server.jar", server_dir / "update_history.json")


def test_first_run_installs_and_records(client, server_dir: Path, jar_bytes: bytes) -> None:
    result = _updater(client, server_dir).update()

    assert result.installed
    assert (server_dir / "server.jar").read_bytes() == jar_bytes
    saved = VersionHistoryStore(server_dir / "update_history.json").load()
    assert saved == result.record
    assert (saved.minecraft_version, saved.build_number) == ("1.20.1", 10)


def test_second_run_is_idempotent(client, server_dir: Path, jar_bytes: bytes) -> None:
    updater = _updater(client, server_dir)
    first = updater.update()
    history_before = (server_dir / "update_history.json").read_bytes()

    second = updater.update()

    assert second.decision.action is UpdateAction.SKIP
    assert second.record == first.record
    assert len(client.downloaded_urls) == 1
    assert (server_dir / "server.jar").read_bytes() == jar_bytes
    assert (server_dir / "update_history.json").read_bytes() == history_before


def test_new_build_is_picked_up(client, server_dir: Path) -> None:
    updater = _updater(client, server_dir)
    updater.update()

    newer = b"build eleven"
    client.publish(make_build("1.20.1", 11, newer), newer)
    result = updater.update()

    assert result.installed
    assert result.record.build_number == 11
    assert (server_dir / "server.jar").read_bytes() == newer


def test_corrupt_history_is_ignored(client, server_dir: Path, jar_bytes: bytes) -> None:
    (server_dir / "update_history.json").write_text('{"minecraft_version": "1.20.1", "bui')

    result = _updater(client, server_dir).update()

    assert result.decision.action is UpdateAction.DOWNLOAD
    assert result.decision.current is None
    assert (server_dir / "server.jar").read_bytes() == jar_bytes
    assert VersionHistoryStore(server_dir / "update_history.json").load() == result.record


def test_corrupt_history_logs_warning(client, server_dir: Path, caplog) -> None:
    (server_dir / "update_history.json").write_text("not json")
    assert _updater(client, server_dir).load_current() is None
    assert "Ignoring unusable version history" in caplog.text


def test_absent_version_downloads_nothing(client, server_dir: Path) -> None:
    with pytest.raises(VersionNotFoundError):
        _updater(client, server_dir).update("1.999")

    assert client.downloaded_urls == []
    assert not (server_dir / "server.jar").exists()
    assert not (server_dir / "update_history.json").exists()


def test_integrity_failure_records_nothing(server_dir: Path) -> None:
    fake = FakeMetadataClient(["1.20"])
    fake.publish(make_build("1.20", 3, b"x", expected_sha256="0" * 64), b"evil")
    old = VersionRecord("1.20", 2, sha256_hex(b"old"))
    store = VersionHistoryStore(server_dir / "update_history.json")
    store.save(old)
    (server_dir / "server.jar").write_bytes(b"old")

    with pytest.raises(IntegrityMismatchError):
        _updater(fake, server_dir).update()

    assert (server_dir / "server.jar").read_bytes() == b"old"
    assert store.load() == old


def test_keep_version_stays_on_installed_version(client, server_dir: Path) -> None:
    VersionHistoryStore(server_dir / "update_history.json").save(
        VersionRecord("1.20", 9, sha256_hex(b"older version jar"))
    )

    result = _updater(client, server_dir).update(keep_version=True)

    assert result.record.minecraft_version == "1.20"
    assert result.record.build_number == 10
    assert client.latest_build_calls == ["1.20"]


def test_explicit_version_wins_over_keep_version(client, server_dir: Path) -> None:
    VersionHistoryStore(server_dir / "update_history.json").save(
        VersionRecord("1.20", 10, sha256_hex(b"older version jar"))
    )

    decision = _updater(client, server_dir).check("1.20.1", keep_version=True)

    assert decision.target.minecraft_version == "1.20.1"


def test_keep_version_without_record_uses_latest(client, server_dir: Path) -> None:
    decision = _updater(client, server_dir).check(keep_version=True)
    assert decision.target.minecraft_version == "1.20.1"


def test_check_does_not_install(client, server_dir: Path) -> None:
    decision = _updater(client, server_dir).check()

    assert decision.needs_download
    assert client.downloaded_urls == []
    assert list(server_dir.iterdir()) == []


def test_large_build_numbers_are_recorded(server_dir: Path) -> None:
    data = b"build one hundred thousand"
    fake = FakeMetadataClient(["1.20"])
    fake.publish(make_build("1.20", 100000, data), data)
    updater = _updater(fake, server_dir)

    first = updater.update()
    second = updater.update()

    assert first.record.build_number == 100000
    assert VersionHistoryStore(server_dir / "update_history.json").load() == first.record
    assert second.decision.action is UpdateAction.SKIP
    assert len(fake.downloaded_urls) == 1
