import importlib

import pytest

trigger_migration = importlib.import_module("shop.migrations.0002_sale_trigger")


class _Connection:
    def __init__(self, vendor):
        self.vendor = vendor
        self.alias = "default"


class _SchemaEditor:
    def __init__(self, vendor):
        self.connection = _Connection(vendor)


class RecordingBackend:
    calls: list = []

    def __init__(self, using):
        self.using = using

    def install(self):
        self.calls.append(("install", self.using))

    def uninstall(self):
        self.calls.append(("uninstall", self.using))


@pytest.fixture
def recorder(monkeypatch):
    RecordingBackend.calls = []
    monkeypatch.setattr(trigger_migration, "PostgresTriggerBackend", RecordingBackend)
    return RecordingBackend


def test_trigger_is_installed_and_removed_on_postgres(recorder):
    editor = _SchemaEditor("postgresql")

    trigger_migration.install_trigger(None, editor)
    trigger_migration.uninstall_trigger(None, editor)

    assert recorder.calls == [("install", "default"), ("uninstall", "default")]


def test_other_databases_are_skipped(recorder):
    editor = _SchemaEditor("sqlite")

    trigger_migration.install_trigger(None, editor)
    trigger_migration.uninstall_trigger(None, editor)

    assert recorder.calls == []


def test_migration_runs_python_in_both_directions():
    (operation,) = trigger_migration.Migration.operations

    assert operation.reversible
    assert trigger_migration.Migration.dependencies == [("shop", "0001_initial")]
