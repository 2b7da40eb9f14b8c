from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import override_settings

from sale_triggers import api


def _run(*args) -> str:
    out = StringIO()
    call_command("sale_trigger", *args, stdout=out)
    return out.getvalue()


def test_sql_prints_install_statements_without_executing():
    output = _run("sql")

    assert "CREATE OR REPLACE FUNCTION update_stock_and_commission()" in output
    assert "DROP TRIGGER IF EXISTS after_sale_insert ON sales;" in output
    assert "AFTER INSERT ON sales" in output


@override_settings(SALE_TRIGGERS={"TRIGGER_NAME": "bad name"})
def test_invalid_configuration_becomes_command_error():
    with pytest.raises(CommandError, match="not a valid SQL identifier"):
        _run("sql")


def test_schema_lifecycle_and_status(vendor):
    try:
        assert "Schema created" in _run("create-schema")
        assert api.add_product("Laptop", "1200.00", 10).stock_quantity == 10

        assert "Trigger installed" in _run("install")
        status = _run("status")
        assert status.startswith("installed")
        expected = "PostgresTriggerBackend" if vendor == "postgresql" else "ApplicationBackend"
        assert expected in status

        assert "Trigger removed" in _run("uninstall")
    finally:
        assert "Schema dropped" in _run("drop-schema")


def test_unknown_action_is_rejected():
    with pytest.raises(CommandError):
        _run("explode")
