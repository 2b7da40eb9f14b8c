from django.db import migrations

from sale_triggers.backends.postgres import PostgresTriggerBackend


def install_trigger(apps, schema_editor):
    # Other databases record sales through the application backend.
    if schema_editor.connection.vendor != "postgresql":
        return
    PostgresTriggerBackend(using=schema_editor.connection.alias).install()


def uninstall_trigger(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    PostgresTriggerBackend(using=schema_editor.connection.alias).uninstall()


class Migration(migrations.Migration):
    dependencies = [
        ("shop", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(install_trigger, uninstall_trigger),
    ]
