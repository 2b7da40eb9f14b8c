from django.core.management.base import BaseCommand, CommandError
from django.db import DEFAULT_DB_ALIAS

from sale_triggers import api, sql
from sale_triggers.conf import get_config
from sale_triggers.exceptions import SaleTriggerError

ACTIONS = ("install", "uninstall", "status", "sql", "create-schema", "drop-schema")


class Command(BaseCommand):
    help = "Install, remove or inspect the sales trigger (stock decrement + commission)"

    def add_arguments(self, parser):
        parser.add_argument("action", choices=ACTIONS)
        parser.add_argument(
            "--database",
            default=DEFAULT_DB_ALIAS,
            help="Database alias to operate on (default: %(default)s)",
        )

    def handle(self, *args, **opts):
        action = opts["action"]
        using = opts["database"]

        try:
            if action == "sql":
                for statement in sql.install_statements(get_config()):
                    self.stdout.write(statement.strip() + ";\n")
                return

            if action == "create-schema":
                api.create_schema(using=using)
                self.stdout.write(self.style.SUCCESS("Schema created"))
                return

            if action == "drop-schema":
                api.drop_schema(using=using)
                self.stdout.write(self.style.SUCCESS("Schema dropped"))
                return

            backend = api.get_backend(using)

            if action == "install":
                backend.install()
                self.stdout.write(self.style.SUCCESS("Trigger installed"))
            elif action == "uninstall":
                backend.uninstall()
                self.stdout.write(self.style.SUCCESS("Trigger removed"))
            else:
                state = "installed" if backend.installed() else "not installed"
                self.stdout.write(f"{state} ({type(backend).__name__}, database={using})")
        except SaleTriggerError as e:
            raise CommandError(str(e)) from e
