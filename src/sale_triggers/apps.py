from django.apps import AppConfig


class SaleTriggersConfig(AppConfig):
    name = "sale_triggers"
    verbose_name = "Sale triggers"
