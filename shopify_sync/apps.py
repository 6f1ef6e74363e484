from django.apps import AppConfig


class ShopifySyncConfig(AppConfig):
    name = "shopify_sync"
    verbose_name = "Shopify Sync"
    default_auto_field = "django.db.models.AutoField"

    def ready(self):
        # Import handler modules to trigger topic registration in router.
        import shopify_sync.handlers.resources  # noqa: F401
