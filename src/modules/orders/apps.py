from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import DeliveryConfirmed, OrderStatusChanged
        from modules.orders.handlers import (
            delivery_confirmed_handler,
            order_status_changed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderStatusChanged, order_status_changed_handler)
        event_bus.subscribe(DeliveryConfirmed, delivery_confirmed_handler)
