from django.apps import AppConfig


class ParticipantsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.participants"
    label = "participants"

    def ready(self) -> None:
        from modules.participants.events import (
            HerderRegistered,
            RoleChosen,
            SlaughterhouseRegistered,
            TransporterRegistered,
        )
        from modules.participants.handlers import (
            profile_registered_handler,
            role_chosen_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(RoleChosen, role_chosen_handler)
        event_bus.subscribe(HerderRegistered, profile_registered_handler)
        event_bus.subscribe(SlaughterhouseRegistered, profile_registered_handler)
        event_bus.subscribe(TransporterRegistered, profile_registered_handler)
