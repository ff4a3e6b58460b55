from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

from paralegal.models.settings import Settings

class SettingsView(BaseModel):
    """Settings as returned to the client; the API key itself is never sent back."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_email: str
    notify_on_deadlines: bool
    notify_on_violations: bool
    api_key_configured: bool

    @classmethod
    def from_settings(cls, settings: Settings, configured: bool) -> "SettingsView":
        return cls(
            user_email=settings.user_email,
            notify_on_deadlines=settings.notify_on_deadlines,
            notify_on_violations=settings.notify_on_violations,
            api_key_configured=configured,
        )

class SettingsUpdateRequest(BaseModel):
    """Partial settings update; omitted fields are left unchanged."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_email: Optional[str] = None
    notify_on_deadlines: Optional[bool] = None
    notify_on_violations: Optional[bool] = None
    api_key: Optional[str] = None
