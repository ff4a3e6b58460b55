from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from paralegal.models.base import CamelModel


class Settings(CamelModel):
    """User settings. One instance is created at startup and shared by reference."""

    # Strict so that e.g. "yes" for a toggle falls back to the default instead of being coerced
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)

    user_email: str = ""
    notify_on_deadlines: bool = True
    notify_on_violations: bool = True
    api_key: str = ""
