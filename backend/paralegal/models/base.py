import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger("models")

M = TypeVar("M", bound="CamelModel")


class CamelModel(BaseModel):
    """Base class for records persisted and exchanged with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def merge_over_defaults(cls: Type[M], data: Any) -> M:
        """
        Build an instance from persisted data, field by field.

        Every field that is missing or fails validation keeps its default, so a
        partially corrupted blob still loads everything that is readable.

        Args:
            data: Decoded JSON (normally a dict keyed by the camelCase aliases)

        Returns:
            A fully populated instance; never raises on malformed input
        """
        instance = cls()
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"⚠️ IGNORING MALFORMED {cls.__name__} DATA: type={type(data).__name__}")
            return instance

        for name, field in cls.model_fields.items():
            key = field.alias or name
            if key in data:
                value = data[key]
            elif name in data:
                value = data[name]
            else:
                continue

            try:
                partial = cls.model_validate({key: value})
            except ValidationError as e:
                logger.warning(f"⚠️ FALLING BACK TO DEFAULT: model={cls.__name__}, field={key}, error={e.error_count()} issue(s)")
                continue
            setattr(instance, name, getattr(partial, name))

        return instance

    def to_export(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, dropping fields marked as transient."""
        return self.model_dump(mode="json", by_alias=True)
