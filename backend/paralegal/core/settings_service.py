import json
import logging
from typing import Any, Dict

from pydantic import ValidationError

from paralegal.core.storage import JsonFileStore
from paralegal.models.settings import Settings

# Configure logging
logger = logging.getLogger("settings_service")

SETTINGS_KEY = "caseAppSettings"

# Key used by earlier versions of the settings blob
LEGACY_API_KEY_FIELD = "deepseekApiKey"


class SettingsService:
    """
    Loads the user settings once, merged over the defaults, and saves them on every update.
    ``settings`` keeps the same object identity for the lifetime of the service so it
    can be handed to other components by reference.
    """

    def __init__(self, store: JsonFileStore):
        self.store = store
        self.settings = self._load_settings()

    def _load_settings(self) -> Settings:
        """Load settings; missing or malformed values fall back to defaults and never raise."""
        try:
            raw = self.store.get(SETTINGS_KEY)
        except OSError as e:
            logger.error(f"❌ ERROR READING SETTINGS: {str(e)}")
            return Settings()

        if not raw:
            logger.info("🔄 NO SAVED SETTINGS, USING DEFAULTS")
            return Settings()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"❌ ERROR PARSING SETTINGS: {str(e)}")
            return Settings()

        if isinstance(data, dict) and "apiKey" not in data and LEGACY_API_KEY_FIELD in data:
            data = {**data, "apiKey": data[LEGACY_API_KEY_FIELD]}

        settings = Settings.merge_over_defaults(data)
        logger.info(f"✅ SETTINGS LOADED: email_set={bool(settings.user_email)}, api_key_set={bool(settings.api_key)}")
        return settings

    def save(self) -> None:
        try:
            self.store.set(SETTINGS_KEY, json.dumps(self.settings.to_export()))
            logger.info("✅ SETTINGS SAVED")
        except OSError as e:
            logger.error(f"❌ ERROR SAVING SETTINGS: {str(e)}")

    def update(self, changes: Dict[str, Any]) -> Settings:
        """
        Apply changes in place and persist them.

        Args:
            changes: Fields to change, keyed by camelCase alias or field name

        Returns:
            The shared settings object

        Raises:
            ValueError: A value has the wrong type; nothing is changed in that case
        """
        aliased = {
            (Settings.model_fields[key].alias or key) if key in Settings.model_fields else key: value
            for key, value in changes.items()
        }
        merged = {**self.settings.to_export(), **aliased}
        try:
            validated = Settings.model_validate(merged)
        except ValidationError as e:
            raise ValueError(f"Invalid settings: {e.error_count()} invalid field(s)") from e

        for name in Settings.model_fields:
            setattr(self.settings, name, getattr(validated, name))

        self.save()
        return self.settings
