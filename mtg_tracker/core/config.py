import os
import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.getcwd(), "data")
CONFIG_FILE = os.path.join(DATA_DIR, "config.json")

DEFAULT_CONFIG: Dict[str, Any] = {
    "set_code": "3ed",
    "set_name": "Revised Edition",
    "cards_file": os.path.join(DATA_DIR, "cards.json"),
    "storage_key": "mtg-revised-collection",
    "storage_secret": "mtg-revised-tracker",
    "search_debounce_ms": 200,
    "scryfall_delay_ms": 150,
    "tcgplayer_delay_ms": 500,
    "host": "0.0.0.0",
    "port": 8080,
}


class ConfigManager:
    def __init__(self, config_file: str = CONFIG_FILE):
        self.config_file = config_file
        self._config: Optional[Dict[str, Any]] = None

    @property
    def config(self) -> Dict[str, Any]:
        if self._config is None:
            self.load()
        return self._config

    def load(self) -> Dict[str, Any]:
        """Reads the config file over the defaults. A missing file leaves the defaults in place."""
        self._config = dict(DEFAULT_CONFIG)
        if not os.path.exists(self.config_file):
            return self._config

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if isinstance(data, dict):
                self._config.update(data)
            else:
                logger.error(f"Config file {self.config_file} is not a JSON object, using defaults")
        except Exception as e:
            logger.error(f"Error loading config: {e}")

        return self._config

    def ensure_file(self):
        """Writes the current settings out when no config file exists yet."""
        if not os.path.exists(self.config_file):
            self.save()

    def save(self):
        try:
            os.makedirs(os.path.dirname(self.config_file), exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error(f"Error saving config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save()

    def get_set_code(self) -> str:
        return str(self.config["set_code"])

    def get_set_name(self) -> str:
        return str(self.config["set_name"])

    def get_cards_file(self) -> str:
        return str(self.config["cards_file"])

    def get_storage_key(self) -> str:
        return str(self.config["storage_key"])

    def get_storage_secret(self) -> str:
        return str(self.config["storage_secret"])

    def get_search_debounce(self) -> float:
        return int(self.config["search_debounce_ms"]) / 1000

    def get_scryfall_delay(self) -> float:
        return int(self.config["scryfall_delay_ms"]) / 1000

    def get_tcgplayer_delay(self) -> float:
        return int(self.config["tcgplayer_delay_ms"]) / 1000

    def get_host(self) -> str:
        return str(self.config["host"])

    def get_port(self) -> int:
        return int(self.config["port"])


config_manager = ConfigManager()
