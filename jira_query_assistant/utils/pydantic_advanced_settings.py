import json
import argparse
from pathlib import Path
from typing import Any, Dict, Tuple, Type
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

CONFIG_FILE_NAME = "config.json"


class ArgparseConfigSettingsSource(PydanticBaseSettingsSource):
    """
    A settings source class that loads variables from command-line arguments.
    Arguments are namespaced by the settings' env_prefix, e.g. --openai_model.
    """

    def __init__(self, settings_cls: Type[BaseSettings]):
        super().__init__(settings_cls)
        self.prefix = settings_cls.model_config.get("env_prefix", "")
        self.args, self.unknown = self._parse_args()

    def _parse_args(self):
        parser = argparse.ArgumentParser(
            description="Command line arguments",
            add_help=False,
            allow_abbrev=False,
        )
        for field_name, field in self.settings_cls.model_fields.items():
            parser.add_argument(
                f"--{self.prefix}{field_name}",
                dest=field_name,
                help=f"{field_name} setting, type= {field.annotation}",
            )
        return parser.parse_known_args()

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> Tuple[Any, str, bool]:
        field_value = getattr(self.args, field_name, None)
        return field_value, field_name, False

    def __call__(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        for field_name in self.settings_cls.model_fields:
            field_value = getattr(self.args, field_name, None)
            if field_value is not None:
                d[field_name] = field_value
        return d


class JsonConfigSettingsSource(PydanticBaseSettingsSource):
    """
    Loads the section named after the settings' env_prefix (without the
    trailing underscore) from a config.json in the working directory.
    """

    def _section(self) -> Dict[str, Any]:
        json_file_path = Path(CONFIG_FILE_NAME)
        if not json_file_path.exists():
            return {}
        encoding = self.config.get("env_file_encoding")
        content = json.loads(json_file_path.read_text(encoding))
        section_name = self.config.get("env_prefix", "").rstrip("_")
        section = content.get(section_name, {}) if section_name else content
        return section if isinstance(section, dict) else {}

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> Tuple[Any, str, bool]:
        return self._section().get(field_name), field_name, False

    def prepare_field_value(
        self, field_name: str, field: FieldInfo, value: Any, value_is_complex: bool
    ) -> Any:
        return value

    def __call__(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        section = self._section()
        for field_name, field in self.settings_cls.model_fields.items():
            field_value = self.prepare_field_value(
                field_name, field, section.get(field_name), False
            )
            if field_value is not None:
                d[field_name] = field_value
        return d


class CustomizedSettings(BaseSettings):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            ArgparseConfigSettingsSource(settings_cls),
            JsonConfigSettingsSource(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
