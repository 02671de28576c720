import os
from dataclasses import dataclass, field
from pathlib import Path

TRUE_VALUES = ("1", "true", "yes")
FALSE_VALUES = ("0", "false", "no")


def _from_env(name: str, current, raw: str):
    """Convert an environment string to the type of the field's default."""
    if isinstance(current, bool):
        return raw.lower() in TRUE_VALUES
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    if isinstance(current, Path):
        return Path(raw)
    if name == "LOG_LEVEL":
        return raw.upper()
    return raw


@dataclass
class Settings:
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    DICTIONARY_PATH: Path = field(init=False)
    DICTIONARY_URL: str = ""

    MIN_WORD_LENGTH: int = 1
    MAX_RESULTS: int = 0

    MAX_GRID_BYTES: int = 10_000
    HTTP_TIMEOUT: float = 30.0
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    PORT: int = 10001

    def __post_init__(self):
        self.DICTIONARY_PATH = self.BASE_DIR / "words.txt.gz"

        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                setattr(self, fld, _from_env(fld, getattr(self, fld), env_val))

    @property
    def dictionary_source(self) -> str:
        return self.DICTIONARY_URL or str(self.DICTIONARY_PATH)


# Fields that may be changed at runtime through /api/settings
EDITABLE_FIELDS: dict[str, type] = {
    "MIN_WORD_LENGTH": int,
    "MAX_RESULTS": int,
    "LOG_LEVEL": str,
    "DEBUG": bool,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def _coerce(name: str, kind: type, value):
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in TRUE_VALUES + FALSE_VALUES:
            return value.lower() in TRUE_VALUES
        raise ValueError(f"expected a boolean, got {value!r}")
    if kind is int:
        if isinstance(value, bool):
            raise ValueError(f"expected an integer, got {value!r}")
        number = int(value)
        if number < 0:
            raise ValueError("must not be negative")
        return number
    text = str(value)
    if name == "LOG_LEVEL":
        text = text.upper()
        if text not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
    return text


def update_settings(cfg: Settings, **values) -> dict[str, str]:
    """Apply editable values to ``cfg``; return per-field error messages.

    Valid fields are applied even when other fields in the same call fail.
    """
    errors: dict[str, str] = {}
    for name, value in values.items():
        if name not in EDITABLE_FIELDS:
            if hasattr(cfg, name):
                errors[name] = "field is not editable"
            else:
                errors[name] = "unknown field"
            continue
        try:
            setattr(cfg, name, _coerce(name, EDITABLE_FIELDS[name], value))
        except (TypeError, ValueError) as exc:
            errors[name] = str(exc)
    return errors


settings = Settings()
