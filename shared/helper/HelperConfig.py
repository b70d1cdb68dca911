"""Environment-backed settings for the case assistant backend."""

import logging
import os

_TRUE_VALUES = ("true", "1", "yes")


class HelperConfig:
    """Typed access to environment settings, plus the shared application logger.

    Keys are upper-cased before lookup. A variable set to an empty string
    counts as unset.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _read(self, key: str, default) -> tuple[str, str | None]:
        """Look up a raw value, failing fast when it is required but absent.

        Returns:
            tuple[str, str | None]: The normalised key and the stripped raw
                value, or None when the caller's default applies.
        """
        key = key.upper()
        raw = (os.getenv(key) or "").strip()
        if raw:
            return key, raw
        if default is None:
            raise ValueError(f"Environment variable '{key}' is not set.")
        return key, None

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Return a text setting such as CONTEXT_MODE or APP_ADMIN_PASSWORD.

        Raises:
            ValueError: If the setting is absent and default is None.
        """
        _, raw = self._read(key, default)
        return raw if raw is not None else default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Return a numeric setting. Values with a decimal point become floats, others ints.

        Args:
            key (str): Setting name, e.g. "RETRIEVAL_LIMIT".
            default (float | int | None): Used when the setting is absent.

        Raises:
            ValueError: If the setting is absent without a default, or not a number.
        """
        key, raw = self._read(key, default)
        if raw is None:
            return default
        try:
            return float(raw) if "." in raw else int(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Return a flag such as LLM_GEMINI_WEB_GROUNDING; "true", "1" and "yes" enable it."""
        _, raw = self._read(key, default)
        if raw is None:
            return default
        return raw.lower() in _TRUE_VALUES

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",", element_type: type = str) -> list:
        """Return a bracketed list setting, e.g. EMBED_ENGINES="[google,supabase]".

        Blank elements are dropped, so "[]" yields an empty list.

        Args:
            key (str): Setting name.
            default (list[str] | None): Used when the setting is absent.
            separator (str): Element delimiter inside the brackets.
            element_type (type): Callable applied to every element.

        Raises:
            ValueError: If the setting is absent without a default, lacks the
                surrounding brackets, or has an element element_type rejects.
        """
        key, raw = self._read(key, default)
        if raw is None:
            return default
        if not (raw.startswith("[") and raw.endswith("]")):
            raise ValueError(f"Environment variable '{key}' must look like '[a{separator}b]'. Got: '{raw}'")

        elements = [item.strip() for item in raw[1:-1].split(separator)]
        try:
            return [element_type(item) for item in elements if item]
        except ValueError as e:
            raise ValueError(f"Environment variable '{key}' has an element that is not {element_type.__name__}: {e}. Got: '{raw}'")

    def get_logger(self) -> logging.Logger:
        return self._logger
