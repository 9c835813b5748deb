"""Named method and property tables for host applications.

Hosts that drive the engine by name (for example a 1C:Enterprise add-in
bridge) look methods and properties up in the fixed tables below, using
either the English or the Russian name, and call them with positional
parameter slots. Calls report success as a boolean and leave the failure
in the engine's last-error slot.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from jsonguard.engine import JsonSchemaEngine
from jsonguard.errors import (
    JsonGuardError,
    ParamConversionError,
    ParamNotFoundError,
    ParamType,
    PropertyConversionError,
)

logger = logging.getLogger(__name__)

EXTENSION_NAME = "JsonGuard"


class Params:
    """Positional parameter slots of one host call."""

    def __init__(self, values: list[Any]):
        self.values = values

    def get(self, index: int) -> Any:
        if index >= len(self.values):
            raise ParamNotFoundError(index)
        return self.values[index]

    def set(self, index: int, value: Any) -> None:
        if index >= len(self.values):
            raise ParamNotFoundError(index)
        self.values[index] = value

    def get_string(self, index: int) -> str:
        value = self.get(index)
        if not isinstance(value, str):
            raise ParamConversionError(index, ParamType.STRING)
        return value

    def get_json_text(self, index: int) -> str | bytes:
        value = self.get(index)
        if not isinstance(value, (str, bytes, bytearray)):
            raise ParamConversionError(index, ParamType.STRING_OR_BLOB)
        return value


def _string_value(value: Any) -> str:
    if not isinstance(value, str):
        raise PropertyConversionError(ParamType.STRING)
    return value


def _bool_value(value: Any) -> bool:
    if not isinstance(value, bool):
        raise PropertyConversionError(ParamType.BOOL)
    return value


@dataclass(frozen=True)
class Method:
    name: str
    name_ru: str
    params_count: int
    handler: Callable[["HostComponent", Params], Any]
    is_function: bool
    save_error: bool = False


@dataclass(frozen=True)
class Prop:
    name: str
    name_ru: str
    getter: Callable[["HostComponent"], Any] | None
    setter: Callable[["HostComponent", Any], None] | None = None


class HostComponent:
    """Name-based facade over one ``JsonSchemaEngine``."""

    def __init__(self, engine: JsonSchemaEngine | None = None):
        self.engine = engine or JsonSchemaEngine()

    # Methods

    def _get_last_error(self, params: Params) -> str | None:
        return self.engine.get_last_error() or None

    def _is_valid(self, params: Params) -> bool:
        return self.engine.is_valid(params.get_json_text(0))

    def _validate(self, params: Params) -> bool:
        instance = params.get_json_text(0)
        params.get(1)  # errors slot
        is_valid, errors_json = self.engine.validate(instance)
        params.set(1, errors_json)
        return is_valid

    def _add_scheme(self, params: Params) -> None:
        self.engine.add_schema(params.get_json_text(0))

    def _delete_scheme(self, params: Params) -> None:
        self.engine.remove_schema(params.get_string(0))

    def _delete_all_schemes(self, params: Params) -> None:
        self.engine.clear_schemas()

    def _set_main_scheme(self, params: Params) -> None:
        self.engine.compile(params.get_json_text(0))

    def _get_validation_errors(self, params: Params) -> str | None:
        return self.engine.get_last_validation_errors() or None

    def _clear_main_scheme(self, params: Params) -> None:
        self.engine.clear_main_schema()

    def _has_scheme(self, params: Params) -> bool:
        return self.engine.has_schema(params.get_string(0))

    def _get_schemes(self, params: Params) -> str:
        return self.engine.list_schemas()

    # Properties

    def _get_schema(self) -> str:
        return self.engine.schema_text

    def _get_format(self) -> str:
        return self.engine.config.output_template or ""

    def _set_format(self, value: Any) -> None:
        self.engine.config.output_template = _string_value(value) or None

    def _get_use_custom_formats(self) -> bool:
        return self.engine.config.use_custom_formats

    def _set_use_custom_formats(self, value: Any) -> None:
        self.engine.config.use_custom_formats = _bool_value(value)

    def _get_version(self) -> str:
        return self.engine.version

    def _get_ignore_unknown_formats(self) -> bool:
        return self.engine.config.ignore_unknown_formats

    def _set_ignore_unknown_formats(self, value: Any) -> None:
        self.engine.config.ignore_unknown_formats = _bool_value(value)

    def _get_check_formats(self) -> bool:
        return self.engine.config.check_formats

    def _set_check_formats(self, value: Any) -> None:
        self.engine.config.check_formats = _bool_value(value)

    def _get_draft(self) -> str:
        return self.engine.draft_name

    def _set_draft(self, value: Any) -> None:
        self.engine.set_draft(_string_value(value))

    # Host protocol

    def find_method(self, name: str) -> int | None:
        for num, method in enumerate(METHODS):
            if name in (method.name, method.name_ru):
                return num
        return None

    def get_method_name(self, num: int, alias: int = 0) -> str | None:
        if not 0 <= num < len(METHODS):
            return None
        method = METHODS[num]
        return method.name if alias == 0 else method.name_ru

    def get_n_params(self, num: int) -> int:
        return METHODS[num].params_count if 0 <= num < len(METHODS) else 0

    def has_ret_val(self, num: int) -> bool:
        return 0 <= num < len(METHODS) and METHODS[num].is_function

    def call_as_proc(self, num: int, params: list[Any]) -> bool:
        if not 0 <= num < len(METHODS) or METHODS[num].is_function:
            return False
        ok, _ = self._invoke(METHODS[num], params)
        return ok

    def call_as_func(self, num: int, params: list[Any]) -> tuple[bool, Any]:
        if not 0 <= num < len(METHODS) or not METHODS[num].is_function:
            return False, None
        return self._invoke(METHODS[num], params)

    def call(self, name: str, *args: Any) -> tuple[bool, Any, list[Any]]:
        """Call a method by name; returns (ok, return value, parameter slots)."""
        num = self.find_method(name)
        params = list(args)
        if num is None:
            return False, None, params
        if self.has_ret_val(num):
            ok, value = self.call_as_func(num, params)
        else:
            ok, value = self.call_as_proc(num, params), None
        return ok, value, params

    def find_prop(self, name: str) -> int | None:
        for num, prop in enumerate(PROPS):
            if name in (prop.name, prop.name_ru):
                return num
        return None

    def get_prop_name(self, num: int, alias: int = 0) -> str | None:
        if not 0 <= num < len(PROPS):
            return None
        prop = PROPS[num]
        return prop.name if alias == 0 else prop.name_ru

    def is_prop_readable(self, num: int) -> bool:
        return 0 <= num < len(PROPS) and PROPS[num].getter is not None

    def is_prop_writable(self, num: int) -> bool:
        return 0 <= num < len(PROPS) and PROPS[num].setter is not None

    def get_prop_val(self, num: int) -> tuple[bool, Any]:
        if not self.is_prop_readable(num):
            return False, None
        self.engine.record_error(None)
        try:
            return True, PROPS[num].getter(self)
        except JsonGuardError as e:
            self.engine.record_error(e)
            return False, None

    def set_prop_val(self, num: int, value: Any) -> bool:
        if not self.is_prop_writable(num):
            return False
        self.engine.record_error(None)
        try:
            PROPS[num].setter(self, value)
        except JsonGuardError as e:
            logger.debug(f"Setting property {PROPS[num].name} failed: {e}")
            self.engine.record_error(e)
            return False
        return True

    def get_prop(self, name: str) -> Any:
        """Read a property by name; None if unknown or failed."""
        num = self.find_prop(name)
        if num is None:
            return None
        return self.get_prop_val(num)[1]

    def set_prop(self, name: str, value: Any) -> bool:
        num = self.find_prop(name)
        return num is not None and self.set_prop_val(num, value)

    def _invoke(self, method: Method, params: list[Any]) -> tuple[bool, Any]:
        try:
            value = method.handler(self, Params(params))
        except JsonGuardError as e:
            logger.debug(f"Method {method.name} failed: {e}")
            self.engine.record_error(e)
            return False, None
        if not method.save_error:
            self.engine.record_error(None)
        return True, value


METHODS: tuple[Method, ...] = (
    Method("GetLastError", "ПолучитьОшибку", 0, HostComponent._get_last_error, True, save_error=True),
    Method("IsValid", "Действителен", 1, HostComponent._is_valid, True),
    Method("Validate", "Проверить", 2, HostComponent._validate, True),
    Method("AddScheme", "ДобавитьСхему", 1, HostComponent._add_scheme, False),
    Method("DeleteScheme", "УдалитьСхему", 1, HostComponent._delete_scheme, False),
    Method("DeleteAllSchemes", "УдалитьВсеСхемы", 0, HostComponent._delete_all_schemes, False),
    Method("SetMainScheme", "УстановитьОсновнуюСхему", 1, HostComponent._set_main_scheme, False),
    Method("GetValidationError", "ПолучитьОшибкиВалидации", 0, HostComponent._get_validation_errors, True),
    Method("ClearMainScheme", "ОчиститьОсновнуюСхему", 0, HostComponent._clear_main_scheme, False),
    Method("HasScheme", "ЕстьСхема", 1, HostComponent._has_scheme, True),
    Method("GetSchemes", "ПолучитьСхемы", 0, HostComponent._get_schemes, True),
)

PROPS: tuple[Prop, ...] = (
    Prop("Schema", "Схема", HostComponent._get_schema),
    Prop("Format", "Формат", HostComponent._get_format, HostComponent._set_format),
    Prop("UseCustomFormats", "ИспользоватьДопФорматы",
         HostComponent._get_use_custom_formats, HostComponent._set_use_custom_formats),
    Prop("Version", "Версия", HostComponent._get_version),
    Prop("IgnoreUnknownFormats", "ИгнорироватьНеизвестныеФорматы",
         HostComponent._get_ignore_unknown_formats, HostComponent._set_ignore_unknown_formats),
    Prop("CheckFormats", "ПроверятьФорматы",
         HostComponent._get_check_formats, HostComponent._set_check_formats),
    Prop("Draft", "Стандарт", HostComponent._get_draft, HostComponent._set_draft),
)
