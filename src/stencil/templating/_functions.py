"""Template helper function implementations.

Each helper is a frozen dataclass with a __call__ method. Helpers take the
piped value as their first argument so they work both as calls,
`{{ toYaml(Stencil.Spec) }}`, and as filters, `{{ Stencil.Spec | toYaml }}`.

Note: Parameters are typed as `object` because templates may pass values of
any type at runtime. Helpers raise ValueError for values they cannot handle;
the render pipeline reports those as execution errors.
"""

import base64
import os
from collections.abc import Callable
from dataclasses import dataclass

import orjson
import yaml
from jinja2 import Undefined

from stencil.documents._convert import dump_yaml, json_to_yaml, to_plain, yaml_to_json


def _indent_lines(text: str, spaces: int) -> str:
    pad = " " * spaces
    return pad + text.replace("\n", "\n" + pad)


def _is_empty(value: object) -> bool:
    return value is None or isinstance(value, Undefined) or value == ""


# =============================================================================
# Built-in helpers
# =============================================================================


@dataclass(frozen=True, slots=True)
class QuoteFunction:
    """Wrap values in double quotes, escaping as a YAML/JSON string.

    Template usage: {{ Stencil.Name | quote }}

    None values are skipped; several values are joined with spaces.
    """

    def __call__(self, *values: object) -> str:
        return " ".join(
            orjson.dumps(str(value)).decode()
            for value in values
            if value is not None and not isinstance(value, Undefined)
        )


@dataclass(frozen=True, slots=True)
class SquoteFunction:
    """Wrap values in single quotes without escaping.

    Template usage: {{ Stencil.Name | squote }}
    """

    def __call__(self, *values: object) -> str:
        return " ".join(
            f"'{value}'"
            for value in values
            if value is not None and not isinstance(value, Undefined)
        )


@dataclass(frozen=True, slots=True)
class ToYamlFunction:
    """Serialize a value to YAML without the trailing newline.

    Template usage: {{ Stencil.Labels | toYaml | nindent(4) }}

    A missing value renders as nothing.
    """

    def __call__(self, value: object) -> str:
        if isinstance(value, Undefined):
            return ""
        return dump_yaml(value).removesuffix("\n")


@dataclass(frozen=True, slots=True)
class FromYamlFunction:
    """Parse a YAML string into data.

    Template usage: {{ fromYaml(Stencil.Raw).name }}
    """

    def __call__(self, value: object) -> object:
        if not isinstance(value, str):
            msg = f"fromYaml expects a string, got {type(value).__name__}"
            raise ValueError(msg)  # noqa: TRY004
        try:
            return yaml.safe_load(value)
        except yaml.YAMLError as e:
            msg = f"fromYaml failed to parse input: {e}"
            raise ValueError(msg) from e


@dataclass(frozen=True, slots=True)
class ToJsonFunction:
    """Serialize a value to compact JSON.

    Template usage: {{ Stencil.Config | toJson | quote }}
    """

    def __call__(self, value: object) -> str:
        if isinstance(value, Undefined):
            return ""
        try:
            return orjson.dumps(to_plain(value), option=orjson.OPT_NON_STR_KEYS).decode()
        except orjson.JSONEncodeError as e:
            msg = f"toJson cannot serialize {type(value).__name__}: {e}"
            raise ValueError(msg) from e


@dataclass(frozen=True, slots=True)
class FromJsonFunction:
    """Parse a JSON string into data.

    Template usage: {{ fromJson(Stencil.Raw).name }}
    """

    def __call__(self, value: object) -> object:
        if not isinstance(value, (str, bytes)):
            msg = f"fromJson expects a string, got {type(value).__name__}"
            raise ValueError(msg)  # noqa: TRY004
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError as e:
            msg = f"fromJson failed to parse input: {e}"
            raise ValueError(msg) from e


@dataclass(frozen=True, slots=True)
class IndentFunction:
    """Indent every line of a string.

    Template usage: {{ Stencil.Script | indent(4) }}
    """

    def __call__(self, value: object, spaces: int) -> str:
        return _indent_lines(str(value), spaces)


@dataclass(frozen=True, slots=True)
class NindentFunction:
    """Indent every line of a string and prepend a newline.

    Template usage: {{ Stencil.Labels | toYaml | nindent(4) }}
    """

    def __call__(self, value: object, spaces: int) -> str:
        return "\n" + _indent_lines(str(value), spaces)


@dataclass(frozen=True, slots=True)
class RequiredFunction:
    """Fail the render when a value is missing or empty.

    Template usage: {{ Stencil.Image | required("image is required") }}
    """

    def __call__(self, value: object, message: str = "value is required") -> object:
        if _is_empty(value):
            raise ValueError(message)
        return value


@dataclass(frozen=True, slots=True)
class EnvFunction:
    """Get environment variable value.

    Template usage: {{ env("HOME") }}

    Returns an empty string when the variable is not set.
    """

    def __call__(self, name: object) -> str:
        if not isinstance(name, str):
            return ""
        return os.environ.get(name, "")


@dataclass(frozen=True, slots=True)
class RequiredEnvFunction:
    """Get environment variable value, failing when it is unset or empty.

    Template usage: {{ requiredEnv("IMAGE_TAG") }}
    """

    def __call__(self, name: object) -> str:
        value = os.environ.get(name, "") if isinstance(name, str) else ""
        if not value:
            msg = f"required env var `{name}` is not set"
            raise ValueError(msg)
        return value


@dataclass(frozen=True, slots=True)
class B64EncFunction:
    """Base64-encode a string.

    Template usage: {{ Stencil.Password | b64enc }}
    """

    def __call__(self, value: object) -> str:
        return base64.b64encode(str(value).encode()).decode()


@dataclass(frozen=True, slots=True)
class B64DecFunction:
    """Decode a base64 string.

    Template usage: {{ Stencil.Encoded | b64dec }}
    """

    def __call__(self, value: object) -> str:
        try:
            return base64.b64decode(str(value), validate=True).decode()
        except ValueError as e:
            msg = f"b64dec failed to decode input: {e}"
            raise ValueError(msg) from e


# =============================================================================
# Custom helpers
# =============================================================================


@dataclass(frozen=True, slots=True)
class IndentRestFunction:
    """Indent every line of a string except the first.

    Template usage: key: {{ Stencil.Text | indentRest(2) }}

    Useful when the first line continues a line already written in the
    template.
    """

    def __call__(self, value: object, spaces: int) -> str:
        text = str(value)
        head, sep, rest = text.partition("\n")
        if not sep:
            return text
        return head + "\n" + _indent_lines(rest, spaces)


@dataclass(frozen=True, slots=True)
class YamlToJsonFunction:
    """Convert a YAML string to JSON.

    Template usage: {{ Stencil.Manifest | yamlToJson }}
    """

    def __call__(self, value: object) -> str:
        try:
            return yaml_to_json(str(value))
        except (yaml.YAMLError, orjson.JSONEncodeError) as e:
            msg = f"yamlToJson failed to convert input: {e}"
            raise ValueError(msg) from e


@dataclass(frozen=True, slots=True)
class JsonToYamlFunction:
    """Convert a JSON string to YAML.

    Template usage: {{ Stencil.Payload | jsonToYaml }}
    """

    def __call__(self, value: object) -> str:
        try:
            return json_to_yaml(str(value))
        except orjson.JSONDecodeError as e:
            msg = f"jsonToYaml failed to convert input: {e}"
            raise ValueError(msg) from e


def builtin_functions() -> dict[str, Callable[..., object]]:
    """Create the general-purpose helpers available to every template."""
    return {
        # Strings and quoting
        "quote": QuoteFunction(),
        "squote": SquoteFunction(),
        "indent": IndentFunction(),
        "nindent": NindentFunction(),
        "b64enc": B64EncFunction(),
        "b64dec": B64DecFunction(),
        # Structured data
        "toYaml": ToYamlFunction(),
        "fromYaml": FromYamlFunction(),
        "toJson": ToJsonFunction(),
        "fromJson": FromJsonFunction(),
        # Validation and environment
        "required": RequiredFunction(),
        "env": EnvFunction(),
        "requiredEnv": RequiredEnvFunction(),
    }


def custom_functions() -> dict[str, Callable[..., object]]:
    """Create the stencil-specific helpers layered over the built-ins."""
    return {
        "indentRest": IndentRestFunction(),
        "yamlToJson": YamlToJsonFunction(),
        "jsonToYaml": JsonToYamlFunction(),
    }
