"""Rendered document handling: splitting, conversion and strict decoding."""

from ._convert import dump_yaml, json_to_yaml, to_plain, yaml_to_json
from ._decode import decode_document, find_unknown_field
from ._models import Manifest
from ._split import DEFAULT_SEPARATOR, match_instances, split_documents

__all__ = [
    "DEFAULT_SEPARATOR",
    "Manifest",
    "decode_document",
    "dump_yaml",
    "find_unknown_field",
    "json_to_yaml",
    "match_instances",
    "split_documents",
    "to_plain",
    "yaml_to_json",
]
