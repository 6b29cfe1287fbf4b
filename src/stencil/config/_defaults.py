"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

Note: DEFAULT_CONFIG is intentionally a plain dict for type compatibility
with functions like deep_merge. The merge functions create copies, so the
original is never mutated. Keys whose default is None (rendering.tab_size)
are omitted because TOML cannot express them.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "rendering": {
        "multi_doc_separator": "---",
        "strict_undefined": False,
        "namespace": "Stencil",
        "panic_on_error": False,
        "frontload_enabled": False,
        "trim_blocks": False,
        "lstrip_blocks": False,
        "keep_trailing_newline": True,
    },
}
