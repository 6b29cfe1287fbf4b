r"""Stencil templating system.

Jinja2-based rendering of component templates: template normalization,
context splitting, escaped second-stage actions and the helper functions
available to every template.

Basic usage:
    from stencil.templating import preprocess_template, render_template_string

    template = preprocess_template('''
        name: {{ Stencil.Name | quote }}
        replicas: {{ Stencil.Replicas }}
    ''')

    result = render_template_string(
        template,
        {"Name": "web", "Replicas": 2},
    )
    # name: "web"
    # replicas: 2

With context functions and escaped actions:
    from stencil.templating import render_template_string

    result = render_template_string(
        "image: {{ Upper(Stencil.Image) }}\ntag: {{! .Values.tag }}",
        {"Upper": str.upper, "Image": "nginx"},
    )
    # image: NGINX
    # tag: {{ .Values.tag }}
"""

from ._context import (
    Binding,
    SplitContext,
    TemplateFunction,
    TemplateVariable,
    split_context,
)
from ._environment import (
    MISSING_VALUE,
    ComponentEnvironment,
    EnvironmentConfig,
    ZeroValueUndefined,
    create_environment,
)
from ._escape import ESCAPE_MARKER, EscapedTemplate, escape_actions, unescape_actions
from ._functions import builtin_functions, custom_functions
from ._preprocess import preprocess_template, trim_template, unindent
from ._renderer import DEFAULT_NAMESPACE, build_function_map, render_template_string

__all__ = [
    "DEFAULT_NAMESPACE",
    "ESCAPE_MARKER",
    "MISSING_VALUE",
    "Binding",
    "ComponentEnvironment",
    "EnvironmentConfig",
    "EscapedTemplate",
    "SplitContext",
    "TemplateFunction",
    "TemplateVariable",
    "ZeroValueUndefined",
    "build_function_map",
    "builtin_functions",
    "create_environment",
    "custom_functions",
    "escape_actions",
    "preprocess_template",
    "render_template_string",
    "split_context",
    "trim_template",
    "unescape_actions",
    "unindent",
]
