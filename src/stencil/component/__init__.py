"""Templated components.

A component pairs a template with a setup function that turns a render input
into the template context, and a schema the rendered YAML is decoded into.

Example:
    from stencil.component import create_component
    from stencil.documents import Manifest

    class Service(Manifest):
        kind: str
        name: str
        port: int

    service = create_component(
        "service",
        '''
        kind: Service
        name: {{ Stencil.Name }}
        port: {{ Stencil.Port }}
        ''',
        schema=Service,
        setup=lambda port: {"Name": "web", "Port": port},
    )

    result = service.render(8080)
    result.instance.port  # 8080
    result.content  # the rendered YAML
"""

from ._component import (
    Component,
    InstancesFn,
    MultiComponent,
    MultiRenderFn,
    RenderFn,
    SetupFn,
    create_component,
    create_multi_component,
)
from ._options import ComponentOptions, PreprocessHook, UnmarshalHook
from ._result import MultiRenderResult, RenderResult

__all__ = [
    "Component",
    "ComponentOptions",
    "InstancesFn",
    "MultiComponent",
    "MultiRenderFn",
    "MultiRenderResult",
    "PreprocessHook",
    "RenderFn",
    "RenderResult",
    "SetupFn",
    "UnmarshalHook",
    "create_component",
    "create_multi_component",
]
