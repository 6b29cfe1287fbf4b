from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from pyfakefs.fake_filesystem import FakeFilesystem
from pytest_mock import MockerFixture

from stencil.component import ComponentOptions, RenderResult, create_component
from stencil.documents import Manifest
from stencil.exceptions import (
    DefinitionError,
    ExecutionError,
    FileReadError,
    ParseError,
    PreprocessError,
    RenderError,
    SetupError,
    ValidationError,
)

if TYPE_CHECKING:
    from conftest import CapturedLog


class ObjectMeta(Manifest):
    name: str


class DeploymentSpec(Manifest):
    replicas: int = 1


class Deployment(Manifest):
    kind: str = "Deployment"
    metadata: ObjectMeta
    spec: DeploymentSpec = DeploymentSpec()


class DaemonSetSpec(Manifest):
    min_ready_seconds: int = 0


class DaemonSet(Manifest):
    kind: str = "DaemonSet"
    metadata: ObjectMeta
    spec: DaemonSetSpec = DaemonSetSpec()


DEPLOYMENT_TEMPLATE = """
    kind: Deployment
    metadata:
      name: {{ Stencil.Name }}
    spec:
      replicas: {{ Stencil.Replicas }}
"""


def _setup(replicas: int) -> dict[str, object]:
    return {"Name": "web", "Replicas": replicas}


class TestComponentRender:
    def test_renders_and_decodes(self) -> None:
        component = create_component(
            "deployment", DEPLOYMENT_TEMPLATE, schema=Deployment, setup=_setup
        )

        result = component.render(3)

        assert result.success
        assert result.error is None
        assert result.instance == Deployment(
            metadata=ObjectMeta(name="web"), spec=DeploymentSpec(replicas=3)
        )
        assert result.content == "kind: Deployment\nmetadata:\n  name: web\nspec:\n  replicas: 3"

    def test_unwrap_returns_instance(self) -> None:
        component = create_component(
            "deployment", DEPLOYMENT_TEMPLATE, schema=Deployment, setup=_setup
        )

        assert component.render(2).unwrap().spec.replicas == 2

    def test_without_setup_context_is_empty(self) -> None:
        component = create_component("static", "kind: DaemonSet\nmetadata:\n  name: x{{ Stencil.Name }}", schema=DaemonSet)

        result = component.render(None)

        assert result.unwrap() == DaemonSet(metadata=ObjectMeta(name="x"))

    def test_unknown_field_is_returned_as_error(self) -> None:
        component = create_component(
            "daemonset", DEPLOYMENT_TEMPLATE, schema=DaemonSet, setup=_setup
        )

        result = component.render(3)

        assert not result.success
        assert isinstance(result.error, ValidationError)
        assert "replicas" in str(result.error)
        assert result.instance is None
        assert "replicas: 3" in result.content

    def test_unwrap_raises_error(self) -> None:
        component = create_component(
            "daemonset", DEPLOYMENT_TEMPLATE, schema=DaemonSet, setup=_setup
        )

        with pytest.raises(ValidationError):
            _ = component.render(3).unwrap()

    def test_panic_on_error_raises(self) -> None:
        component = create_component(
            "daemonset",
            DEPLOYMENT_TEMPLATE,
            schema=DaemonSet,
            setup=_setup,
            options=ComponentOptions(panic_on_error=True),
        )

        with pytest.raises(ValidationError, match="replicas"):
            _ = component.render(3)

    def test_render_override_replaces_decoding(self) -> None:
        component = create_component(
            "deployment",
            DEPLOYMENT_TEMPLATE,
            setup=_setup,
            render=lambda replicas, context, content: (replicas, context["Name"], len(content)),
        )

        result = component.render(3)

        assert result.instance == (3, "web", len(result.content))
        assert "name: web" in result.content

    def test_failing_render_override_is_wrapped(self) -> None:
        def render(value: int, context: object, content: str) -> object:
            msg = "cannot build"
            raise KeyError(msg)

        component = create_component("broken", "a: 1", render=render)

        result = component.render(1)

        assert isinstance(result.error, RenderError)
        assert "failed rendering component 'broken'" in str(result.error)
        assert isinstance(result.error.cause, KeyError)
        assert result.content == "a: 1"

    def test_setup_failure(self) -> None:
        def setup(value: int) -> dict[str, object]:
            msg = "bad input"
            raise ValueError(msg)

        component = create_component("web", "a: 1", schema=dict, setup=setup)

        result = component.render(1)

        assert isinstance(result.error, SetupError)
        assert result.error.component == "web"
        assert result.content == ""

    def test_parse_error_is_returned(self) -> None:
        component = create_component("web", "a: {{ Stencil.X", schema=dict)

        result = component.render(None)

        assert isinstance(result.error, ParseError)

    def test_strict_undefined_option(self) -> None:
        component = create_component(
            "web",
            "a: {{ Stencil.Missing }}",
            schema=dict,
            options=ComponentOptions(strict_undefined=True),
        )

        assert isinstance(component.render(None).error, ExecutionError)

    def test_missing_values_decode_as_null(self) -> None:
        component = create_component("web", "a: {{ Stencil.Missing }}", schema=dict)

        assert component.render(None).unwrap() == {"a": None}

    def test_custom_namespace_option(self) -> None:
        component = create_component(
            "web",
            "a: {{ Values.X }}",
            schema=dict,
            setup=lambda value: {"X": value},
            options=ComponentOptions(namespace="Values"),
        )

        assert component.render(5).unwrap() == {"a": 5}

    def test_escaped_actions_reach_content(self) -> None:
        component = create_component(
            "chart",
            "image: {{ Stencil.Image }}\ntag: '{{! .Values.tag }}'",
            schema=dict,
            setup=lambda value: {"Image": value},
        )

        result = component.render("nginx")

        assert result.content == "image: nginx\ntag: '{{ .Values.tag }}'"
        assert result.unwrap() == {"image": "nginx", "tag": "{{ .Values.tag }}"}

    def test_render_is_repeatable(self) -> None:
        component = create_component(
            "deployment", DEPLOYMENT_TEMPLATE, schema=Deployment, setup=_setup
        )

        first = component.render(2)
        second = component.render(2)

        assert first == second
        assert first.instance is not second.instance

    def test_custom_unmarshal_hook(self, mocker: MockerFixture) -> None:
        unmarshal = mocker.Mock(return_value={"decoded": True})
        options = ComponentOptions(unmarshal=unmarshal)
        component = create_component("web", "a: 1", schema=dict, options=options)

        result = component.render(None)

        assert result.instance == {"decoded": True}
        unmarshal.assert_called_once_with("a: 1", dict, options)

    def test_failing_unmarshal_hook_is_validation_error(self, mocker: MockerFixture) -> None:
        unmarshal = mocker.Mock(side_effect=TypeError("nope"))
        component = create_component(
            "web", "a: 1", schema=dict, options=ComponentOptions(unmarshal=unmarshal)
        )

        result = component.render(None)

        assert isinstance(result.error, ValidationError)
        assert isinstance(result.error.cause, TypeError)

    def test_result_type(self) -> None:
        component = create_component("web", "a: 1", schema=dict)

        assert isinstance(component.render(None), RenderResult)


class TestComponentCreation:
    def test_template_is_preprocessed_once(self) -> None:
        component = create_component("web", "\n    a: 1\n    b: 2\n", schema=dict)

        assert component.template == "a: 1\nb: 2"

    def test_tab_size_option(self) -> None:
        component = create_component(
            "web", "a:\n\tb: 1", schema=dict, options=ComponentOptions(tab_size=2)
        )

        assert component.render(None).unwrap() == {"a": {"b": 1}}

    def test_custom_preprocess_hook(self) -> None:
        options = ComponentOptions(preprocess_template=lambda text, opts: text.upper())

        component = create_component("web", "a: x", schema=dict, options=options)

        assert component.template == "A: X"

    def test_failing_preprocess_hook_raises(self) -> None:
        def preprocess(text: str, options: ComponentOptions) -> str:
            msg = "nope"
            raise RuntimeError(msg)

        with pytest.raises(PreprocessError) as exc_info:
            _ = create_component(
                "web", "a: 1", schema=dict, options=ComponentOptions(preprocess_template=preprocess)
            )

        assert exc_info.value.component == "web"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_requires_schema_or_render(self) -> None:
        with pytest.raises(DefinitionError, match="schema or a render"):
            _ = create_component("web", "a: 1")

    def test_reads_template_file(self, fs: FakeFilesystem) -> None:
        fs.create_file("/templates/web.yaml", contents="a: {{ Stencil.A }}\n")

        component = create_component(
            "web", Path("/templates/web.yaml"), schema=dict, setup=lambda value: {"A": value}
        )

        assert component.render(1).unwrap() == {"a": 1}

    def test_template_is_file_flag(self, fs: FakeFilesystem) -> None:
        fs.create_file("/templates/web.yaml", contents="a: 1")

        component = create_component(
            "web", "/templates/web.yaml", schema=dict, template_is_file=True
        )

        assert component.template == "a: 1"

    def test_file_templates_include_siblings(self, fs: FakeFilesystem) -> None:
        fs.create_file("/templates/labels.yaml", contents="app: {{ Stencil.App }}")
        fs.create_file(
            "/templates/web.yaml",
            contents="labels:\n  {% include 'labels.yaml' %}",
        )

        component = create_component(
            "web", Path("/templates/web.yaml"), schema=dict, setup=lambda value: {"App": value}
        )

        assert component.render("web").unwrap() == {"labels": {"app": "web"}}

    def test_missing_template_file_raises(self, fs: FakeFilesystem) -> None:
        with pytest.raises(FileReadError) as exc_info:
            _ = create_component("web", Path("/missing.yaml"), schema=dict)

        assert exc_info.value.path == Path("/missing.yaml")
        assert exc_info.value.component == "web"

    def test_frontload_success(self) -> None:
        options = ComponentOptions(frontload_enabled=True, frontload_input=2)

        component = create_component(
            "deployment", DEPLOYMENT_TEMPLATE, schema=Deployment, setup=_setup, options=options
        )

        assert component.render(4).unwrap().spec.replicas == 4

    def test_frontload_failure_raises_at_creation(self) -> None:
        options = ComponentOptions(frontload_enabled=True, frontload_input=2)

        with pytest.raises(ValidationError, match="replicas"):
            _ = create_component(
                "daemonset", DEPLOYMENT_TEMPLATE, schema=DaemonSet, setup=_setup, options=options
            )

    def test_frontload_failure_with_panic_raises(self) -> None:
        options = ComponentOptions(
            frontload_enabled=True, frontload_input=None, panic_on_error=True
        )

        with pytest.raises(ParseError):
            _ = create_component("web", "a: {{", schema=dict, options=options)

    def test_frontload_uses_frontload_input(self, mocker: MockerFixture) -> None:
        setup = mocker.Mock(return_value={"A": 1})
        options = ComponentOptions(frontload_enabled=True, frontload_input="warmup")

        _ = create_component("web", "a: {{ Stencil.A }}", schema=dict, setup=setup, options=options)

        setup.assert_called_once_with("warmup")


class TestComponentLogging:
    def test_logs_creation_and_render(self, captured_log: "CapturedLog") -> None:
        options = ComponentOptions(logger=captured_log.logger)
        component = create_component("web", "a: 1", schema=dict, options=options)

        _ = component.render(None)

        assert captured_log.event_names() == ["component_created", "component_rendered"]
        assert all(event["component"] == "web" for event in captured_log.events())

    def test_logs_failure_with_stage(self, captured_log: "CapturedLog") -> None:
        options = ComponentOptions(logger=captured_log.logger)
        component = create_component("web", "a: {{", schema=dict, options=options)

        _ = component.render(None)

        (failure,) = captured_log.events("warning")
        assert failure["event"] == "component_render_failed"
        assert failure["stage"] == "parse"
