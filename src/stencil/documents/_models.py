"""Base model for schemas of rendered documents."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Manifest(BaseModel):
    """Base class for document schemas.

    Fields are declared in snake_case and read from camelCase keys, the
    convention of Kubernetes-style manifests. Undeclared keys are rejected.

    Example:
        class ObjectMeta(Manifest):
            name: str
            labels: dict[str, str] = {}

        class Deployment(Manifest):
            api_version: str = "apps/v1"
            kind: str = "Deployment"
            metadata: ObjectMeta
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )
