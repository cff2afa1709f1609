"""Models for the template publish workflow."""

from typing import Annotated, Literal

from pydantic import ConfigDict, Field, model_validator

from templatepub.models.base import TemplatepubBaseModel


class Artifact(TemplatepubBaseModel):
    """One packaged template staged for publication."""

    name: str = Field(min_length=1)
    remote_key: str = Field(min_length=1)


class TrackingHandle(TemplatepubBaseModel):
    """Identifier and status location returned by the publish endpoint."""

    id: str = Field(min_length=1)
    status_url: str = Field(min_length=1)


class TemplatePending(TemplatepubBaseModel):
    state: Literal["pending"] = "pending"
    id: str

    @property
    def is_terminal(self) -> bool:
        return False


class TemplateValidated(TemplatepubBaseModel):
    state: Literal["validated"] = "validated"
    id: str

    @property
    def is_terminal(self) -> bool:
        return True


class TemplateFailed(TemplatepubBaseModel):
    # Error text is reported as the service sent it
    model_config = ConfigDict(str_strip_whitespace=False)

    state: Literal["failed"] = "failed"
    id: str
    errors: list[str] = Field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return True


TemplateStatus = Annotated[
    TemplatePending | TemplateValidated | TemplateFailed,
    Field(discriminator="state"),
]


class PublishOutcome(TemplatepubBaseModel):
    """Result of publishing one artifact: either a template id or an error."""

    model_config = ConfigDict(str_strip_whitespace=False)

    artifact_name: str
    remote_key: str
    template_id: str | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_exactly_one_result(self) -> "PublishOutcome":
        if (self.template_id is None) == (self.error is None):
            raise ValueError("exactly one of template_id and error must be set")
        return self

    @property
    def success(self) -> bool:
        return self.template_id is not None

    @classmethod
    def succeeded(cls, artifact: Artifact, template_id: str) -> "PublishOutcome":
        return cls(
            artifact_name=artifact.name,
            remote_key=artifact.remote_key,
            template_id=template_id,
        )

    @classmethod
    def failed(cls, artifact: Artifact, error: str) -> "PublishOutcome":
        return cls(
            artifact_name=artifact.name,
            remote_key=artifact.remote_key,
            error=error,
        )


class BatchResult(TemplatepubBaseModel):
    """Outcomes of one publish batch."""

    outcomes: list[PublishOutcome] = Field(default_factory=list)
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """True only if every outcome succeeded; an empty batch succeeds."""
        return not self.timed_out and all(o.success for o in self.outcomes)

    @property
    def failed_names(self) -> list[str]:
        return [o.artifact_name for o in self.outcomes if not o.success]
