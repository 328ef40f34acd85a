from typing import Any, Literal
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from enum import StrEnum


class ApiVersion(StrEnum):
    V1 = "admission.k8s.io/v1"
    V1BETA1 = "admission.k8s.io/v1beta1"


class Operation(StrEnum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.30/#groupversionresource-v1-meta
class GroupVersionResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    group: str = ""
    version: str
    resource: str

    def __str__(self):
        if self.group:
            return f"{self.group}/{self.version}/{self.resource}"
        return f"{self.version}/{self.resource}"


class GroupVersionKind(BaseModel):
    group: str = ""
    version: str
    kind: str


POD_RESOURCE = GroupVersionResource(group="", version="v1", resource="pods")


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.30/#status-v1-meta
class AdmissionReviewStatus(BaseModel):
    message: str


# https://kubernetes.io/docs/reference/config-api/apiserver-admission.v1/#admission-k8s-io-v1-AdmissionResponse
class AdmissionResponse(BaseModel):
    uid: str
    allowed: bool
    status: AdmissionReviewStatus | None = None
    warnings: list[str] | None = None

    @model_validator(mode="after")
    def validate_model(self):
        if self.allowed and self.status:
            raise ValueError("an allowed response must not carry a status message")

        return self


# https://kubernetes.io/docs/reference/config-api/apiserver-admission.v1/#admission-k8s-io-v1-AdmissionRequest
class AdmissionRequest(BaseModel):
    uid: str
    kind: GroupVersionKind | None = None
    resource: GroupVersionResource
    name: str | None = None
    namespace: str | None = None
    operation: Operation = Operation.CREATE
    dryRun: bool | None = None
    # Left undecoded; a broken object is reported when the pod is decoded.
    object: Any = None


# https://kubernetes.io/docs/reference/config-api/apiserver-admission.v1/#admission-k8s-io-v1-AdmissionReview
class AdmissionReview(BaseModel):
    apiVersion: ApiVersion = ApiVersion.V1
    kind: Literal["AdmissionReview"] = "AdmissionReview"
    request: AdmissionRequest | None = None
    response: AdmissionResponse | None = None

    @model_validator(mode="after")
    def validate_model(self):
        if not (self.request or self.response):
            raise ValueError("must contain a request or a response")

        return self


class Metadata(BaseModel):
    name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] = {}

    @field_validator("labels", mode="before")
    @classmethod
    def validate_labels(cls, val):
        # The API server sends "labels": null for pods without labels.
        return {} if val is None else val


class Pod(BaseModel):
    apiVersion: Literal["v1"] = "v1"
    kind: Literal["Pod"] = "Pod"
    metadata: Metadata = Field(default_factory=Metadata)


class Verdict(BaseModel):
    """The outcome of evaluating policy against a single pod."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    message: str | None = None
    warnings: tuple[str, ...] = ()

    @model_validator(mode="after")
    def validate_model(self):
        if self.allowed and self.message is not None:
            raise ValueError("an allowed verdict must not carry a message")

        return self
