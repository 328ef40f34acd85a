import logging
import pydantic

from typing import Any

from exc import (
    EncodeError,
    ObjectDecodeError,
    RequestDecodeError,
    TypeMismatchError,
    UnsupportedMediaType,
)
from models import (
    POD_RESOURCE,
    AdmissionResponse,
    AdmissionReview,
    AdmissionReviewStatus,
    Pod,
    Verdict,
)

LOG = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def decode_request(body: bytes, content_type: str | None) -> AdmissionReview:
    """Parse the body of a validate call into an AdmissionReview.

    The content type must be exactly application/json; we don't look at the
    body at all otherwise.
    """
    if content_type != JSON_CONTENT_TYPE:
        raise UnsupportedMediaType(f"expected {JSON_CONTENT_TYPE} content-type")

    try:
        review = AdmissionReview.model_validate_json(body)
    except pydantic.ValidationError as err:
        raise RequestDecodeError("error decoding admission review") from err

    if review.request is None:
        raise RequestDecodeError("admission review does not contain a request")

    LOG.debug(
        "decoded admission review %s for %s", review.request.uid, review.request.resource
    )

    return review


def check_resource_type(review: AdmissionReview) -> None:
    if review.request.resource != POD_RESOURCE:
        raise TypeMismatchError(review.request.resource)


def decode_pod(raw: Any) -> Pod:
    if raw is None:
        raise ObjectDecodeError("error decoding raw pod: request has no object")

    try:
        if isinstance(raw, (str, bytes)):
            return Pod.model_validate_json(raw)
        return Pod.model_validate(raw)
    except pydantic.ValidationError as err:
        raise ObjectDecodeError("error decoding raw pod") from err


def build_response(review: AdmissionReview, verdict: Verdict) -> AdmissionReview:
    status = None
    if verdict.message is not None:
        status = AdmissionReviewStatus(message=verdict.message)

    return AdmissionReview(
        apiVersion=review.apiVersion,
        kind=review.kind,
        response=AdmissionResponse(
            uid=review.request.uid,
            allowed=verdict.allowed,
            status=status,
            warnings=list(verdict.warnings) or None,
        ),
    )


def encode_response(review: AdmissionReview) -> bytes:
    try:
        return review.model_dump_json(exclude_none=True).encode()
    except ValueError as err:
        raise EncodeError("error marshalling response json") from err
