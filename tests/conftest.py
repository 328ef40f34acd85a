import pytest

import webhook


def _admission_review(labels=None, resource="pods", group="", uid="1234", **kwargs):
    obj = {"apiVersion": "v1", "kind": "Pod", "metadata": {"name": "test-pod"}}
    if labels is not None:
        obj["metadata"]["labels"] = labels

    review = {
        "apiVersion": "admission.k8s.io/v1",
        "kind": "AdmissionReview",
        "request": {
            "uid": uid,
            "kind": {"group": "", "version": "v1", "kind": "Pod"},
            "resource": {"group": group, "version": "v1", "resource": resource},
            "operation": "CREATE",
            "object": obj,
        },
    }
    review.update(kwargs)
    return review


@pytest.fixture()
def admission_review():
    """Returns a function that builds an AdmissionReview request for a pod."""
    return _admission_review


@pytest.fixture()
def app():
    app = webhook.create_app(TESTING=True)
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()
