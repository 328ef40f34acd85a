import argparse
import functools
import logging
import ssl
import sys

from flask import Flask, Response, request

from codec import (
    JSON_CONTENT_TYPE,
    build_response,
    check_resource_type,
    decode_pod,
    decode_request,
    encode_response,
)
from exc import ApplicationError, ClientError
from policy import evaluate

LOG = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


class DEFAULTS:
    BIND_ADDRESS = "0.0.0.0"
    PORT = 443
    TLS_CERT = None
    TLS_KEY = None


def jsonresponse():
    """Serializes the model returned by a view function as a JSON response."""

    def _outer(func):
        @functools.wraps(func)
        def _inner(*args, **kwargs):
            res = func(*args, **kwargs)
            return Response(encode_response(res), content_type=JSON_CONTENT_TYPE)

        return _inner

    return _outer


@jsonresponse()
def validate_pod():
    LOG.info("received message on validate")

    body = decode_request(request.get_data(), request.headers.get("Content-Type"))

    # The ValidatingWebhookConfiguration should only route pods here, but we
    # verify before decoding the object.
    check_resource_type(body)

    pod = decode_pod(body.request.object)
    verdict = evaluate(pod)

    LOG.info(
        "request %s: allowed=%s message=%s warnings=%s",
        body.request.uid,
        verdict.allowed,
        verdict.message,
        list(verdict.warnings),
    )

    return build_response(body, verdict)


def handle_clienterror(err):
    LOG.warning("rejecting request: %s: %s", err, err.__cause__ or "")
    return str(err), 400, {"content-type": "text/plain"}


def handle_applicationerror(err):
    LOG.error("failed to handle request: %s: %s", err, err.__cause__ or "")
    return str(err), 500, {"content-type": "text/plain"}


def health():
    return "OK", 200, {"content-type": "text/plain"}


def create_app(**config) -> Flask:
    """Use an application factory [1] to create the Flask app.

    Configuration comes from DEFAULTS, then WEBHOOK_* environment variables,
    then keyword arguments, so tests can build isolated instances.

    [1]: https://flask.palletsprojects.com/en/3.0.x/patterns/appfactories/
    """

    app = Flask(__name__)
    app.config.from_object(DEFAULTS)
    app.config.from_prefixed_env("WEBHOOK")
    if config:
        app.config.update(config)

    app.errorhandler(ClientError)(handle_clienterror)
    app.errorhandler(ApplicationError)(handle_applicationerror)
    app.add_url_rule("/healthz", view_func=health)
    app.add_url_rule("/validate", view_func=validate_pod, methods=["POST"])

    return app


def load_tls_context(cert_file, key_file) -> ssl.SSLContext:
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ctx.load_cert_chain(cert_file, key_file)
    return ctx


def parse_args(config, argv=None):
    parser = argparse.ArgumentParser(
        prog="validating-webhook",
        description="Kubernetes validating webhook requiring a hello label on pods",
    )
    parser.add_argument(
        "--tls-cert", default=config["TLS_CERT"], help="Certificate for TLS"
    )
    parser.add_argument(
        "--tls-key", default=config["TLS_KEY"], help="Private key file for TLS"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config["PORT"],
        help="Port to listen on for HTTPS traffic",
    )
    return parser.parse_args(argv)


def main(argv=None):
    app = create_app()
    args = parse_args(app.config, argv)

    if not (args.tls_cert and args.tls_key):
        print("--tls-cert and --tls-key required", file=sys.stderr)
        sys.exit(1)

    ssl_context = load_tls_context(args.tls_cert, args.tls_key)

    LOG.info("starting webhook server on port %d (tls enabled)", args.port)
    app.run(
        host=app.config["BIND_ADDRESS"],
        port=args.port,
        ssl_context=ssl_context,
        threaded=True,
    )


if __name__ == "__main__":
    main()
