class ApplicationError(Exception):
    """Base class for errors raised while handling an admission request.

    Anything that is not also a ClientError is reported to the caller as a 500.
    """


class ClientError(ApplicationError):
    """The request itself was unacceptable; reported as a 400."""


class UnsupportedMediaType(ClientError):
    pass


class DecodeError(ApplicationError):
    pass


class RequestDecodeError(DecodeError, ClientError):
    pass


class ObjectDecodeError(DecodeError):
    pass


class TypeMismatchError(ClientError):
    def __init__(self, got):
        super().__init__(f"did not receive pod, got {got.resource}")
        self.got = got


class EncodeError(ApplicationError):
    pass
