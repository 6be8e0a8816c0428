import grpc
from easypy.exceptions import TException


class Abort(Exception):
    @property
    def code(self):
        return self.args[0]

    @property
    def message(self):
        return self.args[1]


class QuantityParseError(TException):
    template = "Cannot parse quantity {text!r}: {reason}"


class InvalidQuantity(Abort):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value

    @property
    def code(self):
        return grpc.StatusCode.INVALID_ARGUMENT

    @property
    def message(self):
        return (
            f"Parameter {self.field!r} has invalid quantity {self.value!r}."
            f" Please provide a valid value for this parameter"
            f" (e.g. '500m', '1', '2Gi') in the mount pod configuration"
        )

    def __str__(self):
        return self.message
