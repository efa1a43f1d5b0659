# core/exceptions.py
from rest_framework.views import exception_handler


def _flatten(value):
    if isinstance(value, dict):
        for item in value.values():
            yield from _flatten(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _flatten(item)
    else:
        yield value


def custom_exception_handler(exc, context):
    """
    Reduce every DRF error payload to {"error": "<first message>"}.
    """
    response = exception_handler(exc, context)
    if response is None:
        return response

    messages = list(_flatten(response.data))
    first = messages[0] if messages else str(exc)
    response.data = {"error": str(first)}
    return response
