"""Input validation for the in-process API.

@validate_request turns plain dict arguments into the pydantic model named
by the parameter's annotation, so presentation code can pass form data
straight through. Pydantic failures surface as tzcalendar ValidationError.
"""

import functools
import inspect
from typing import Any, get_type_hints

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError


def validate(model: type[BaseModel], data: Any) -> BaseModel:
    """Validate data against model.

    Raises:
        ValidationError: With {"errors": [...]} details from pydantic
    """
    if isinstance(data, model):
        return data
    if data is None:
        raise ValidationError("Missing input data", {"model": model.__name__})
    try:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid input data",
            {"errors": e.errors(include_url=False, include_context=False)}
        ) from e


def validate_request(func):
    """Validate every argument annotated with a pydantic model.

    Example:
        >>> @validate_request
        ... def create_timezone(data: TimezoneCreate): ...
        >>> create_timezone({"name": "Tokyo", "identifier": "Asia/Tokyo"})
    """
    signature = inspect.signature(func)
    hints = get_type_hints(func)
    models = {
        name: hint
        for name, hint in hints.items()
        if name != "return" and inspect.isclass(hint) and issubclass(hint, BaseModel)
    }

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        bound = signature.bind(*args, **kwargs)
        for name, model in models.items():
            if name in bound.arguments:
                bound.arguments[name] = validate(model, bound.arguments[name])
        return func(*bound.args, **bound.kwargs)

    return wrapper
