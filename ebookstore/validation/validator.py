"""
Field validator: translates pydantic validation errors into messages.

Constraints are declared on the request model (Field bounds, constrained
types and validators). This module only classifies what pydantic reports:
errors about the SHAPE of the payload (broken JSON, wrong types) become
MalformedPayload, constraint errors become a field -> message map keyed
and phrased with wire names.
"""

from typing import Any, Dict, NamedTuple, NoReturn, Optional, Type, Union

from pydantic import BaseModel, ValidationError
from pydantic_core import ErrorDetails

from ebookstore.domain.errors import MalformedPayload, ValidationFailed

from .messages import MessageCatalog


class _Template(NamedTuple):
    code: str
    """MessageCatalog template key"""

    param: Optional[str] = None
    """Template parameter filled from the error context"""

    ctx_key: Optional[str] = None
    """Key of that value in the pydantic error context"""


# pydantic error type -> message template
_TEMPLATES: Dict[str, _Template] = {
    "missing": _Template("required"),
    "string_too_long": _Template("max_length", "limit", "max_length"),
    "string_too_short": _Template("min_length", "limit", "min_length"),
    "greater_than": _Template("gt", "bound", "gt"),
    "greater_than_equal": _Template("gte", "bound", "ge"),
    "less_than": _Template("lt", "bound", "lt"),
    "less_than_equal": _Template("lte", "bound", "le"),
    "url_parsing": _Template("url"),
    "url_syntax_violation": _Template("url"),
    "url_scheme": _Template("url"),
    "url_too_long": _Template("url"),
    "uuid_parsing": _Template("uuid"),
    "uuid_version": _Template("uuid"),
    "less_than_field": _Template("less_than_field", "other", "other"),
}

def is_shape_error(error_type: str) -> bool:
    """Check if a pydantic error type means the payload has the wrong shape."""
    return error_type == "json_invalid" or error_type.endswith("_type")


def wire_name(model: Type[BaseModel], attribute: str) -> str:
    """Return the external name of a model attribute (its alias, if any)."""
    model_field = model.model_fields[attribute]
    return model_field.alias or attribute


class FieldValidator:
    """
    Validates payloads against a pydantic model and collects every violation.

    Each field gets one message, taken from its first error; all fields
    are always reported together.

    Usage:
        validator = FieldValidator(CreateEbookRequest, MessageCatalog())
        request = validator.parse_json(body)
    """

    def __init__(self, model: Type[BaseModel], messages: MessageCatalog) -> None:
        self._model = model
        self._messages = messages

    @property
    def model(self) -> Type[BaseModel]:
        return self._model

    def validate(self, payload: Any) -> Dict[str, str]:
        """
        Check a decoded payload.

        Args:
            payload: Decoded JSON value

        Returns:
            Mapping of wire field name to message; empty when valid

        Raises:
            MalformedPayload: If the payload has the wrong shape
        """
        try:
            self._model.model_validate(payload)
        except ValidationError as e:
            return self.errors_from(e)
        return {}

    def parse(self, payload: Any) -> BaseModel:
        """
        Build the model from a decoded payload.

        Raises:
            MalformedPayload: If the payload has the wrong shape
            ValidationFailed: If any constraint fails, carrying the error map
        """
        try:
            return self._model.model_validate(payload)
        except ValidationError as e:
            self._raise_for(e)

    def parse_json(self, body: Union[str, bytes]) -> BaseModel:
        """
        Build the model from a raw JSON document.

        Raises:
            MalformedPayload: If the body is not valid JSON or has the wrong shape
            ValidationFailed: If any constraint fails, carrying the error map
        """
        try:
            return self._model.model_validate_json(body)
        except ValidationError as e:
            self._raise_for(e)

    def errors_from(self, error: ValidationError) -> Dict[str, str]:
        """
        Translate a ValidationError into a wire-named message map.

        Raises:
            MalformedPayload: If any of its errors is about shape
        """
        details = error.errors(include_url=False, include_input=False)

        shape_errors = [detail for detail in details if is_shape_error(detail["type"])]
        if shape_errors:
            first = shape_errors[0]
            location = ".".join(str(part) for part in first["loc"]) or "body"
            raise MalformedPayload(f"{location}: {first['msg']}") from error

        messages: Dict[str, str] = {}
        for detail in details:
            name = str(detail["loc"][0]) if detail["loc"] else "body"
            if name not in messages:
                messages[name] = self._render(name, detail)
        return messages

    def _render(self, name: str, detail: ErrorDetails) -> str:
        template = _TEMPLATES.get(detail["type"], _Template("invalid"))
        context = detail.get("ctx", {})
        params: Dict[str, Any] = {}

        if template.param is not None:
            value = context.get(template.ctx_key)
            if template.param == "other":
                value = wire_name(self._model, value)
            params[template.param] = value
        if template.code == "uuid":
            params["position"] = detail["loc"][1] if len(detail["loc"]) > 1 else 0

        return self._messages.render(template.code, name, **params)

    def _raise_for(self, error: ValidationError) -> NoReturn:
        raise ValidationFailed(self.errors_from(error)) from error
