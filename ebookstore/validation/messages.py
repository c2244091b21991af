"""
Message catalog for field validation errors.

The catalog is a plain object built once at startup and injected into the
FieldValidator; there is no module-level translator state.
"""

from typing import Any, Dict, Mapping, Optional

ENGLISH_TEMPLATES: Dict[str, str] = {
    "required": "field '{field}' is required.",
    "max_length": "field '{field}' must be at most {limit} characters long.",
    "min_length": "field '{field}' must be at least {limit} characters long.",
    "gt": "field '{field}' must be greater than {bound}.",
    "gte": "field '{field}' must be greater than or equal to {bound}.",
    "lt": "field '{field}' must be less than {bound}.",
    "lte": "field '{field}' must be less than or equal to {bound}.",
    "url": "field '{field}' must be a valid URL.",
    "uuid": "field '{field}' must contain only valid UUIDs (invalid item at position {position}).",
    "less_than_field": "field '{field}' must be less than field '{other}'.",
    "invalid": "field '{field}' is invalid.",
}

PORTUGUESE_TEMPLATES: Dict[str, str] = {
    "required": "O campo '{field}' é obrigatório.",
    "max_length": "O tamanho máximo é {limit} caracteres.",
    "min_length": "O tamanho mínimo é {limit} caracteres.",
    "gt": "O valor deve ser maior que {bound}.",
    "gte": "O valor deve ser maior ou igual a {bound}.",
    "lt": "O valor deve ser menor que {bound}.",
    "lte": "O valor deve ser menor ou igual a {bound}.",
    "url": "O campo '{field}' deve ser uma URL válida.",
    "uuid": "O campo '{field}' deve conter apenas UUIDs válidos (item inválido na posição {position}).",
    "less_than_field": "O campo '{field}' deve ser menor que o campo '{other}'.",
    "invalid": "Campo inválido",
}

_LOCALES: Dict[str, Dict[str, str]] = {
    "en": ENGLISH_TEMPLATES,
    "pt_BR": PORTUGUESE_TEMPLATES,
}


class MessageCatalog:
    """
    Renders validation errors into human-readable messages.

    Unknown codes fall back to the "invalid" template.
    """

    def __init__(self, templates: Optional[Mapping[str, str]] = None) -> None:
        merged = dict(ENGLISH_TEMPLATES)
        if templates:
            merged.update(templates)
        self._templates = merged

    @classmethod
    def for_locale(cls, locale: str) -> "MessageCatalog":
        """
        Build the catalog for a supported locale.

        Raises:
            ValueError: If the locale is not supported
        """
        try:
            return cls(_LOCALES[locale])
        except KeyError:
            raise ValueError(
                f"Unsupported message locale '{locale}', expected one of {sorted(_LOCALES)}"
            ) from None

    def render(self, code: str, field: str, **params: Any) -> str:
        """Render the message for a template code and wire field name."""
        template = self._templates.get(code, self._templates["invalid"])
        return template.format(field=field, **params)
