"""Request payload validation with pydantic models."""

from __future__ import annotations

from typing import Type, TypeVar

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .error_handlers import ValidationError

ModelT = TypeVar('ModelT', bound=BaseModel)


def load_json(schema: Type[ModelT], data=None) -> ModelT:
    """Validate the JSON body (or `data`) against `schema`; 400 on failure."""
    if data is None:
        data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        errors = [
            {'loc': [str(part) for part in err['loc']], 'msg': err['msg'], 'type': err['type']}
            for err in exc.errors()
        ]
        raise ValidationError('Invalid input', errors=errors) from exc
