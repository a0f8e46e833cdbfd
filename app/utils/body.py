from typing import Optional, Type, TypeVar
from fastapi import HTTPException, Request, status
from pydantic import BaseModel, ValidationError

Model = TypeVar("Model", bound=BaseModel)


def request_body(request: Request) -> Optional[bytes]:
    """Raw body stored by request_body_middleware, or None if there was none."""
    return getattr(request.state, "body", None)


def decode_body(body: Optional[bytes], model: Type[Model]) -> Model:
    """Parse a JSON body into ``model``; any failure is a 422."""
    try:
        return model.model_validate_json(body or b"{}")
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
