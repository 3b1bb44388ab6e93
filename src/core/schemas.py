from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict


class BaseDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def _check_not_blank(s: str) -> str:
    if not s.strip():
        raise ValueError("Value should not be empty")
    return s


NotBlankStr = Annotated[str, AfterValidator(_check_not_blank)]
