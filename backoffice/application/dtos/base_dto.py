# backoffice/application/dtos/base_dto.py

"""
Base class for custom DTOs.

Defines CustomBaseModel, which extends Pydantic's BaseModel with
behaviour shared by every DTO of the application.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class CustomBaseModel(BaseModel):
    """
    Base model for all application DTOs.

    Output schemas are built straight from ORM rows.
    """

    model_config = ConfigDict(from_attributes=True)


def reject_null(value: Any) -> Any:
    """
    Validator body for optional update fields stored in NOT NULL columns.

    Such a field may be left out of the payload, but an explicit null is
    invalid input.

    Raises:
        ValueError: If the value is None
    """
    if value is None:
        raise ValueError("may be omitted but cannot be null")
    return value
