# backoffice/adapters/outbound/persistence/repositories/base_repository.py

"""
Generic async repository.

Every statement runs inside ``guard``: SQLAlchemy failures are logged and
re-raised as domain exceptions, so nothing above the persistence adapter
ever sees a driver error.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Generic, Optional, Type, TypeVar, Union

from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.future import select

from backoffice.adapters.outbound.persistence.models.base_model import Base
from backoffice.domain.exceptions import (
    DomainException,
    ResourceAlreadyExistsException,
    DatabaseOperationException,
)

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)
# Generic types for Pydantic DTOs
CreateSchemaType = TypeVar("CreateSchemaType")
UpdateSchemaType = TypeVar("UpdateSchemaType")


def is_unique_violation(error: IntegrityError) -> bool:
    error_msg = str(error).lower()
    return 'unique' in error_msg or 'duplicate' in error_msg


class AsyncCRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Async base class for the authorization repositories.

    Attributes:
        model: SQLAlchemy model class
        logger: Logger named after the model
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @asynccontextmanager
    async def guard(self, db: AsyncSession, action: str, *, write: bool = False) -> AsyncIterator[None]:
        """
        Translate database failures raised while performing ``action``.

        Write blocks also roll the session back on any failure, domain
        exceptions included, so a rejected change never lingers in the
        session. Reads leave the session untouched.

        Args:
            db: Async database session
            action: What the block does, used in logs and error details (ex: "creating role")
            write: Whether the block modifies data

        Raises:
            ResourceAlreadyExistsException: On a uniqueness violation
            DatabaseOperationException: On any other SQLAlchemy error
        """
        try:
            yield
        except DomainException:
            if write:
                await db.rollback()
            raise
        except IntegrityError as e:
            await db.rollback()
            if is_unique_violation(e):
                self.logger.warning(f"Uniqueness violation while {action}: {e}")
                raise ResourceAlreadyExistsException(
                    detail=f"{self.model.__name__} with these data already exists"
                )
            self.logger.error(f"Integrity error while {action}: {e}")
            raise DatabaseOperationException(detail=f"Error {action}", original_error=e)
        except SQLAlchemyError as e:
            if write:
                await db.rollback()
            self.logger.error(f"Error {action}: {e}")
            raise DatabaseOperationException(detail=f"Error {action}", original_error=e)

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        async with self.guard(db, f"fetching {self.model.__name__} {id}"):
            result = await db.execute(select(self.model).where(self.model.id == id))
            return result.scalar_one_or_none()

    async def get_by_field(self, db: AsyncSession, field_name: str, value: Any) -> Optional[ModelType]:
        """
        Get an entity by the value of a specific column.

        Returns:
            Entity found or None if it doesn't exist
        """
        async with self.guard(db, f"fetching {self.model.__name__} by {field_name}"):
            query = select(self.model).where(getattr(self.model, field_name) == value)
            result = await db.execute(query)
            return result.scalar_one_or_none()

    async def exists(self, db: AsyncSession, **filters) -> bool:
        """
        Check if an entity matches every ``field=value`` filter.
        """
        async with self.guard(db, f"checking existence of {self.model.__name__}"):
            query = select(self.model)
            for field, value in filters.items():
                query = query.where(getattr(self.model, field) == value)
            result = await db.execute(select(query.exists()))
            return bool(result.scalar())

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        Insert a new row and commit.

        Args:
            db: Async database session
            obj_in: Creation schema or dictionary with column values

        Returns:
            Newly created entity, refreshed
        """
        async with self.guard(db, f"creating {self.model.__name__}", write=True):
            values = obj_in if isinstance(obj_in, dict) else jsonable_encoder(obj_in)
            db_obj = self.model(**values)
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)

        self.logger.info(f"{self.model.__name__} created with ID: {db_obj.id}")
        return db_obj

    async def update(
            self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        Set the given column attributes on ``db_obj`` and commit.

        Keys that are not columns of the model (relationships, the primary
        key, request-only fields) are ignored.
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        columns = {attr.key for attr in inspect(self.model).column_attrs} - {"id"}

        async with self.guard(db, f"updating {self.model.__name__} {db_obj.id}", write=True):
            for field, value in update_data.items():
                if field in columns:
                    setattr(db_obj, field, value)
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)

        self.logger.info(f"{self.model.__name__} with ID {db_obj.id} updated")
        return db_obj
