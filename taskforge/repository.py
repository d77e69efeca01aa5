"""Persistence collaborator used by the seeders and the identity migrator.

Every read and write goes through :class:`Repository` so that database
failures surface as :class:`~taskforge.errors.PersistenceError` and the
generation code never touches the session directly.
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from taskforge.errors import PersistenceError

ModelT = TypeVar("ModelT", bound=SQLModel)


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def _fail(self, action: str, model: Type[SQLModel], exc: SQLAlchemyError) -> PersistenceError:
        self.session.rollback()
        return PersistenceError(f"{action} {model.__name__} failed: {exc}")

    def find_one(self, model: Type[ModelT], *conditions: Any) -> Optional[ModelT]:
        try:
            return self.session.exec(select(model).where(*conditions).limit(1)).first()
        except SQLAlchemyError as exc:
            raise self._fail("find", model, exc) from exc

    def find_many(
            self,
            model: Type[ModelT],
            *conditions: Any,
            fields: Optional[Sequence[str]] = None,
            limit: Optional[int] = None,
    ) -> List[Any]:
        """Return matching rows.

        With ``fields`` only those columns are loaded: a single field yields a
        list of plain values, several fields yield row tuples.
        """
        if fields:
            statement = select(*[getattr(model, name) for name in fields])
        else:
            statement = select(model)
        statement = statement.where(*conditions)
        if limit is not None:
            statement = statement.limit(limit)
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise self._fail("find", model, exc) from exc

    def count(self, model: Type[SQLModel], *conditions: Any) -> int:
        statement = select(func.count()).select_from(model).where(*conditions)
        try:
            return self.session.exec(statement).one()
        except SQLAlchemyError as exc:
            raise self._fail("count", model, exc) from exc

    def exists(self, model: Type[SQLModel], *conditions: Any) -> bool:
        return self.find_one(model, *conditions) is not None

    def save(self, obj: ModelT) -> ModelT:
        try:
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
        except SQLAlchemyError as exc:
            raise self._fail("save", type(obj), exc) from exc
        return obj

    def bulk_insert(self, model: Type[ModelT], records: Sequence[Union[ModelT, Dict[str, Any]]]) -> int:
        # one transaction: either every record lands or none does
        rows = [r if isinstance(r, model) else model(**r) for r in records]
        if not rows:
            return 0
        try:
            self.session.add_all(rows)
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("bulk insert", model, exc) from exc
        return len(rows)
