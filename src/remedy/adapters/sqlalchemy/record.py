"""Active-record style mutations on top of SQLAlchemy declarative classes.

``Record`` is a mixin for mapped classes. It adds mass assignment with
restricted columns, a ``validate`` hook and ``save``/``update`` operations that
raise :class:`~remedy.domain.errors.ValidationFailed` instead of writing
invalid rows.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Any, ClassVar, Self

from sqlalchemy import func, inspect, select, update
from sqlalchemy.orm import make_transient_to_detached
from sqlalchemy.orm.attributes import set_committed_value

from remedy.adapters.sqlalchemy.session import current_session
from remedy.domain.errors import MassAssignmentRestricted, ValidationFailed

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator, Mapping

    from sqlalchemy.orm import Mapper, Session

log = getLogger(__name__)


class ValidationErrors(dict[str, list[str]]):
    """Messages collected by ``Record.validate`` keyed by attribute name."""

    def add(self, attribute: str, message: str) -> None:
        self.setdefault(attribute, []).append(message)

    def on(self, attribute: str) -> list[str] | None:
        return self.get(attribute) or None

    def full_messages(self) -> list[str]:
        return [
            f"{attribute} {message}" for attribute, messages in self.items() for message in messages
        ]


class RecordValues(MutableMapping[str, Any]):
    """Live view of a record's column attributes.

    Columns holding ``None`` are treated as absent; deleting a key sets the
    column back to ``None``.
    """

    __slots__ = ("_record",)

    def __init__(self, record: Record) -> None:
        self._record = record

    def __getitem__(self, key: str) -> Any:
        if key not in self._record.column_names():
            raise KeyError(key)
        return getattr(self._record, key)

    def __setitem__(self, key: str, value: Any) -> None:
        if key not in self._record.column_names():
            raise KeyError(key)
        setattr(self._record, key, value)

    def __delitem__(self, key: str) -> None:
        if key not in self:
            raise KeyError(key)
        setattr(self._record, key, None)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str) or key not in self._record.column_names():
            return False
        return getattr(self._record, key) is not None

    def __iter__(self) -> Iterator[str]:
        return (name for name in self._record.column_names() if name in self)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self)!r})"


class Record:
    """Mixin giving a mapped class validation and active-record mutations."""

    restricted_columns: ClassVar[frozenset[str]] = frozenset()

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        from_store: bool = False,
        *,
        setup: Callable[[Self], object] | None = None,
    ) -> None:
        values = {} if values is None else values
        if from_store:
            self.set_all(values)
            self._mark_persisted()
        else:
            self.set_values(values)
        if setup is not None:
            setup(self)

    # -- introspection -------------------------------------------------

    @classmethod
    def _mapper(cls) -> Mapper[Any]:
        return inspect(cls)

    @classmethod
    def column_names(cls) -> tuple[str, ...]:
        return tuple(prop.key for prop in cls._mapper().column_attrs)

    @classmethod
    def primary_key_names(cls) -> tuple[str, ...]:
        mapper = cls._mapper()
        return tuple(mapper.get_property_by_column(column).key for column in mapper.primary_key)

    @property
    def values(self) -> RecordValues:
        return RecordValues(self)

    @property
    def is_new(self) -> bool:
        return not inspect(self).has_identity

    @property
    def is_modified(self) -> bool:
        return inspect(self).modified

    # -- mass assignment -----------------------------------------------

    def _assign(self, values: Mapping[str, Any], allowed: Collection[str]) -> None:
        for key in values:
            if key not in allowed:
                raise MassAssignmentRestricted(key)
        for key, value in values.items():
            setattr(self, key, value)

    def set_values(self, values: Mapping[str, Any]) -> None:
        """Assign ``values`` unless one names a primary key or restricted column."""

        blocked = set(self.restricted_columns) | set(self.primary_key_names())
        self._assign(values, [name for name in self.column_names() if name not in blocked])

    def set_all(self, values: Mapping[str, Any]) -> None:
        self._assign(values, self.column_names())

    def set_only(self, values: Mapping[str, Any], *columns: str) -> None:
        self._assign(values, [name for name in self.column_names() if name in columns])

    def set_except(self, values: Mapping[str, Any], *columns: str) -> None:
        self._assign(values, [name for name in self.column_names() if name not in columns])

    # -- validation ----------------------------------------------------

    @property
    def errors(self) -> ValidationErrors:
        return self.__dict__.setdefault("_remedy_errors", ValidationErrors())

    def validate(self) -> None:
        """Override to add messages to ``self.errors``."""

    def is_valid(self) -> bool:
        self.errors.clear()
        self.validate()
        return not self.errors

    # -- persistence ---------------------------------------------------

    def _mark_persisted(self) -> None:
        session = current_session()
        state = inspect(self)
        if state.key is None:
            if state.session is not None:
                state.session.expunge(self)
            make_transient_to_detached(self)
        # An already loaded copy of the same row would clash in the identity map.
        clash = session.identity_map.get(inspect(self).key)
        if clash is not None and clash is not self:
            session.expunge(clash)
        session.add(self)

    def _update_columns(self, session: Session, columns: Collection[str]) -> None:
        mapper = self._mapper()
        unknown = [name for name in columns if name not in self.column_names()]
        if unknown:
            raise ValueError(f"Unknown columns for {type(self).__name__}: {unknown}")
        changes = {mapper.column_attrs[name].columns[0]: getattr(self, name) for name in columns}
        criteria = [
            column == getattr(self, mapper.get_property_by_column(column).key)
            for column in mapper.primary_key
        ]
        session.add(self)
        session.execute(update(mapper.local_table).where(*criteria).values(changes))
        for name in columns:
            set_committed_value(self, name, getattr(self, name))

    def save(self, *columns: str) -> Self:
        """Validate and write the record; ``columns`` limits an UPDATE to those columns."""

        return self._save(columns)

    def _save(self, columns: Collection[str]) -> Self:
        if not self.is_valid():
            raise ValidationFailed(errors=self.errors)
        session = current_session()
        if columns and not self.is_new:
            self._update_columns(session, columns)
        else:
            session.add(self)
            session.flush()
        log.debug("Saved %s %s", type(self).__name__, inspect(self).identity)
        return self

    def save_changes(self) -> Self:
        if self.is_new or self.is_modified:
            return self._save(())
        return self

    def discard_changes(self) -> None:
        """Drop unsaved attribute changes of a stored record so no later flush writes them."""

        state = inspect(self)
        if state.session is None or not state.has_identity:
            return
        changed = [attr.key for attr in state.attrs if attr.history.has_changes()]
        if changed:
            log.debug("Discarding changes to %s on %s", changed, type(self).__name__)
            state.session.expire(self, changed)

    def _apply_update(self, assign: Callable[[], None]) -> Self:
        try:
            assign()
            return self.save_changes()
        except ValidationFailed:
            self.discard_changes()
            raise

    def update(self, values: Mapping[str, Any]) -> Self:
        return self._apply_update(partial(self.set_values, values))

    def update_all(self, values: Mapping[str, Any]) -> Self:
        return self._apply_update(partial(self.set_all, values))

    def update_only(self, values: Mapping[str, Any], *columns: str) -> Self:
        return self._apply_update(partial(self.set_only, values, *columns))

    def update_except(self, values: Mapping[str, Any], *columns: str) -> Self:
        return self._apply_update(partial(self.set_except, values, *columns))

    # -- queries -------------------------------------------------------

    @classmethod
    def create(
        cls,
        values: Mapping[str, Any] | None = None,
        *,
        setup: Callable[[Self], object] | None = None,
    ) -> Self:
        return cls(values, setup=setup).save()

    @classmethod
    def first(cls, **criteria: Any) -> Self | None:
        stmt = select(cls).filter_by(**criteria).limit(1)
        return current_session().scalars(stmt).first()

    @classmethod
    def count(cls, **criteria: Any) -> int:
        matching = select(cls).filter_by(**criteria).subquery()
        stmt = select(func.count()).select_from(matching)
        return current_session().execute(stmt).scalar_one()
