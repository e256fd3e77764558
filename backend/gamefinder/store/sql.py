"""
SQLAlchemy chat store: same contract as MemoryStore, backed by DATABASE_URL.
One DB session per call; each write commits before returning.
"""
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from gamefinder.core.constants import ROLE_ASSISTANT, ROLES
from gamefinder.core.errors import StoreError
from gamefinder.models import ChatMessageRow, ChatSessionRow, GameRecommendationRow
from gamefinder.store.types import (
    ChatMessage,
    ChatSession,
    GameRecommendation,
    MessageMetadata,
    RecommendationData,
    UtcClock,
)


def _aware(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything we write is UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _to_session(row: ChatSessionRow) -> ChatSession:
    return ChatSession(
        id=row.id,
        title=row.title,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_message(row: ChatMessageRow) -> ChatMessage:
    return ChatMessage(
        id=row.id,
        session_id=row.session_id,
        role=row.role,
        content=row.content,
        metadata=MessageMetadata.model_validate(row.meta) if row.meta is not None else None,
        created_at=_aware(row.created_at),
    )


def _to_recommendation(row: GameRecommendationRow) -> GameRecommendation:
    return GameRecommendation(
        id=row.id,
        message_id=row.message_id,
        title=row.title,
        description=row.description,
        platform=row.platform,
        genre=row.genre,
        rating=row.rating,
        price=row.price,
        image_url=row.image_url or "",
        created_at=_aware(row.created_at),
    )


class SqlStore:
    def __init__(self, session_factory: sessionmaker, clock: UtcClock | None = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or UtcClock()

    @contextmanager
    def _db(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Database error: {e}") from e
        finally:
            db.close()

    # Sessions

    def get_session(self, session_id: str) -> ChatSession | None:
        with self._db() as db:
            row = db.get(ChatSessionRow, session_id)
            return _to_session(row) if row else None

    def list_sessions(self) -> list[ChatSession]:
        with self._db() as db:
            rows = db.query(ChatSessionRow).order_by(ChatSessionRow.updated_at.desc()).all()
            return [_to_session(r) for r in rows]

    def create_session(self, title: str) -> ChatSession:
        now = self._clock.now()
        with self._db() as db:
            row = ChatSessionRow(id=str(uuid.uuid4()), title=title, created_at=now, updated_at=now)
            db.add(row)
            db.commit()
            return _to_session(row)

    def update_session(self, session_id: str, *, title: str | None = None) -> ChatSession | None:
        with self._db() as db:
            row = db.get(ChatSessionRow, session_id)
            if not row:
                return None
            if title is not None:
                row.title = title
            row.updated_at = self._clock.now()
            db.commit()
            return _to_session(row)

    def _delete_messages(self, db: Session, message_ids: list[str]) -> None:
        if not message_ids:
            return
        db.query(GameRecommendationRow).filter(
            GameRecommendationRow.message_id.in_(message_ids)
        ).delete(synchronize_session=False)
        db.query(ChatMessageRow).filter(ChatMessageRow.id.in_(message_ids)).delete(synchronize_session=False)

    def delete_session(self, session_id: str) -> bool:
        with self._db() as db:
            row = db.get(ChatSessionRow, session_id)
            if not row:
                return False
            message_ids = [
                mid for (mid,) in db.query(ChatMessageRow.id).filter(ChatMessageRow.session_id == session_id)
            ]
            self._delete_messages(db, message_ids)
            db.delete(row)
            db.commit()
            return True

    def delete_all_sessions(self) -> int:
        with self._db() as db:
            db.query(GameRecommendationRow).delete()
            db.query(ChatMessageRow).delete()
            count = db.query(ChatSessionRow).delete()
            db.commit()
            return count

    # Messages

    def get_message(self, message_id: str) -> ChatMessage | None:
        with self._db() as db:
            row = db.get(ChatMessageRow, message_id)
            return _to_message(row) if row else None

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        with self._db() as db:
            rows = (
                db.query(ChatMessageRow)
                .filter(ChatMessageRow.session_id == session_id)
                .order_by(ChatMessageRow.created_at.asc())
                .all()
            )
            return [_to_message(r) for r in rows]

    def create_message(
        self,
        session_id: str,
        role: str,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> ChatMessage:
        if role not in ROLES:
            raise StoreError(f"Invalid message role: {role!r}")
        with self._db() as db:
            if db.get(ChatSessionRow, session_id) is None:
                raise StoreError(f"Cannot add message: session {session_id} does not exist")
            row = ChatMessageRow(
                id=str(uuid.uuid4()),
                session_id=session_id,
                role=role,
                content=content,
                meta=metadata.model_dump(by_alias=True) if metadata is not None else None,
                created_at=self._clock.now(),
            )
            db.add(row)
            db.commit()
            return _to_message(row)

    def delete_message(self, message_id: str) -> bool:
        with self._db() as db:
            if db.get(ChatMessageRow, message_id) is None:
                return False
            self._delete_messages(db, [message_id])
            db.commit()
            return True

    # Recommendations

    def list_recommendations(self, message_id: str) -> list[GameRecommendation]:
        with self._db() as db:
            rows = (
                db.query(GameRecommendationRow)
                .filter(GameRecommendationRow.message_id == message_id)
                .order_by(GameRecommendationRow.created_at.asc())
                .all()
            )
            return [_to_recommendation(r) for r in rows]

    def _check_owner(self, db: Session, message_id: str) -> None:
        owner = db.get(ChatMessageRow, message_id)
        if owner is None:
            raise StoreError(f"Cannot add recommendation: message {message_id} does not exist")
        if owner.role != ROLE_ASSISTANT:
            raise StoreError(f"Cannot add recommendation: message {message_id} is not an assistant message")

    def _new_row(self, message_id: str, data: RecommendationData) -> GameRecommendationRow:
        return GameRecommendationRow(
            id=str(uuid.uuid4()),
            message_id=message_id,
            title=data.title,
            description=data.description,
            platform=data.platform,
            genre=data.genre,
            rating=data.rating,
            price=data.price,
            image_url=data.image_url,
            created_at=self._clock.now(),
        )

    def create_recommendation(self, message_id: str, data: RecommendationData) -> GameRecommendation:
        return self.create_recommendations(message_id, [data])[0]

    def create_recommendations(
        self, message_id: str, items: Sequence[RecommendationData]
    ) -> list[GameRecommendation]:
        with self._db() as db:
            self._check_owner(db, message_id)
            rows = [self._new_row(message_id, item) for item in items]
            db.add_all(rows)
            # Single commit: either every row lands or none do.
            db.commit()
            return [_to_recommendation(r) for r in rows]
