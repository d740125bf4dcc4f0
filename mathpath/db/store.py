"""
Progress stores.

The progression service talks to a ``ProgressStore``. Two backends:

- InMemoryProgressStore: dict-backed, for tests and throwaway sessions
- SqlProgressStore: SQLAlchemy-backed, SQLite by default
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Protocol

from loguru import logger
from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from mathpath.progression.models import MasteryRecord, Profile, ProfileStats

from .database import create_db_engine, init_db, make_session_factory, session_scope
from .models import ProfileRow, ProfileStatsRow, SkillProgressRow


class ProgressStore(Protocol):
    """Persistence collaborator for profiles and progress."""

    def create_profile(self, name: str) -> Profile: ...

    def get_profile(self, profile_id: str) -> Profile | None: ...

    def get_profile_by_name(self, name: str) -> Profile | None: ...

    def list_profiles(self) -> list[Profile]: ...

    def delete_profile(self, profile_id: str) -> bool: ...

    def load_mastery_records(self, profile_id: str) -> dict[str, MasteryRecord]: ...

    def load_profile_stats(self, profile_id: str) -> ProfileStats | None: ...

    def save_mastery_record(self, record: MasteryRecord) -> None: ...

    def save_profile_stats(self, stats: ProfileStats) -> None: ...

    def save_lesson_result(self, record: MasteryRecord, stats: ProfileStats) -> None:
        """Save a finished lesson's record and stats together, or neither."""
        ...


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Profile name must not be empty")
    return cleaned


def _as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps read back from the database."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _to_utc(value: datetime | None) -> datetime | None:
    """SQLite drops offsets, so timestamps are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# =============================================================================
# In-memory
# =============================================================================


class InMemoryProgressStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}
        self._records: dict[str, dict[str, MasteryRecord]] = {}
        self._stats: dict[str, ProfileStats] = {}

    def create_profile(self, name: str) -> Profile:
        name = _clean_name(name)
        if self.get_profile_by_name(name) is not None:
            raise ValueError(f"Profile already exists: {name}")
        profile = Profile(id=str(uuid.uuid4()), name=name, created_at=datetime.now(UTC))
        self._profiles[profile.id] = profile
        self._records[profile.id] = {}
        return profile

    def get_profile(self, profile_id: str) -> Profile | None:
        return self._profiles.get(profile_id)

    def get_profile_by_name(self, name: str) -> Profile | None:
        name = name.strip()
        for profile in self._profiles.values():
            if profile.name == name:
                return profile
        return None

    def list_profiles(self) -> list[Profile]:
        return sorted(self._profiles.values(), key=lambda p: p.created_at)

    def delete_profile(self, profile_id: str) -> bool:
        if self._profiles.pop(profile_id, None) is None:
            return False
        self._records.pop(profile_id, None)
        self._stats.pop(profile_id, None)
        return True

    def load_mastery_records(self, profile_id: str) -> dict[str, MasteryRecord]:
        return dict(self._records.get(profile_id, {}))

    def load_profile_stats(self, profile_id: str) -> ProfileStats | None:
        return self._stats.get(profile_id)

    def save_mastery_record(self, record: MasteryRecord) -> None:
        self._require_profile(record.profile_id)
        self._records[record.profile_id][record.skill_id] = record

    def save_profile_stats(self, stats: ProfileStats) -> None:
        self._require_profile(stats.profile_id)
        self._stats[stats.profile_id] = stats

    def save_lesson_result(self, record: MasteryRecord, stats: ProfileStats) -> None:
        self._require_profile(record.profile_id)
        self._require_profile(stats.profile_id)
        self._records[record.profile_id][record.skill_id] = record
        self._stats[stats.profile_id] = stats

    def _require_profile(self, profile_id: str) -> None:
        if profile_id not in self._profiles:
            raise KeyError(f"Unknown profile: {profile_id}")


# =============================================================================
# SQLAlchemy
# =============================================================================


def _profile_from_row(row: ProfileRow) -> Profile:
    return Profile(id=row.id, name=row.name, created_at=_as_utc(row.created_at))


def _record_from_row(row: SkillProgressRow) -> MasteryRecord:
    return MasteryRecord(
        profile_id=row.profile_id,
        skill_id=row.skill_id,
        mastery_level=row.mastery_level,
        best_score=row.best_score,
        attempts=row.attempts,
        updated_at=_as_utc(row.updated_at),
    )


class SqlProgressStore:
    """Store backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine, create_tables: bool = True):
        self.engine = engine
        self._factory: sessionmaker[Session] = make_session_factory(engine)
        if create_tables:
            init_db(engine)

    def create_profile(self, name: str) -> Profile:
        name = _clean_name(name)
        row = ProfileRow(id=str(uuid.uuid4()), name=name, created_at=datetime.now(UTC))
        try:
            with session_scope(self._factory) as session:
                session.add(row)
                session.flush()
                profile = _profile_from_row(row)
        except IntegrityError as exc:
            raise ValueError(f"Profile already exists: {name}") from exc
        logger.info(f"Created profile {profile.name} ({profile.id})")
        return profile

    def get_profile(self, profile_id: str) -> Profile | None:
        with session_scope(self._factory) as session:
            row = session.get(ProfileRow, profile_id)
            return _profile_from_row(row) if row is not None else None

    def get_profile_by_name(self, name: str) -> Profile | None:
        name = name.strip()
        with session_scope(self._factory) as session:
            row = session.scalars(select(ProfileRow).where(ProfileRow.name == name)).first()
            return _profile_from_row(row) if row is not None else None

    def list_profiles(self) -> list[Profile]:
        with session_scope(self._factory) as session:
            rows = session.scalars(select(ProfileRow).order_by(ProfileRow.created_at)).all()
            return [_profile_from_row(row) for row in rows]

    def delete_profile(self, profile_id: str) -> bool:
        with session_scope(self._factory) as session:
            row = session.get(ProfileRow, profile_id)
            if row is None:
                return False
            # SQLite leaves foreign keys unenforced unless asked, so remove children explicitly
            session.execute(delete(SkillProgressRow).where(SkillProgressRow.profile_id == profile_id))
            session.execute(delete(ProfileStatsRow).where(ProfileStatsRow.profile_id == profile_id))
            session.delete(row)
        logger.info(f"Deleted profile {profile_id}")
        return True

    def load_mastery_records(self, profile_id: str) -> dict[str, MasteryRecord]:
        with session_scope(self._factory) as session:
            rows = session.scalars(
                select(SkillProgressRow).where(SkillProgressRow.profile_id == profile_id)
            ).all()
            return {row.skill_id: _record_from_row(row) for row in rows}

    def load_profile_stats(self, profile_id: str) -> ProfileStats | None:
        with session_scope(self._factory) as session:
            row = session.get(ProfileStatsRow, profile_id)
            if row is None:
                return None
            return ProfileStats(
                profile_id=row.profile_id,
                streak=row.streak,
                total_completed=row.total_completed,
                last_played_at=_as_utc(row.last_played_at),
            )

    def save_mastery_record(self, record: MasteryRecord) -> None:
        with session_scope(self._factory) as session:
            self._write_record(session, record)

    def save_profile_stats(self, stats: ProfileStats) -> None:
        with session_scope(self._factory) as session:
            self._write_stats(session, stats)

    def save_lesson_result(self, record: MasteryRecord, stats: ProfileStats) -> None:
        with session_scope(self._factory) as session:
            self._write_record(session, record)
            self._write_stats(session, stats)

    def _write_record(self, session: Session, record: MasteryRecord) -> None:
        self._require_profile(session, record.profile_id)
        row = session.scalars(
            select(SkillProgressRow).where(
                SkillProgressRow.profile_id == record.profile_id,
                SkillProgressRow.skill_id == record.skill_id,
            )
        ).first()
        if row is None:
            row = SkillProgressRow(profile_id=record.profile_id, skill_id=record.skill_id)
            session.add(row)
        row.mastery_level = record.mastery_level
        row.best_score = record.best_score
        row.attempts = record.attempts
        row.updated_at = _to_utc(record.updated_at)

    def _write_stats(self, session: Session, stats: ProfileStats) -> None:
        self._require_profile(session, stats.profile_id)
        row = session.get(ProfileStatsRow, stats.profile_id)
        if row is None:
            row = ProfileStatsRow(profile_id=stats.profile_id)
            session.add(row)
        row.streak = stats.streak
        row.total_completed = stats.total_completed
        row.last_played_at = _to_utc(stats.last_played_at)

    @staticmethod
    def _require_profile(session: Session, profile_id: str) -> None:
        if session.get(ProfileRow, profile_id) is None:
            raise KeyError(f"Unknown profile: {profile_id}")


def open_store(database_url: str | None = None) -> SqlProgressStore:
    """SQL store for the configured (or given) database URL."""
    return SqlProgressStore(create_db_engine(database_url))
