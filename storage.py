"""SQL persistence for saved life-data snapshots and country lookups."""

import json
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Generator

from pydantic import BaseModel, field_validator
from sqlalchemy import Column, Text
from sqlmodel import Field, Session, SQLModel, create_engine, select

from activities import Activity
from config import DATABASE_URL, DAYS_PER_WEEK_RANGE, HOURS_RANGE


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class LifeData(SQLModel, table=True):
    __tablename__ = "user_life_data"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int | None = Field(default=None)
    birthdate: date
    country_code: str = Field(sa_column=Column(Text, nullable=False))
    # JSON-encoded list of activities
    activities: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=_now_utc)
    updated_at: datetime = Field(default_factory=_now_utc)

    def activity_list(self) -> list[Activity]:
        return [Activity.from_dict(item) for item in json.loads(self.activities)]


class CountryLifeExpectancy(SQLModel, table=True):
    __tablename__ = "country_life_expectancy"

    id: int | None = Field(default=None, primary_key=True)
    country_code: str = Field(index=True, unique=True)
    country_name: str
    life_expectancy: float
    data_year: int
    updated_at: datetime = Field(default_factory=_now_utc)


class LifeDataCreate(BaseModel):
    """Payload accepted when saving a snapshot."""

    user_id: int | None = None
    birthdate: date
    country_code: str
    activities: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("country_code")
    @classmethod
    def _check_country_code(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("country_code is required")
        return value

    @field_validator("activities", mode="before")
    @classmethod
    def _encode_activities(cls, value: Any) -> str:
        """Accept a JSON string or a list and normalise to a JSON string."""

        if isinstance(value, str):
            try:
                items = json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"activities must be valid JSON: {e.msg}") from e
        else:
            items = value
        if not isinstance(items, list):
            raise ValueError("activities must be a list")

        for item in items:
            if not isinstance(item, dict) or not str(item.get("name", "")).strip():
                raise ValueError("every activity needs a name")
            try:
                hours = float(item.get("hours", -1))
                days = int(item.get("days_per_week", item.get("daysPerWeek", 7)))
            except (TypeError, ValueError) as e:
                raise ValueError("activity hours and days_per_week must be numbers") from e
            if not HOURS_RANGE[0] <= hours <= HOURS_RANGE[1]:
                raise ValueError(
                    f"activity hours must be between {HOURS_RANGE[0]:g} and {HOURS_RANGE[1]:g}"
                )
            if not DAYS_PER_WEEK_RANGE[0] <= days <= DAYS_PER_WEEK_RANGE[1]:
                raise ValueError("days_per_week must be between 1 and 7")
        return json.dumps(items)


def create_db_engine(url: str = DATABASE_URL, **kwargs):
    if url.startswith("sqlite") and "connect_args" not in kwargs:
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)


class LifeDataStore:
    """Save and load snapshots; also backs the country life-expectancy cache."""

    def __init__(self, engine):
        self.engine = engine

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        with Session(self.engine) as session:
            yield session

    def save_life_data(self, payload: LifeDataCreate) -> LifeData:
        now = _now_utc()
        entry = LifeData(
            user_id=payload.user_id,
            birthdate=payload.birthdate,
            country_code=payload.country_code,
            activities=payload.activities,
            created_at=payload.created_at or now,
            updated_at=payload.updated_at or now,
        )
        with self.session() as session:
            session.add(entry)
            session.commit()
            session.refresh(entry)
        return entry

    def get_life_data(self, life_data_id: int) -> LifeData | None:
        with self.session() as session:
            return session.get(LifeData, life_data_id)

    def get_cached_life_expectancy(self, country_code: str) -> CountryLifeExpectancy | None:
        with self.session() as session:
            statement = select(CountryLifeExpectancy).where(
                CountryLifeExpectancy.country_code == country_code
            )
            return session.exec(statement).first()

    def cache_life_expectancy(
        self,
        country_code: str,
        country_name: str,
        life_expectancy: float,
        data_year: int,
    ) -> CountryLifeExpectancy:
        """Insert or update the stored value for ``country_code``."""

        with self.session() as session:
            statement = select(CountryLifeExpectancy).where(
                CountryLifeExpectancy.country_code == country_code
            )
            record = session.exec(statement).first()
            if record is None:
                record = CountryLifeExpectancy(
                    country_code=country_code,
                    country_name=country_name,
                    life_expectancy=life_expectancy,
                    data_year=data_year,
                )
            else:
                record.life_expectancy = life_expectancy
                record.data_year = data_year
                record.updated_at = _now_utc()
            session.add(record)
            session.commit()
            session.refresh(record)
            return record
