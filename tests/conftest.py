import json
from typing import Any, Optional

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from studify.db import Base, models  # noqa: F401
from studify.providers import GenerationProvider, GenerationResponse


class FakeProvider(GenerationProvider):
    """Stands in for the webhook: returns a fixed payload or raises a fixed error."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls: list[tuple] = []

    def _response(self) -> GenerationResponse:
        raw = self.payload if isinstance(self.payload, str) else json.dumps(self.payload)
        return GenerationResponse(payload=self.payload, raw_text=raw, status_code=200, elapsed_seconds=0.01)

    async def generate_plan(self, course, duration_type, custom_days):
        self.calls.append((course, duration_type, custom_days))
        if self.error is not None:
            raise self.error
        return self._response()

    async def probe(self):
        if self.error is not None:
            raise self.error
        return self._response()


@pytest.fixture
async def engine(tmp_path):
    # File-backed so concurrent readers get their own connections.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'studify_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def count_rows(session_factory):
    async def _count(model) -> int:
        async with session_factory() as session:
            return (await session.execute(select(func.count()).select_from(model))).scalar_one()
    return _count


def make_payload() -> dict:
    """Three-day plan: two study days and a quiz day with questions and resources."""
    return {
        "daily_plan": [
            {
                "day": 1,
                "title": "Intro to Variables",
                "description": "Names, values and assignment",
                "topics": ["What is a variable", "Assignment"],
                "estimated_time": "2 hours",
                "type": "regular",
                "resources": [{"name": "Python docs", "url": "https://docs.python.org/3/"}],
            },
            {
                "day": 2,
                "title": "Control Flow Basics",
                "topics": ["if statements", "for loops", "while loops"],
                "estimated_time": "90 minutes",
                "type": "regular",
            },
            {
                "day": 3,
                "title": "Week 1 Review Quiz",
                "topics": ["Take the quiz"],
                "estimated_time": "1 hour",
                "type": "quiz",
                "quiz_data": {
                    "title": "Basics Quiz",
                    "covers_days": [1, 2],
                    "questions": [
                        {
                            "question": "Which keyword starts a loop?",
                            "options": ["if", "for", "def"],
                            "correct_answer": 1,
                            "explanation": "for iterates over a sequence",
                        },
                        {
                            "question": "What does = do?",
                            "options": ["Compares", "Assigns"],
                            "correct_answer": "B",
                        },
                    ],
                },
            },
        ]
    }


@pytest.fixture
def plan_payload() -> dict:
    return make_payload()


@pytest.fixture
def provider_factory():
    return FakeProvider
