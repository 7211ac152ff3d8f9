"""Shared fixtures: a throwaway SQLite database per test and an in-memory backend."""
import asyncio
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from onboard.core.record import OnboardingRecord
from onboard.core.session import UserContext
from onboard.database.session import init_db
from onboard.errors import AuthenticationError, ConflictError, NotFoundError

VALID_PASSWORD = "Secret#123"


def employee_data(**overrides: Any) -> Dict[str, Any]:
    data = {
        "full_name": "Aarav Sharma",
        "email": "aarav.sharma@example.com",
        "phone_number": "9876543210",
        "department": "Engineering",
        "role": "Software Engineer",
        "date_of_joining": "2024-03-10",
    }
    data.update(overrides)
    return data


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


class FakeBackend:
    """In-memory ``EmployeeBackend`` that records calls."""

    def __init__(self) -> None:
        self.records: Dict[str, OnboardingRecord] = {}
        self.calls: List[str] = []
        self.fail_with: Optional[Exception] = None
        # When set, create/update wait on it before answering
        self.gate: Optional[asyncio.Event] = None
        # identifier -> (password, employee summary)
        self.accounts: Dict[str, tuple] = {}

    def add(self, **fields: Any) -> OnboardingRecord:
        record = OnboardingRecord.from_mapping(employee_data(**fields))
        record.version = 1
        self.records[record.employee_id] = record
        return record

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    async def list_employees(self) -> List[OnboardingRecord]:
        await self._enter("list")
        return [r.copy() for r in self.records.values()]

    async def get_employee(self, employee_id: str) -> OnboardingRecord:
        await self._enter("get")
        if employee_id not in self.records:
            raise NotFoundError("Employee not found")
        return self.records[employee_id].copy()

    async def create_employee(self, payload: Dict[str, Any]) -> OnboardingRecord:
        await self._enter("create")
        if any(r.email == payload["email"] for r in self.records.values()):
            raise ConflictError("An employee with this email already exists")
        record = OnboardingRecord.from_mapping(payload)
        record.password = ""
        record.version = 1
        self.records[record.employee_id] = record
        return record.copy()

    async def update_employee(self, payload: Dict[str, Any]) -> OnboardingRecord:
        await self._enter("update")
        current = self.records.get(payload["employee_id"])
        if current is None:
            raise NotFoundError("Employee not found")
        record = OnboardingRecord.from_mapping({**current.to_payload(), **payload})
        record.password = ""
        record.version = (current.version or 1) + 1
        self.records[record.employee_id] = record
        return record.copy()

    async def delete_employee(self, employee_id: str) -> None:
        await self._enter("delete")
        if employee_id not in self.records:
            raise NotFoundError("Employee not found")
        del self.records[employee_id]

    async def login(self, identifier: str, password: str) -> Dict[str, Any]:
        await self._enter("login")
        account = self.accounts.get(identifier)
        if account is None or account[0] != password:
            raise AuthenticationError("Invalid credentials")
        return dict(account[1])


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def user_ctx():
    return UserContext()
