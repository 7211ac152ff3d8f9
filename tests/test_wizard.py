"""Wizard state store and step transitions."""
import asyncio
import re

import pytest

from onboard.core.directory import EmployeeDirectory
from onboard.core.record import OnboardingRecord
from onboard.core.session import WizardSession
from onboard.core.wizard import OnboardingWizard
from onboard.errors import ConflictError, ErrorKind

from conftest import VALID_PASSWORD


def make_wizard(backend, session=None):
    return OnboardingWizard(session or WizardSession(), backend)


def fill_to_last_step(wizard):
    wizard.update(full_name="Priya Nair", email="priya@example.com", phone_number="9876543210")
    assert wizard.next().ok
    wizard.update(department="Engineering", role="Software Engineer", date_of_joining="2024-03-10")
    assert wizard.next().ok
    wizard.update(password=VALID_PASSWORD, confirm_password=VALID_PASSWORD)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


def test_next_blocked_by_invalid_email(backend):
    wizard = make_wizard(backend)
    wizard.update(full_name="Priya Nair", email="bad", phone_number="9876543210")

    outcome = wizard.next()

    assert not outcome.ok
    assert outcome.kind == ErrorKind.VALIDATION
    assert outcome.message == "Please complete Step 1 to proceed."
    assert "email" in outcome.field_errors
    assert wizard.current_step == 1


def test_back_keeps_entered_data(backend):
    wizard = make_wizard(backend)
    wizard.update(full_name="Priya Nair", email="priya@example.com", phone_number="9876543210")
    assert wizard.next().ok
    wizard.update(role="HR Manager")

    assert wizard.back().ok

    assert wizard.current_step == 1
    assert wizard.record.full_name == "Priya Nair"
    assert wizard.record.role == "HR Manager"
    assert not wizard.back().ok


def test_next_on_last_step_does_not_advance(backend):
    wizard = make_wizard(backend)
    fill_to_last_step(wizard)

    outcome = wizard.next()

    assert not outcome.ok
    assert wizard.current_step == 3


# ---------------------------------------------------------------------------
# Draft employee ID
# ---------------------------------------------------------------------------


def test_id_generated_once_department_and_date_known(backend):
    wizard = make_wizard(backend)
    wizard.update(department="Engineering")
    assert wizard.record.employee_id == ""

    wizard.update(date_of_joining="2024-03-10")
    assert re.match(r"^24ENG\d{4}$", wizard.record.employee_id)


def test_id_regenerated_only_on_real_change(backend):
    wizard = make_wizard(backend)
    wizard.update(department="Engineering", date_of_joining="2024-03-10")
    first = wizard.record.employee_id

    wizard.update(department="Engineering", role="Software Engineer")
    assert wizard.record.employee_id == first

    wizard.update(department="Finance")
    assert wizard.record.employee_id.startswith("24FIN")


def test_invalid_date_clears_draft_id(backend):
    wizard = make_wizard(backend)
    wizard.update(department="Engineering", date_of_joining="2024-03-10")

    wizard.update(date_of_joining="2024-99-99")

    assert wizard.record.employee_id == ""
    assert "date_of_joining" in wizard.step_errors(2)


def test_unknown_field_rejected():
    with pytest.raises(AttributeError):
        WizardSession().update(nickname="P")


# ---------------------------------------------------------------------------
# Edit mode
# ---------------------------------------------------------------------------


def test_edit_mode_keeps_id_and_department(backend):
    existing = backend.add(employee_id="24ENG1234")
    wizard = make_wizard(backend)
    wizard.edit(existing)

    outcome = wizard.update(department="Finance", date_of_joining="2023-01-02")

    assert not outcome.ok
    assert list(outcome.field_errors) == ["department"]
    assert wizard.record.department == "Engineering"
    assert wizard.record.employee_id == "24ENG1234"
    assert wizard.record.date_of_joining == "2023-01-02"


def test_edit_mode_password_optional(backend):
    existing = backend.add(employee_id="24ENG1234")
    wizard = make_wizard(backend)
    wizard.edit(existing)
    wizard.session.current_step = 3

    assert wizard.is_step_valid()


async def test_edit_submit_updates_record(backend):
    existing = backend.add(employee_id="24ENG1234")
    wizard = make_wizard(backend)
    wizard.edit(existing)
    wizard.update(role="Staff Engineer")
    assert wizard.next().ok
    assert wizard.next().ok

    outcome = await wizard.submit()

    assert outcome.ok
    assert outcome.message == "Employee details updated."
    assert backend.calls == ["update"]
    assert backend.records["24ENG1234"].role == "Staff Engineer"
    assert not wizard.session.is_editing_mode


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


async def test_submit_requires_last_step(backend):
    wizard = make_wizard(backend)

    outcome = await wizard.submit()

    assert not outcome.ok
    assert backend.calls == []


async def test_successful_submit_resets_and_grows_directory(backend):
    session = WizardSession()
    wizard = make_wizard(backend, session)
    directory = EmployeeDirectory(backend, session)
    await directory.list()
    before = len(directory.employees)

    fill_to_last_step(wizard)
    employee_id = wizard.record.employee_id
    outcome = await wizard.submit()

    assert outcome.ok
    assert outcome.message == "Employee Onboarding Complete!"
    assert outcome.data.employee_id == employee_id
    assert wizard.current_step == 1
    assert wizard.record == OnboardingRecord()

    await directory.list()
    assert len(directory.employees) == before + 1


async def test_failed_submit_stays_on_last_step(backend):
    backend.fail_with = ConflictError("An employee with this email already exists")
    wizard = make_wizard(backend)
    fill_to_last_step(wizard)
    employee_id = wizard.record.employee_id

    outcome = await wizard.submit()

    assert not outcome.ok
    assert outcome.kind == ErrorKind.CONFLICT
    assert outcome.message == "An employee with this email already exists"
    assert wizard.current_step == 3
    assert wizard.record.employee_id == employee_id
    assert not wizard.session.id_locked


async def test_unexpected_error_is_transport_failure(backend):
    backend.fail_with = RuntimeError("connection reset")
    wizard = make_wizard(backend)
    fill_to_last_step(wizard)

    outcome = await wizard.submit()

    assert outcome.kind == ErrorKind.TRANSPORT
    assert "connection reset" not in outcome.message


async def test_double_submit_sends_once(backend):
    backend.gate = asyncio.Event()
    wizard = make_wizard(backend)
    fill_to_last_step(wizard)

    first = asyncio.create_task(wizard.submit())
    await asyncio.sleep(0)
    second = await wizard.submit()
    backend.gate.set()
    first = await first

    assert second.kind == ErrorKind.BUSY
    assert first.ok
    assert backend.calls == ["create"]


async def test_id_locked_while_submitting(backend):
    backend.gate = asyncio.Event()
    wizard = make_wizard(backend)
    fill_to_last_step(wizard)
    employee_id = wizard.record.employee_id

    task = asyncio.create_task(wizard.submit())
    await asyncio.sleep(0)
    wizard.update(department="Sales")
    assert wizard.record.employee_id == employee_id

    backend.gate.set()
    await task
