"""Chat client helpers: per-user contexts, step prompts, rendering and shutdown."""
from aiogram.types import User

from onboard.core.session import WizardSession
from onboard.core.wizard import OnboardingWizard
from onboard.handlers.onboarding import missing_fields
from onboard.keyboards.inline import CALLBACK_FIELD, CALLBACK_WIZARD, get_step_keyboard
from onboard.middlewares.context import UserContextMiddleware
from onboard.utils.formatting import (
    format_employee_list,
    format_notice,
    format_saved_employee,
    format_signed_in,
    format_step_card,
)

from main import finish_stopping, make_signal_handler


def callback_data(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


async def test_middleware_keeps_one_context_per_user(backend):
    middleware = UserContextMiddleware(backend)
    seen = []

    async def handler(event, data):
        seen.append(data)

    alice = User(id=1, is_bot=False, first_name="Alice")
    bob = User(id=2, is_bot=False, first_name="Bob")
    await middleware(handler, object(), {"event_from_user": alice})
    await middleware(handler, object(), {"event_from_user": alice})
    await middleware(handler, object(), {"event_from_user": bob})

    assert seen[0]["user_ctx"] is seen[1]["user_ctx"]
    assert seen[0]["user_ctx"] is not seen[2]["user_ctx"]
    assert seen[0]["directory"] is seen[1]["directory"]
    assert seen[0]["wizard"].session is seen[0]["user_ctx"].wizard
    assert seen[0]["is_admin"] is False
    assert seen[0]["backend"] is backend


def test_missing_fields_create_mode(backend):
    wizard = OnboardingWizard(WizardSession(), backend)
    assert missing_fields(wizard) == ["full_name", "email", "phone_number"]

    wizard.update(full_name="Priya Nair")
    assert missing_fields(wizard) == ["email", "phone_number"]


def test_missing_fields_edit_mode_skips_locked_and_password(backend):
    wizard = OnboardingWizard(WizardSession(), backend)
    wizard.edit(backend.add(employee_id="24ENG1234"))

    wizard.session.current_step = 2
    assert missing_fields(wizard) == []

    wizard.session.current_step = 3
    assert missing_fields(wizard) == []

    wizard.update(password="Secret#123")
    assert missing_fields(wizard) == ["confirm_password"]


def test_step_keyboard_navigation():
    first = callback_data(get_step_keyboard(1))
    assert f"{CALLBACK_WIZARD}next" in first
    assert f"{CALLBACK_WIZARD}back" not in first

    last = callback_data(get_step_keyboard(3))
    assert f"{CALLBACK_WIZARD}submit" in last
    assert f"{CALLBACK_WIZARD}back" in last


def test_step_keyboard_hides_department_when_editing():
    assert f"{CALLBACK_FIELD}department" in callback_data(get_step_keyboard(2))
    assert f"{CALLBACK_FIELD}department" not in callback_data(get_step_keyboard(2, is_editing=True))


def test_step_card_escapes_input(backend):
    wizard = OnboardingWizard(WizardSession(), backend)
    wizard.update(full_name="<b>Eve</b>")

    card = format_step_card(wizard, {"email": "Email is required."})

    assert "&lt;b&gt;Eve&lt;/b&gt;" in card
    assert "Step 1/3: Basic Info" in card
    assert "Email: Email is required." in card


def test_empty_directory_message():
    assert "No employees yet" in format_employee_list([])


def test_saved_employee_confirmation_escapes_name(backend):
    record = backend.add(employee_id="24ENG1234", full_name="Ann <Lee>")

    text = format_saved_employee("Employee onboarded successfully!", record)

    assert "Ann &lt;Lee&gt;" in text
    assert "<Lee>" not in text
    assert "<code>24ENG1234</code>" in text


def test_sign_in_message_escapes_name():
    employee = {"employee_id": "24ENG1234", "role": "R&D", "department": "Engineering"}

    text = format_signed_in("Welcome, Ann <Lee>!", employee)

    assert "Welcome, Ann &lt;Lee&gt;!" in text
    assert "R&amp;D" in text


def test_notice_escapes_message():
    assert format_notice("⚠️", "Delete <b>x</b>?") == "⚠️ Delete &lt;b&gt;x&lt;/b&gt;?"


class StoppingDispatcher:
    def __init__(self, error=None):
        self.error = error
        self.stopped = 0

    async def stop_polling(self):
        self.stopped += 1
        if self.error:
            raise self.error


async def test_signal_stop_tasks_are_awaited():
    dispatcher = StoppingDispatcher()
    stopping = set()

    make_signal_handler(dispatcher, stopping)()
    assert len(stopping) == 1

    await finish_stopping(stopping)
    assert not stopping
    assert dispatcher.stopped == 1


async def test_signal_stop_failure_is_collected():
    dispatcher = StoppingDispatcher(RuntimeError("Polling is not started"))
    stopping = set()

    make_signal_handler(dispatcher, stopping)()
    await finish_stopping(stopping)

    assert not stopping
    assert dispatcher.stopped == 1
