"""
FSM states for the onboarding wizard and sign-in dialogs.
"""
from aiogram.fsm.state import State, StatesGroup


class OnboardingStates(StatesGroup):
    """Which wizard field the next message fills in."""

    # Step 1
    full_name = State()
    email = State()
    phone_number = State()

    # Step 2 (department is picked from a keyboard)
    department = State()
    role = State()
    date_of_joining = State()

    # Step 3
    password = State()
    confirm_password = State()

    # Step card shown, waiting for a button
    review = State()


class LoginStates(StatesGroup):
    identifier = State()
    password = State()
