"""
Client-side onboarding logic: validators, ID generation, wizard, directory.
"""
from onboard.core.directory import EmployeeDirectory
from onboard.core.outcome import Outcome
from onboard.core.record import OnboardingRecord
from onboard.core.session import AuthSession, UserContext, WizardSession
from onboard.core.wizard import OnboardingWizard

__all__ = [
    "EmployeeDirectory",
    "Outcome",
    "OnboardingRecord",
    "AuthSession",
    "UserContext",
    "WizardSession",
    "OnboardingWizard",
]
