# app/errors/onboarding_errors.py

class OnboardingError(Exception):
    """Base exception for onboarding automation errors."""
    pass

class OnboardingTaskNotFound(OnboardingError):
    """Raised when an onboarding task is not found."""
    pass