"""Credential lifecycle workflows."""

from loginn.workflows.authentication import AuthenticationWorkflow
from loginn.workflows.deletion import DeletionWorkflow
from loginn.workflows.password_reset import PasswordResetWorkflow
from loginn.workflows.registration import RegistrationWorkflow
from loginn.workflows.sessions import SessionWorkflow
from loginn.workflows.verification import VerificationWorkflow

__all__ = [
    "AuthenticationWorkflow",
    "DeletionWorkflow",
    "PasswordResetWorkflow",
    "RegistrationWorkflow",
    "SessionWorkflow",
    "VerificationWorkflow",
]
