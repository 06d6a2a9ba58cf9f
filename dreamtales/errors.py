"""Failure kinds raised by the pipeline and translated to HTTP at the routers."""

from fastapi import status


class DreamTalesError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailure(DreamTalesError, ValueError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class ConfigurationFailure(DreamTalesError, RuntimeError):
    default_message = "Service is not configured."


class AuthFailure(DreamTalesError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid API key."


class RateLimitFailure(DreamTalesError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please try again later."


class QuotaFailure(DreamTalesError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "Character quota exceeded. Please check your ElevenLabs subscription."


class GenerationFailure(DreamTalesError):
    default_message = "Failed to generate story. Please try again."


class SynthesisFailure(DreamTalesError):
    default_message = "Failed to generate audio. Please try again."


class PersistenceFailure(DreamTalesError):
    default_message = "Failed to save story to storage."
