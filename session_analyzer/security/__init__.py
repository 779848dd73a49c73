"""
Security helpers for logging.
"""
from session_analyzer.security.log_redaction import SecretRedactionFilter, redact_secrets

__all__ = ["SecretRedactionFilter", "redact_secrets"]
