"""
Secure logging utilities with credential redaction
Purpose: keep provider keys (server and bring-your-own) out of logs
"""
import hashlib
import json
import logging
import re
import time
import traceback
import uuid
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set, Tuple

if TYPE_CHECKING:
    from fastapi import Request

logger = logging.getLogger(__name__)


class SecureLogger:
    """
    Secure request/response logger with automatic redaction

    Features:
    - Redacts sensitive headers (provider tokens, user-supplied keys)
    - Redacts sensitive query parameters (api_key, token, ...)
    - Scrubs known secrets out of free text such as exception messages
    - Generates request IDs for tracing
    """

    # Headers that should ALWAYS be redacted
    SENSITIVE_HEADERS: Set[str] = {
        'authorization',
        'cookie',
        'set-cookie',
        'x-api-key',
        'x-subscription-token',
        'x-user-serpapi-key',
        'x-user-searchapi-key',
        'x-user-brave-key',
        'x-forwarded-for',
        'x-real-ip',
        'proxy-authorization',
    }

    # Query parameters that should be redacted
    SENSITIVE_PARAMS: Set[str] = {
        'api_key',
        'apikey',
        'key',
        'token',
        'access_token',
        'secret',
        'password',
    }

    # Provider keys that may leak into free text
    SECRET_PATTERNS: List[Tuple[re.Pattern, str]] = [
        (re.compile(r'(api_key=)[^&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(Bearer\s+)[A-Za-z0-9._~+/=-]+'), r'\1[REDACTED]'),
    ]

    @classmethod
    def generate_request_id(cls) -> str:
        """
        Generate unique request ID for tracing
        Format: req_[timestamp]_[random]
        """
        timestamp = int(time.time() * 1000)
        random_part = uuid.uuid4().hex[:8]
        return f"req_{timestamp}_{random_part}"

    @classmethod
    def mask_credential(cls, credential: Optional[str]) -> str:
        """Short fingerprint of a key: last four characters only."""
        if not credential:
            return '[NONE]'
        if len(credential) <= 8:
            return '****'
        return f"****{credential[-4:]}"

    @classmethod
    def sanitize_headers(cls, headers: Dict[str, Any]) -> Dict[str, Any]:
        """
        Remove or redact sensitive headers

        Args:
            headers: Original headers dictionary

        Returns:
            Sanitized headers safe for logging
        """
        if not headers:
            return {}

        sanitized = {}
        for key, value in headers.items():
            key_lower = key.lower().strip()

            if key_lower in cls.SENSITIVE_HEADERS:
                # For auth headers, show type but not value
                if key_lower == 'authorization' and value:
                    parts = str(value).split(' ', 1)
                    if len(parts) == 2:
                        sanitized[key] = f"{parts[0]} [REDACTED]"
                    else:
                        sanitized[key] = '[REDACTED]'
                else:
                    sanitized[key] = '[REDACTED]'
            else:
                sanitized[key] = cls.redact_secrets(str(value))

        return sanitized

    @classmethod
    def sanitize_params(cls, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Redact sensitive query parameters

        Args:
            params: Query parameters

        Returns:
            Sanitized parameters
        """
        if not params:
            return {}

        sanitized = {}
        for key, value in params.items():
            if key.lower().strip() in cls.SENSITIVE_PARAMS:
                sanitized[key] = '[REDACTED]'
            else:
                sanitized[key] = value

        return sanitized

    @classmethod
    def redact_secrets(cls, text: str, max_length: int = 1000) -> str:
        """
        Redact credential patterns from text

        Args:
            text: Text to redact
            max_length: Truncate if longer than this

        Returns:
            Redacted text
        """
        if not text:
            return text

        if len(text) > max_length:
            text = text[:max_length] + '...[TRUNCATED]'

        for pattern, replacement in cls.SECRET_PATTERNS:
            text = pattern.sub(replacement, text)

        return text

    @classmethod
    def scrub_secrets(cls, text: str, secrets: Iterable[Optional[str]]) -> str:
        """Replace every occurrence of the given secrets, then apply the patterns."""
        for secret in secrets:
            if secret:
                text = text.replace(secret, '[REDACTED]')
        return cls.redact_secrets(text)

    @classmethod
    def format_request_log(
        cls,
        request: 'Request',
        request_id: str,
        include_headers: bool = False
    ) -> Dict[str, Any]:
        """
        Format request for secure logging

        Args:
            request: FastAPI request object
            request_id: Unique request identifier
            include_headers: Whether to include sanitized headers

        Returns:
            Log-safe request summary
        """
        log_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": cls.sanitize_params(dict(request.query_params)),
        }

        if request.client:
            # Hash IP for privacy while maintaining uniqueness for debugging
            ip_hash = hashlib.sha256(request.client.host.encode()).hexdigest()[:8]
            log_data["client_hash"] = ip_hash

        log_data["byo_key"] = any(
            request.headers.get(header) for header in
            ('x-user-serpapi-key', 'x-user-searchapi-key', 'x-user-brave-key')
        )

        if include_headers:
            log_data["headers"] = cls.sanitize_headers(dict(request.headers))

        return log_data

    @classmethod
    def format_response_log(cls, request_id: str, status_code: int, duration_ms: float) -> Dict[str, Any]:
        """Format response for secure logging."""
        log_data = {
            "request_id": request_id,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
        }

        if 200 <= status_code < 300:
            log_data["status_category"] = "success"
        elif 400 <= status_code < 500:
            log_data["status_category"] = "client_error"
        elif 500 <= status_code < 600:
            log_data["status_category"] = "server_error"
        else:
            log_data["status_category"] = "other"

        return log_data

    @classmethod
    def format_error_log(cls, request_id: str, error: Exception, include_traceback: bool = False) -> Dict[str, Any]:
        """Format error for secure logging."""
        log_data = {
            "request_id": request_id,
            "error_type": type(error).__name__,
            "error_message": cls.redact_secrets(str(error)),
        }

        if include_traceback:
            log_data["traceback"] = cls.redact_secrets(traceback.format_exc(), max_length=10000)

        return log_data


def log_secure(level: str, message: str, data: Dict[str, Any], request_id: Optional[str] = None):
    """
    Helper for consistent structured logging

    Args:
        level: Log level (info, warning, error)
        message: Log message
        data: Structured data to log
        request_id: Optional request ID for correlation
    """
    if request_id:
        data["request_id"] = request_id

    log_json = json.dumps({"message": message, "data": data}, default=str)

    if level == "info":
        logger.info(log_json)
    elif level == "warning":
        logger.warning(log_json)
    elif level == "error":
        logger.error(log_json)
    else:
        logger.debug(log_json)
