"""Validation utilities for links."""

import re
from typing import Iterable, Tuple
from urllib.parse import urlparse

SHORT_CODE_PATTERN = re.compile(r'[a-zA-Z0-9_-]+')
MAX_URL_LENGTH = 2048


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a target URL.
    
    Args:
        url: The URL to validate
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"
    
    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"
    
    if url != url.strip() or any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"
    
    try:
        result = urlparse(url)
        # Accessing port validates it (raises ValueError when out of range)
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"
    
    # Check if scheme is http or https
    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"
    
    # Check if netloc (domain) exists
    if not result.hostname:
        return False, "URL must have a valid domain"
    
    return True, ""


def is_valid_short_code(
    short_code: str,
    min_length: int = 3,
    max_length: int = 20,
    reserved: Iterable[str] = (),
) -> Tuple[bool, str]:
    """Validate a user-supplied short code.
    
    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code
        reserved: Codes that would shadow application routes (case-insensitive)
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"
    
    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"
    
    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"
    
    # Only allow alphanumeric characters, hyphens, and underscores
    if not SHORT_CODE_PATTERN.fullmatch(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"
    
    if short_code.lower() in {word.lower() for word in reserved}:
        return False, f"'{short_code}' is a reserved word and cannot be used"
    
    return True, ""
