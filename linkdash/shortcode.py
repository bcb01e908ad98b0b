"""Short code generation utilities."""

import random
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate candidate short codes for links.

    Codes are drawn uniformly from the base62 alphabet. Uniqueness is not
    guaranteed here; the link service checks every candidate against the store.
    """
    
    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9
    
    def __init__(self, default_length: int = 7, rng: Optional[random.Random] = None):
        """Initialize short code generator.
        
        Args:
            default_length: Default length for generated codes
            rng: Optional randomness source (defaults to the OS CSPRNG)
        """
        if default_length < 1:
            raise ValueError("default_length must be at least 1")
        self.default_length = default_length
        self.rng = rng or random.SystemRandom()
    
    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.
        
        Args:
            length: Length of the code (uses default if not specified)
            
        Returns:
            Random short code of exactly ``length`` characters
        """
        if length is None:
            length = self.default_length
        if length < 1:
            raise ValueError("length must be at least 1")
        return ''.join(self.rng.choices(self.BASE62_CHARS, k=length))
