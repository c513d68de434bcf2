import random
import string
import uuid

# Unambiguous characters for codes read aloud at the help desk
CODE_ALPHABET = ''.join(c for c in string.ascii_uppercase + string.digits if c not in 'O0I1L')


def generate_contingent_code(prefix: str = "CC", length: int = 5) -> str:
    """Generate a contingent code like 'CC-7KQ4M'"""
    body = ''.join(random.choice(CODE_ALPHABET) for _ in range(length))
    return f"{prefix}-{body}" if prefix else body


def generate_short_id(prefix: str = "") -> str:
    """Generate a short random ID for public record identifiers"""
    short = uuid.uuid4().hex[:12]
    return f"{prefix}{short}" if prefix else short
