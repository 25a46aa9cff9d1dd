import secrets
import string

ALPHANUMERIC = string.ascii_letters + string.digits


def random_string(length: int) -> str:
    """
    Return a random alphanumeric token of ``length`` characters.
    """
    return ''.join(secrets.choice(ALPHANUMERIC) for _ in range(length))
