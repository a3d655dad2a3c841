import secrets
import string

ROOM_ID_ALPHABET = string.ascii_lowercase + string.digits
ROOM_ID_LENGTH = 7


def generate_room_id(length: int = ROOM_ID_LENGTH) -> str:
    """
    Generate a short random room ID.

    Args:
        length: Number of characters, lowercase letters and digits

    Returns:
        str: The room ID, e.g. "k3x9a0q"
    """
    return "".join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(length))


def should_initiate(local_id: str, remote_id: str) -> bool:
    """
    Decide which side of a pair sends the offer.

    The side whose ID sorts first initiates, so both ends reach the
    same answer without talking to each other.
    """
    return local_id < remote_id
