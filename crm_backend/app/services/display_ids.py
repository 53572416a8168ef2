"""
Display ID service.

Allocates human-readable sequential IDs such as ``ROI-alpha-001``.

Each prefix owns a counter row in ``display_id_counters``. Counters map onto
a Greek letter plus a three digit number: 1 -> alpha-001, 999 -> alpha-999,
1000 -> beta-001, up to 23976 -> omega-999.
"""

import uuid
from typing import NamedTuple

from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.app.models.display_id_counter import DisplayIdCounter
from crm_backend.app.models.route_interest_enums import DisplayIdPrefix


GREEK_ALPHABET = (
    "alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta",
    "iota", "kappa", "lambda", "mu", "nu", "xi", "omicron", "pi",
    "rho", "sigma", "tau", "upsilon", "phi", "chi", "psi", "omega",
)

NUMBERS_PER_LETTER = 999
MAX_COUNTER = len(GREEK_ALPHABET) * NUMBERS_PER_LETTER


class ParsedDisplayId(NamedTuple):
    prefix: str
    letter: str
    number: int
    counter: int


def new_id() -> str:
    """Return a new opaque, globally unique internal ID."""
    return str(uuid.uuid4())


def format_display_id(prefix: DisplayIdPrefix, counter: int) -> str:
    """
    Convert a 1-based counter into a display ID.

    Raises:
        ValueError: If the counter is outside 1..MAX_COUNTER
    """
    if counter < 1 or counter > MAX_COUNTER:
        raise ValueError(f"Counter {counter} out of range (1-{MAX_COUNTER})")

    letter_index, number = divmod(counter - 1, NUMBERS_PER_LETTER)
    return f"{DisplayIdPrefix(prefix).value}-{GREEK_ALPHABET[letter_index]}-{number + 1:03d}"


def parse_display_id(display_id: str) -> ParsedDisplayId:
    """
    Split a display ID back into its components.

    Raises:
        ValueError: If the string is not a well-formed display ID
    """
    parts = display_id.split("-")
    if len(parts) != 3:
        raise ValueError(f"Invalid display ID format: {display_id}")

    prefix, letter, number_str = parts
    if letter not in GREEK_ALPHABET:
        raise ValueError(f"Invalid Greek letter in display ID: {letter}")

    if not number_str.isdigit() or not 1 <= int(number_str) <= NUMBERS_PER_LETTER:
        raise ValueError(f"Invalid number in display ID: {number_str}")

    number = int(number_str)
    counter = GREEK_ALPHABET.index(letter) * NUMBERS_PER_LETTER + number
    return ParsedDisplayId(prefix=prefix, letter=letter, number=number, counter=counter)


async def next_display_id(db: AsyncSession, prefix: DisplayIdPrefix) -> str:
    """
    Increment the counter for a prefix and return the formatted display ID.

    The increment is flushed but not committed; it becomes durable with the
    caller's transaction.

    Args:
        db: Database session
        prefix: Display ID prefix to allocate from

    Returns:
        Formatted display ID, e.g. ``REX-alpha-007``
    """
    prefix = DisplayIdPrefix(prefix)
    row = await db.get(DisplayIdCounter, prefix.value)

    if row is None:
        row = DisplayIdCounter(prefix=prefix.value, counter=1)
        db.add(row)
    else:
        row.counter += 1

    await db.flush()
    return format_display_id(prefix, row.counter)
