"""Short, human-readable order identifiers."""

import random

DEFAULT_PREFIX = "ORD"
DEFAULT_DIGITS = 5


class OrderIdGenerator:
    """Generates ids of the form ``<prefix><N random digits>``.

    Ids are not unique by construction. The order store rejects a duplicate id
    and the order service retries with a fresh one.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        digits: int = DEFAULT_DIGITS,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            prefix: Fixed leading text of every id
            digits: Number of random decimal digits
            rng: Random source; pass a seeded Random for reproducible ids
        """
        if digits <= 0:
            raise ValueError("digits must be positive")

        self.prefix = prefix
        self.digits = digits
        self.rng = rng if rng is not None else random.Random()

    def generate(self) -> str:
        """Return a fresh order id."""
        number = self.rng.randrange(10**self.digits)
        return f"{self.prefix}{number:0{self.digits}d}"
