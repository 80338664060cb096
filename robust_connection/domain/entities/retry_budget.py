"""RetryBudget entity for one connect or reconnect episode.

A RetryBudget counts down the attempts left before an episode fails
permanently. A fresh budget is created for the initial connection and for
every episode that follows a loss, so attempts never accumulate across
the lifetime of a connection.
"""

from dataclasses import dataclass


@dataclass
class RetryBudget:
    """Countdown of attempts remaining within one episode.

    Attributes:
        remaining: Attempts left before the episode is terminal
        interval: Fixed delay between attempts, in seconds
        attempts_made: Attempts already made in this episode

    Example:
        >>> budget = RetryBudget(remaining=3, interval=1.0)
        >>> budget.consume()
        2
        >>> budget.exhausted
        False
    """

    remaining: int
    interval: float
    attempts_made: int = 0

    def __post_init__(self) -> None:
        """Validate budget values.

        Raises:
            TypeError: If remaining is not an int
            ValueError: If remaining or interval is negative
        """
        if isinstance(self.remaining, bool) or not isinstance(self.remaining, int):
            raise TypeError(
                f"remaining must be int, got {type(self.remaining).__name__}"
            )

        if self.remaining < 0:
            raise ValueError(f"remaining must be >= 0, got {self.remaining}")

        if self.interval < 0:
            raise ValueError(f"interval must be >= 0, got {self.interval}")

    @classmethod
    def for_episode(cls, attempts: int, interval: float) -> "RetryBudget":
        """Create a fresh budget for a new episode.

        Args:
            attempts: Attempts permitted in the episode
            interval: Delay between attempts, in seconds

        Returns:
            New RetryBudget with nothing consumed
        """
        return cls(remaining=attempts, interval=interval)

    @property
    def exhausted(self) -> bool:
        """Check if no attempts remain.

        Returns:
            True once remaining drops below 1
        """
        return self.remaining < 1

    def consume(self) -> int:
        """Record one failed attempt.

        The counter never goes negative, so a budget created with zero
        attempts still allows the single attempt every episode makes.

        Returns:
            Attempts remaining after this failure
        """
        self.attempts_made += 1
        self.remaining = max(self.remaining - 1, 0)
        return self.remaining
