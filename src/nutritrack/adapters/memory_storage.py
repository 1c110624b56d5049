"""In-memory key-value storage."""

from dataclasses import dataclass, field

from nutritrack.services.meals import KeyValueStorage


@dataclass
class InMemoryStorage(KeyValueStorage):
    """Dict-backed storage that lives as long as the process."""

    values: dict[str, str] = field(default_factory=dict)

    def load(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self.values.get(key)

    def save(self, key: str, value: str) -> None:
        """Store a value for a key."""
        self.values[key] = value
