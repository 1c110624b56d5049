"""Supabase key-value storage."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutritrack.services.meals import KeyValueStorage


@dataclass
class SupabaseStorage(KeyValueStorage):
    """Supabase implementation of key-value storage."""

    client: Client
    table: str = "kv_store"

    def load(self, key: str) -> str | None:
        """Return the stored value for a key."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def save(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
