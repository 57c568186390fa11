from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from journal_ai.core.types import Goal, ReflectionPromptRequest, UsageStats


class EntryNotFoundError(LookupError):
    """Raised when an entry does not exist or belongs to someone else."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"Entry '{entry_id}' not found")
        self.entry_id = entry_id


@dataclass(slots=True)
class EntryRecord:
    id: str
    owner_id: str
    content: str
    title: str | None = None
    mood: str | None = None
    goals: list[Goal] = field(default_factory=list)
    created_at: datetime | None = None
    delivered: bool = False

    def to_reflection_request(self) -> ReflectionPromptRequest:
        return ReflectionPromptRequest(
            entry_content=self.content,
            entry_title=self.title,
            mood=self.mood,
            goals=list(self.goals),
            created_at=self.created_at,
        )


@dataclass(slots=True)
class UserProfile:
    owner_id: str
    display_name: str | None = None
    stats: UsageStats | None = None


class ContentStore(ABC):
    @abstractmethod
    async def get_entry(self, owner_id: str, entry_id: str) -> EntryRecord:
        pass

    @abstractmethod
    async def get_profile(self, owner_id: str) -> UserProfile:
        pass


class InMemoryContentStore(ContentStore):
    def __init__(
        self,
        entries: list[EntryRecord] | None = None,
        profiles: list[UserProfile] | None = None,
    ) -> None:
        self._entries = {entry.id: entry for entry in entries or []}
        self._profiles = {profile.owner_id: profile for profile in profiles or []}

    def add_entry(self, entry: EntryRecord) -> None:
        self._entries[entry.id] = entry

    def add_profile(self, profile: UserProfile) -> None:
        self._profiles[profile.owner_id] = profile

    async def get_entry(self, owner_id: str, entry_id: str) -> EntryRecord:
        entry = self._entries.get(entry_id)
        if entry is None or entry.owner_id != owner_id:
            raise EntryNotFoundError(entry_id)
        return entry

    async def get_profile(self, owner_id: str) -> UserProfile:
        return self._profiles.get(owner_id) or UserProfile(owner_id=owner_id)
