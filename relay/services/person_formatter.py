"""Format Notion user references as Discord mentions where possible."""

from __future__ import annotations

from relay.models.person import PartialUser, Person
from relay.services.identity_resolver import IdentityResolver


class PersonFormatter:
    """
    Turn a Notion user into display text.

    Resolved users become a Discord ping (`<@id>`); unresolved users fall
    back to their Notion name, then their Notion ID.
    """

    def __init__(self, resolver: IdentityResolver) -> None:
        self._resolver = resolver

    async def format(self, person: Person) -> str:
        # A partial user has no kind and no name; nothing to resolve against
        if isinstance(person, PartialUser):
            return person.id

        discord_user_id = await self._resolver.resolve(person.id)
        if not discord_user_id:
            return person.name or person.id

        return f"<@{discord_user_id}>"
