"""FamilyTree: the API the UI and persistence layers call into."""

from collections.abc import Iterable

import connectivity
import kinship
import suggestions
from errors import (
    Accept,
    MemberNotFound,
    MustBeRelated,
    NotRelated,
    Ok,
    Reject,
    UnsafeDelete,
    UnsafeUnlink,
    Verdict,
)
from log_config import get_logger
from models import ConnectionPath, Member, Suggestion
from relations import RelationKind
from unique_queue import UniqueQueue
from validation import valid_relation_options, validate_relationship

log = get_logger(__name__)


class FamilyTree:
    """
    Wraps a caller-owned `{id: Member}` collection and keeps it consistent.

    Every mutation goes through the validator or the delete-safety check.
    The tree never saves anything: it records which ids changed
    (`modified_ids`, `deleted_ids`) so the persistence layer can write them.

    Not thread-safe; callers serialize mutations.

    Usage:
        tree = FamilyTree()
        tree.add_member(avraham)
        tree.add_member(yitzchak, avraham, RelationKind.SON)
        path = tree.find_shortest_connection(avraham.id, yitzchak.id)
    """

    def __init__(self, members: dict[str, Member] | None = None):
        self.members: dict[str, Member] = members if members is not None else {}
        for key, member in self.members.items():
            if key != member.id:
                raise ValueError(f"Member {member.id} is stored under a different id {key}")

        self.modified_ids: set[str] = set()
        self.deleted_ids: set[str] = set()
        self._suggestions: UniqueQueue[Suggestion] = UniqueQueue()

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self.members

    # ─────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────

    def get_member(self, member_id: str) -> Member | None:
        return self.members.get(member_id)

    def all_members(self) -> list[Member]:
        return list(self.members.values())

    def search(self, term: str) -> list[Member]:
        """Members whose full name contains `term`, ignoring case."""
        needle = term.casefold()
        return [m for m in self.members.values() if needle in m.full_name.casefold()]

    def relation_between(self, member_id: str, other_id: str) -> RelationKind | None:
        """What `other_id` is to `member_id`, if they are directly related."""
        member = self.members.get(member_id)
        return member.relation_to(other_id) if member else None

    def relation_options(self, member_id: str) -> list[RelationKind]:
        member = self.members.get(member_id)
        if member is None:
            return []
        return valid_relation_options(self.members, member)

    # ─────────────────────────────────────────
    # Relationships
    # ─────────────────────────────────────────

    def propose_relationship(self, source: Member, target: Member, kind: RelationKind) -> Verdict:
        """Validate "source is the `kind` of target" without changing anything."""
        return validate_relationship(self.members, source, target, kind)

    def commit_relationship(self, source: Member, target: Member, kind: RelationKind) -> Ok:
        """
        Store the edge and its mirror. The edge must already have been validated.

        A `source` that is not yet in the tree is inserted. Relations implied by
        the new edge (grandparents, siblings, shared parents, cousins) are
        stored as well, and follow-up suggestions are queued for every stored
        edge. Marrying a rabbi marks the spouse as a rabbi as well (the
        rebbetzin keeps the title).
        """
        if target.id not in self.members:
            raise KeyError(f"Member {target.id} is not in the family tree")
        if source.id not in self.members:
            self._insert(source)

        derived = self._store(source, target, kind)

        if kind is RelationKind.SPOUSE and (source.is_rabbi or target.is_rabbi):
            source.is_rabbi = target.is_rabbi = True

        for link in [(source, target, kind), *derived]:
            self._queue_suggestions(suggestions.after_link(self.members, *link))

        log.info(
            "relationship_committed",
            source=source.id,
            target=target.id,
            relation=kind.value,
            derived=len(derived),
        )
        return Ok()

    def remove_relationship(self, member_id: str, other_id: str) -> Ok | Reject:
        """
        Drop every edge between two members, refusing if the tree would split.

        Relations derived earlier through that edge (a grandparent or sibling
        entry on a third member) stay in place.
        """
        for mid in (member_id, other_id):
            if mid not in self.members:
                return Reject(MemberNotFound(mid))

        member, other = self.members[member_id], self.members[other_id]
        if member.relation_to(other_id) is None and other.relation_to(member_id) is None:
            return Reject(NotRelated(member_id, other_id))
        if not connectivity.can_safely_unlink(self.members, member_id, other_id):
            return Reject(UnsafeUnlink(member_id, other_id))

        member.remove_all_relations_to(other_id)
        other.remove_all_relations_to(member_id)
        self.modified_ids.update((member_id, other_id))
        log.info("relationship_removed", member_a=member_id, member_b=other_id)
        return Ok()

    # ─────────────────────────────────────────
    # Members
    # ─────────────────────────────────────────

    def add_member(
        self,
        member: Member,
        relative: Member | None = None,
        kind: RelationKind | None = None,
        *,
        allow_duplicate: bool = False,
    ) -> Verdict:
        """
        Add a new person, related as the `kind` of `relative`.

        Only the first member of an empty tree may come without a relative.
        A PossibleDuplicate rejection is overridden by `allow_duplicate=True`.
        """
        if member.id in self.members:
            raise ValueError(f"Member id {member.id} is already in the family tree")

        if relative is None or kind is None:
            if self.members:
                return Reject(MustBeRelated())
            self._insert(member)
            return Accept()

        verdict = self.propose_relationship(member, relative, kind)
        if isinstance(verdict, Reject) and not (verdict.overridable and allow_duplicate):
            return verdict

        self.commit_relationship(member, relative, kind)
        return Accept()

    def update_member(self, member_id: str, updated: Member) -> Ok | Reject:
        """Copy editable details (names, flags, dates) from `updated`. Gender and relations stay."""
        member = self.members.get(member_id)
        if member is None:
            return Reject(MemberNotFound(member_id))
        member.update_details(updated)
        self.modified_ids.add(member_id)
        return Ok()

    def remove_member(self, member_id: str) -> Ok | Reject:
        """Delete a member and every mirror edge pointing at them, unless that splits the tree."""
        if member_id not in self.members:
            return Reject(MemberNotFound(member_id))
        if not connectivity.can_safely_delete(self.members, member_id):
            log.info("member_delete_refused", member_id=member_id)
            return Reject(UnsafeDelete(member_id))

        del self.members[member_id]
        self.modified_ids.discard(member_id)
        self.deleted_ids.add(member_id)

        for other in self.members.values():
            if other.remove_all_relations_to(member_id):
                self.modified_ids.add(other.id)

        self._drop_suggestions_for(member_id)
        log.info("member_removed", member_id=member_id)
        return Ok()

    # ─────────────────────────────────────────
    # Traversal
    # ─────────────────────────────────────────

    def find_shortest_connection(self, member_id: str, other_id: str) -> ConnectionPath | Reject:
        return connectivity.shortest_connection_path(self.members, member_id, other_id)

    def is_tree_connected(self) -> bool:
        return connectivity.is_connected(self.members)

    def can_safely_delete(self, member_id: str) -> bool:
        return connectivity.can_safely_delete(self.members, member_id)

    # ─────────────────────────────────────────
    # Suggested connections
    # ─────────────────────────────────────────

    def pop_suggestion(self) -> Suggestion | None:
        return self._suggestions.pull()

    def peek_suggestion(self) -> Suggestion | None:
        return self._suggestions.peek()

    def has_suggestions(self) -> bool:
        return not self._suggestions.is_empty()

    # ─────────────────────────────────────────
    # Change tracking
    # ─────────────────────────────────────────

    def clear_tracked_changes(self) -> None:
        """Forget pending changes once the persistence layer has saved them."""
        self.modified_ids.clear()
        self.deleted_ids.clear()

    def _insert(self, member: Member) -> None:
        self.members[member.id] = member
        self.modified_ids.add(member.id)
        self.deleted_ids.discard(member.id)
        log.info("member_added", member_id=member.id, name=member.full_name)

    def _store(self, source: Member, target: Member, kind: RelationKind) -> list[kinship.Link]:
        """Store an edge and everything it implies. Returns the implied edges that were stored."""
        self._store_edge(source, target, kind)

        derived: list[kinship.Link] = []
        pending: UniqueQueue[kinship.Link] = UniqueQueue()
        for link in kinship.implied_links(self.members, source, target, kind):
            pending.add(link)

        while pending:
            link = pending.pull()
            # Earlier links may have filled the slot or related the pair already
            if not kinship.can_link(*link):
                continue
            self._store_edge(*link)
            derived.append(link)
            log.debug("relation_derived", source=link[0].id, target=link[1].id, relation=link[2].value)
            for follow_up in kinship.implied_links(self.members, *link):
                pending.add(follow_up)

        return derived

    def _store_edge(self, source: Member, target: Member, kind: RelationKind) -> None:
        target.add_relation(kind, source.id)
        source.add_relation(kind.inverse(target.gender), target.id)
        self.modified_ids.update((source.id, target.id))

    def _queue_suggestions(self, new: Iterable[Suggestion]) -> None:
        for suggestion in new:
            if self._suggestions.add(suggestion):
                log.debug(
                    "connection_suggested",
                    source=suggestion.source_id,
                    target=suggestion.target_id,
                    relation=suggestion.relation.value,
                )

    def _drop_suggestions_for(self, member_id: str) -> None:
        kept: UniqueQueue[Suggestion] = UniqueQueue()
        for suggestion in self._suggestions:
            if member_id not in (suggestion.source_id, suggestion.target_id):
                kept.add(suggestion)
        self._suggestions = kept
