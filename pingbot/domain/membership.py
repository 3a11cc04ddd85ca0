import logging
from typing import Iterable, Mapping, Optional

from pingbot.domain.models import DiscourseUser, Topic

logger = logging.getLogger(__name__)

DEFAULT_MEMBER_SUFFIXES = ("-PingCAP", "- PingCAP")

# author_association values GitHub reports for people with a stake in the repository
PRIVILEGED_ROLES = frozenset({"OWNER", "COLLABORATOR", "MEMBER", "CONTRIBUTOR"})


def is_privileged_role(author_association: Optional[str]) -> bool:
    return author_association in PRIVILEGED_ROLES


class MembershipClassifier:
    """
    Decides whether a forum identity belongs to the team.

    An identity is a member when its canonical name is in the explicit roster,
    or when any of its names ends with one of the organisational suffixes.
    Either rule is enough; the heuristic never removes a roster match.
    """

    def __init__(self, roster: Iterable[str] = (), suffixes: Iterable[str] = DEFAULT_MEMBER_SUFFIXES):
        self.roster = frozenset(roster)
        self.suffixes = tuple(suffixes)

    def in_roster(self, identity: str) -> bool:
        return identity in self.roster

    def has_member_suffix(self, identity: Optional[str]) -> bool:
        if not identity:
            return False
        return any(identity.endswith(suffix) for suffix in self.suffixes)

    def is_member(self, canonical: str, *aliases: Optional[str]) -> bool:
        """
        Classifies an identity.

        Args:
            canonical (str): The exact identity checked against the roster (e.g. a username).
            *aliases: Other names of the same identity (e.g. a display name), checked by suffix only.
        """
        if self.in_roster(canonical):
            return True
        return any(self.has_member_suffix(name) for name in (canonical, *aliases))

    def is_member_user(self, user: DiscourseUser) -> bool:
        return self.is_member(user.username, user.name)

    def membership_map(self, users: Iterable[DiscourseUser]) -> Mapping[int, bool]:
        return {user.id: self.is_member_user(user) for user in users}


def topic_has_member_poster(topic: Topic, membership: Mapping[int, bool]) -> bool:
    """Returns True on the first poster known to be a member. Unknown posters count as non-members."""
    for poster in topic.posters:
        member = membership.get(poster.user_id)
        if member is None:
            logger.warning(f"user id {poster.user_id} not in list (topic {topic.id})")
            continue
        if member:
            return True
    return False
