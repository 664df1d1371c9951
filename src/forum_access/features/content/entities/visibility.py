"""Role hierarchy for target-role restricted content.

``RoleVisibility`` is the only place that decides whether one role meets
or exceeds another. TA and professor share a level, so a single
instructor threshold covers both.
"""

import logging
from typing import Dict, Iterable, Optional, Union

from ....config.constants import Role
from ....config.settings import ForumSettings
from ...roles.entities.identity import Identity

logger = logging.getLogger(__name__)

ROLE_LEVELS: Dict[Role, int] = {
    Role.NONE: 0,
    Role.STUDENT: 1,
    Role.TA: 2,
    Role.PROFESSOR: 2,
}


class RoleVisibility:
    """Evaluates who may restrict content and who may see it."""

    def __init__(
        self,
        instructor_role: Role = Role.TA,
        restricted_target_roles: Iterable[Role] = (Role.TA,),
    ):
        self.instructor_role = Role.parse(instructor_role)
        self.restricted_target_roles = frozenset(Role.parse(r) for r in restricted_target_roles)

    @classmethod
    def from_settings(cls, settings: ForumSettings) -> "RoleVisibility":
        return cls(settings.instructor_role, settings.restricted_target_roles)

    @staticmethod
    def level(role: Role) -> int:
        return ROLE_LEVELS[role]

    def meets(self, role: Role, required: Role) -> bool:
        """True when ``role`` is at or above ``required``."""
        return self.level(role) >= self.level(required)

    def is_instructor(self, identity: Identity) -> bool:
        return self.meets(identity.role, self.instructor_role)

    def can_restrict(self, identity: Identity) -> bool:
        """Only instructors and administrators may tag content with a target role."""
        return identity.is_admin or self.is_instructor(identity)

    def can_view(self, identity: Identity, target_role: Union[str, Role, None]) -> bool:
        """Whether ``identity`` may see content tagged with ``target_role``.

        Untagged content is visible to everyone. A tag that no longer parses
        is visible to administrators only.
        """
        if not target_role:
            return True
        if identity.is_admin:
            return True
        try:
            required = Role.parse(target_role)
        except ValueError:
            logger.warning(f"Unknown targetRole {target_role!r}; hiding content")
            return False
        if required == Role.NONE:
            return True
        return not identity.is_guest and self.meets(identity.role, required)

    def normalize_target_role(self, identity: Identity, requested: Union[str, Role, None]) -> Optional[Role]:
        """Decide the tag content is created with.

        Returns None (unrestricted) when nothing was requested, when the caller
        may not restrict content, or when the value is not a restrictable role.
        Stripping is silent; it never raises.
        """
        if requested is None or requested == "":
            return None
        if not self.can_restrict(identity):
            logger.debug(f"Stripping targetRole {requested!r} requested by uid {identity.uid}")
            return None
        try:
            role = Role.parse(requested)
        except ValueError:
            logger.debug(f"Stripping unknown targetRole {requested!r} from uid {identity.uid}")
            return None
        if role not in self.restricted_target_roles:
            logger.debug(f"Stripping non-restrictable targetRole {role.value!r} from uid {identity.uid}")
            return None
        return role
