"""Category record."""

from dataclasses import dataclass
from typing import Any, Dict

from ....config.constants import PrivilegeDefault


@dataclass
class Category:
    """A category as stored in ``category:{cid}``.

    ``privilege_default`` decides what an action with no configured
    principal set means: general categories allow, restricted ones
    (announcements) deny.
    """

    cid: int
    name: str
    description: str = ""
    post_queue: bool = True
    privilege_default: PrivilegeDefault = PrivilegeDefault.ALLOW

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "Category":
        try:
            default = PrivilegeDefault(data.get("privilegeDefault") or PrivilegeDefault.ALLOW.value)
        except ValueError:
            default = PrivilegeDefault.DENY
        return cls(
            cid=int(data.get("cid", 0)),
            name=data.get("name", ""),
            description=data.get("description", ""),
            post_queue=data.get("postQueue", "1") != "0",
            privilege_default=default,
        )

    def to_hash(self) -> Dict[str, Any]:
        return {
            "cid": self.cid,
            "name": self.name,
            "description": self.description,
            "postQueue": self.post_queue,
            "privilegeDefault": self.privilege_default.value,
        }
