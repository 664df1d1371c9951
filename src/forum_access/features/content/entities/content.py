"""Topic and post records."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


@dataclass
class Topic:
    """A topic as stored in ``topic:{tid}``."""

    tid: int
    cid: int
    uid: int
    title: str
    main_pid: int = 0
    timestamp: int = 0
    last_post_time: int = 0
    post_count: int = 0
    target_role: Optional[str] = None
    resolved: bool = False
    teaser: Optional["Post"] = field(default=None, repr=False)

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "Topic":
        return cls(
            tid=_int(data.get("tid")),
            cid=_int(data.get("cid")),
            uid=_int(data.get("uid")),
            title=data.get("title", ""),
            main_pid=_int(data.get("mainPid")),
            timestamp=_int(data.get("timestamp")),
            last_post_time=_int(data.get("lastposttime")),
            post_count=_int(data.get("postcount")),
            target_role=data.get("targetRole") or None,
            resolved=data.get("resolved") == "1",
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "tid": self.tid,
            "cid": self.cid,
            "uid": self.uid,
            "title": self.title,
            "mainPid": self.main_pid,
            "timestamp": self.timestamp,
            "lastposttime": self.last_post_time,
            "postcount": self.post_count,
            "resolved": self.resolved,
        }
        if self.target_role:
            data["targetRole"] = self.target_role
        if self.teaser is not None:
            data["teaser"] = self.teaser.to_dict()
        return data


@dataclass
class Post:
    """A post as stored in ``post:{pid}``."""

    pid: int
    tid: int
    cid: int
    uid: int
    content: str
    timestamp: int = 0
    target_role: Optional[str] = None

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "Post":
        return cls(
            pid=_int(data.get("pid")),
            tid=_int(data.get("tid")),
            cid=_int(data.get("cid")),
            uid=_int(data.get("uid")),
            content=data.get("content", ""),
            timestamp=_int(data.get("timestamp")),
            target_role=data.get("targetRole") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "pid": self.pid,
            "tid": self.tid,
            "cid": self.cid,
            "uid": self.uid,
            "content": self.content,
            "timestamp": self.timestamp,
        }
        if self.target_role:
            data["targetRole"] = self.target_role
        return data
