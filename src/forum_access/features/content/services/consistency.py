"""Repair of the per-category secondary indexes.

Tag fields on the topic and post hashes are authoritative. ``reconcile``
walks every topic of a category and makes the restricted and resolved
sets agree with them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ....config.constants import Keys
from ..repositories.indexes import ResolutionIndex, RestrictionIndex
from ..repositories.post_repository import PostRepository
from ..repositories.topic_repository import TopicRepository

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """Index entries added and removed by one reconcile run."""

    cid: int
    topics_added: List[int] = field(default_factory=list)
    topics_removed: List[int] = field(default_factory=list)
    posts_added: List[int] = field(default_factory=list)
    posts_removed: List[int] = field(default_factory=list)
    resolved_added: List[int] = field(default_factory=list)
    resolved_removed: List[int] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return any((
            self.topics_added, self.topics_removed,
            self.posts_added, self.posts_removed,
            self.resolved_added, self.resolved_removed,
        ))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cid": self.cid,
            "topicsAdded": self.topics_added,
            "topicsRemoved": self.topics_removed,
            "postsAdded": self.posts_added,
            "postsRemoved": self.posts_removed,
            "resolvedAdded": self.resolved_added,
            "resolvedRemoved": self.resolved_removed,
        }


class ConsistencyChecker:
    """Rebuilds restricted and resolved indexes from stored hashes."""

    def __init__(
        self,
        topics: TopicRepository,
        posts: PostRepository,
        restrictions: RestrictionIndex,
        resolutions: ResolutionIndex,
    ):
        self.topics = topics
        self.posts = posts
        self.restrictions = restrictions
        self.resolutions = resolutions

    async def reconcile(self, cid: int) -> ReconcileReport:
        report = ReconcileReport(cid=cid)
        tids = await self.topics.get_category_tids(Keys.CATEGORY_TIDS.format(cid=cid))
        topics = [topic for topic in await self.topics.get_many(tids) if topic and topic.cid == cid]

        restricted = set(await self.restrictions.restricted_tids(cid))
        resolved = set(await self.resolutions.resolved_tids(cid))
        restricted_posts = set(await self.restrictions.restricted_pids(cid))

        tagged_tids = set()
        resolved_tids = set()
        tagged_pids = set()
        for topic in topics:
            if topic.target_role:
                tagged_tids.add(topic.tid)
                if topic.tid not in restricted:
                    await self.restrictions.index_topic(cid, topic.tid, topic.timestamp)
                    report.topics_added.append(topic.tid)
            if topic.resolved:
                resolved_tids.add(topic.tid)
                if topic.tid not in resolved:
                    await self.resolutions.index(cid, topic.tid, topic.last_post_time)
                    report.resolved_added.append(topic.tid)

            pids = ([topic.main_pid] if topic.main_pid else []) + await self.topics.get_reply_pids(topic.tid)
            for post in await self.posts.get_many(pids):
                if post is None or not post.target_role:
                    continue
                tagged_pids.add(post.pid)
                if post.pid not in restricted_posts:
                    await self.restrictions.index_post(cid, post.pid, post.timestamp)
                    report.posts_added.append(post.pid)

        for tid in sorted(restricted - tagged_tids):
            await self.restrictions.deindex_topic(cid, tid)
            report.topics_removed.append(tid)
        for tid in sorted(resolved - resolved_tids):
            await self.resolutions.deindex(cid, tid)
            report.resolved_removed.append(tid)
        for pid in sorted(restricted_posts - tagged_pids):
            await self.restrictions.deindex_post(cid, pid)
            report.posts_removed.append(pid)

        if report.changed:
            logger.warning(f"Repaired indexes of category {cid}: {report.to_dict()}")
        else:
            logger.debug(f"Indexes of category {cid} are consistent")
        return report
