"""Category topic listings with instructor/resolved filters."""

import logging
from typing import Any, Dict, List

from ....config.constants import Keys, Privilege, SortMode
from ..entities.content import Topic
from ..entities.listing import TopicListQuery
from ..repositories.indexes import ResolutionIndex, RestrictionIndex
from ..repositories.topic_repository import TopicRepository
from .content_service import ContentService

logger = logging.getLogger(__name__)

# Ordering set and direction (reverse = highest score first) per sort mode.
_SORT_SOURCES = {
    SortMode.RECENTLY_REPLIED: (Keys.CATEGORY_TIDS, True),
    SortMode.RECENTLY_CREATED: (Keys.CATEGORY_TIDS_CREATE, True),
    SortMode.NEWEST_TO_OLDEST: (Keys.CATEGORY_TIDS_CREATE, True),
    SortMode.OLDEST_TO_NEWEST: (Keys.CATEGORY_TIDS_CREATE, False),
    SortMode.MOST_POSTS: (Keys.CATEGORY_TIDS_POSTS, True),
}


class CategoryListingService:
    """Lists the topics of a category as a given viewer sees them."""

    def __init__(
        self,
        topics: TopicRepository,
        restrictions: RestrictionIndex,
        resolutions: ResolutionIndex,
        content: ContentService,
    ):
        self.topics = topics
        self.restrictions = restrictions
        self.resolutions = resolutions
        self.content = content

    async def get_topic_ids(self, query: TopicListQuery) -> List[int]:
        """Ordered, role-filtered tids for one page of a category listing.

        The sort set gives the order. ``instructor`` keeps only restricted
        topics and ``resolved`` only resolved ones; with both set a topic
        must be in both indexes. Filtering for the viewer happens before the
        page is cut, so pages are never short because of hidden topics.
        """
        key, reverse = _SORT_SOURCES[query.sort]
        tids = await self.topics.get_category_tids(key.format(cid=query.cid), reverse=reverse)

        if query.instructor:
            restricted = set(await self.restrictions.restricted_tids(query.cid))
            tids = [tid for tid in tids if tid in restricted]
        if query.resolved:
            resolved = set(await self.resolutions.resolved_tids(query.cid))
            tids = [tid for tid in tids if tid in resolved]

        visible = await self.content.privileges.filter_topics(Privilege.TOPICS_READ, tids, query.uid)
        logger.debug(
            f"Listing cid={query.cid} sort={query.sort.value} instructor={query.instructor} "
            f"resolved={query.resolved}: {len(visible)}/{len(tids)} visible to uid {query.uid}"
        )
        if query.stop < 0:
            return visible[query.start:]
        return visible[query.start:query.stop + 1]

    async def get_category_topics(self, query: TopicListQuery) -> Dict[str, Any]:
        """Topic records for a listing page, each with its visible teaser.

        Returns:
            ``{"topics": [...], "nextStart": int}``
        """
        tids = await self.get_topic_ids(query)
        topics: List[Topic] = [topic for topic in await self.topics.get_many(tids) if topic]
        teasers = await self.content.get_teasers([topic.tid for topic in topics], query.uid)
        for topic, teaser in zip(topics, teasers):
            topic.teaser = teaser
        return {
            "topics": [topic.to_dict() for topic in topics],
            "nextStart": query.start + len(tids),
        }
