import logging
from typing import Iterable, List, Optional

import aiohttp

from pingbot.domain.membership import MembershipClassifier, topic_has_member_poster
from pingbot.domain.models import Category, Topic
from pingbot.infrastructure.acl import DiscourseTranslator
from pingbot.infrastructure.discourse_client import DiscourseClient

logger = logging.getLogger(__name__)


class TopicReplyService:
    """
    Finds Discourse topics in which no team member has posted.
    Each category builds its own membership map from the users listed with it.
    """

    def __init__(self, discourse_client: DiscourseClient, classifier: MembershipClassifier):
        self.discourse_client = discourse_client
        self.classifier = classifier

    async def list_categories(self, session: aiohttp.ClientSession) -> List[Category]:
        payload = await self.discourse_client.get_categories(session)
        return DiscourseTranslator.to_categories(payload)

    async def find_no_reply_topics_by_category(
        self,
        session: aiohttp.ClientSession,
        category: Category,
        classifier: Optional[MembershipClassifier] = None,
    ) -> List[Topic]:
        classifier = classifier or self.classifier
        payload = await self.discourse_client.get_category_content(session, category.id)
        content = DiscourseTranslator.to_category_content(payload)
        membership = classifier.membership_map(content.users)

        return [topic for topic in content.topics if not topic_has_member_poster(topic, membership)]

    async def find_no_reply_topics(
        self,
        session: aiohttp.ClientSession,
        category_names: Iterable[str],
        classifier: Optional[MembershipClassifier] = None,
    ) -> List[Topic]:
        """
        Collects no-reply topics from the categories whose names are configured.

        Configured names with no matching category are skipped: category sets
        drift over time and a stale name is not an error.

        Returns:
            List[Topic]: Surviving topics in category order, annotated with the forum base URL.
        """
        wanted = set(category_names)
        no_reply: List[Topic] = []

        categories = await self.list_categories(session)
        matched = [category for category in categories if category.name in wanted]
        missing = wanted - {category.name for category in matched}
        if missing:
            logger.debug(f"Configured categories not found: {sorted(missing)}")

        for category in matched:
            logger.info(f"Finding no-reply topics in {category}")
            topics = await self.find_no_reply_topics_by_category(session, category, classifier)
            logger.info(f"{len(topics)} no-reply topics in {category.name}")
            no_reply.extend(topics)

        base_url = self.discourse_client.base_url
        return [topic.model_copy(update={"base_url": base_url}) for topic in no_reply]
