import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pingbot.application.issue_service import IssueReplyService
from pingbot.application.report import ReportAggregator
from pingbot.application.topic_service import TopicReplyService
from pingbot.config import DEFAULT_CONFIG_PATH, Settings, load_settings
from pingbot.domain.exceptions import ConfigurationException, PingbotException
from pingbot.domain.membership import MembershipClassifier
from pingbot.infrastructure.acl import GitHubTranslator
from pingbot.infrastructure.discourse_client import DiscourseClient
from pingbot.infrastructure.github_client import GitHubRestClient
from pingbot.infrastructure.http import create_session
from pingbot.infrastructure.slack_client import SlackClient

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pingbot",
        description="Report open issues and forum topics no team member has answered.",
    )
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="Path to the TOML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--dry-run", action="store_true", help="Print the report instead of sending it to Slack")
    return parser.parse_args(argv)


async def run(settings: Settings, dry_run: bool = False) -> int:
    """
    Runs one detection pass and delivers the report.

    A failing source is logged and reported as unavailable; the other source
    still runs. Returns the process exit code.
    """
    github_client = GitHubRestClient(token=settings.github_token)
    discourse_client = DiscourseClient(base_url=settings.discourse_base_url)
    classifier = MembershipClassifier(settings.discourse_members, settings.member_suffixes)

    issue_service = IssueReplyService(github_client=github_client)
    topic_service = TopicReplyService(discourse_client=discourse_client, classifier=classifier)
    aggregator = ReportAggregator(settings.max_age_hours, settings.show_empty_sections)

    issues, topics = [], []
    issue_error = topic_error = None

    async with create_session() as session:
        try:
            login = GitHubTranslator.to_login(await github_client.get_current_user(session))
            logger.info(f"Current user: {login}")
            issues = await issue_service.find_no_reply_issues(
                session, settings.repositories, max_age_hours=settings.max_age_hours
            )
        except PingbotException as e:
            logger.error(f"Failed to collect no-reply issues: {e}")
            issue_error = str(e)

        try:
            topics = await topic_service.find_no_reply_topics(session, settings.discourse_categories)
        except PingbotException as e:
            logger.error(f"Failed to collect no-reply topics: {e}")
            topic_error = str(e)

        report = aggregator.build(issues, topics, issue_error, topic_error)

        if dry_run or not settings.notify_slack:
            print(report)
        else:
            await SlackClient(token=settings.slack_token).send_message(session, settings.slack_channel, report)

    return 1 if issue_error or topic_error else 0


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except ConfigurationException as e:
        logger.error(str(e))
        sys.exit(2)

    try:
        exit_code = asyncio.run(run(settings, dry_run=args.dry_run))
    except KeyboardInterrupt:
        logger.info("Run interrupted by user. Exiting.")
        sys.exit(130)
    except PingbotException as e:
        logger.error(f"Run failed: {e}")
        sys.exit(1)

    sys.exit(exit_code)

if __name__ == "__main__":
    main()
