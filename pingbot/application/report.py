from typing import Optional, Sequence, Tuple

from pingbot.domain.models import Issue, Topic

EMPTY_REPORT = "No no-reply items."


class ReportAggregator:
    """
    Renders no-reply issues and topics into the text handed to the notifier.

    Each section is built as an immutable tuple of lines and the sections are
    joined at the end. Items keep their input order.

    A section with zero items renders its header with a count of 0 when
    ``show_empty`` is set and is left out otherwise. A section whose source
    failed always renders, with the error in place of items.
    """

    def __init__(self, max_age_hours: float = 72, show_empty: bool = True):
        self.max_age_hours = max_age_hours
        self.show_empty = show_empty

    @staticmethod
    def format_issue(issue: Issue) -> str:
        return f"{issue.owner}/{issue.repo}#{issue.number}: {issue.title}, {issue.html_url}"

    @staticmethod
    def format_topic(topic: Topic) -> str:
        return f"{topic.id}: {topic.title}, {topic.url}"

    def _hours(self) -> str:
        return f"{self.max_age_hours:g}"

    def issue_section(self, issues: Sequence[Issue], error: Optional[str] = None) -> Tuple[str, ...]:
        if error is not None:
            return (f"No-reply issues unavailable: {error}",)
        if not issues and not self.show_empty:
            return ()
        header = f"{len(issues)} no-reply issues in the last {self._hours()} hours"
        return (header, *(self.format_issue(issue) for issue in issues))

    def topic_section(self, topics: Sequence[Topic], error: Optional[str] = None) -> Tuple[str, ...]:
        if error is not None:
            return (f"No-reply topics unavailable: {error}",)
        if not topics and not self.show_empty:
            return ()
        header = f"{len(topics)} no-reply topics"
        return (header, *(self.format_topic(topic) for topic in topics))

    def build(
        self,
        issues: Sequence[Issue],
        topics: Sequence[Topic],
        issue_error: Optional[str] = None,
        topic_error: Optional[str] = None,
    ) -> str:
        sections = [
            section
            for section in (
                self.issue_section(issues, issue_error),
                self.topic_section(topics, topic_error),
            )
            if section
        ]
        if not sections:
            return EMPTY_REPORT
        return "\n\n".join("\n".join(section) for section in sections)
