"""Safety alerts: tell members when a business they saved changes score.

Only members who saved the business and kept ``safety_alerts`` switched on
are notified. Recomputes that leave the score where it was (votes, replies,
repeat runs) send nothing.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.business.business import Business
from directory.business.events import SafetyScoreRecalculated
from directory.domain import directory
from directory.notification.notification import Notification, NotificationKind, NotificationPriority
from directory.shared.paging import iter_all
from directory.user.user import User

logger = structlog.get_logger(__name__)


def _wants_safety_alerts(user):
    preferences = user.notification_preferences
    return preferences is None or preferences.safety_alerts


@directory.event_handler(part_of=Notification, stream_category="directory::business")
class SafetyAlertsHandler:
    @handle(SafetyScoreRecalculated)
    def on_safety_score_recalculated(self, event: SafetyScoreRecalculated) -> None:
        previous = event.previous_safety_score
        if previous is None or previous == event.safety_score:
            return

        business = current_domain.repository_for(Business).get(event.business_id)
        dropped = event.safety_score < previous
        message = f"{business.name} safety score {'decreased' if dropped else 'increased'} to {event.safety_score}"

        members = current_domain.repository_for(User)._dao.query
        recipients = [u for u in iter_all(members) if u.has_saved(event.business_id) and _wants_safety_alerts(u)]

        repo = current_domain.repository_for(Notification)
        for user in recipients:
            repo.add(
                Notification.send(
                    user_id=user.id,
                    kind=NotificationKind.SAFETY.value,
                    title="Safety Score Update",
                    message=message,
                    business_id=event.business_id,
                    priority=(NotificationPriority.HIGH if dropped else NotificationPriority.MEDIUM).value,
                )
            )

        logger.debug(
            "safety_alerts.sent",
            business_id=str(event.business_id),
            safety_score=event.safety_score,
            previous_safety_score=previous,
            recipients=len(recipients),
        )
