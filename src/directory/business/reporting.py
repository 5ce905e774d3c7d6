"""ReportBusiness: report a listing for moderation.

Each member can report a listing once. The report only bumps the counter
moderators sort by; it does not change the listing's status.
"""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.business.business import Business
from directory.domain import directory


@directory.command(part_of="Business")
class ReportBusiness:
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@directory.command_handler(part_of=Business)
class ReportBusinessHandler:
    @handle(ReportBusiness)
    def report_business(self, command):
        repo = current_domain.repository_for(Business)
        business = repo.get(command.business_id)

        business.report(user_id=command.user_id, reason=command.reason)

        repo.add(business)
