"""ModerateBusiness: approve, reject, flag, or re-open a listing."""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.business.business import Business
from directory.domain import directory


@directory.command(part_of="Business")
class ModerateBusiness:
    business_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    status = String(required=True)  # BusinessStatus value


@directory.command_handler(part_of=Business)
class ModerateBusinessHandler:
    @handle(ModerateBusiness)
    def moderate_business(self, command):
        repo = current_domain.repository_for(Business)
        business = repo.get(command.business_id)

        business.moderate(moderator_id=command.moderator_id, status=command.status)

        repo.add(business)
