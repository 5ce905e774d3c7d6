"""Business engagement: page views and saves.

Saving a business touches two aggregates: the Business save counter and the
User's saved list. Both are updated in the same handler so the counter and
the list cannot drift apart.
"""

from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.business.business import Business
from directory.domain import directory
from directory.user.user import User


@directory.command(part_of="Business")
class RecordBusinessView:
    business_id = Identifier(required=True)


@directory.command(part_of="Business")
class SaveBusiness:
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)


@directory.command(part_of="Business")
class UnsaveBusiness:
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)


@directory.command_handler(part_of=Business)
class BusinessEngagementHandler:
    @handle(RecordBusinessView)
    def record_view(self, command):
        repo = current_domain.repository_for(Business)
        business = repo.get(command.business_id)
        business.record_view()
        repo.add(business)

    @handle(SaveBusiness)
    def save_business(self, command):
        business_repo = current_domain.repository_for(Business)
        user_repo = current_domain.repository_for(User)
        business = business_repo.get(command.business_id)
        user = user_repo.get(command.user_id)

        if user.has_saved(business.id):
            raise ValidationError({"business": ["Business is already saved"]})

        user.save_business(business.id)
        business.add_save(user.id)

        user_repo.add(user)
        business_repo.add(business)

    @handle(UnsaveBusiness)
    def unsave_business(self, command):
        business_repo = current_domain.repository_for(Business)
        user_repo = current_domain.repository_for(User)
        business = business_repo.get(command.business_id)
        user = user_repo.get(command.user_id)

        if not user.has_saved(business.id):
            raise ValidationError({"business": ["Business is not in the saved list"]})

        user.unsave_business(business.id)
        business.remove_save(user.id)

        user_repo.add(user)
        business_repo.add(business)
