"""Directory bounded context: Businesses, Reviews, and Users.

Handles the business listing lifecycle, community reviews with moderation
and verification, user profiles, and the safety-score aggregation that keeps
each business's derived rating fields in step with its reviews.
"""

from protean.domain import Domain

from directory.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_file_prefix="safespace")

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
directory = Domain(name="directory")
