"""Delete-permission rule for articles."""

import logging

from linkshare.core.errors import AuthorizationError, NotFoundError
from linkshare.models.article import Article
from linkshare.models.user import ROLE_ADMIN
from linkshare.schemas.auth import Principal

logger = logging.getLogger(__name__)


def can_delete(principal: Principal, owner_id: int) -> bool:
    """Admins may delete anything; everyone else only what they own."""
    return principal.role == ROLE_ADMIN or principal.id == owner_id


def authorize_delete(principal: Principal, article: Article | None, article_id: int) -> Article:
    """
    Gate a delete. A missing article is reported as not found before the
    ownership rule is consulted; a refused rule raises AuthorizationError.
    """
    if article is None:
        raise NotFoundError("Article not found.")
    if not can_delete(principal, article.owner_id):
        logger.info(
            "Delete denied: article_id=%s principal_id=%s role=%s owner_id=%s",
            article_id,
            principal.id,
            principal.role,
            article.owner_id,
        )
        raise AuthorizationError("You can only delete your own articles.")
    return article
