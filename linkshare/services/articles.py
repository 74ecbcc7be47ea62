"""Article repository: create, list, look up and delete shared links."""

import logging
from urllib.parse import urlparse

from sqlalchemy.orm import Session

from linkshare.core.errors import ValidationError
from linkshare.models.article import Article
from linkshare.schemas.auth import Principal
from linkshare.services.authorization import authorize_delete

logger = logging.getLogger(__name__)

ALLOWED_URL_SCHEMES = ("http", "https")


def validate_url(url: str) -> str:
    """Return the stripped URL, or raise ValidationError unless it is an absolute http(s) URL."""
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES or not parsed.netloc:
        raise ValidationError("Invalid URL format.")
    return url


def create_article(db: Session, principal: Principal, url: str) -> Article:
    """Insert one article owned by the principal."""
    article = Article(
        url=validate_url(url),
        owner_id=principal.id,
        owner_username=principal.username,
    )
    db.add(article)
    db.commit()
    db.refresh(article)
    logger.info("Article created: article_id=%s owner_id=%s", article.id, principal.id)
    return article


def list_articles(db: Session) -> list[Article]:
    """All articles, newest first."""
    return db.query(Article).order_by(Article.created_at.desc(), Article.id.desc()).all()


def get_article(db: Session, article_id: int) -> Article | None:
    return db.get(Article, article_id)


def delete_article(db: Session, principal: Principal, article_id: int) -> None:
    """Delete an article if it exists and the principal may delete it."""
    article = authorize_delete(principal, get_article(db, article_id), article_id)
    db.delete(article)
    db.commit()
    logger.info(
        "Article deleted: article_id=%s by principal_id=%s role=%s",
        article_id,
        principal.id,
        principal.role,
    )
