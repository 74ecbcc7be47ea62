"""Article endpoints: list, submit, delete."""

from fastapi import APIRouter, status

from linkshare.api.deps import CurrentPrincipal, DbSession, OptionalPrincipal
from linkshare.schemas.article import ArticleCreate, ArticleResponse, ArticlesListResponse
from linkshare.schemas.auth import MessageResponse
from linkshare.services import articles as article_service
from linkshare.services.authorization import can_delete

router = APIRouter()


@router.get("", response_model=ArticlesListResponse)
def list_articles(db: DbSession, principal: OptionalPrincipal) -> ArticlesListResponse:
    """List all articles, newest first. Anonymous callers see can_delete=false everywhere."""
    rows = article_service.list_articles(db)
    return ArticlesListResponse(
        articles=[
            ArticleResponse(
                id=a.id,
                url=a.url,
                owner_id=a.owner_id,
                owner_username=a.owner_username,
                created_at=a.created_at,
                can_delete=principal is not None and can_delete(principal, a.owner_id),
            )
            for a in rows
        ]
    )


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
def create_article(
    body: ArticleCreate,
    db: DbSession,
    principal: CurrentPrincipal,
) -> ArticleResponse:
    """Submit a link owned by the caller."""
    article = article_service.create_article(db, principal, body.url)
    return ArticleResponse(
        id=article.id,
        url=article.url,
        owner_id=article.owner_id,
        owner_username=article.owner_username,
        created_at=article.created_at,
        can_delete=True,
    )


@router.delete("/{article_id}", response_model=MessageResponse)
def delete_article(
    article_id: int,
    db: DbSession,
    principal: CurrentPrincipal,
) -> MessageResponse:
    """
    Delete an article. 404 if it does not exist, 403 unless the caller owns it
    or is an admin.
    """
    article_service.delete_article(db, principal, article_id)
    return MessageResponse(message="Article deleted successfully")
