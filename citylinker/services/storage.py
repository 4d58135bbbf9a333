"""
Data-access facade: every query the API needs, plus read-model enrichment.

Routes never touch the ORM session directly; they go through DatabaseStorage.
Lookups return None for missing rows instead of raising. Each write is a
single statement committed immediately.
"""

from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy import delete, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from citylinker.core.database import get_db
from citylinker.models import (
    Category,
    Publication,
    PublicationStatus,
    PublicationType,
    Review,
    User,
    UserRole,
)
from citylinker.schemas.auth import UnknownUser, UserPublic
from citylinker.schemas.catalog import (
    CategoryOut,
    CategoryWithCount,
    PublicationOut,
    PublicationWithDetails,
)
from citylinker.schemas.reviews import ReviewOut, ReviewWithUser
from citylinker.schemas.stats import AdminStats, BusinessStats

DEFAULT_TRENDING_LIMIT = 8

# Search type filter value meaning "no restriction".
ALL_TYPES = "all"


def average_rating(ratings: list[int]) -> float:
    """Arithmetic mean of ratings; 0.0 when there are none."""
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def public_user(user: User | None) -> UserPublic | UnknownUser:
    """Password-free view of a user, or the placeholder when the row is gone."""
    if user is None:
        return UnknownUser()
    return UserPublic.model_validate(user)


class DatabaseStorage:
    """Repository over the relational store, bound to one SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # --- users ---

    def get_user(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def create_user(self, data: dict[str, Any]) -> User:
        """Insert a user. Raises IntegrityError on a duplicate email (callers pre-check)."""
        user = User(**data)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def update_user(self, user_id: int, data: dict[str, Any]) -> User | None:
        """Set the given columns only. Callers decide which keys are allowed."""
        user = self.get_user(user_id)
        if user is None:
            return None
        for key, value in data.items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_all_users(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def delete_user(self, user_id: int) -> None:
        """Delete a user; publications, reviews and sessions go with it. No-op if absent."""
        self.db.execute(delete(User).where(User.id == user_id))
        self.db.commit()
        self.db.expire_all()

    # --- categories ---

    def get_categories(self) -> list[CategoryWithCount]:
        """Every category with the number of its approved publications."""
        result: list[CategoryWithCount] = []
        for category in self.db.query(Category).order_by(Category.id).all():
            count = (
                self.db.query(Publication)
                .filter(
                    Publication.category_id == category.id,
                    Publication.status == PublicationStatus.APPROVED,
                )
                .count()
            )
            result.append(
                CategoryWithCount(**CategoryOut.model_validate(category).model_dump(), count=count)
            )
        return result

    def get_category_by_id(self, category_id: int) -> Category | None:
        return self.db.get(Category, category_id)

    def get_category_by_name(self, name: str) -> Category | None:
        return self.db.query(Category).filter(Category.name == name).first()

    def create_category(self, data: dict[str, Any]) -> Category:
        category = Category(**data)
        self.db.add(category)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(category)
        return category

    # --- publications ---

    def _enrich(self, publication: Publication) -> PublicationWithDetails:
        """Attach owner (password-free), category, reviews and the rating aggregate."""
        owner = self.get_user(publication.user_id)
        category = (
            self.get_category_by_id(publication.category_id)
            if publication.category_id
            else None
        )
        reviews = (
            self.db.query(Review)
            .filter(Review.publication_id == publication.id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )
        return PublicationWithDetails(
            **PublicationOut.model_validate(publication).model_dump(),
            user=public_user(owner),
            category=CategoryOut.model_validate(category) if category else None,
            reviews=[ReviewOut.model_validate(r) for r in reviews],
            average_rating=average_rating([r.rating for r in reviews]),
            review_count=len(reviews),
        )

    def _newest_first(self, query):
        return query.order_by(Publication.created_at.desc(), Publication.id.desc())

    def get_publications(
        self, status: PublicationStatus | None = None
    ) -> list[PublicationWithDetails]:
        query = self.db.query(Publication)
        if status is not None:
            query = query.filter(Publication.status == status)
        return [self._enrich(p) for p in self._newest_first(query).all()]

    def get_publication(self, publication_id: int) -> Publication | None:
        """Raw row without enrichment (ownership checks, updates)."""
        return self.db.get(Publication, publication_id)

    def get_publication_by_id(self, publication_id: int) -> PublicationWithDetails | None:
        publication = self.get_publication(publication_id)
        if publication is None:
            return None
        return self._enrich(publication)

    def get_publications_by_user(self, user_id: int) -> list[PublicationWithDetails]:
        query = self.db.query(Publication).filter(Publication.user_id == user_id)
        return [self._enrich(p) for p in self._newest_first(query).all()]

    def get_trending_publications(
        self, limit: int = DEFAULT_TRENDING_LIMIT
    ) -> list[PublicationWithDetails]:
        """Approved publications with the most views, at most `limit`."""
        publications = (
            self.db.query(Publication)
            .filter(Publication.status == PublicationStatus.APPROVED)
            .order_by(Publication.views.desc(), Publication.id.desc())
            .limit(limit)
            .all()
        )
        return [self._enrich(p) for p in publications]

    def search_publications(
        self,
        query: str | None = None,
        type: PublicationType | str | None = None,
        category_id: int | None = None,
    ) -> list[PublicationWithDetails]:
        """
        Search approved publications only.

        type: exact match unless None or "all". category_id: exact match.
        query: case-insensitive substring of title or description.
        """
        q = self.db.query(Publication).filter(
            Publication.status == PublicationStatus.APPROVED
        )
        if type is not None and type != ALL_TYPES:
            q = q.filter(Publication.type == PublicationType(type))
        if category_id:
            q = q.filter(Publication.category_id == category_id)
        if query:
            q = q.filter(
                or_(
                    Publication.title.icontains(query, autoescape=True),
                    Publication.description.icontains(query, autoescape=True),
                )
            )
        return [self._enrich(p) for p in self._newest_first(q).all()]

    def create_publication(self, data: dict[str, Any]) -> Publication:
        """Insert a listing; it always starts pending with zero views."""
        publication = Publication(
            **data,
            status=PublicationStatus.PENDING,
            rejection_reason=None,
            views=0,
        )
        self.db.add(publication)
        self.db.commit()
        self.db.refresh(publication)
        return publication

    def update_publication(
        self, publication_id: int, data: dict[str, Any]
    ) -> Publication | None:
        publication = self.get_publication(publication_id)
        if publication is None:
            return None
        for key, value in data.items():
            setattr(publication, key, value)
        self.db.commit()
        self.db.refresh(publication)
        return publication

    def delete_publication(self, publication_id: int) -> None:
        """Delete a listing and its reviews. No-op if absent."""
        self.db.execute(delete(Publication).where(Publication.id == publication_id))
        self.db.commit()
        self.db.expire_all()

    def increment_publication_views(self, publication_id: int) -> None:
        """Atomic views = views + 1 in a single UPDATE."""
        self.db.execute(
            update(Publication)
            .where(Publication.id == publication_id)
            .values(views=Publication.views + 1)
        )
        self.db.commit()

    # --- reviews ---

    def get_reviews_by_publication(self, publication_id: int) -> list[ReviewWithUser]:
        reviews = (
            self.db.query(Review)
            .filter(Review.publication_id == publication_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )
        return [
            ReviewWithUser(
                **ReviewOut.model_validate(review).model_dump(),
                user=public_user(self.get_user(review.user_id)),
            )
            for review in reviews
        ]

    def create_review(self, data: dict[str, Any]) -> Review:
        review = Review(**data)
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    # --- stats ---

    def get_admin_stats(self) -> AdminStats:
        return AdminStats(
            total_users=self.db.query(User).count(),
            total_businesses=self.db.query(User).filter(User.role == UserRole.BUSINESS).count(),
            total_clients=self.db.query(User).filter(User.role == UserRole.CLIENT).count(),
            total_publications=self.db.query(Publication).count(),
            pending_publications=self.db.query(Publication)
            .filter(Publication.status == PublicationStatus.PENDING)
            .count(),
            total_reviews=self.db.query(Review).count(),
        )

    def get_business_stats(self, user_id: int) -> BusinessStats:
        """Views, moderation counts and rating aggregate over one owner's publications."""
        publications = self.db.query(Publication).filter(Publication.user_id == user_id).all()

        ratings: list[int] = []
        for publication in publications:
            ratings.extend(
                rating
                for (rating,) in self.db.query(Review.rating)
                .filter(Review.publication_id == publication.id)
                .all()
            )

        return BusinessStats(
            total_views=sum(p.views for p in publications),
            total_reviews=len(ratings),
            average_rating=average_rating(ratings),
            pending_count=sum(1 for p in publications if p.status == PublicationStatus.PENDING),
            approved_count=sum(1 for p in publications if p.status == PublicationStatus.APPROVED),
        )


def get_storage(db: Annotated[Session, Depends(get_db)]) -> DatabaseStorage:
    """Dependency: storage facade over the request's DB session."""
    return DatabaseStorage(db)
