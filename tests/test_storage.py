"""Integration tests for DatabaseStorage against an in-memory SQLite database."""

import unittest

from sqlalchemy.exc import IntegrityError

from citylinker.models import Publication, PublicationStatus, PublicationType, Review, UserRole
from citylinker.schemas.auth import UnknownUser, UserPublic
from citylinker.services.storage import average_rating, public_user
from tests.db_helpers import DatabaseTestCase


class TestHelpers(unittest.TestCase):
    def test_average_rating(self) -> None:
        self.assertEqual(average_rating([]), 0.0)
        self.assertEqual(average_rating([5, 4]), 4.5)
        self.assertAlmostEqual(average_rating([5, 4, 4]), 13 / 3)

    def test_public_user_placeholder(self) -> None:
        placeholder = public_user(None)
        self.assertIsInstance(placeholder, UnknownUser)
        self.assertEqual(
            placeholder.model_dump(by_alias=True),
            {"firstName": "Utilisateur", "lastName": "Inconnu"},
        )


class TestUsers(DatabaseTestCase):
    def test_create_and_lookup(self) -> None:
        user = self.make_user("a@example.com", role=UserRole.BUSINESS, business_name="Lushi Tech")
        self.assertEqual(self.storage.get_user(user.id).email, "a@example.com")
        self.assertEqual(self.storage.get_user_by_email("a@example.com").id, user.id)
        self.assertIsNone(self.storage.get_user(9999))
        self.assertIsNone(self.storage.get_user_by_email("nobody@example.com"))
        self.assertFalse(user.business_verified)
        self.assertEqual(user.role, UserRole.BUSINESS)

    def test_duplicate_email_raises(self) -> None:
        self.make_user("dup@example.com")
        with self.assertRaises(IntegrityError):
            self.make_user("dup@example.com")
        self.assertEqual(len(self.storage.get_all_users()), 1)

    def test_public_user_has_no_password(self) -> None:
        user = self.make_user()
        dumped = public_user(user).model_dump(by_alias=True)
        self.assertIsInstance(public_user(user), UserPublic)
        self.assertNotIn("password", dumped)
        self.assertEqual(dumped["firstName"], "Jean")

    def test_update_user(self) -> None:
        user = self.make_user()
        updated = self.storage.update_user(user.id, {"phone": "+243 81 000 0000"})
        self.assertEqual(updated.phone, "+243 81 000 0000")
        self.assertIsNone(self.storage.update_user(9999, {"phone": "x"}))

    def test_all_users_newest_first(self) -> None:
        first = self.make_user("first@example.com")
        second = self.make_user("second@example.com")
        ids = [u.id for u in self.storage.get_all_users()]
        self.assertEqual(ids, [second.id, first.id])

    def test_delete_user_cascades(self) -> None:
        owner = self.make_user("owner@example.com", role=UserRole.BUSINESS)
        client = self.make_user("client@example.com")
        category = self.make_category()
        own = self.make_publication(owner, category)
        other_owner = self.make_user("other@example.com", role=UserRole.BUSINESS)
        other = self.make_publication(other_owner, category, title="Autre annonce")
        self.storage.create_review({"user_id": client.id, "publication_id": own.id, "rating": 5})
        self.storage.create_review({"user_id": owner.id, "publication_id": other.id, "rating": 3})

        self.storage.delete_user(owner.id)

        self.assertIsNone(self.storage.get_user(owner.id))
        self.assertIsNone(self.storage.get_publication(own.id))
        self.assertIsNotNone(self.storage.get_publication(other.id))
        self.assertEqual(self.db.query(Review).count(), 0)

    def test_delete_missing_user_is_noop(self) -> None:
        self.storage.delete_user(12345)


class TestCategories(DatabaseTestCase):
    def test_counts_only_approved(self) -> None:
        owner = self.make_user(role=UserRole.BUSINESS)
        tech = self.make_category("Technologie")
        food = self.make_category("Restauration", icon="utensils")
        self.make_publication(owner, tech, title="Approuvée 1")
        self.make_publication(owner, tech, title="Approuvée 2")
        self.make_publication(owner, tech, title="En attente", status=PublicationStatus.PENDING)
        self.make_publication(owner, food, title="Rejetée", status=PublicationStatus.REJECTED)

        counts = {c.name: c.count for c in self.storage.get_categories()}
        self.assertEqual(counts, {"Technologie": 2, "Restauration": 0})

    def test_lookup(self) -> None:
        category = self.make_category("Santé", icon="stethoscope")
        self.assertEqual(self.storage.get_category_by_id(category.id).name, "Santé")
        self.assertEqual(self.storage.get_category_by_name("Santé").id, category.id)
        self.assertIsNone(self.storage.get_category_by_id(999))


class TestPublications(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.make_user("biz@example.com", role=UserRole.BUSINESS)
        self.client_user = self.make_user("client@example.com")
        self.category = self.make_category()

    def test_create_forces_pending(self) -> None:
        publication = self.storage.create_publication(
            {
                "user_id": self.owner.id,
                "category_id": self.category.id,
                "type": PublicationType.ANNOUNCEMENT,
                "title": "Promo laptop",
                "description": "Arrivage de PC portables venant d'Europe.",
            }
        )
        self.assertEqual(publication.status, PublicationStatus.PENDING)
        self.assertEqual(publication.views, 0)
        self.assertIsNone(publication.rejection_reason)

    def test_enriched_read_model(self) -> None:
        publication = self.make_publication(self.owner, self.category)
        for rating in (5, 4):
            self.storage.create_review(
                {"user_id": self.client_user.id, "publication_id": publication.id, "rating": rating}
            )
        details = self.storage.get_publication_by_id(publication.id)
        self.assertEqual(details.review_count, 2)
        self.assertEqual(details.average_rating, 4.5)
        self.assertEqual(details.user.email, "biz@example.com")
        self.assertEqual(details.category.name, "Technologie")
        self.assertNotIn("password", details.model_dump(by_alias=True)["user"])

    def test_no_reviews_average_zero(self) -> None:
        publication = self.make_publication(self.owner, self.category)
        details = self.storage.get_publication_by_id(publication.id)
        self.assertEqual(details.review_count, 0)
        self.assertEqual(details.average_rating, 0.0)
        self.assertEqual(details.reviews, [])

    def test_missing_publication(self) -> None:
        self.assertIsNone(self.storage.get_publication_by_id(404))
        self.assertIsNone(self.storage.update_publication(404, {"title": "x"}))

    def test_status_filter(self) -> None:
        approved = self.make_publication(self.owner, self.category, title="A")
        pending = self.make_publication(
            self.owner, self.category, title="B", status=PublicationStatus.PENDING
        )
        self.assertEqual(
            [p.id for p in self.storage.get_publications(PublicationStatus.APPROVED)], [approved.id]
        )
        self.assertEqual(
            [p.id for p in self.storage.get_publications(PublicationStatus.PENDING)], [pending.id]
        )
        self.assertEqual(
            [p.id for p in self.storage.get_publications()], [pending.id, approved.id]
        )

    def test_by_user_includes_every_status(self) -> None:
        self.make_publication(self.owner, self.category, title="A")
        self.make_publication(self.owner, self.category, title="B", status=PublicationStatus.REJECTED)
        self.assertEqual(len(self.storage.get_publications_by_user(self.owner.id)), 2)
        self.assertEqual(self.storage.get_publications_by_user(self.client_user.id), [])

    def test_trending_order_and_limit(self) -> None:
        low = self.make_publication(self.owner, self.category, title="Low", views=3)
        high = self.make_publication(self.owner, self.category, title="High", views=40)
        self.make_publication(
            self.owner, self.category, title="Hidden", views=500, status=PublicationStatus.PENDING
        )
        mid = self.make_publication(self.owner, self.category, title="Mid", views=10)

        trending = self.storage.get_trending_publications(limit=2)
        self.assertEqual([p.id for p in trending], [high.id, mid.id])
        self.assertEqual(
            [p.id for p in self.storage.get_trending_publications()], [high.id, mid.id, low.id]
        )

    def test_search_only_approved(self) -> None:
        self.make_publication(
            self.owner, self.category, title="Réparation téléphones", status=PublicationStatus.PENDING
        )
        visible = self.make_publication(self.owner, self.category, title="Réparation ordinateurs")
        results = self.storage.search_publications(query="réparation")
        self.assertEqual([p.id for p in results], [visible.id])

    def test_search_text_matches_title_or_description_case_insensitive(self) -> None:
        by_title = self.make_publication(self.owner, self.category, title="Laptop HP Core i5")
        by_description = self.make_publication(
            self.owner,
            self.category,
            title="Arrivage",
            description="PC portables et LAPTOPS venant d'Europe.",
        )
        self.make_publication(self.owner, self.category, title="Buffet du dimanche")
        ids = {p.id for p in self.storage.search_publications(query="laptop")}
        self.assertEqual(ids, {by_title.id, by_description.id})

    def test_search_wildcards_are_literal(self) -> None:
        self.make_publication(self.owner, self.category, title="Remise spéciale")
        discount = self.make_publication(self.owner, self.category, title="Remise de 50% ce mois")
        self.assertEqual(
            [p.id for p in self.storage.search_publications(query="50%")], [discount.id]
        )
        self.assertEqual(self.storage.search_publications(query="_"), [])

    def test_search_type_and_category(self) -> None:
        food = self.make_category("Restauration", icon="utensils")
        service = self.make_publication(self.owner, self.category, title="Service")
        announcement = self.make_publication(
            self.owner, food, title="Annonce", type=PublicationType.ANNOUNCEMENT
        )
        self.assertEqual(
            [p.id for p in self.storage.search_publications(type="service")], [service.id]
        )
        self.assertEqual(len(self.storage.search_publications(type="all")), 2)
        self.assertEqual(
            [p.id for p in self.storage.search_publications(category_id=food.id)],
            [announcement.id],
        )
        self.assertEqual(
            self.storage.search_publications(type="service", category_id=food.id), []
        )

    def test_increment_views(self) -> None:
        publication = self.make_publication(self.owner, self.category, views=7)
        self.storage.increment_publication_views(publication.id)
        self.storage.increment_publication_views(publication.id)
        self.db.expire_all()
        self.assertEqual(self.storage.get_publication(publication.id).views, 9)

    def test_delete_publication_removes_reviews(self) -> None:
        publication = self.make_publication(self.owner, self.category)
        self.storage.create_review(
            {"user_id": self.client_user.id, "publication_id": publication.id, "rating": 2}
        )
        self.storage.delete_publication(publication.id)
        self.assertIsNone(self.storage.get_publication(publication.id))
        self.assertEqual(self.db.query(Review).count(), 0)

    def test_reviews_with_authors(self) -> None:
        publication = self.make_publication(self.owner, self.category)
        self.storage.create_review(
            {
                "user_id": self.client_user.id,
                "publication_id": publication.id,
                "rating": 4,
                "comment": "Très bon service",
            }
        )
        reviews = self.storage.get_reviews_by_publication(publication.id)
        self.assertEqual(len(reviews), 1)
        self.assertEqual(reviews[0].user.email, "client@example.com")
        self.assertEqual(reviews[0].comment, "Très bon service")
        self.assertEqual(self.storage.get_reviews_by_publication(999), [])


class TestStats(DatabaseTestCase):
    def test_admin_stats(self) -> None:
        owner = self.make_user("biz@example.com", role=UserRole.BUSINESS)
        client = self.make_user("client@example.com")
        self.make_user("admin@example.com", role=UserRole.ADMIN)
        category = self.make_category()
        approved = self.make_publication(owner, category)
        self.make_publication(owner, category, title="En attente", status=PublicationStatus.PENDING)
        self.storage.create_review({"user_id": client.id, "publication_id": approved.id, "rating": 5})

        stats = self.storage.get_admin_stats()
        self.assertEqual(stats.total_users, 3)
        self.assertEqual(stats.total_businesses, 1)
        self.assertEqual(stats.total_clients, 1)
        self.assertEqual(stats.total_publications, 2)
        self.assertEqual(stats.pending_publications, 1)
        self.assertEqual(stats.total_reviews, 1)

    def test_business_stats(self) -> None:
        owner = self.make_user("biz@example.com", role=UserRole.BUSINESS)
        client = self.make_user("client@example.com")
        category = self.make_category()
        first = self.make_publication(owner, category, title="Un", views=100)
        second = self.make_publication(owner, category, title="Deux", views=20)
        self.make_publication(
            owner, category, title="Trois", views=5, status=PublicationStatus.PENDING
        )
        for publication, rating in ((first, 5), (first, 3), (second, 4)):
            self.storage.create_review(
                {"user_id": client.id, "publication_id": publication.id, "rating": rating}
            )

        stats = self.storage.get_business_stats(owner.id)
        self.assertEqual(stats.total_views, 125)
        self.assertEqual(stats.total_reviews, 3)
        self.assertEqual(stats.average_rating, 4.0)
        self.assertEqual(stats.pending_count, 1)
        self.assertEqual(stats.approved_count, 2)

    def test_business_stats_empty(self) -> None:
        owner = self.make_user(role=UserRole.BUSINESS)
        stats = self.storage.get_business_stats(owner.id)
        self.assertEqual(
            stats.model_dump(),
            {
                "total_views": 0,
                "total_reviews": 0,
                "average_rating": 0.0,
                "pending_count": 0,
                "approved_count": 0,
            },
        )


if __name__ == "__main__":
    unittest.main()
