"""API tests for the admin area: moderation, user management, categories, stats."""

from citylinker.models import PublicationStatus, UserRole
from tests.db_helpers import ApiTestCase


class AdminApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.category = self.make_category()
        self.admin = self.make_user("admin@example.com", role=UserRole.ADMIN)
        self.owner = self.make_user("biz@example.com", role=UserRole.BUSINESS)
        self.customer = self.make_user("client@example.com")
        self.as_admin = self.login("admin@example.com")
        self.as_customer = self.login("client@example.com")


class TestAccess(AdminApiTestCase):
    def test_admin_routes_guarded(self) -> None:
        for path in ("/api/admin/stats", "/api/admin/users", "/api/admin/publications"):
            self.assertEqual(self.client.get(path).status_code, 401, path)
            forbidden = self.as_customer.get(path)
            self.assertEqual(forbidden.status_code, 403, path)
            self.assertEqual(forbidden.json(), {"message": "Accès non autorisé"})
            self.assertEqual(self.as_admin.get(path).status_code, 200, path)

    def test_role_change_applies_immediately(self) -> None:
        self.assertEqual(self.as_customer.get("/api/business/stats").status_code, 403)
        response = self.as_admin.patch(
            f"/api/admin/users/{self.customer.id}", json={"role": "business"}
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["user"]["role"], "business")
        self.assertEqual(self.as_customer.get("/api/business/stats").status_code, 200)


class TestModeration(AdminApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.publication = self.make_publication(
            self.owner, self.category, status=PublicationStatus.PENDING
        )
        self.url = f"/api/admin/publications/{self.publication.id}/status"

    def test_pending_queue_and_full_list(self) -> None:
        approved = self.make_publication(self.owner, self.category, title="Déjà publiée")
        pending = self.as_admin.get("/api/admin/publications/pending").json()
        self.assertEqual([p["id"] for p in pending], [self.publication.id])
        everything = self.as_admin.get("/api/admin/publications").json()
        self.assertEqual({p["id"] for p in everything}, {self.publication.id, approved.id})

    def test_approve(self) -> None:
        response = self.as_admin.patch(self.url, json={"status": "approved"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "approved")
        self.assertEqual(
            [p["id"] for p in self.client.get("/api/publications").json()], [self.publication.id]
        )

    def test_reject_with_reason_then_approve_clears_it(self) -> None:
        rejected = self.as_admin.patch(
            self.url, json={"status": "rejected", "rejectionReason": "Image floue"}
        )
        self.assertEqual(rejected.json()["status"], "rejected")
        self.assertEqual(rejected.json()["rejectionReason"], "Image floue")
        approved = self.as_admin.patch(
            self.url, json={"status": "approved", "rejectionReason": "ignoré"}
        )
        self.assertIsNone(approved.json()["rejectionReason"])

    def test_other_statuses_refused(self) -> None:
        for value in ("pending", "archived", ""):
            response = self.as_admin.patch(self.url, json={"status": value})
            self.assertEqual(response.status_code, 400, value)
            self.assertEqual(response.json(), {"message": "Statut invalide"})
        self.db.expire_all()
        self.assertEqual(
            self.storage.get_publication(self.publication.id).status, PublicationStatus.PENDING
        )

    def test_missing_publication(self) -> None:
        response = self.as_admin.patch(
            "/api/admin/publications/999/status", json={"status": "approved"}
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "Publication non trouvée"})

    def test_clients_cannot_moderate(self) -> None:
        self.assertEqual(
            self.as_customer.patch(self.url, json={"status": "approved"}).status_code, 403
        )


class TestUserManagement(AdminApiTestCase):
    def test_list_users_without_passwords(self) -> None:
        users = self.as_admin.get("/api/admin/users").json()
        self.assertEqual(
            {u["email"] for u in users},
            {"admin@example.com", "biz@example.com", "client@example.com"},
        )
        for user in users:
            self.assertNotIn("password", user)

    def test_verify_business(self) -> None:
        response = self.as_admin.patch(
            f"/api/admin/users/{self.owner.id}",
            json={"businessVerified": True, "businessName": "Lushi Tech Services"},
        )
        self.assertEqual(response.status_code, 200)
        user = response.json()["user"]
        self.assertTrue(user["businessVerified"])
        self.assertEqual(user["businessName"], "Lushi Tech Services")

    def test_password_not_editable(self) -> None:
        before = self.storage.get_user(self.owner.id).password
        response = self.as_admin.patch(
            f"/api/admin/users/{self.owner.id}", json={"password": "hijacked1"}
        )
        self.assertEqual(response.status_code, 200)
        self.db.expire_all()
        self.assertEqual(self.storage.get_user(self.owner.id).password, before)

    def test_own_role_locked(self) -> None:
        response = self.as_admin.patch(f"/api/admin/users/{self.admin.id}", json={"role": "client"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"message": "Vous ne pouvez pas modifier votre propre rôle"})
        same_role = self.as_admin.patch(
            f"/api/admin/users/{self.admin.id}", json={"role": "admin", "phone": "+243 97 000 0000"}
        )
        self.assertEqual(same_role.status_code, 200)

    def test_update_missing_user(self) -> None:
        response = self.as_admin.patch("/api/admin/users/999", json={"phone": "x"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "Utilisateur non trouvé"})

    def test_delete_user_cascades_and_ends_sessions(self) -> None:
        as_owner = self.login("biz@example.com")
        self.make_publication(self.owner, self.category)
        response = self.as_admin.delete(f"/api/admin/users/{self.owner.id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Utilisateur supprimé"})
        self.assertEqual(self.client.get("/api/publications").json(), [])
        self.assertEqual(as_owner.get("/api/auth/me").status_code, 401)

    def test_cannot_delete_self(self) -> None:
        response = self.as_admin.delete(f"/api/admin/users/{self.admin.id}")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json(), {"message": "Impossible de supprimer votre propre compte Admin"}
        )
        self.assertIsNotNone(self.storage.get_user_by_email("admin@example.com"))


class TestCategoriesAndStats(AdminApiTestCase):
    def test_create_category(self) -> None:
        response = self.as_admin.post(
            "/api/admin/categories",
            json={"name": "Immobilier", "icon": "home", "description": "Agences, Locations"},
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()["name"], "Immobilier")
        names = [c["name"] for c in self.client.get("/api/categories").json()]
        self.assertEqual(names, ["Technologie", "Immobilier"])

    def test_duplicate_category(self) -> None:
        response = self.as_admin.post("/api/admin/categories", json={"name": "Technologie", "icon": "x"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"message": "Cette catégorie existe déjà"})

    def test_customers_cannot_create_categories(self) -> None:
        response = self.as_customer.post("/api/admin/categories", json={"name": "Santé", "icon": "x"})
        self.assertEqual(response.status_code, 403)

    def test_stats(self) -> None:
        approved = self.make_publication(self.owner, self.category)
        self.make_publication(self.owner, self.category, title="Attente", status=PublicationStatus.PENDING)
        self.as_customer.post(f"/api/publications/{approved.id}/reviews", json={"rating": 4})
        stats = self.as_admin.get("/api/admin/stats").json()
        self.assertEqual(
            stats,
            {
                "totalUsers": 3,
                "totalBusinesses": 1,
                "totalClients": 1,
                "totalPublications": 2,
                "pendingPublications": 1,
                "totalReviews": 1,
            },
        )
