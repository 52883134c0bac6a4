"""Tests for user, book and library API endpoints."""

from fastapi.testclient import TestClient


class TestUserEndpoints:
    """Test registration and login."""

    def test_register_and_login(self, client: TestClient):
        """Should register a user who can then log in."""
        response = client.post(
            "/api/v1/users/register",
            json={
                "username": "dave",
                "password": "open-sesame",
                "first_name": "Dave",
                "last_name": "Reader",
                "national_id": "DVDRDR83D04H501D",
                "email": "dave@example.com",
            },
        )
        assert response.status_code == 201

        response = client.post(
            "/api/v1/users/login", json={"username": "dave", "password": "open-sesame"}
        )
        assert response.status_code == 200
        assert response.json() == {"authenticated": True}

    def test_register_duplicate(self, client: TestClient, test_users):
        """Should return 409 for a taken username."""
        response = client.post(
            "/api/v1/users/register",
            json={
                "username": "alice",
                "password": "x",
                "first_name": "A",
                "last_name": "B",
                "national_id": "XXXXXX00X00X000X",
                "email": "other@example.com",
            },
        )
        assert response.status_code == 409

    def test_register_invalid_email(self, client: TestClient):
        """Should reject a malformed email."""
        response = client.post(
            "/api/v1/users/register",
            json={
                "username": "dave",
                "password": "x",
                "first_name": "Dave",
                "last_name": "Reader",
                "national_id": "DVDRDR83D04H501D",
                "email": "not-an-email",
            },
        )
        assert response.status_code == 422

    def test_login_wrong_password(self, client: TestClient, test_users):
        """Should return 401 for a wrong credential."""
        response = client.post(
            "/api/v1/users/login", json={"username": "alice", "password": "wrong"}
        )
        assert response.status_code == 401

    def test_username_exists(self, client: TestClient, test_users):
        """Should report whether a username is registered."""
        assert client.get("/api/v1/users/alice/exists").json() == {"exists": True}
        assert client.get("/api/v1/users/nobody/exists").json() == {"exists": False}


class TestBookEndpoints:
    """Test catalogue endpoints."""

    def test_get_book(self, client: TestClient, test_books):
        """Should return book by ID."""
        response = client.get("/api/v1/books/101")

        assert response.status_code == 200
        assert response.json()["title"] == "Dune"

    def test_get_book_not_found(self, client: TestClient, test_books):
        """Should return 404 for non-existent book."""
        assert client.get("/api/v1/books/99999").status_code == 404

    def test_search_by_title(self, client: TestClient, test_books):
        """Should find books by partial title."""
        response = client.get("/api/v1/books/by-title", params={"q": "dune"})

        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [101, 606]

    def test_search_by_author_and_year(self, client: TestClient, test_books):
        """Should filter author matches by year."""
        response = client.get(
            "/api/v1/books/by-author-year", params={"author": "asimov", "year": 1950}
        )

        assert [b["title"] for b in response.json()] == ["I, Robot"]

    def test_search_by_id(self, client: TestClient, test_books):
        """Should return a one-element list for a known id."""
        response = client.get("/api/v1/books/by-id", params={"id": 101})

        assert response.status_code == 200
        assert [b["title"] for b in response.json()] == ["Dune"]

    def test_search_by_id_missing(self, client: TestClient, test_books):
        """Should return an empty list, not 404, for an unknown id."""
        response = client.get("/api/v1/books/by-id", params={"id": 99999})

        assert response.status_code == 200
        assert response.json() == []

    def test_search_by_title_wildcards_literal(self, client: TestClient, test_books):
        """Should not treat % in a query as a wildcard."""
        response = client.get("/api/v1/books/by-title", params={"q": "%"})

        assert response.status_code == 200
        assert response.json() == []


class TestLibraryEndpoints:
    """Test library endpoints."""

    def test_library_lifecycle(self, client: TestClient, test_users, test_books):
        """Should create, fill, rename and delete a library."""
        base = "/api/v1/users/alice/libraries"

        response = client.post(base, json={"name": "SciFi"})
        assert response.status_code == 201
        assert response.json()["name"] == "SciFi"

        assert client.put(f"{base}/SciFi/books/101").status_code == 200
        assert client.put(f"{base}/SciFi/books/202").status_code == 200
        assert client.get(f"{base}/SciFi/books").json() == [101, 202]
        assert client.get(f"{base}/SciFi/books/101").json() == {"member": True}

        response = client.patch(f"{base}/SciFi", json={"new_name": "Science Fiction"})
        assert response.status_code == 200
        assert response.json()["book_ids"] == [101, 202]

        assert client.delete(f"{base}/Science Fiction/books/202").status_code == 204
        assert client.get(base).json() == ["Science Fiction"]

        assert client.delete(f"{base}/Science Fiction").status_code == 204
        assert client.get(base).json() == []

    def test_create_duplicate(self, client: TestClient, test_users):
        """Should return 409 for a name the user already has."""
        client.post("/api/v1/users/alice/libraries", json={"name": "SciFi"})

        response = client.post("/api/v1/users/alice/libraries", json={"name": "SciFi"})

        assert response.status_code == 409

    def test_create_blank_name(self, client: TestClient, test_users):
        """Should return 400 for a blank name."""
        response = client.post("/api/v1/users/alice/libraries", json={"name": "  "})

        assert response.status_code == 400

    def test_create_name_with_slash(self, client: TestClient, test_users):
        """Should reject names that cannot be addressed as a path segment."""
        base = "/api/v1/users/alice/libraries"

        assert client.post(base, json={"name": "Sci/Fi"}).status_code == 422
        assert client.get(base).json() == []

    def test_rename_to_name_with_slash(self, client: TestClient, test_users):
        """Should refuse a new name containing a slash and keep the old one."""
        base = "/api/v1/users/alice/libraries"
        client.post(base, json={"name": "SciFi"})

        response = client.patch(f"{base}/SciFi", json={"new_name": "Sci/Fi"})

        assert response.status_code == 422
        assert client.get(base).json() == ["SciFi"]
        assert client.get(f"{base}/SciFi/exists").json() == {"exists": True}

    def test_create_for_unknown_user(self, client: TestClient, test_users):
        """Should return 404 for an unregistered owner."""
        response = client.post("/api/v1/users/nobody/libraries", json={"name": "SciFi"})

        assert response.status_code == 404

    def test_library_id_and_membership(self, client: TestClient, test_users, test_books):
        """Should resolve a library id usable for membership checks."""
        base = "/api/v1/users/alice/libraries"
        client.post(base, json={"name": "SciFi"})
        client.put(f"{base}/SciFi/books/101")

        library_id = client.get(f"{base}/SciFi/id").json()["library_id"]

        response = client.get(f"/api/v1/libraries/{library_id}/books/101")
        assert response.json() == {"member": True}
        assert client.get(f"{base}/Missing/id").status_code == 404
        assert client.get(f"{base}/SciFi/exists").json() == {"exists": True}

    def test_add_unknown_book(self, client: TestClient, test_users, test_books):
        """Should return 404 for a book outside the catalogue."""
        client.post("/api/v1/users/alice/libraries", json={"name": "SciFi"})

        response = client.put("/api/v1/users/alice/libraries/SciFi/books/9999")

        assert response.status_code == 404
