"""
GraphQL API Tests

Tests for the GraphQL endpoint including:
- The signup -> login -> post -> edit -> history flow
- Authentication (full and split tokens, cookies, rejected tokens)
- Visibility and ownership rules
- Cursor pagination
- Polymorphic node lookup
"""

from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from inkwell.models import Author, BlogPost, Edit
from inkwell.services.content import BLOG_POSTS, create_content, update_content
from inkwell.services.security import SIGNATURE_COOKIE, split_token
from inkwell.utils import utc_now

# =============================================================================
# Helper Functions
# =============================================================================


def graphql_query(client: TestClient, query: str, variables: dict = None, token: str = None):
    """Execute a GraphQL query and return the response."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    payload = {"query": query}
    if variables:
        payload["variables"] = variables

    response = client.post("/graphql", json=payload, headers=headers)
    return response.json()


def error_messages(result: dict) -> list[str]:
    return [error["message"] for error in result.get("errors", [])]


CREATE_POST = """
mutation($input: CreateBlogPostInput!) {
    createBlogPost(input: $input) { id title content isPublished }
}
"""

UPDATE_POST = """
mutation($input: UpdateBlogPostInput!) {
    updateBlogPost(input: $input) { id content }
}
"""

POST_EDITS = """
query($id: ID!) {
    blogPost(id: $id) {
        edits { id changes { text added removed } }
    }
}
"""


# =============================================================================
# End-to-end Flow
# =============================================================================


class TestEditHistoryFlow:
    """Sign up, log in, write a post, edit it and read the history."""

    def test_full_flow(self, client: TestClient):
        result = graphql_query(
            client,
            """
            mutation {
                createAuthor(input: {name: "Alice", username: "alice", password: "secret123"}) {
                    id username
                }
            }
            """,
        )
        assert "errors" not in result
        assert result["data"]["createAuthor"]["username"] == "alice"

        result = graphql_query(
            client, 'mutation { authenticate(username: "alice", password: "secret123") }'
        )
        assert "errors" not in result
        token = result["data"]["authenticate"]

        result = graphql_query(
            client,
            CREATE_POST,
            variables={"input": {"title": "Hello", "content": "World one"}},
            token=token,
        )
        assert "errors" not in result
        post_id = result["data"]["createBlogPost"]["id"]

        result = graphql_query(
            client,
            UPDATE_POST,
            variables={"input": {"id": post_id, "content": "World two"}},
            token=token,
        )
        assert "errors" not in result
        assert result["data"]["updateBlogPost"]["content"] == "World two"

        result = graphql_query(client, POST_EDITS, variables={"id": post_id}, token=token)
        assert "errors" not in result
        edits = result["data"]["blogPost"]["edits"]
        assert len(edits) == 1
        assert edits[0]["changes"] == [
            {"text": "World ", "added": None, "removed": None},
            {"text": "one", "added": None, "removed": True},
            {"text": "two", "added": True, "removed": None},
        ]

    def test_unchanged_content_records_no_edit(
        self, client: TestClient, alice_token: str, published_post: BlogPost
    ):
        graphql_query(
            client,
            UPDATE_POST,
            variables={"input": {"id": published_post.id, "content": "World one"}},
            token=alice_token,
        )

        result = graphql_query(client, POST_EDITS, variables={"id": published_post.id})
        assert result["data"]["blogPost"]["edits"] == []

    def test_second_update_in_one_request_sees_both_edits(
        self, client: TestClient, alice_token: str, published_post: BlogPost
    ):
        result = graphql_query(
            client,
            """
            mutation($id: ID!) {
                a: updateBlogPost(input: {id: $id, content: "World two"}) { edits { id } }
                b: updateBlogPost(input: {id: $id, content: "World three"}) { edits { id } }
            }
            """,
            variables={"id": published_post.id},
            token=alice_token,
        )

        assert "errors" not in result
        first_edits = [e["id"] for e in result["data"]["a"]["edits"]]
        second_edits = [e["id"] for e in result["data"]["b"]["edits"]]
        assert len(first_edits) == 1
        assert len(second_edits) == 2
        assert first_edits[0] in second_edits

    def test_edit_links_back_to_its_content(
        self, client: TestClient, db_session: Session, alice: Author, published_post: BlogPost
    ):
        update_content(db_session, BLOG_POSTS, published_post, alice.id, content="World two")

        result = graphql_query(
            client,
            """
            query($id: ID!) {
                blogPost(id: $id) {
                    edits { content { id title ... on BlogPostType { isPublished } } }
                }
            }
            """,
            variables={"id": published_post.id},
        )

        assert "errors" not in result
        content = result["data"]["blogPost"]["edits"][0]["content"]
        assert content == {"id": published_post.id, "title": "Hello", "isPublished": True}


# =============================================================================
# Authentication
# =============================================================================


class TestAuthentication:
    """Tests for tokens, cookies and the viewer."""

    def test_authenticate_sets_split_cookies(self, client: TestClient, alice: Author):
        response = client.post(
            "/graphql",
            json={"query": 'mutation { authenticate(username: "alice", password: "secret123") }'},
        )
        token = response.json()["data"]["authenticate"]
        header_payload, signature = split_token(token)

        assert response.cookies["jwt.header.payload"] == header_payload
        assert response.cookies[SIGNATURE_COOKIE] == signature
        signature_cookie = next(
            c for c in response.headers.get_list("set-cookie") if c.startswith(SIGNATURE_COOKIE)
        )
        assert "httponly" in signature_cookie.lower()
        assert "samesite=strict" in signature_cookie.lower()

    def test_wrong_password(self, client: TestClient, alice: Author):
        result = graphql_query(
            client, 'mutation { authenticate(username: "alice", password: "nope") }'
        )

        assert error_messages(result) == ["Invalid username or password."]

    def test_viewer_with_full_token(self, client: TestClient, alice_token: str):
        result = graphql_query(client, "{ viewer { username } }", token=alice_token)

        assert result["data"]["viewer"] == {"username": "alice"}

    def test_viewer_anonymous(self, client: TestClient):
        result = graphql_query(client, "{ viewer { username } }")

        assert result["data"]["viewer"] is None

    def test_split_token_with_signature_cookie(self, client: TestClient, alice_token: str):
        header_payload, signature = split_token(alice_token)
        client.cookies.set(SIGNATURE_COOKIE, signature)

        result = graphql_query(client, "{ viewer { username } }", token=header_payload)

        assert result["data"]["viewer"] == {"username": "alice"}

    def test_tampered_signature_is_rejected(self, client: TestClient, alice_token: str):
        header_payload, _ = split_token(alice_token)
        client.cookies.set(SIGNATURE_COOKIE, "forged")

        response = client.post(
            "/graphql",
            json={"query": "{ viewer { username } }"},
            headers={"Authorization": f"Bearer {header_payload}"},
        )

        assert response.status_code == 401

    def test_malformed_header_is_rejected(self, client: TestClient):
        response = client.post(
            "/graphql",
            json={"query": "{ viewer { username } }"},
            headers={"Authorization": "Token abc"},
        )

        assert response.status_code == 400

    def test_update_author(self, client: TestClient, alice_token: str):
        result = graphql_query(
            client,
            """
            mutation {
                updateAuthor(input: {password: "secret123", name: "Alicia"}) { name username }
            }
            """,
            token=alice_token,
        )

        assert "errors" not in result
        assert result["data"]["updateAuthor"] == {"name": "Alicia", "username": "alice"}

    def test_update_author_wrong_password(self, client: TestClient, alice_token: str):
        result = graphql_query(
            client,
            'mutation { updateAuthor(input: {password: "wrong", name: "X"}) { name } }',
            token=alice_token,
        )

        assert error_messages(result) == ["Password incorrect."]

    def test_logout(self, client: TestClient):
        result = graphql_query(client, "mutation { logout }")

        assert result["data"]["logout"] is True


# =============================================================================
# Authors
# =============================================================================


class TestAuthorQueries:
    """Tests for author lookups."""

    def test_author_by_name_ignores_case(self, client: TestClient, alice: Author):
        result = graphql_query(client, '{ author(name: "ALICE") { id name } }')

        assert result["data"]["author"] == {"id": alice.id, "name": "Alice"}

    def test_unknown_author_is_null(self, client: TestClient):
        result = graphql_query(client, '{ author(name: "nobody") { id } }')

        assert "errors" not in result
        assert result["data"]["author"] is None

    def test_authors_with_their_posts(
        self,
        client: TestClient,
        bob: Author,
        published_post: BlogPost,
        unpublished_post: BlogPost,
    ):
        result = graphql_query(
            client,
            """
            {
                authors {
                    username
                    blogPosts { total afterEdges { node { title } } }
                }
            }
            """,
        )

        assert "errors" not in result
        by_username = {a["username"]: a["blogPosts"] for a in result["data"]["authors"]}
        assert by_username["alice"]["total"] == 1
        assert by_username["alice"]["afterEdges"] == [{"node": {"title": "Hello"}}]
        assert by_username["bob"]["total"] == 0

    def test_duplicate_username(self, client: TestClient, alice: Author):
        result = graphql_query(
            client,
            """
            mutation {
                createAuthor(input: {name: "A", username: "Alice", password: "pw123456"}) { id }
            }
            """,
        )

        assert error_messages(result) == ["Username already taken."]


# =============================================================================
# Blog Posts
# =============================================================================


class TestBlogPosts:
    """Tests for blog post visibility, ownership and deletion."""

    LIST = "{ blogPosts { total afterEdges { node { title } } } }"

    def test_unpublished_posts_hidden_from_anonymous(
        self, client: TestClient, published_post: BlogPost, unpublished_post: BlogPost
    ):
        result = graphql_query(client, self.LIST)

        assert result["data"]["blogPosts"]["total"] == 1

    def test_unpublished_posts_hidden_from_other_authors(
        self,
        client: TestClient,
        bob_token: str,
        published_post: BlogPost,
        unpublished_post: BlogPost,
    ):
        result = graphql_query(client, self.LIST, token=bob_token)

        assert result["data"]["blogPosts"]["total"] == 1

    def test_unpublished_posts_visible_to_author(
        self,
        client: TestClient,
        alice_token: str,
        published_post: BlogPost,
        unpublished_post: BlogPost,
    ):
        result = graphql_query(client, self.LIST, token=alice_token)

        assert result["data"]["blogPosts"]["total"] == 2

    def test_unpublished_post_by_id_is_null(self, client: TestClient, unpublished_post: BlogPost):
        result = graphql_query(
            client, "query($id: ID!) { blogPost(id: $id) { id } }", {"id": unpublished_post.id}
        )

        assert "errors" not in result
        assert result["data"]["blogPost"] is None

    def test_create_requires_authentication(self, client: TestClient):
        result = graphql_query(
            client, CREATE_POST, variables={"input": {"title": "Hi", "content": "There"}}
        )

        assert error_messages(result) == ["Authentication required"]

    def test_blank_title_is_rejected(self, client: TestClient, alice_token: str):
        result = graphql_query(
            client,
            CREATE_POST,
            variables={"input": {"title": "  ", "content": "There"}},
            token=alice_token,
        )

        assert error_messages(result) == ["Title should not be blank."]

    def test_cannot_edit_another_authors_post(
        self, client: TestClient, bob_token: str, published_post: BlogPost
    ):
        result = graphql_query(
            client,
            UPDATE_POST,
            variables={"input": {"id": published_post.id, "content": "Hacked"}},
            token=bob_token,
        )

        assert error_messages(result) == ["You cannot edit another author's post."]

    def test_update_unknown_post(self, client: TestClient, alice_token: str):
        result = graphql_query(
            client,
            UPDATE_POST,
            variables={"input": {"id": "no-such-id", "content": "x"}},
            token=alice_token,
        )

        assert error_messages(result) == ["No post with id no-such-id."]

    def test_delete_removes_post_and_edits(
        self,
        client: TestClient,
        db_session: Session,
        alice: Author,
        alice_token: str,
        published_post: BlogPost,
    ):
        post_id = published_post.id
        update_content(db_session, BLOG_POSTS, published_post, alice.id, content="World two")
        edit_id = graphql_query(client, POST_EDITS, variables={"id": post_id})["data"][
            "blogPost"
        ]["edits"][0]["id"]

        result = graphql_query(
            client,
            "mutation($id: ID!) { deleteBlogPost(id: $id) }",
            variables={"id": post_id},
            token=alice_token,
        )
        assert result["data"]["deleteBlogPost"] == post_id

        for node_id in (post_id, edit_id):
            result = graphql_query(
                client, "query($id: ID!) { node(id: $id) { id } }", {"id": node_id}
            )
            assert result["data"]["node"] is None

    def test_delete_after_update_in_one_request(
        self, client: TestClient, alice_token: str, published_post: BlogPost
    ):
        post_id = published_post.id

        result = graphql_query(
            client,
            """
            mutation($id: ID!) {
                updateBlogPost(input: {id: $id, content: "World two"}) { edits { id } }
                deleteBlogPost(id: $id)
            }
            """,
            variables={"id": post_id},
            token=alice_token,
        )

        assert "errors" not in result
        assert result["data"]["deleteBlogPost"] == post_id


# =============================================================================
# Pagination
# =============================================================================


class TestPagination:
    """Tests for cursor pagination over GraphQL."""

    PAGE = """
    query($pager: PagerInput) {
        blogPosts(pager: $pager) {
            total
            beforeEdges { cursor node { title } }
            afterEdges { cursor node { title } }
            pageInfo { startCursor endCursor hasPreviousPage hasNextPage }
        }
    }
    """

    def create_posts(self, db_session: Session, author: Author, count: int) -> None:
        now = utc_now()
        for i in range(count):
            create_content(
                db_session,
                BLOG_POSTS,
                author_id=author.id,
                title=f"Post {i}",
                content="...",
                is_published=True,
                publish_date=now - timedelta(days=i),
            )

    def test_pages_newest_first(self, client: TestClient, db_session: Session, alice: Author):
        self.create_posts(db_session, alice, 3)

        first = graphql_query(client, self.PAGE, {"pager": {"first": 2}})["data"]["blogPosts"]
        assert [e["node"]["title"] for e in first["afterEdges"]] == ["Post 0", "Post 1"]
        assert first["pageInfo"]["hasNextPage"] is True
        assert first["total"] == 3

        after = first["pageInfo"]["endCursor"]
        second = graphql_query(client, self.PAGE, {"pager": {"first": 2, "after": after}})
        second = second["data"]["blogPosts"]
        assert [e["node"]["title"] for e in second["afterEdges"]] == ["Post 2"]
        assert second["pageInfo"]["hasNextPage"] is False

    def test_neighbours_of_a_post(self, client: TestClient, db_session: Session, alice: Author):
        self.create_posts(db_session, alice, 3)
        everything = graphql_query(client, self.PAGE)["data"]["blogPosts"]
        middle = everything["afterEdges"][1]["cursor"]

        result = graphql_query(
            client,
            self.PAGE,
            {"pager": {"first": 1, "after": middle, "last": 1, "before": middle}},
        )["data"]["blogPosts"]

        assert [e["node"]["title"] for e in result["beforeEdges"]] == ["Post 0"]
        assert [e["node"]["title"] for e in result["afterEdges"]] == ["Post 2"]

    def test_invalid_pager(self, client: TestClient):
        result = graphql_query(client, self.PAGE, {"pager": {"first": -1}})

        assert error_messages(result) == ["Neither `first` nor `last` can be negative."]

    def test_mixed_directions_are_rejected(
        self, client: TestClient, db_session: Session, alice: Author
    ):
        self.create_posts(db_session, alice, 3)
        everything = graphql_query(client, self.PAGE)["data"]["blogPosts"]
        middle = everything["afterEdges"][1]["cursor"]

        for pager in ({"first": 2, "before": middle}, {"last": 2, "after": middle}):
            result = graphql_query(client, self.PAGE, {"pager": pager})

            assert result["data"] is None
            assert len(error_messages(result)) == 1

    def test_invalid_cursor(self, client: TestClient):
        result = graphql_query(client, self.PAGE, {"pager": {"after": "%%%"}})

        assert error_messages(result) == ["Invalid cursor: '%%%'"]


# =============================================================================
# Journal Entries and Drafts
# =============================================================================


class TestPrivateContent:
    """Tests for journal entries and drafts."""

    def test_journal_entries_require_authentication(self, client: TestClient):
        result = graphql_query(client, "{ journalEntries { total } }")

        assert error_messages(result) == ["Authentication required"]

    def test_encrypted_journal_entry(self, client: TestClient, alice_token: str, bob_token: str):
        result = graphql_query(
            client,
            """
            mutation {
                createJournalEntry(input: {
                    title: "Day 1",
                    content: "Y2lwaGVydGV4dA==",
                    encryptionParams: {cipher: AES_256_GCM, iv: "aXY="}
                }) { id encryptionParams { cipher iv } }
            }
            """,
            token=alice_token,
        )
        assert "errors" not in result
        entry = result["data"]["createJournalEntry"]
        assert entry["encryptionParams"] == {"cipher": "AES_256_GCM", "iv": "aXY="}

        mine = graphql_query(client, "{ journalEntries { total } }", token=alice_token)
        theirs = graphql_query(client, "{ journalEntries { total } }", token=bob_token)
        assert mine["data"]["journalEntries"]["total"] == 1
        assert theirs["data"]["journalEntries"]["total"] == 0

    def test_encryption_requires_iv(self, client: TestClient, alice_token: str):
        result = graphql_query(
            client,
            """
            mutation {
                createJournalEntry(input: {
                    title: "Day 1", content: "x", encryptionParams: {cipher: AES_256_GCM}
                }) { id }
            }
            """,
            token=alice_token,
        )

        assert error_messages(result) == [
            "Missing `iv` in encryption params required for cipher AES_256_GCM."
        ]

    def test_draft_date_moves_on_update(self, client: TestClient, alice_token: str):
        created = graphql_query(
            client,
            'mutation { createDraft(input: {title: "Idea", content: "first"}) { id } }',
            token=alice_token,
        )
        draft_id = created["data"]["createDraft"]["id"]

        update = """
        mutation($input: UpdateDraftInput!) { updateDraft(input: $input) { date edits { id } } }
        """
        dated = graphql_query(
            client,
            update,
            {"input": {"id": draft_id, "date": "2020-01-01T00:00:00+00:00"}},
            token=alice_token,
        )
        assert dated["data"]["updateDraft"]["date"].startswith("2020-01-01T00:00:00")

        bumped = graphql_query(
            client, update, {"input": {"id": draft_id, "content": "second"}}, token=alice_token
        )
        assert not bumped["data"]["updateDraft"]["date"].startswith("2020")
        assert len(bumped["data"]["updateDraft"]["edits"]) == 1

    def test_delete_draft_and_journal_entry(self, client: TestClient, alice_token: str):
        draft_id = graphql_query(
            client,
            'mutation { createDraft(input: {title: "Idea", content: "first"}) { id } }',
            token=alice_token,
        )["data"]["createDraft"]["id"]
        entry_id = graphql_query(
            client,
            'mutation { createJournalEntry(input: {title: "Day", content: "rain"}) { id } }',
            token=alice_token,
        )["data"]["createJournalEntry"]["id"]

        result = graphql_query(
            client,
            """
            mutation($draft: ID!, $entry: ID!) {
                deleteDraft(id: $draft)
                deleteJournalEntry(id: $entry)
            }
            """,
            {"draft": draft_id, "entry": entry_id},
            token=alice_token,
        )

        assert "errors" not in result
        assert result["data"] == {"deleteDraft": draft_id, "deleteJournalEntry": entry_id}

        remaining = graphql_query(
            client, "{ drafts { afterEdges { node { id } } } }", token=alice_token
        )
        assert remaining["data"]["drafts"]["afterEdges"] == []

    def test_other_authors_draft_is_hidden(self, client: TestClient, bob_token: str, alice_token):
        created = graphql_query(
            client,
            'mutation { createDraft(input: {title: "Idea", content: "first"}) { id } }',
            token=alice_token,
        )
        draft_id = created["data"]["createDraft"]["id"]

        result = graphql_query(
            client, "query($id: ID!) { draft(id: $id) { id } }", {"id": draft_id}, token=bob_token
        )

        assert result["data"]["draft"] is None


# =============================================================================
# Node Lookup
# =============================================================================


class TestNodeQuery:
    """Tests for polymorphic node lookup."""

    NODE = """
    query($id: ID!) {
        node(id: $id) {
            __typename
            id
            ... on AuthorType { username }
            ... on BlogPostType { title }
        }
    }
    """

    def test_author_node(self, client: TestClient, alice: Author):
        result = graphql_query(client, self.NODE, {"id": alice.id})

        assert result["data"]["node"] == {
            "__typename": "AuthorType",
            "id": alice.id,
            "username": "alice",
        }

    def test_blog_post_node(self, client: TestClient, published_post: BlogPost):
        result = graphql_query(client, self.NODE, {"id": published_post.id})

        assert result["data"]["node"] == {
            "__typename": "BlogPostType",
            "id": published_post.id,
            "title": "Hello",
        }

    def test_unknown_id(self, client: TestClient):
        result = graphql_query(client, self.NODE, {"id": "does-not-exist"})

        assert "errors" not in result
        assert result["data"]["node"] is None

    def test_edit_of_hidden_post_is_null(
        self, client: TestClient, db_session: Session, alice: Author, unpublished_post: BlogPost
    ):
        update_content(
            db_session, BLOG_POSTS, unpublished_post, alice.id, content="Still not ready"
        )
        edit_id = db_session.execute(select(Edit.id)).scalar_one()

        result = graphql_query(client, self.NODE, {"id": edit_id})

        assert result["data"]["node"] is None
