"""Tests for CommentsClient with a mocked HTTP session."""

import threading
from unittest.mock import Mock

import pytest
import requests

from blogcomments.client import CommentsClient, CommentsClientError, generate_device_token

ROWS = [
    {
        "id": 1,
        "post_id": "p1",
        "parent_id": None,
        "name": "Alice",
        "message": "Hi",
        "device_token": "tok-a",
        "hidden": False,
        "created_at": "2025-01-01T10:00:00Z",
    },
    {
        "id": 2,
        "post_id": "p1",
        "parent_id": 1,
        "name": "Bob",
        "message": "Hello",
        "device_token": "tok-b",
        "hidden": False,
        "created_at": "2025-01-01T10:05:00Z",
    },
]


def _response(payload, status_code=200):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return CommentsClient("https://blog.example/", "p1", device_token="tok-a", session=session)


class TestDeviceToken:
    def test_generated_token_is_hex(self):
        """Test that generated tokens are 32 hex characters and distinct."""
        token = generate_device_token()
        assert len(token) == 32
        int(token, 16)
        assert token != generate_device_token()

    def test_client_generates_token_when_absent(self, session):
        """Test that a client without token gets a fresh one."""
        assert len(CommentsClient("https://blog.example", "p1", session=session).device_token) == 32


class TestLoad:
    """Tests for CommentsClient.load."""

    def test_builds_tree(self, client, session):
        """Test that the flat list is fetched and nested."""
        session.request.return_value = _response(ROWS)
        roots = client.load()
        session.request.assert_called_once_with("GET", "https://blog.example/api/comments", params={"postId": "p1"})
        assert [root.id for root in roots] == [1]
        assert [reply.id for reply in roots[0].replies] == [2]
        assert client.is_owner(client.comments[0]) is True
        assert client.is_owner(client.comments[1]) is False

    def test_malformed_rows_raise_client_error(self, client, session):
        """Test that rows not shaped like comments are raised as CommentsClientError."""
        session.request.return_value = _response([{"id": "not-a-number", "name": "Alice"}])
        with pytest.raises(CommentsClientError, match="Unexpected comment data"):
            client.load()

    def test_without_post_id(self, session):
        """Test that no request is made without a post id."""
        client = CommentsClient("https://blog.example", "", session=session)
        assert client.load() == []
        session.request.assert_not_called()

    def test_http_error_raises_client_error(self, client, session):
        """Test that a failed response is raised as CommentsClientError."""
        session.request.return_value = _response({"error": "boom"}, status_code=500)
        with pytest.raises(CommentsClientError):
            client.load()

    def test_network_error_raises_client_error(self, client, session):
        """Test that connection failures are not retried."""
        session.request.side_effect = requests.ConnectionError("offline")
        with pytest.raises(CommentsClientError):
            client.load()
        assert session.request.call_count == 1


class TestSubmit:
    """Tests for CommentsClient.submit."""

    def test_posts_then_reloads(self, client, session):
        """Test that a submit sends trimmed fields and returns the fresh tree."""
        session.request.side_effect = [_response({"success": True}), _response(ROWS)]
        roots = client.submit("  Alice ", " Hi ", parent_id=None)
        post_call = session.request.call_args_list[0]
        assert post_call.args == ("POST", "https://blog.example/api/comments")
        assert post_call.kwargs["json"] == {
            "postId": "p1",
            "parentId": None,
            "name": "Alice",
            "message": "Hi",
            "deviceToken": "tok-a",
        }
        assert [root.id for root in roots] == [1]
        assert client.submitting is False

    def test_blank_input_not_sent(self, client, session):
        """Test that blank name or message is refused locally."""
        assert client.submit("  ", "Hi") is None
        assert client.submit("Alice", "\n") is None
        session.request.assert_not_called()

    def test_second_submit_refused_while_in_flight(self, client, session):
        """Test that the submitting flag blocks duplicate submissions."""
        client._submit_lock.acquire()
        try:
            assert client.submitting is True
            assert client.submit("Alice", "Hi") is None
        finally:
            client._submit_lock.release()
        session.request.assert_not_called()

    def test_concurrent_submits_send_once(self, client, session):
        """Test that a submit from another thread is refused while the first is in flight."""
        posted = threading.Event()
        release = threading.Event()

        def request(method, url, **kwargs):
            if method == "POST":
                posted.set()
                release.wait(5)
                return _response({"success": True})
            return _response(ROWS)

        session.request.side_effect = request
        worker = threading.Thread(target=client.submit, args=("Alice", "Hi"))
        worker.start()
        assert posted.wait(5)
        assert client.submit("Bob", "Hello") is None
        release.set()
        worker.join(5)
        assert [call.args[0] for call in session.request.call_args_list] == ["POST", "GET"]

    def test_flag_cleared_after_failure(self, client, session):
        """Test that a failed submit re-enables submitting."""
        session.request.return_value = _response({"error": "Missing fields"}, status_code=400)
        with pytest.raises(CommentsClientError):
            client.submit("Alice", "Hi")
        assert client.submitting is False


class TestDelete:
    def test_deletes_then_reloads(self, client, session):
        """Test that delete sends id and token and reloads."""
        session.request.side_effect = [_response({"success": True}), _response(ROWS)]
        client.delete(1)
        delete_call = session.request.call_args_list[0]
        assert delete_call.args == ("DELETE", "https://blog.example/api/comments")
        assert delete_call.kwargs["json"] == {"commentId": 1, "deviceToken": "tok-a"}
        assert session.request.call_count == 2

    def test_forbidden_raises(self, client, session):
        """Test that a 403 surfaces as CommentsClientError."""
        session.request.return_value = _response({"error": "Forbidden"}, status_code=403)
        with pytest.raises(CommentsClientError):
            client.delete(1)
