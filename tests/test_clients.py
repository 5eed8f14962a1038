import httpx
import pytest
import respx
from casync.clients.auth import AccessToken, ClientCredentialAuthenticator
from casync.clients.base import HTTPRequestError
from casync.clients.graph import GraphPolicyClient, GraphRequestError
from casync.clients.ntfy import Notification, NotificationError, NtfyNotifier, Priority, Tag
from casync.core.errors import AuthenticationError
from httpx import Response
from pydantic import SecretStr

TOKEN_URL = "https://login.microsoftonline.com/tenant-id/oauth2/v2.0/token"
POLICIES_URL = "https://graph.microsoft.com/v1.0/identity/conditionalAccess/policies"


@pytest.fixture
def token():
    return AccessToken(token="abc123", expires_at=0.0)


class TestClientCredentialAuthenticator:
    def test_success(self):
        with respx.mock:
            route = respx.post(TOKEN_URL).mock(
                return_value=Response(
                    200,
                    json={"access_token": "abc123", "expires_in": 3599, "token_type": "Bearer"},
                )
            )

            token = ClientCredentialAuthenticator().authenticate(
                "client-id", SecretStr("s3cret"), "tenant-id"
            )

        assert token.authorization == "Bearer abc123"
        form = route.calls.last.request.content.decode()
        assert "grant_type=client_credentials" in form
        assert "client_secret=s3cret" in form
        assert "scope=https%3A%2F%2Fgraph.microsoft.com%2F.default" in form

    def test_rejected_credentials_are_fatal(self):
        with respx.mock:
            respx.post(TOKEN_URL).mock(
                return_value=Response(
                    401,
                    json={"error": "invalid_client", "error_description": "bad secret"},
                )
            )

            with pytest.raises(AuthenticationError) as exc_info:
                ClientCredentialAuthenticator().authenticate("client-id", "wrong", "tenant-id")

        assert "invalid_client: bad secret" in exc_info.value.message
        assert exc_info.value.details["status"] == 401

    def test_network_failure_is_fatal(self):
        with respx.mock:
            respx.post(TOKEN_URL).mock(side_effect=httpx.ConnectError("unreachable"))

            with pytest.raises(AuthenticationError):
                ClientCredentialAuthenticator().authenticate("client-id", "secret", "tenant-id")

    def test_missing_access_token(self):
        with respx.mock:
            respx.post(TOKEN_URL).mock(return_value=Response(200, json={"expires_in": 10}))

            with pytest.raises(AuthenticationError):
                ClientCredentialAuthenticator().authenticate("client-id", "secret", "tenant-id")

    def test_empty_credentials_rejected_without_request(self):
        with respx.mock:
            route = respx.post(TOKEN_URL)

            with pytest.raises(AuthenticationError):
                ClientCredentialAuthenticator().authenticate("client-id", "", "tenant-id")

            assert route.call_count == 0


class TestGraphPolicyClient:
    def test_list_follows_next_link(self, token):
        next_url = f"{POLICIES_URL}?$skiptoken=page2"
        with respx.mock:
            route = respx.get(url__startswith=POLICIES_URL)
            route.side_effect = [
                Response(
                    200,
                    json={
                        "value": [{"id": "1", "displayName": "GH - A"}],
                        "@odata.nextLink": next_url,
                    },
                ),
                Response(200, json={"value": [{"id": "2", "displayName": "GH - B"}]}),
            ]

            policies = GraphPolicyClient(token).list_policies()

        assert [p["id"] for p in policies] == ["1", "2"]
        assert route.call_count == 2
        assert route.calls.last.request.headers["Authorization"] == "Bearer abc123"

    def test_create_update_delete(self, token):
        client = GraphPolicyClient(token)
        payload = {"displayName": "GH - C", "state": "disabled"}
        with respx.mock:
            create = respx.post(POLICIES_URL).mock(
                return_value=Response(201, json={"id": "3", "displayName": "GH - C"})
            )
            update = respx.patch(f"{POLICIES_URL}/1").mock(return_value=Response(204))
            delete = respx.delete(f"{POLICIES_URL}/2").mock(return_value=Response(204))

            created = client.create_policy(payload)
            client.update_policy("1", payload)
            client.delete_policy("2")

        assert created["id"] == "3"
        assert create.call_count == update.call_count == delete.call_count == 1

    def test_error_detail_from_graph_body(self, token):
        with respx.mock:
            respx.delete(f"{POLICIES_URL}/2").mock(
                return_value=Response(
                    404,
                    json={"error": {"code": "ResourceNotFound", "message": "Policy not found"}},
                )
            )

            with pytest.raises(GraphRequestError) as exc_info:
                GraphPolicyClient(token).delete_policy("2")

        error = exc_info.value
        assert isinstance(error, HTTPRequestError)
        assert error.status_code == 404
        assert str(error) == "HTTP 404: ResourceNotFound: Policy not found"

    def test_non_json_success_body_is_a_request_error(self, token):
        with respx.mock:
            respx.post(POLICIES_URL).mock(return_value=Response(201, text="Created"))

            with pytest.raises(GraphRequestError) as exc_info:
                GraphPolicyClient(token).create_policy({"displayName": "GH - C"})

        assert exc_info.value.status_code == 201
        assert "not JSON" in exc_info.value.message

    def test_no_retry_on_server_error(self, token):
        with respx.mock:
            route = respx.post(POLICIES_URL).mock(return_value=Response(503, text="busy"))

            with pytest.raises(GraphRequestError):
                GraphPolicyClient(token).create_policy({"displayName": "GH - C"})

        assert route.call_count == 1


class TestNtfyNotifier:
    URL = "https://ntfy.example.com/ca-deploy"

    def test_send_sets_headers_and_body(self):
        notification = Notification(
            title="Conditional Access Deployment Successful",
            priority=Priority.DEFAULT,
            tags=Tag.SUCCESS,
            body="Created: 1",
        )
        with respx.mock:
            route = respx.post(self.URL).mock(return_value=Response(200, json={"id": "m1"}))

            NtfyNotifier(self.URL).send(notification)

        request = route.calls.last.request
        assert request.headers["Title"] == "Conditional Access Deployment Successful"
        assert request.headers["Priority"] == "default"
        assert request.headers["Tags"] == "white_check_mark"
        assert request.content == b"Created: 1"

    def test_send_failure_raises_notification_error(self):
        notification = Notification("t", Priority.HIGH, Tag.WARNING, "body")
        with respx.mock:
            respx.post(self.URL).mock(return_value=Response(500, text="down"))

            with pytest.raises(NotificationError) as exc_info:
                NtfyNotifier(self.URL).send(notification)

        assert "Failed to send notification" in str(exc_info.value)
