"""Root test configuration."""

import json
import logging

import pytest
import structlog
from casync.clients.graph import GraphRequestError


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


REQUIRED_ENV = {
    "AZURE_CLIENT_ID": "client-id",
    "AZURE_CLIENT_SECRET": "client-secret",
    "AZURE_TENANT_ID": "tenant-id",
    "NTFY_URL": "https://ntfy.example.com/ca-deploy",
    "WORKFLOW_NAME": "Deploy Conditional Access Policies",
    "RUN_ID": "4242",
}


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Complete environment, with no stray .env file in the working directory."""
    monkeypatch.chdir(tmp_path)
    for key, value in REQUIRED_ENV.items():
        monkeypatch.setenv(key, value)
    for key in ("POLICIES_DIR", "MANAGED_PREFIX", "GRAPH_BASE_URL", "LOGIN_BASE_URL"):
        monkeypatch.delenv(key, raising=False)
    return dict(REQUIRED_ENV)


def _policy_body(name, state="enabled", **extra):
    body = {
        "displayName": name,
        "state": state,
        "conditions": {
            "users": {"includeUsers": ["All"]},
            "applications": {"includeApplications": ["All"]},
        },
        "grantControls": {"operator": "OR", "builtInControls": ["mfa"]},
        "sessionControls": None,
    }
    body.update(extra)
    return body


@pytest.fixture
def policy_body():
    return _policy_body


@pytest.fixture
def policies_dir(tmp_path):
    directory = tmp_path / "policies"
    directory.mkdir()
    return directory


@pytest.fixture
def write_definition(policies_dir):
    """Write a definition file; pass a dict for JSON or a str for raw content."""

    def _write(filename, content):
        path = policies_dir / filename
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


class FakePolicyClient:
    """In-memory stand-in for GraphPolicyClient.

    ``fail_on`` holds ``(operation, key)`` pairs; the key is the display name
    for creates and the policy id for updates and deletes.
    """

    def __init__(self, policies=None, fail_on=()):
        self.policies = [dict(p) for p in (policies or [])]
        self.fail_on = set(fail_on)
        self.calls = []
        self._next_id = 100

    def list_policies(self):
        return [dict(p) for p in self.policies]

    def create_policy(self, payload):
        self.calls.append(("create", payload["displayName"], payload))
        if ("create", payload["displayName"]) in self.fail_on:
            raise GraphRequestError("BadRequest: invalid conditions", status_code=400)
        self._next_id += 1
        created = dict(payload, id=str(self._next_id))
        self.policies.append(created)
        return created

    def update_policy(self, policy_id, payload):
        self.calls.append(("update", policy_id, payload))
        if ("update", policy_id) in self.fail_on:
            raise GraphRequestError("Forbidden: insufficient privileges", status_code=403)
        for policy in self.policies:
            if policy["id"] == policy_id:
                policy.update(payload)

    def delete_policy(self, policy_id):
        self.calls.append(("delete", policy_id, None))
        if ("delete", policy_id) in self.fail_on:
            raise GraphRequestError("NotFound: policy not found", status_code=404)
        self.policies = [p for p in self.policies if p["id"] != policy_id]


@pytest.fixture
def make_client():
    return FakePolicyClient
