import pytest

from identity_console.core.exceptions import AccountNotFoundError
from identity_console.models.job import OperationResult, OperationStatus
from identity_console.services.job_service import JobService
from identity_console.services.job_store import JobStore

TICK = 0.01


class FakeIdentityClient:
    """Records submit calls; emails listed in `failing` come back as errors."""

    def __init__(self, failing=(), on_submit=None):
        self.calls = []
        self.failing = set(failing)
        self.on_submit = on_submit

    async def submit(self, record, credential, send_invites):
        self.calls.append((record.email, credential, send_invites))
        if self.on_submit is not None:
            await self.on_submit(record, len(self.calls) - 1)
        if record.email in self.failing:
            return OperationResult(email=record.email, status=OperationStatus.ERROR, message="Email taken")
        return OperationResult(
            email=record.email,
            status=OperationStatus.SUCCESS,
            message="Invitation sent" if send_invites else "User created",
            user_id=f"user_{len(self.calls)}"
        )


class FakeCredentials:
    def __init__(self, secrets=None):
        self.secrets = secrets if secrets is not None else {"acct-1": "sk_one", "acct-2": "sk_two"}

    def get_credential(self, account_id):
        if account_id not in self.secrets:
            raise AccountNotFoundError(account_id)
        return self.secrets[account_id]


@pytest.fixture
def fake_client():
    return FakeIdentityClient()


@pytest.fixture
def fake_credentials():
    return FakeCredentials()


@pytest.fixture
def job_store():
    return JobStore()


@pytest.fixture
def job_service(job_store, fake_client, fake_credentials):
    return JobService(job_store, fake_client, fake_credentials, tick_seconds=TICK)


@pytest.fixture
def make_client():
    return FakeIdentityClient


@pytest.fixture
def make_service(job_store, fake_credentials):
    def _make(client=None, **kwargs):
        kwargs.setdefault("tick_seconds", TICK)
        return JobService(job_store, client or FakeIdentityClient(), fake_credentials, **kwargs)

    return _make
