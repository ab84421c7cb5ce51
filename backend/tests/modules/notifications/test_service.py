import pytest
from unittest.mock import AsyncMock, MagicMock

from modules.notifications.interfaces import INotificationService
from modules.notifications.service import NotificationService
from shared.exceptions import ExternalServiceError


def make_service(client, verification_tokens, **overrides):
    options = {
        "verification_url": "http://app.test/verify",
        "verification_token_ttl": 86400,
        "verification_template_id": 3,
        "sender_email": "no-reply@identa.test",
        "sender_name": "Identa",
        "contacts_list_id": 7,
    }
    options.update(overrides)
    return NotificationService(client, verification_tokens, **options)


@pytest.fixture
def brevo():
    client = MagicMock()
    client.create_contact = AsyncMock()
    client.send_template_email = AsyncMock()
    return client


class TestNotificationService:
    def test_implements_interface(self, brevo, verification_tokens):
        assert isinstance(make_service(brevo, verification_tokens), INotificationService)

    def test_enabled_only_with_client(self, brevo, verification_tokens):
        assert make_service(brevo, verification_tokens).enabled
        assert not make_service(None, verification_tokens).enabled

    @pytest.mark.asyncio
    async def test_register_contact(self, brevo, verification_tokens):
        await make_service(brevo, verification_tokens).register_contact("c-1", "ada@example.com")
        brevo.create_contact.assert_awaited_once_with("ada@example.com", ext_id="c-1", list_ids=[7])

    @pytest.mark.asyncio
    async def test_register_contact_without_list(self, brevo, verification_tokens):
        service = make_service(brevo, verification_tokens, contacts_list_id=None)
        await service.register_contact("c-1", "ada@example.com")
        assert brevo.create_contact.call_args.kwargs["list_ids"] == []

    @pytest.mark.asyncio
    async def test_register_contact_disabled(self, verification_tokens):
        await make_service(None, verification_tokens).register_contact("c-1", "ada@example.com")

    @pytest.mark.asyncio
    async def test_send_email_verification(self, brevo, verification_tokens):
        token = await make_service(brevo, verification_tokens).send_email_verification(
            "Ada", "ada@example.com"
        )

        assert verification_tokens.tokens[token] == "ada@example.com"
        kwargs = brevo.send_template_email.call_args.kwargs
        assert kwargs["to_email"] == "ada@example.com"
        assert kwargs["template_id"] == 3
        assert kwargs["params"]["verification_link"] == f"http://app.test/verify?token={token}"
        assert kwargs["params"]["greetings_title"] == "Hi Ada"

    @pytest.mark.asyncio
    async def test_disabled_still_issues_token(self, verification_tokens):
        """Verification keeps working without the email integration."""
        token = await make_service(None, verification_tokens).send_email_verification(
            "Ada", "ada@example.com"
        )
        assert verification_tokens.tokens[token] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_send_failure_propagates(self, brevo, verification_tokens):
        brevo.send_template_email.side_effect = ExternalServiceError("down", service="brevo")
        with pytest.raises(ExternalServiceError):
            await make_service(brevo, verification_tokens).send_email_verification("Ada", "ada@example.com")

    def test_verification_link_with_existing_query(self, brevo, verification_tokens):
        service = make_service(brevo, verification_tokens, verification_url="http://app.test/verify?lang=en")
        assert service.verification_link("abc") == "http://app.test/verify?lang=en&token=abc"
