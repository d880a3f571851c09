from types import SimpleNamespace

import pytest

from ballknowledge.config.settings import InferenceConfig
from ballknowledge.exceptions import ConfigurationException, UpstreamError
from ballknowledge.providers import (
    AzureVisionProvider,
    OpenAIVisionProvider,
    ProviderFactory,
    VisionInferenceService,
)
from ballknowledge.providers.messages import SYSTEM_PROMPT, build_messages, response_text


class FakeCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.reply


def fake_client(completions):
    async def close():
        completions.closed = True

    return SimpleNamespace(chat=SimpleNamespace(completions=completions), close=close)


def chat_reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_messages_put_instructions_before_images():
    messages = build_messages("Rate this player", ["https://x/clip.mp4#t=0.0", "https://x/clip.mp4#t=10.0"])

    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    parts = messages[1]["content"]
    assert parts[0] == {"type": "text", "text": "Rate this player"}
    assert [p["image_url"]["url"] for p in parts[1:]] == ["https://x/clip.mp4#t=0.0", "https://x/clip.mp4#t=10.0"]


@pytest.mark.parametrize("response", [SimpleNamespace(choices=[]), chat_reply(None), None])
def test_empty_response_text(response):
    assert response_text(response) == ""


def test_openai_provider_requires_key():
    with pytest.raises(ConfigurationException):
        OpenAIVisionProvider({"api_key": None})


async def test_openai_provider_sends_one_request():
    provider = OpenAIVisionProvider({"api_key": "sk-test", "model_name": "gpt-4o-mini"})
    completions = FakeCompletions(reply=chat_reply('{"summary": "ok"}'))
    provider.client = fake_client(completions)

    text = await provider.complete("Rate", ["https://x/c.mp4#t=0.0"], temperature=0.3, max_output_tokens=4000)

    assert text == '{"summary": "ok"}'
    assert completions.kwargs["model"] == "gpt-4o-mini"
    assert completions.kwargs["temperature"] == 0.3
    assert completions.kwargs["max_completion_tokens"] == 4000
    assert len(completions.kwargs["messages"][1]["content"]) == 2

    await provider.close()
    assert completions.closed is True


async def test_openai_provider_wraps_sdk_errors():
    class RateLimited(Exception):
        status_code = 429

    provider = OpenAIVisionProvider({"api_key": "sk-test"})
    provider.client = fake_client(FakeCompletions(error=RateLimited("slow down")))

    with pytest.raises(UpstreamError) as exc_info:
        await provider.complete("Rate", [], temperature=0.3, max_output_tokens=10)

    details = exc_info.value.details
    assert details["provider"] == "openai"
    assert details["status_code"] == 429
    assert details["original_exception"] == "RateLimited"


@pytest.mark.parametrize(
    "config",
    [
        {"endpoint": None, "deployment_name": "vision", "api_key": "k"},
        {"endpoint": "https://res.openai.azure.com", "deployment_name": None, "api_key": "k"},
        {"endpoint": "https://res.openai.azure.com", "deployment_name": "vision", "api_key": None},
    ],
)
def test_azure_provider_configuration_errors(config):
    with pytest.raises(ConfigurationException):
        AzureVisionProvider(config)


async def test_azure_provider_uses_deployment_as_model():
    provider = AzureVisionProvider(
        {"endpoint": "https://res.openai.azure.com", "deployment_name": "vision-prod", "api_key": "k"}
    )
    completions = FakeCompletions(reply=chat_reply("{}"))
    provider.client = fake_client(completions)

    assert await provider.complete("Rate", [], temperature=0.1, max_output_tokens=50) == "{}"
    assert completions.kwargs["model"] == "vision-prod"


def test_factory_returns_none_without_credentials():
    config = InferenceConfig(provider="openai", api_key=None)
    assert ProviderFactory.create_vision_service(config) is None


def test_factory_builds_openai_provider():
    config = InferenceConfig(provider="OpenAI", api_key="sk-test")
    assert isinstance(ProviderFactory.create_vision_service(config), OpenAIVisionProvider)


def test_factory_rejects_unknown_provider():
    with pytest.raises(ConfigurationException) as exc_info:
        ProviderFactory.create_vision_service(InferenceConfig(provider="gemini", api_key="k"))
    assert exc_info.value.error_code == "CONFIGURATION_ERROR"


def test_factory_registration(monkeypatch):
    class EchoService(VisionInferenceService):
        def __init__(self, config):
            self.config = config

        async def complete(self, instructions, visual_references, *, temperature, max_output_tokens):
            return "{}"

        async def close(self):
            pass

    monkeypatch.setattr(ProviderFactory, "_vision_providers", dict(ProviderFactory._vision_providers))
    ProviderFactory.register_vision_provider("Echo", EchoService)

    assert "echo" in ProviderFactory.get_supported_providers()
    service = ProviderFactory.create_vision_service(InferenceConfig(provider="echo"))
    assert isinstance(service, EchoService)
    assert service.config["provider"] == "echo"
