"""
Azure credentials for the Azure OpenAI provider when managed identity is enabled.
"""

from azure.identity.aio import (
    DefaultAzureCredential as AsyncDefaultAzureCredential,
    AzureCliCredential as AsyncAzureCliCredential,
    ChainedTokenCredential as AsyncChainedTokenCredential
)

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"


class AzureCredentials:
    """Centralized credential management for Azure services."""

    @staticmethod
    def get_async_credentials():
        """
        Get credentials for Azure services (async version).
        Uses ChainedTokenCredential to try CLI first, then fallback to DefaultAzureCredential.

        Returns:
            AsyncChainedTokenCredential with CLI and DefaultAzureCredential
        """
        return AsyncChainedTokenCredential(
            AsyncAzureCliCredential(),
            AsyncDefaultAzureCredential()
        )
