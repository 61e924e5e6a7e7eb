import logging
from typing import Union

from llama_index.core.llms import ChatMessage, MessageRole
from llama_index.embeddings.openai import OpenAIEmbedding
from llama_index.llms.anthropic import Anthropic
from llama_index.llms.google_genai import GoogleGenAI
from llama_index.llms.openai import OpenAI

from portal.core.config import Settings
from portal.llms.domain import LLM
from portal.llms.enums import LLMProvider
from portal.llms.exceptions import MissingAPIKeyException
from portal.llms.registry import LLMFactory

logger = logging.getLogger(__name__)


class LLMService:
    def __init__(self, settings: Settings, llm_factory: LLMFactory):
        self.settings = settings
        self.llm_factory = llm_factory

    async def get_model_metadata(self, model_name: str | None = None) -> LLM:
        return await self.llm_factory.get_llm(model_name or self.settings.LLM_MODEL)

    def _get_api_key(self, provider: LLMProvider) -> str:
        api_key = {
            LLMProvider.OPENAI: self.settings.OPENAI_API_KEY,
            LLMProvider.ANTHROPIC: self.settings.ANTHROPIC_API_KEY,
            LLMProvider.GOOGLE: self.settings.GOOGLE_API_KEY,
        }.get(provider)
        if not api_key:
            raise MissingAPIKeyException(f"No API key configured for provider {provider}.")
        return api_key

    async def get_client(
        self, model_name: str | None = None, temperature: float | None = None
    ) -> Union[OpenAI, Anthropic, GoogleGenAI]:
        """
        Hydrates a client using the configured model, temperature and provider key.
        """
        llm_metadata = await self.get_model_metadata(model_name)
        api_key = self._get_api_key(llm_metadata.provider)
        if temperature is None:
            temperature = self.settings.LLM_TEMPERATURE

        return await self.llm_factory.get_client(
            llm_metadata.model_name, llm_metadata.provider, temperature, api_key, self.settings.OPENAI_API_BASE
        )

    async def complete(self, prompt: str, system_prompt: str | None = None, temperature: float | None = None) -> str:
        """Single-turn chat call returning the text of the answer."""
        client = await self.get_client(temperature=temperature)
        messages = []
        if system_prompt:
            messages.append(ChatMessage(role=MessageRole.SYSTEM, content=system_prompt))
        messages.append(ChatMessage(role=MessageRole.USER, content=prompt))

        logger.debug(f"LLM call: {len(prompt)} prompt chars")
        response = await client.achat(messages)
        return response.message.content or ""

    async def get_embedding_model(self) -> OpenAIEmbedding:
        api_key = self._get_api_key(LLMProvider.OPENAI)
        return await self.llm_factory.get_embedding_client(
            self.settings.EMBEDDING_MODEL, api_key, self.settings.OPENAI_API_BASE
        )
