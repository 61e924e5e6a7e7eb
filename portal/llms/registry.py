from typing import Union

from async_lru import alru_cache
from llama_index.embeddings.openai import OpenAIEmbedding
from llama_index.llms.anthropic import Anthropic
from llama_index.llms.google_genai import GoogleGenAI
from llama_index.llms.openai import OpenAI

from portal.llms.domain import LLM
from portal.llms.enums import LLMModel, LLMProvider
from portal.llms.exceptions import UnsupportedLLMModelException


class LLMFactory:
    _MODEL_REGISTRY: dict[LLMModel, LLM] = {
        # Anthropic
        LLMModel.CLAUDE_SONNET_4_5: LLM(
            model_name=LLMModel.CLAUDE_SONNET_4_5, provider=LLMProvider.ANTHROPIC, default_context_window=200000
        ),
        LLMModel.CLAUDE_HAIKU_4_5: LLM(
            model_name=LLMModel.CLAUDE_HAIKU_4_5, provider=LLMProvider.ANTHROPIC, default_context_window=200000
        ),
        # Google
        LLMModel.GEMINI_2_5_PRO: LLM(
            model_name=LLMModel.GEMINI_2_5_PRO, provider=LLMProvider.GOOGLE, default_context_window=1000000
        ),
        LLMModel.GEMINI_2_5_FLASH: LLM(
            model_name=LLMModel.GEMINI_2_5_FLASH, provider=LLMProvider.GOOGLE, default_context_window=1000000
        ),
        # OpenAI
        LLMModel.GPT_4O: LLM(model_name=LLMModel.GPT_4O, provider=LLMProvider.OPENAI, default_context_window=128000),
        LLMModel.GPT_4O_MINI: LLM(
            model_name=LLMModel.GPT_4O_MINI, provider=LLMProvider.OPENAI, default_context_window=128000
        ),
        LLMModel.GPT_4_1: LLM(model_name=LLMModel.GPT_4_1, provider=LLMProvider.OPENAI, default_context_window=1000000),
        LLMModel.GPT_4_1_MINI: LLM(
            model_name=LLMModel.GPT_4_1_MINI, provider=LLMProvider.OPENAI, default_context_window=1000000
        ),
        LLMModel.GPT_5: LLM(model_name=LLMModel.GPT_5, provider=LLMProvider.OPENAI, default_context_window=400000),
        LLMModel.GPT_5_MINI: LLM(model_name=LLMModel.GPT_5_MINI, provider=LLMProvider.OPENAI,
                                 default_context_window=400000),
    }

    async def get_llm(self, model_name: str) -> LLM:
        try:
            return self._MODEL_REGISTRY[LLMModel(model_name)]
        except (KeyError, ValueError):
            raise UnsupportedLLMModelException(f"Unsupported LLM model: {model_name}")

    @alru_cache
    async def get_client(
        self,
        model_name: LLMModel,
        provider: LLMProvider,
        temperature: float,
        api_key: str,
        api_base: str | None = None,
    ) -> Union[OpenAI, Anthropic, GoogleGenAI]:
        """
        Initialized LlamaIndex client for the model. Cached per argument set on the
        process-wide factory instance.
        """
        if provider == LLMProvider.OPENAI:
            return OpenAI(model=model_name, temperature=temperature, api_key=api_key, api_base=api_base)
        elif provider == LLMProvider.ANTHROPIC:
            return Anthropic(model=model_name, temperature=temperature, api_key=api_key)
        elif provider == LLMProvider.GOOGLE:
            return GoogleGenAI(model=model_name, temperature=temperature, api_key=api_key)
        else:
            raise ValueError(f"Unsupported LLM provider: {provider}")

    @alru_cache
    async def get_embedding_client(self, model_name: str, api_key: str, api_base: str | None = None) -> OpenAIEmbedding:
        return OpenAIEmbedding(model=model_name, api_key=api_key, api_base=api_base)
