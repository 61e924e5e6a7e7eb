from enum import StrEnum


class LLMProvider(StrEnum):
    ANTHROPIC = "Anthropic"
    GOOGLE = "Google"
    OPENAI = "OpenAI"


class LLMModel(StrEnum):
    CLAUDE_SONNET_4_5 = "claude-sonnet-4-5"
    CLAUDE_HAIKU_4_5 = "claude-haiku-4-5"
    GEMINI_2_5_PRO = "gemini-2.5-pro"
    GEMINI_2_5_FLASH = "gemini-2.5-flash"
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4_1 = "gpt-4.1"
    GPT_4_1_MINI = "gpt-4.1-mini"
    GPT_5 = "gpt-5"
    GPT_5_MINI = "gpt-5-mini"
