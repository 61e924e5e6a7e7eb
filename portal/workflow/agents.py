"""
LLM agents of the ICONIX pipeline.

Every agent renders its prompt template from the prompts table and sends it to
the configured chat model. Templates are read in a short-lived session of their
own so that no database transaction stays open while the model is answering.
"""
import logging
import re
from string import Template
from typing import Awaitable, Callable

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.db import DatabaseSessionManager
from portal.llms.services import LLMService
from portal.prompts.defaults import DEFAULT_PROMPTS
from portal.prompts.enums import PromptCode
from portal.prompts.services import PromptService
from portal.workflow.schemas import Issue

logger = logging.getLogger(__name__)

NO_CONTEXT = "none"
EVALUATED_MODEL_MAX_LENGTH = 50000
TRUNCATION_NOTICE = "\n\n[... truncated ...]"
NARRATIVE_PLACEHOLDERS = ("$description", "$goal", "$context")

_issues_adapter = TypeAdapter(list[Issue])


def normalize_context(context: str | None) -> str:
    return context if context and context.strip() else NO_CONTEXT


def truncate_text(text: str | None, max_length: int) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_NOTICE


def format_issues(issues: list[Issue]) -> str:
    if not issues:
        return NO_CONTEXT
    return "".join(f"- {issue.title} ⇒ {issue.suggestion} (severity={issue.severity})\n" for issue in issues)


def _clean_json_response(response: str | None) -> str:
    if not response or not response.strip():
        return "[]"
    cleaned = re.sub(r"```json\s*", "", response)
    cleaned = re.sub(r"```\s*", "", cleaned).strip()
    start, end = cleaned.find("["), cleaned.rfind("]")
    if start >= 0 and end > start:
        cleaned = cleaned[start:end + 1]
    return cleaned


def _fix_common_json_errors(payload: str) -> str:
    """Inserts the commas models tend to forget between objects and between fields."""
    payload = re.sub(r"}\s*\{", "}, {", payload)
    payload = re.sub(r'("[^"]+")\s*("[a-z]+)":', r"\1, \2:", payload, flags=re.IGNORECASE)
    payload = re.sub(r'(\d+)\s*("[a-z]+)":', r"\1, \2:", payload, flags=re.IGNORECASE)
    payload = re.sub(r'(true|false|null)\s*("[a-z]+)":', r"\1, \2:", payload, flags=re.IGNORECASE)
    return payload


def parse_issues(response: str | None) -> list[Issue]:
    """Lenient parsing of the evaluator answer. Anything unparseable yields no issues."""
    payload = _fix_common_json_errors(_clean_json_response(response))
    try:
        issues = _issues_adapter.validate_json(payload)
    except (ValidationError, ValueError) as e:
        logger.error(f"Failed to parse issues from LLM response: {e}")
        return []
    logger.info(f"Parsed {len(issues)} issues from LLM response")
    return issues


class IconixAgent:
    def __init__(
        self,
        db: DatabaseSessionManager,
        llm_service: LLMService,
        prompt_service_factory: Callable[[AsyncSession], Awaitable[PromptService]],
    ):
        self.db = db
        self.llm_service = llm_service
        self.prompt_service_factory = prompt_service_factory

    async def _template(self, code: str) -> str:
        async with self.db.session() as session:
            prompt_service = await self.prompt_service_factory(session)
            return await prompt_service.get_by_code(code)

    async def _render(self, code: str, **values: str) -> str:
        async with self.db.session() as session:
            prompt_service = await self.prompt_service_factory(session)
            return await prompt_service.render(code, **values)

    async def _complete(self, prompt: str, system_prompt: str | None = None) -> str:
        return await self.llm_service.complete(prompt, system_prompt=system_prompt)


class NarrativeWriterService(IconixAgent):
    async def compose_narrative(self, description: str, goal: str, context: str | None) -> str:
        template = await self._template(PromptCode.NARRATIVE_WRITER)
        if not all(placeholder in template for placeholder in NARRATIVE_PLACEHOLDERS):
            logger.warning("Prompt 'narrative_writer' lacks its placeholders, falling back to the built-in template")
            template = _default_template(PromptCode.NARRATIVE_WRITER)

        prompt = Template(template).safe_substitute(
            description=description or "", goal=goal or "", context=normalize_context(context)
        )
        logger.debug(f"Narrative prompt length: {len(prompt)} chars")
        return await self._complete(prompt)


class DomainModellerService(IconixAgent):
    async def generate(self, narrative: str, context: str | None) -> str:
        system_prompt = await self._template(PromptCode.DOMAIN_MODELLER_SYSTEM)
        prompt = await self._render(
            PromptCode.DOMAIN_MODELLER_GENERATE, narrative=narrative, context=normalize_context(context)
        )
        return await self._complete(prompt, system_prompt=system_prompt)

    async def refine(self, narrative: str, model: str, issues: list[Issue], context: str | None) -> str:
        system_prompt = await self._template(PromptCode.DOMAIN_MODELLER_SYSTEM)
        prompt = await self._render(
            PromptCode.DOMAIN_MODELLER_REFINE,
            narrative=narrative,
            model=model,
            issues=format_issues(issues),
            context=normalize_context(context),
        )
        return await self._complete(prompt, system_prompt=system_prompt)


class EvaluatorService(IconixAgent):
    async def evaluate_model(self, narrative: str, context: str | None, model: str) -> list[Issue]:
        prompt = await self._render(
            PromptCode.EVALUATOR_PLANTUML,
            narrative=narrative,
            context=normalize_context(context),
            model=truncate_text(model, EVALUATED_MODEL_MAX_LENGTH),
        )
        return await self._evaluate(prompt)

    async def evaluate_narrative(self, narrative: str, context: str | None) -> list[Issue]:
        prompt = await self._render(
            PromptCode.EVALUATOR_NARRATIVE, narrative=narrative, context=normalize_context(context)
        )
        return await self._evaluate(prompt)

    async def _evaluate(self, prompt: str) -> list[Issue]:
        response = await self._complete(prompt)
        logger.debug(f"Raw evaluator response: {response}")
        return parse_issues(response)


class UseCaseModellerService(IconixAgent):
    async def generate(self, narrative: str, domain_model: str, context: str | None) -> str:
        prompt = await self._render(
            PromptCode.USECASE_MODELLER,
            narrative=narrative,
            domain_model=domain_model,
            context=normalize_context(context),
        )
        return await self._complete(prompt)


class MVCModellerService(IconixAgent):
    async def generate(self, narrative: str, domain_model: str, use_case_model: str, context: str | None) -> str:
        prompt = await self._render(
            PromptCode.MVC_MODELLER,
            narrative=narrative,
            domain_model=domain_model,
            use_case_model=use_case_model,
            context=normalize_context(context),
        )
        return await self._complete(prompt)


class ScenarioWriterService(IconixAgent):
    async def generate(
        self,
        narrative: str,
        domain_model: str,
        use_case_model: str,
        mvc_model: str,
        context: str | None,
    ) -> str:
        prompt = await self._render(
            PromptCode.SCENARIO_WRITER,
            narrative=narrative,
            domain_model=domain_model,
            use_case_model=use_case_model,
            mvc_model=mvc_model,
            context=normalize_context(context),
        )
        return await self._complete(prompt)


def _default_template(code: str) -> str:
    return next(prompt["content"] for prompt in DEFAULT_PROMPTS if prompt["code"] == code)
