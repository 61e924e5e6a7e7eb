import json
import logging
import re
import uuid
from typing import Awaitable, Callable, Sequence

from llama_index.core.llms import ChatMessage as LLMChatMessage
from llama_index.core.tools import BaseTool
from sqlalchemy.ext.asyncio import AsyncSession

from portal.chat.enums import MessageRole
from portal.chat.models import ChatMessage
from portal.chat.repositories import ChatMessageRepository
from portal.chat.schemas import (
    ChatHistoryMessage,
    ChatMessageCreate,
    ChatRequest,
    ChatResponse,
    DiagramInfo,
    ToolCallInfo,
)
from portal.core.db import DatabaseSessionManager
from portal.llms.services import LLMService
from portal.prompts.enums import PromptCode
from portal.prompts.services import PromptService
from portal.rag.services import RagService
from portal.workflow.exceptions import WorkflowSessionNotFoundException
from portal.workflow.services import WorkflowSessionService

logger = logging.getLogger(__name__)

MAX_TOOL_ITERATIONS = 5
HISTORY_LIMIT = 3
RAG_TOP_K = 3
SESSION_NARRATIVE_MAX_LENGTH = 500
MAX_ITERATIONS_MESSAGE = "Maximum number of tool calling iterations reached."

DIAGRAM_PATTERN = re.compile(r"```(?:plantuml|puml)[^\n]*\n(.*?)```", re.DOTALL)
DIAGRAM_TITLES = {
    "generate_domain_model": "Domain Model",
    "generate_use_case_diagram": "Use Case Diagram",
    "generate_mvc_diagram": "MVC Diagram",
    "generate_scenario": "Sequence Diagram",
}


def extract_diagrams(tool_name: str, tool_result: str | None, start_index: int = 0) -> list[DiagramInfo]:
    """PlantUML code of the ```plantuml and ```puml blocks of a tool result."""
    if not tool_result:
        return []
    diagrams = []
    for match in DIAGRAM_PATTERN.finditer(tool_result):
        title = DIAGRAM_TITLES.get(tool_name, f"Diagram {start_index + len(diagrams) + 1}")
        diagrams.append(DiagramInfo(title=title, code=match.group(1).strip()))
    return diagrams


def _truncate(text: str, max_length: int) -> str:
    return text if len(text) <= max_length else text[:max_length] + "..."


class ChatHistoryService:
    def __init__(self, message_repo: ChatMessageRepository):
        self.message_repo = message_repo

    async def add_message(self, message_in: ChatMessageCreate) -> ChatMessage:
        return await self.message_repo.create(obj_in=message_in)

    async def get_recent_messages(self, limit: int = HISTORY_LIMIT) -> list[ChatHistoryMessage]:
        """The last `limit` messages in chronological order. Tool results are reported as assistant messages."""
        messages = list(reversed(await self.message_repo.list_latest(limit)))
        return [
            ChatHistoryMessage(
                role="user" if message.role == MessageRole.USER else "assistant",
                content=message.content or "",
                timestamp=message.created_at,
            )
            for message in messages
        ]


class ToolCallingChatService:
    """
    Chat with the configured LLM that may call the portal tools.

    Every message of the exchange (user, assistant and tool results) is saved
    in its own transaction, the LLM is called without a session open.
    """

    def __init__(
        self,
        db: DatabaseSessionManager,
        llm_service: LLMService,
        tools: Sequence[BaseTool],
        history_service_factory: Callable[[AsyncSession], Awaitable[ChatHistoryService]],
        prompt_service_factory: Callable[[AsyncSession], Awaitable[PromptService]],
        rag_service_factory: Callable[[AsyncSession], Awaitable[RagService]],
        session_service_factory: Callable[[AsyncSession], Awaitable[WorkflowSessionService]],
    ):
        self.db = db
        self.llm_service = llm_service
        self.tools = list(tools)
        self.history_service_factory = history_service_factory
        self.prompt_service_factory = prompt_service_factory
        self.rag_service_factory = rag_service_factory
        self.session_service_factory = session_service_factory

    async def process_message(self, request_in: ChatRequest) -> ChatResponse:
        conversation_id = (request_in.conversation_id or "").strip() or str(uuid.uuid4())
        logger.info(f"Processing chat message with tool calling. conversationId: {conversation_id}")

        await self._save(ChatMessageCreate(role=MessageRole.USER, content=request_in.message, conversation_id=conversation_id))

        system_prompt = await self._build_system_prompt(request_in.message, request_in.workflow_session_id)
        messages = [LLMChatMessage(role="system", content=system_prompt)]
        for item in request_in.history or []:
            if item.role in (MessageRole.USER, MessageRole.ASSISTANT):
                messages.append(LLMChatMessage(role=item.role, content=item.content))
        messages.append(LLMChatMessage(role="user", content=request_in.message))

        tool_calls: list[ToolCallInfo] = []
        diagrams: list[DiagramInfo] = []
        final_response = None

        for iteration in range(1, MAX_TOOL_ITERATIONS + 1):
            logger.debug(f"Tool calling iteration {iteration}")
            try:
                llm = await self.llm_service.get_client()
                response = await llm.achat_with_tools(self.tools, chat_history=messages)
                selections = llm.get_tool_calls_from_response(response, error_on_no_tool_call=False)
                content = response.message.content or ""

                if not selections:
                    final_response = content
                    await self._save(
                        ChatMessageCreate(role=MessageRole.ASSISTANT, content=content, conversation_id=conversation_id)
                    )
                    break

                logger.info(f"LLM requested {len(selections)} tool calls")
                await self._save(
                    ChatMessageCreate(
                        role=MessageRole.ASSISTANT,
                        content=content,
                        tool_calls=[
                            {"id": s.tool_id, "name": s.tool_name, "arguments": json.dumps(s.tool_kwargs)}
                            for s in selections
                        ],
                        conversation_id=conversation_id,
                    )
                )
                messages.append(response.message)

                for selection in selections:
                    logger.info(f"Executing tool: {selection.tool_name} with id: {selection.tool_id}")
                    result = await self._call_tool(selection.tool_name, selection.tool_kwargs)
                    await self._save(
                        ChatMessageCreate(
                            role=MessageRole.TOOL,
                            content=result,
                            tool_call_id=selection.tool_id,
                            tool_name=selection.tool_name,
                            conversation_id=conversation_id,
                        )
                    )
                    messages.append(
                        LLMChatMessage(
                            role="tool",
                            content=result,
                            additional_kwargs={"tool_call_id": selection.tool_id, "name": selection.tool_name},
                        )
                    )
                    tool_calls.append(
                        ToolCallInfo(
                            id=selection.tool_id,
                            name=selection.tool_name,
                            arguments=json.dumps(selection.tool_kwargs),
                            result=result,
                        )
                    )
                    diagrams.extend(extract_diagrams(selection.tool_name, result, len(diagrams)))

            except Exception as e:
                logger.error("Error in tool calling iteration", exc_info=True)
                final_response = f"An error occurred while processing the request: {e}"
                break

        if final_response is None:
            final_response = MAX_ITERATIONS_MESSAGE

        return ChatResponse(
            response=final_response, tool_calls=tool_calls, diagrams=diagrams, conversation_id=conversation_id
        )

    async def _call_tool(self, tool_name: str, tool_kwargs: dict) -> str:
        tool = next((t for t in self.tools if t.metadata.name == tool_name), None)
        if tool is None:
            return f"Unknown tool: {tool_name}"
        try:
            output = await tool.acall(**tool_kwargs)
        except Exception as e:
            logger.error(f"Error executing tool: {tool_name}", exc_info=True)
            return f"Error executing tool {tool_name}: {e}"
        return output.content

    async def _build_system_prompt(self, user_message: str, workflow_session_id: str | None) -> str:
        async with self.db.session() as session:
            prompt_service = await self.prompt_service_factory(session)
            parts = [await prompt_service.get_by_code(PromptCode.CHAT_SYSTEM)]

        async with self.db.session() as session:
            rag_service = await self.rag_service_factory(session)
            rag = await rag_service.retrieve_context(user_message, RAG_TOP_K)
        if rag.fragments_count > 0:
            parts.append(f"=== Documentation context ===\n{rag.text}")

        if workflow_session_id and workflow_session_id.strip():
            try:
                async with self.db.session() as session:
                    session_service = await self.session_service_factory(session)
                    artifacts = (await session_service.get_session_data(workflow_session_id)).artifacts
            except WorkflowSessionNotFoundException:
                logger.debug(f"Workflow session {workflow_session_id} not found, no session context added")
            else:
                section = f"=== Current workflow session: {workflow_session_id} ==="
                narrative = artifacts.get("narrative")
                if narrative and narrative.strip():
                    section += f"\nNarrative: {_truncate(narrative, SESSION_NARRATIVE_MAX_LENGTH)}"
                parts.append(section)

        return "\n\n".join(parts)

    async def _save(self, message_in: ChatMessageCreate) -> None:
        async with self.db.session() as session:
            history_service = await self.history_service_factory(session)
            await history_service.add_message(message_in)
