"""Base class for tools exposed to the conversational agent runtime."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from langchain_core.tools import StructuredTool
from loguru import logger
from pydantic import BaseModel

InputT = TypeVar("InputT", bound=BaseModel)


class ToolContext(BaseModel):
    """Conversation scope a tool call runs in."""

    tenant_id: str
    session_id: str
    customer_id: str | None = None
    correlation_id: str


class ToolResult(BaseModel):
    """Outcome reported back to the agent. Tools never raise."""

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def ok(cls, **data: Any) -> "ToolResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)


class BaseTool(ABC, Generic[InputT]):
    """Abstract base class for agent tools."""

    name: str
    description: str
    input_schema: type[InputT]
    mutates: bool = False

    @abstractmethod
    async def execute(self, input: InputT, context: ToolContext) -> ToolResult:
        """Run the tool for one agent call."""

    async def invoke(self, raw_input: dict[str, Any], context: ToolContext) -> ToolResult:
        """Validate raw arguments from the model, then execute."""
        try:
            parsed = self.input_schema.model_validate(raw_input)
        except ValueError as e:
            return ToolResult.fail(f"Invalid arguments for {self.name}: {e}")

        result = await self.execute(parsed, context)
        if self.mutates:
            logger.info(
                f"Tool {self.name} (mutating) session={context.session_id} "
                f"correlation={context.correlation_id} success={result.success}"
            )
        else:
            logger.debug(f"Tool {self.name} session={context.session_id} success={result.success}")
        return result

    def as_langchain_tool(self, context: ToolContext) -> StructuredTool:
        """Bind the tool to a conversation and expose it to a LangChain agent."""

        async def _run(**kwargs: Any) -> dict[str, Any]:
            result = await self.invoke(kwargs, context)
            return result.model_dump(exclude_none=True)

        return StructuredTool.from_function(
            coroutine=_run,
            name=self.name,
            description=self.description,
            args_schema=self.input_schema,
        )
