"""Agent tools for generating a PDF catalog and sending it over chat."""

from __future__ import annotations

from loguru import logger
from pydantic import BaseModel, Field

from artifacthandoff.application.ports.recipient_directory import RecipientDirectory
from artifacthandoff.application.ports.workspace_directory import WorkspaceDirectory
from artifacthandoff.application.tools.base import BaseTool, ToolContext, ToolResult
from artifacthandoff.application.use_cases.dispatch_artifact import DeliveryDispatcher
from artifacthandoff.application.use_cases.produce_artifact import ArtifactProducer
from artifacthandoff.domain.errors import HandoffError, RecipientNotFound, ReferenceNotFound
from artifacthandoff.domain.models import CatalogFilter, CatalogOptions, Destination, WorkspaceProfile


class GenerateCatalogInput(BaseModel):
    category: str | None = Field(None, description="Filter products by category (partial match)")
    search: str | None = Field(None, description="Search by product name or SKU")
    min_stock: int | None = Field(None, description="Only include products with at least this stock")
    min_price: int | None = Field(None, description="Minimum price filter (in cents)")
    max_price: int | None = Field(None, description="Maximum price filter (in cents)")
    product_ids: list[str] | None = Field(None, description="Specific product IDs to include")
    limit: int | None = Field(None, description="Maximum products to include (default 100)")
    title: str | None = Field(None, description="Custom catalog title")
    include_images: bool | None = Field(None, description="Include product images (default true)")


class SendCatalogInput(BaseModel):
    reference: str = Field(..., description="The reference returned by generate_catalog_pdf")
    caption: str | None = Field(None, description="Optional message to send with the PDF")


class GenerateCatalogPdfTool(BaseTool[GenerateCatalogInput]):
    name = "generate_catalog_pdf"
    description = """Generate a PDF catalog from available stock. Use this when the customer asks for a product catalog, price list, or wants to see available products as a PDF.

Returns a reference that can be sent to the customer with the send_catalog_pdf tool. The reference stays valid for about 30 minutes.

Examples:
- "Send me the catalog" -> generate_catalog_pdf()
- "I want to see the drinks" -> generate_catalog_pdf(category="drinks")
- "Catalog of products in stock" -> generate_catalog_pdf(min_stock=1)"""
    input_schema = GenerateCatalogInput

    def __init__(self, producer: ArtifactProducer, workspaces: WorkspaceDirectory | None = None) -> None:
        self.producer = producer
        self.workspaces = workspaces

    async def execute(self, input: GenerateCatalogInput, context: ToolContext) -> ToolResult:
        try:
            filter = CatalogFilter(
                category=input.category,
                search=input.search,
                min_stock=input.min_stock,
                min_price=input.min_price,
                max_price=input.max_price,
                product_ids=input.product_ids,
                limit=input.limit or 100,
            )
        except ValueError as e:
            return ToolResult.fail(f"Invalid catalog filter: {e}")

        profile = await self._profile(context.tenant_id)
        options = CatalogOptions(
            title=input.title or "Catálogo",
            include_images=True if input.include_images is None else input.include_images,
            show_stock=False,
            workspace_name=profile.display_name,
            logo_url=profile.logo_url,
        )

        try:
            produced = await self.producer.produce(filter, options, context.tenant_id)
        except HandoffError as e:
            return ToolResult.fail(str(e))

        return ToolResult.ok(**produced.model_dump())

    async def _profile(self, tenant_id: str) -> WorkspaceProfile:
        if self.workspaces is None:
            return WorkspaceProfile()
        return await self.workspaces.profile_for(tenant_id) or WorkspaceProfile()


class SendCatalogPdfTool(BaseTool[SendCatalogInput]):
    name = "send_catalog_pdf"
    description = """Send a generated PDF catalog to the customer over chat.

Use this after generate_catalog_pdf.

Example flow:
1. Customer asks for the catalog
2. Call generate_catalog_pdf() -> returns reference
3. Call send_catalog_pdf(reference) -> sends the PDF"""
    input_schema = SendCatalogInput
    mutates = True

    def __init__(self, dispatcher: DeliveryDispatcher, recipients: RecipientDirectory) -> None:
        self.dispatcher = dispatcher
        self.recipients = recipients

    async def execute(self, input: SendCatalogInput, context: ToolContext) -> ToolResult:
        # Checked before the recipient lookup so an expired reference always
        # reads as "generate a new one"
        if self.dispatcher.store.get(input.reference, context.tenant_id) is None:
            return ToolResult.fail(ReferenceNotFound.user_message)

        phone = None
        if context.customer_id:
            phone = await self.recipients.phone_for(context.tenant_id, context.customer_id)
        if not phone:
            return ToolResult.fail(RecipientNotFound.user_message)

        destination = Destination(
            tenant_id=context.tenant_id,
            session_id=context.session_id,
            recipient=phone,
            correlation_id=context.correlation_id,
        )

        try:
            accepted = await self.dispatcher.dispatch(input.reference, destination, input.caption)
        except ReferenceNotFound:
            return ToolResult.fail(ReferenceNotFound.user_message)
        except HandoffError as e:
            logger.warning(f"send_catalog_pdf failed for session {context.session_id}: {e}")
            return ToolResult.fail(f"{e.user_message} ({e})")

        return ToolResult.ok(sent=True, filename=accepted.filename, job_id=accepted.job_id)


def create_catalog_tools(
    producer: ArtifactProducer,
    dispatcher: DeliveryDispatcher,
    recipients: RecipientDirectory,
    workspaces: WorkspaceDirectory | None = None,
) -> list[BaseTool]:
    """Both tools share the producer's store through the dispatcher."""
    return [
        GenerateCatalogPdfTool(producer, workspaces),
        SendCatalogPdfTool(dispatcher, recipients),
    ]
