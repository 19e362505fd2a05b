"""Application service that runs a batch of form entries end to end."""
from __future__ import annotations

import time
from typing import Callable

import httpx

from one_liners.core.logging import get_logger
from one_liners.core.settings import Settings, load_settings
from one_liners.domain import (
    STATUS_COMPLETE,
    STATUS_PROCESSING,
    BatchOutcome,
    Entry,
    ErrorCode,
    OneLinersError,
    Result,
    build_entry_text,
)
from one_liners.infrastructure import (
    EmbeddingClient,
    GravityFormsClient,
    OpenAIClient,
    ThreadsAPI,
    VectorStoreWriter,
)

from .conversation import ConversationClient
from .extraction import SummaryExtractor, summary_sentences
from .polling import RunPoller

logger = get_logger(__name__)

FINAL_SUMMARY_PROMPT = (
    "Summarize the following form responses as a whole in exactly three sentences. "
    'Reply only with JSON of the form {"summary": ["sentence one", "sentence two", "sentence three"]}.'
)

ClientFactory = Callable[[str], OpenAIClient]


class EntryOrchestrator:
    """Coordinates embedding, vector storage and the cumulative summary."""

    def __init__(
        self,
        settings: Settings,
        *,
        forms: GravityFormsClient | None,
        embeddings: EmbeddingClient,
        vector_store: VectorStoreWriter,
        conversation: ConversationClient,
        client_factory: ClientFactory,
    ) -> None:
        self._settings = settings
        self._forms = forms
        self._embeddings = embeddings
        self._vector_store = vector_store
        self._conversation = conversation
        self._client_factory = client_factory

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------
    # configuration
    # ------------------------------------------------------------------
    def validate_configuration(self) -> None:
        missing = self._settings.missing_batch_settings()
        if self._forms is None:
            missing.append("GRAVITY_FORMS_URL")
        if missing:
            raise OneLinersError(
                ErrorCode.CONFIGURATION_MISSING,
                f"Missing configuration: {', '.join(missing)}. Please configure the settings first.",
            )

    def _require_forms(self) -> GravityFormsClient:
        if self._forms is None:
            raise OneLinersError(ErrorCode.CONFIGURATION_MISSING, "Missing configuration: GRAVITY_FORMS_URL.")
        return self._forms

    # ------------------------------------------------------------------
    # entries
    # ------------------------------------------------------------------
    def list_entries(self, form_id: int | str) -> list[Entry]:
        return self._require_forms().get_entries(form_id, status="active")

    def entry_link(self, form_id: int | str, entry_id: int) -> str:
        return self._require_forms().entry_admin_url(form_id, entry_id)

    def _process_entry(self, entry: Entry, text: str) -> str:
        try:
            vector = self._embeddings.embed(text)
        except OneLinersError as exc:
            logger.error("entry_embedding_failed", entry_id=entry.entry_id, error=exc.message)
            return f"Embedding Error: {exc.message}"

        stored = self._vector_store.store_vector_with_retry(
            self._settings.vector_store_id or "",
            vector,
            entry.entry_id,
            text,
        )
        if not stored.ok:
            logger.error("entry_storage_failed", entry_id=entry.entry_id, error=stored.failure.message)
            return f"Vector Store Error: {stored.failure.message}"
        return STATUS_COMPLETE

    # ------------------------------------------------------------------
    # batch
    # ------------------------------------------------------------------
    def process_entries(self) -> BatchOutcome:
        """Process every active entry and ask for one cumulative summary.

        Configuration problems, a failed entry fetch, an empty form and a
        failed thread creation raise :class:`OneLinersError` before any entry
        is touched. Per-entry failures are recorded in the status map and the
        batch carries on.
        """

        self.validate_configuration()
        form_id = self._settings.form_id or ""

        entries = self.list_entries(form_id)
        if not entries:
            raise OneLinersError(ErrorCode.NO_ENTRIES_FOUND, "No entries found in the form.")

        thread_id = self._conversation.create_thread()
        if not thread_id:
            raise OneLinersError(ErrorCode.THREAD_CREATION_FAILED, "Failed to create a new thread for processing.")

        outcome = BatchOutcome()
        collected: list[str] = []
        for entry in entries:
            outcome.entry_statuses[entry.entry_id] = STATUS_PROCESSING
            text = build_entry_text(entry)
            logger.info("entry_processing", entry_id=entry.entry_id, thread_id=thread_id)
            status = self._process_entry(entry, text)
            outcome.entry_statuses[entry.entry_id] = status
            if status == STATUS_COMPLETE:
                collected.append(text)

        summary = self.generate_final_summary(thread_id, collected)
        if summary.ok:
            outcome.final_summary = summary.value
        else:
            outcome.summary_failure = summary.failure
        logger.info(
            "batch_processed",
            thread_id=thread_id,
            entries=len(entries),
            completed=len(collected),
            success=outcome.success,
        )
        return outcome

    def generate_final_summary(self, thread_id: str, texts: list[str]) -> Result[tuple[str, str, str]]:
        if not texts:
            return Result.error(ErrorCode.NO_PROCESSED_ENTRIES, "No entries were processed successfully.")

        prompt = "\n\n".join([FINAL_SUMMARY_PROMPT, *texts])
        response = self._conversation.add_message_and_run_thread(
            thread_id,
            self._settings.assistant_id or "",
            prompt,
        )
        if not response.ok:
            logger.error("final_summary_failed", thread_id=thread_id, code=response.failure.code.value)
            return Result.error(
                response.failure.code,
                f"Error generating final summary: {response.failure.message}",
            )
        return summary_sentences(response.value or {})

    # ------------------------------------------------------------------
    # credentials
    # ------------------------------------------------------------------
    def check_credentials(self, api_key: str, assistant_id: str) -> str | None:
        """Return an error message, or ``None`` when both values are usable."""

        client = self._client_factory(api_key)
        api = ThreadsAPI(client)
        try:
            if not api.is_api_key_valid():
                return "Invalid API Key. Please check your key and try again."
            if not api.is_assistant_valid(assistant_id):
                return "Invalid Assistant ID. Please check the ID and try again."
        finally:
            client.close()
        return None


def build_orchestrator(
    settings: Settings,
    *,
    http_client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> EntryOrchestrator:
    """Wire the provider and forms clients from ``settings``."""

    def client_factory(api_key: str) -> OpenAIClient:
        return OpenAIClient(
            api_key,
            api_base=settings.api_base,
            beta_header=settings.beta_header,
            timeout=settings.request_timeout,
            upload_timeout=settings.upload_timeout,
            http_client=http_client,
        )

    client = client_factory(settings.api_key or "")
    api = ThreadsAPI(client)
    extractor = SummaryExtractor(api)
    poller = RunPoller(
        api,
        extractor,
        interval=settings.poll_interval,
        max_attempts=settings.poll_max_attempts,
        sleep=sleep,
    )

    forms: GravityFormsClient | None = None
    if settings.forms_url:
        forms = GravityFormsClient(
            settings.forms_url,
            settings.forms_consumer_key,
            settings.forms_consumer_secret,
            timeout=settings.request_timeout,
            http_client=http_client,
        )

    return EntryOrchestrator(
        settings,
        forms=forms,
        embeddings=EmbeddingClient(client),
        vector_store=VectorStoreWriter(
            client,
            purpose=settings.file_purpose,
            max_retries=settings.store_max_retries,
            retry_delay=settings.store_retry_delay,
            sleep=sleep,
        ),
        conversation=ConversationClient(api, poller, extractor),
        client_factory=client_factory,
    )


_orchestrator: EntryOrchestrator | None = None


def configure_orchestrator(orchestrator: EntryOrchestrator | None) -> None:
    """Install the orchestrator used by the HTTP routes (``None`` resets it)."""

    global _orchestrator
    _orchestrator = orchestrator


def get_orchestrator() -> EntryOrchestrator:
    """Return the configured orchestrator, building one from the environment."""

    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator(load_settings())
    return _orchestrator
