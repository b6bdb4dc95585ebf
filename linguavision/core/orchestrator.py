"""
Batch orchestration: item lifecycle and per-item translation tasks.

Every uploaded image becomes a BatchItem that moves through
IDLE -> ANALYZING -> SUCCESS | ERROR. All items of a batch are translated
concurrently on the running event loop. In-flight work is never cancelled:
removing, clearing or retrying an item simply makes the outcome of the old
attempt unwritable.
"""

import asyncio
import logging
from typing import Callable, Iterable, List, Optional, Set

import httpx

from linguavision.config import TranslationConfig
from linguavision.core.exceptions import MissingCredentialError, TranslationError
from linguavision.core.item_store import ItemStore
from linguavision.core.models import (
    BatchItem, ImagePayload, ItemStatus, ModelProvider, SourceLanguage
)
from linguavision.core.strategy import TranslationStrategy, missing_credential
from linguavision.core.translation_clients import ProviderCredentials

logger = logging.getLogger(__name__)

ItemListener = Callable[[BatchItem], None]
CredentialsRequiredCallback = Callable[[MissingCredentialError], None]
StrategyFactory = Callable[..., TranslationStrategy]


class BatchOrchestrator:
    """
    Owns the batch items and drives their translation.

    Configuration is passed in explicitly and only replaced through
    ``update_config``, which also rebuilds the strategy. Each started attempt
    increments ``BatchItem.attempt``; a completion is written only if the item
    still exists and is still on the attempt that produced it.
    """

    def __init__(self, config: TranslationConfig,
                 store: Optional[ItemStore] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 strategy_factory: StrategyFactory = TranslationStrategy.from_config,
                 on_credentials_required: Optional[CredentialsRequiredCallback] = None):
        self.store = store or ItemStore()
        self.http_client = http_client
        self.on_credentials_required = on_credentials_required
        self._strategy_factory = strategy_factory
        self._config = config
        self._strategy = strategy_factory(config, http_client=http_client)
        self._listeners: List[ItemListener] = []
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> TranslationConfig:
        return self._config

    @property
    def strategy(self) -> TranslationStrategy:
        return self._strategy

    def update_config(self, config: TranslationConfig) -> None:
        """Replace the configuration; attempts already running keep the old one"""
        self._config = config
        self._strategy = self._strategy_factory(config, http_client=self.http_client)
        logger.info("Orchestrator configuration updated")

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: ItemListener) -> None:
        """Register a callback notified with every item version written"""
        self._listeners.append(listener)

    def remove_listener(self, listener: ItemListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, item: BatchItem) -> None:
        for listener in list(self._listeners):
            try:
                listener(item)
            except Exception:
                logger.exception(f"Item listener failed for {item.id}")

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    async def add_files(self, images: Iterable[ImagePayload],
                        language: SourceLanguage = SourceLanguage.AUTO,
                        provider: ModelProvider = ModelProvider.GEMINI) -> List[BatchItem]:
        """
        Register images as IDLE items and start translating all of them.

        Returns:
            The created items, before any translation has run
        """
        items = [BatchItem(image=image, language=language) for image in images]
        for item in items:
            self.store.add(item)
            self._notify(item)

        logger.info(f"Added {len(items)} item(s) to the batch ({provider.value}, {language.value})")
        for item in items:
            self._schedule(self.translate_item(item.id, language, provider))
        return items

    async def translate_item(self, item_id: str,
                             language: Optional[SourceLanguage] = None,
                             provider: Optional[ModelProvider] = None) -> Optional[BatchItem]:
        """
        Run one attempt for an item and wait for its outcome.

        Returns:
            The final item, or None when the attempt was refused (item
            missing or already analyzing) or its outcome was discarded
        """
        started = self._begin_attempt(item_id, language, provider)
        if started is None or started.status is not ItemStatus.ANALYZING:
            return started
        return await self._run_attempt(started)

    async def retry(self, item_id: str,
                    language: Optional[SourceLanguage] = None,
                    provider: Optional[ModelProvider] = None) -> bool:
        """
        Start a fresh attempt for an item without waiting for it.

        Returns:
            False if the item does not exist or is still analyzing
        """
        started = self._begin_attempt(item_id, language, provider)
        if started is None:
            return False
        if started.status is ItemStatus.ANALYZING:
            self._schedule(self._run_attempt(started))
        return True

    def get(self, item_id: str) -> Optional[BatchItem]:
        return self.store.get(item_id)

    def items(self) -> List[BatchItem]:
        return self.store.list()

    def remove(self, item_id: str) -> bool:
        """Forget an item; a running attempt finishes but is not recorded"""
        removed = self.store.remove(item_id)
        if removed:
            logger.info(f"Removed item {item_id}")
        return removed

    def clear(self) -> int:
        count = self.store.clear()
        logger.info(f"Cleared {count} item(s)")
        return count

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled attempt has finished"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    # ------------------------------------------------------------------
    # Attempt lifecycle
    # ------------------------------------------------------------------

    def _schedule(self, coroutine) -> asyncio.Task:
        task = asyncio.ensure_future(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _begin_attempt(self, item_id: str, language: Optional[SourceLanguage],
                       provider: Optional[ModelProvider]) -> Optional[BatchItem]:
        """
        Atomically start an attempt.

        Returns the written item: ANALYZING when the attempt can run, ERROR
        when a credential is missing (no network call is made), or None when
        the item is missing or already analyzing.
        """
        credentials = ProviderCredentials.from_config(self._config)
        missing: List[MissingCredentialError] = []

        def _start(item: BatchItem) -> Optional[BatchItem]:
            if item.status is ItemStatus.ANALYZING:
                return None
            selected = provider or item.provider or ModelProvider.GEMINI
            started = item.start_attempt(selected, language)
            error = missing_credential(selected, credentials)
            if error is not None:
                missing.append(error)
                return started.fail(error.message)
            return started

        written = self.store.update(item_id, _start)
        if written is None:
            logger.info(f"Attempt refused for item {item_id} (missing or already analyzing)")
            return None

        self._notify(written)
        if missing:
            logger.warning(f"{written.filename}: {missing[0].message}")
            self._credentials_required(missing[0])
        return written

    async def _run_attempt(self, started: BatchItem) -> Optional[BatchItem]:
        strategy = self._strategy
        credentials = ProviderCredentials.from_config(self._config)

        try:
            result = await strategy.translate_item(
                started.image, started.language, started.provider, credentials
            )
            final = started.succeed(result)
            logger.info(f"{started.filename}: translated {len(result.segments)} segment(s) "
                        f"({result.detected_language})")
        except TranslationError as e:
            final = started.fail(e.message)
            logger.error(f"{started.filename}: {e.message}")
            if isinstance(e, MissingCredentialError):
                self._credentials_required(e)
        except Exception as e:
            logger.exception(f"{started.filename}: unexpected failure")
            final = started.fail(f"Unexpected error: {e}")

        if not self.store.replace(final, expected_attempt=started.attempt):
            logger.debug(f"Discarding outcome of attempt {started.attempt} for {started.id}")
            return None
        self._notify(final)
        return final

    def _credentials_required(self, error: MissingCredentialError) -> None:
        if self.on_credentials_required is not None:
            self.on_credentials_required(error)
