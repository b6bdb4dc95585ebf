"""Unit tests for BatchOrchestrator item lifecycle."""

import asyncio

import pytest
from conftest import FakeProviderFactory, make_image
from linguavision.config import ProviderConfig, TranslationConfig
from linguavision.core.exceptions import AuthFailedError
from linguavision.core.models import (
    ItemStatus,
    ModelProvider,
    Segment,
    SourceLanguage,
    TranslationResult
)
from linguavision.core.ocr_client import TextExtractionClient
from linguavision.core.orchestrator import BatchOrchestrator
from linguavision.core.retry_manager import RetryManager, RetryPolicy
from linguavision.core.strategy import TranslationStrategy
from linguavision.core.translation_clients import (
    ImageTranslationClient,
    TextTranslationClient
)

RESULT = TranslationResult("Korean", (Segment("선배", "Hello, senior."),))


@pytest.fixture(autouse=True)
def no_env_keys(monkeypatch):
    """Credentials come only from the configs built in these tests."""
    for name in ('GEMINI_API_KEY', 'GEMINI_PRO_API_KEY', 'CLAUDE_API_KEY'):
        monkeypatch.delenv(name, raising=False)


def make_config(gemini="g-key", claude=""):
    return TranslationConfig(
        gemini=ProviderConfig(api_key=gemini, env_var='GEMINI_API_KEY',
                              premium_env_var='GEMINI_PRO_API_KEY'),
        claude=ProviderConfig(api_key=claude, model="claude-x", env_var='CLAUDE_API_KEY')
    )


def fake_http_strategy(factory):
    """Strategy factory wiring the real clients to a scripted provider factory."""
    async def no_sleep(delay):
        return None

    def build(config, http_client=None):
        retry = RetryManager(RetryPolicy(max_retries=3, initial_delay=2.0), sleep=no_sleep)
        shared = {'retry_manager': retry, 'provider_factory': factory}
        return TranslationStrategy(
            TextExtractionClient(**shared),
            {
                ModelProvider.GEMINI: ImageTranslationClient(**shared),
                ModelProvider.CLAUDE: TextTranslationClient(model=config.claude.model, **shared),
            }
        )
    return build


class BlockingStrategy:
    """Strategy that waits for a release signal before answering."""

    def __init__(self, outcome=RESULT):
        self.outcome = outcome
        self.release = asyncio.Event()
        self.started = 0

    async def translate_item(self, image, language, provider, credentials):
        self.started += 1
        await self.release.wait()
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def fixed_strategy(strategy):
    return lambda config, http_client=None: strategy


class TestMissingCredentials:
    """Pre-flight validation makes no network call."""

    @pytest.mark.asyncio
    async def test_three_files_without_gemini_key(self):
        """3 ERROR items, zero provider calls, the callback fires per item."""
        factory = FakeProviderFactory()
        signals = []
        orchestrator = BatchOrchestrator(
            make_config(gemini=""),
            strategy_factory=fake_http_strategy(factory),
            on_credentials_required=signals.append
        )

        await orchestrator.add_files([make_image(f"{n}.png") for n in range(3)],
                                     SourceLanguage.KOREAN, ModelProvider.GEMINI)
        await orchestrator.wait_for_pending()

        items = orchestrator.items()
        assert [item.status for item in items] == [ItemStatus.ERROR] * 3
        assert all("Missing Gemini API Key" in item.error for item in items)
        assert factory.calls == []
        assert len(signals) == 3

    @pytest.mark.asyncio
    async def test_claude_selected_without_claude_key(self):
        factory = FakeProviderFactory()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fake_http_strategy(factory))

        [item] = await orchestrator.add_files([make_image()], SourceLanguage.AUTO, ModelProvider.CLAUDE)
        await orchestrator.wait_for_pending()

        final = orchestrator.get(item.id)
        assert final.status is ItemStatus.ERROR
        assert final.error == "Missing Claude API Key. Click the settings gear to add your key."
        assert factory.calls == []


class TestTranslationLifecycle:
    """Items move IDLE -> ANALYZING -> SUCCESS | ERROR."""

    @pytest.mark.asyncio
    async def test_korean_end_to_end(self):
        """OCR text, then Gemini translation normalized to 'Hello, senior.'"""
        factory = FakeProviderFactory(
            "선배님, 안녕하세요.",
            '{"detectedLanguage": "Korean", "segments": [{"source": "선배님, 안녕하세요.", "target": "hello, senior."}]}'
        )
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fake_http_strategy(factory))
        seen = []
        orchestrator.add_listener(lambda item: seen.append(item.status))

        [item] = await orchestrator.add_files([make_image()], SourceLanguage.KOREAN, ModelProvider.GEMINI)
        await orchestrator.wait_for_pending()

        final = orchestrator.get(item.id)
        assert final.status is ItemStatus.SUCCESS
        assert final.result.detected_language == "Korean"
        assert final.result.segments[0].target == "Hello, senior."
        assert final.error is None
        assert final.provider is ModelProvider.GEMINI
        assert seen == [ItemStatus.IDLE, ItemStatus.ANALYZING, ItemStatus.SUCCESS]
        assert [call['model'] for call in factory.calls] == ["gemini-3-flash-preview", "gemini-3-pro-preview"]

    @pytest.mark.asyncio
    async def test_removed_listener_is_not_notified(self):
        strategy = BlockingStrategy()
        strategy.release.set()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(strategy))
        kept, dropped = [], []
        orchestrator.add_listener(kept.append)
        orchestrator.add_listener(dropped.append)

        orchestrator.remove_listener(dropped.append)
        orchestrator.remove_listener(dropped.append)
        await orchestrator.add_files([make_image()])
        await orchestrator.wait_for_pending()

        assert [item.status for item in kept] == [ItemStatus.IDLE, ItemStatus.ANALYZING, ItemStatus.SUCCESS]
        assert dropped == []

    @pytest.mark.asyncio
    async def test_add_files_returns_idle_items(self):
        strategy = BlockingStrategy()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(strategy))

        items = await orchestrator.add_files([make_image("a.png"), make_image("b.png")])

        assert [item.status for item in items] == [ItemStatus.IDLE, ItemStatus.IDLE]
        assert [item.filename for item in orchestrator.items()] == ["a.png", "b.png"]
        strategy.release.set()
        await orchestrator.wait_for_pending()

    @pytest.mark.asyncio
    async def test_failure_recorded_on_item(self):
        strategy = BlockingStrategy(outcome=AuthFailedError("Invalid Gemini API Key."))
        strategy.release.set()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(strategy))

        [item] = await orchestrator.add_files([make_image()])
        await orchestrator.wait_for_pending()

        final = orchestrator.get(item.id)
        assert final.status is ItemStatus.ERROR
        assert final.error == "Invalid Gemini API Key."
        assert final.result is None

    @pytest.mark.asyncio
    async def test_language_hint_and_empty_image(self):
        """Missing detectedLanguage uses the hint; no text gives Unknown."""
        factory = FakeProviderFactory(
            "texto", '{"segments": [{"source": "hola", "target": "hi"}]}',
        )
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fake_http_strategy(factory))

        [good] = await orchestrator.add_files([make_image("good.png")], SourceLanguage.SPANISH)
        await orchestrator.wait_for_pending()
        factory.script.extend(["", ""])
        [empty] = await orchestrator.add_files([make_image("empty.png")], SourceLanguage.SPANISH)
        await orchestrator.wait_for_pending()

        assert orchestrator.get(good.id).status is ItemStatus.SUCCESS
        assert orchestrator.get(good.id).result.detected_language == "Spanish"
        assert orchestrator.get(empty.id).result == TranslationResult("Unknown", ())


class TestRetry:
    """Retry starts a fresh attempt; refused while analyzing."""

    @pytest.mark.asyncio
    async def test_retry_refused_while_analyzing(self):
        strategy = BlockingStrategy()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(strategy))

        [item] = await orchestrator.add_files([make_image()])
        await asyncio.sleep(0)
        assert orchestrator.get(item.id).status is ItemStatus.ANALYZING

        assert await orchestrator.retry(item.id) is False
        strategy.release.set()
        await orchestrator.wait_for_pending()
        assert strategy.started == 1

    @pytest.mark.asyncio
    async def test_retry_after_error(self):
        strategy = BlockingStrategy(outcome=AuthFailedError("bad key"))
        strategy.release.set()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(strategy))

        [item] = await orchestrator.add_files([make_image()], SourceLanguage.KOREAN)
        await orchestrator.wait_for_pending()

        strategy.outcome = RESULT
        assert await orchestrator.retry(item.id, provider=ModelProvider.GEMINI) is True
        await orchestrator.wait_for_pending()

        final = orchestrator.get(item.id)
        assert final.status is ItemStatus.SUCCESS
        assert final.attempt == 2
        assert final.language is SourceLanguage.KOREAN

    @pytest.mark.asyncio
    async def test_retry_unknown_item(self):
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(BlockingStrategy()))
        assert await orchestrator.retry("missing") is False


class TestRemoval:
    """Removed items ignore the completion of their in-flight attempt."""

    @pytest.mark.asyncio
    async def test_completion_after_remove_is_ignored(self):
        strategy = BlockingStrategy()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(strategy))
        seen = []
        orchestrator.add_listener(lambda item: seen.append(item.status))

        [item] = await orchestrator.add_files([make_image()])
        await asyncio.sleep(0)
        assert orchestrator.remove(item.id) is True

        strategy.release.set()
        await orchestrator.wait_for_pending()

        assert orchestrator.get(item.id) is None
        assert ItemStatus.SUCCESS not in seen

    @pytest.mark.asyncio
    async def test_clear(self):
        strategy = BlockingStrategy()
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(strategy))

        await orchestrator.add_files([make_image("a.png"), make_image("b.png")])
        assert orchestrator.clear() == 2

        strategy.release.set()
        await orchestrator.wait_for_pending()
        assert orchestrator.items() == []

    def test_remove_unknown(self):
        orchestrator = BatchOrchestrator(make_config(), strategy_factory=fixed_strategy(BlockingStrategy()))
        assert orchestrator.remove("missing") is False


class TestUpdateConfig:
    """update_config replaces the config and rebuilds the strategy."""

    @pytest.mark.asyncio
    async def test_rebuilds_strategy(self):
        built = []

        def factory(config, http_client=None):
            built.append(config)
            return BlockingStrategy()

        orchestrator = BatchOrchestrator(make_config(gemini=""), strategy_factory=factory)
        new_config = make_config(gemini="new-key")
        orchestrator.update_config(new_config)

        assert len(built) == 2
        assert built[1] is new_config
        assert orchestrator.config is new_config

        strategy = orchestrator.strategy
        strategy.release.set()
        [item] = await orchestrator.add_files([make_image()])
        await orchestrator.wait_for_pending()
        assert orchestrator.get(item.id).status is ItemStatus.SUCCESS
