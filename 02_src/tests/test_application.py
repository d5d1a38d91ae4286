"""Tests for Application."""

import pytest

from notifier.app import Application, create_transport
from notifier.transport import OutboxTransport, TelegramTransport

from conftest import FakeCatalog, make_profile


@pytest.fixture
async def app():
    """Create and start an in-memory application without the tick loop."""
    application = Application(
        db_path=":memory:",
        transport=OutboxTransport(),
        catalog=FakeCatalog(),
        run_dispatcher=False,
    )
    await application.start()
    yield application
    await application.stop()


class TestApplicationStart:
    """Tests for Application.start()."""

    async def test_start_initializes_components(self, app):
        """Test that start initializes all components."""
        assert app._storage is not None
        assert app._dialogue_engine is not None
        assert app._dispatcher is not None

    async def test_components_share_dependencies(self, app):
        """Test that components receive the same repository and transport."""
        assert app.dialogue_engine._repository is app.storage
        assert app.dispatcher._repository is app.storage
        assert app.dialogue_engine._transport is app.transport
        assert app.dispatcher._transport is app.transport

    async def test_start_creates_database_tables(self, app):
        """Test that start creates database tables."""
        async with app._storage._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ) as cursor:
            tables = [row[0] for row in await cursor.fetchall()]
            assert "profiles" in tables

    async def test_start_runs_dispatcher_loop(self):
        """Test that the tick loop starts by default."""
        application = Application(
            db_path=":memory:",
            transport=OutboxTransport(),
            catalog=FakeCatalog(),
            dispatch_interval=3600,
        )
        await application.start()
        assert application.dispatcher.running
        await application.stop()
        assert not application.dispatcher.running


class TestApplicationStop:
    """Tests for Application.stop()."""

    async def test_stop_closes_storage_and_catalog(self):
        """Test that stop releases resources."""
        catalog = FakeCatalog()
        application = Application(
            db_path=":memory:",
            transport=OutboxTransport(),
            catalog=catalog,
            run_dispatcher=False,
        )
        await application.start()
        await application.stop()

        assert application._storage._conn is None
        assert catalog.closed


class TestApplicationReset:
    """Tests for Application.reset()."""

    async def test_reset_clears_profiles_and_sessions(self, app):
        """Test that reset clears storage, sessions and the outbox."""
        await app.storage.create(make_profile("1"))
        await app.dialogue_engine.handle_message("2", "/start")

        await app.reset()

        assert await app.storage.list_all() == []
        assert app.dialogue_engine.session_state("2").value == "start"
        assert app.transport.peek("2") == []


class TestApplicationProperties:
    """Tests for Application properties."""

    @pytest.mark.parametrize(
        "name", ["storage", "dialogue_engine", "dispatcher", "transport"]
    )
    def test_property_raises_when_not_started(self, name):
        """Test that properties raise before start."""
        application = Application(db_path=":memory:")

        with pytest.raises(RuntimeError, match="not started"):
            getattr(application, name)


class TestCreateTransport:
    """Tests for create_transport()."""

    def test_default_is_outbox(self, monkeypatch):
        """Test the default transport."""
        monkeypatch.delenv("TRANSPORT", raising=False)
        assert isinstance(create_transport(), OutboxTransport)

    def test_telegram(self, monkeypatch):
        """Test selecting Telegram."""
        monkeypatch.setenv("TRANSPORT", "telegram")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        assert isinstance(create_transport(), TelegramTransport)

    def test_unknown(self, monkeypatch):
        """Test that unknown transports are rejected."""
        monkeypatch.setenv("TRANSPORT", "pigeon")
        with pytest.raises(ValueError):
            create_transport()
