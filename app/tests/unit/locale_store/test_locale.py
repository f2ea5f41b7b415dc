"""Tests for locale_store.locale module."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from locale_store import LocaleCell, ObservableValue


class TestObservableValue:
    """Tests for ObservableValue."""

    def test_get_returns_initial(self):
        assert ObservableValue("es").get() == "es"

    def test_set_notifies_on_change(self):
        value = ObservableValue("es")
        callback = MagicMock()
        value.on_change(callback)

        assert value.set("pt") is True

        callback.assert_called_once_with("pt")

    def test_set_same_value_does_not_notify(self):
        value = ObservableValue("es")
        callback = MagicMock()
        value.on_change(callback)

        assert value.set("es") is False

        callback.assert_not_called()

    def test_observers_run_in_registration_order(self):
        value = ObservableValue("es")
        calls = []
        value.on_change(lambda v: calls.append(("first", v)))
        value.on_change(lambda v: calls.append(("second", v)))

        value.set("pt")

        assert calls == [("first", "pt"), ("second", "pt")]

    def test_unsubscribe(self):
        value = ObservableValue("es")
        callback = MagicMock()
        unsubscribe = value.on_change(callback)

        unsubscribe()
        value.set("pt")

        callback.assert_not_called()

    def test_failing_observer_does_not_stop_others(self):
        value = ObservableValue("es")
        failing = MagicMock(side_effect=RuntimeError("boom"))
        callback = MagicMock()
        value.on_change(failing)
        value.on_change(callback)

        value.set("pt")

        assert value.get() == "pt"
        callback.assert_called_once_with("pt")


class TestLocaleCell:
    """Tests for LocaleCell."""

    def test_get_returns_current_value(self):
        assert LocaleCell("es").get() == "es"

    def test_defaults_to_fallback_locale(self):
        assert LocaleCell().get() == "en"

    @pytest.mark.asyncio
    async def test_set_updates_value(self):
        locale = LocaleCell("es")

        await locale.set("pt")

        assert locale.get() == "pt"

    @pytest.mark.asyncio
    async def test_before_update_runs_before_value_is_set(self):
        """The hook sees the previous locale and gets the new one."""
        seen = []
        locale = None

        async def before_update(new_locale):
            seen.append(locale.get())

        hook = AsyncMock(side_effect=before_update)
        locale = LocaleCell("es", hook)

        await locale.set("pt")

        assert seen == ["es"]
        hook.assert_awaited_once_with("pt")

    @pytest.mark.asyncio
    async def test_before_update_not_called_for_same_value(self):
        hook = AsyncMock()
        locale = LocaleCell("es", hook)

        await locale.set("es")

        hook.assert_not_called()

    @pytest.mark.asyncio
    async def test_force_calls_before_update_for_same_value(self):
        hook = AsyncMock()
        locale = LocaleCell("es", hook)

        await locale.set("es", force=True)

        hook.assert_awaited_once_with("es")

    @pytest.mark.asyncio
    async def test_on_change_called_when_value_changes(self):
        callback = MagicMock()
        locale = LocaleCell("es")
        locale.on_change(callback)

        await locale.set("pt")

        callback.assert_called_once_with("pt")

    @pytest.mark.asyncio
    async def test_on_change_not_called_for_same_value(self):
        callback = MagicMock()
        locale = LocaleCell("es")
        locale.on_change(callback)

        await locale.set("es")
        await locale.set("es", force=True)

        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_slow_hook_keeps_old_value_until_resolved(self):
        """get() and observers only see the new locale after the hook settles."""
        release = asyncio.Event()
        hook_calls = []

        async def before_update(new_locale):
            hook_calls.append(new_locale)
            await release.wait()

        callback = MagicMock()
        locale = LocaleCell("es", before_update)
        locale.on_change(callback)

        pending = asyncio.create_task(locale.set("pt"))
        await asyncio.sleep(0)

        assert hook_calls == ["pt"]
        assert locale.get() == "es"
        callback.assert_not_called()

        release.set()
        await pending

        assert locale.get() == "pt"
        callback.assert_called_once_with("pt")

    @pytest.mark.asyncio
    async def test_failing_hook_does_not_commit(self):
        callback = MagicMock()
        locale = LocaleCell("es", AsyncMock(side_effect=IOError("offline")))
        locale.on_change(callback)

        with pytest.raises(IOError):
            await locale.set("pt")

        assert locale.get() == "es"
        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_sets_are_serialized(self):
        """The last set issued wins, whatever order the fetches finish in."""
        delays = {"pt": 0.05, "fr": 0.0}
        started = []

        async def before_update(new_locale):
            started.append(new_locale)
            await asyncio.sleep(delays[new_locale])

        committed = []
        locale = LocaleCell("es", before_update)
        locale.on_change(committed.append)

        await asyncio.gather(locale.set("pt"), locale.set("fr"))

        assert started == ["pt", "fr"]
        assert committed == ["pt", "fr"]
        assert locale.get() == "fr"

    @pytest.mark.asyncio
    async def test_queued_set_to_committed_value_is_no_op(self):
        hook = AsyncMock()
        locale = LocaleCell("es", hook)

        await asyncio.gather(locale.set("pt"), locale.set("pt"))

        hook.assert_awaited_once_with("pt")
        assert locale.get() == "pt"

    @pytest.mark.asyncio
    async def test_queued_set_runs_after_failure(self):
        calls = []

        async def before_update(new_locale):
            calls.append(new_locale)
            if new_locale == "pt":
                raise ValueError("bad payload")

        locale = LocaleCell("es", before_update)

        results = await asyncio.gather(
            locale.set("pt"), locale.set("fr"), return_exceptions=True
        )

        assert isinstance(results[0], ValueError)
        assert results[1] is None
        assert calls == ["pt", "fr"]
        assert locale.get() == "fr"
