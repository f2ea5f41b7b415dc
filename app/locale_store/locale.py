"""Reactive locale cell.

ObservableValue is the change-notifying value holder; LocaleCell builds on it
with an asynchronous pre-commit hook that must settle before a new locale
becomes visible.
"""

import asyncio
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from core.config import FALLBACK_LOCALE
from core.logging import get_module_logger

logger = get_module_logger()

T = TypeVar("T")

ChangeCallback = Callable[[T], None]
BeforeUpdateHook = Callable[[str], Awaitable[None]]


class ObservableValue(Generic[T]):
    """Single value holder notifying observers when the value changes.

    Observers run in registration order. An observer that raises is logged
    and the remaining observers still run.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._observers: List[ChangeCallback] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        """Assign value and notify observers.

        Returns:
            True if the value changed and observers were notified.
        """
        if value == self._value:
            return False
        self._value = value
        self._notify(value)
        return True

    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register an observer.

        Returns:
            A function removing the observer.
        """
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _notify(self, value: T) -> None:
        for observer in list(self._observers):
            try:
                observer(value)
            except Exception as e:
                logger.exception(
                    "change_observer_failed",
                    observer=getattr(observer, "__name__", "unknown"),
                    error=str(e),
                )


async def _no_op_hook(new_locale: str) -> None:
    return None


class LocaleCell:
    """Holder of the active locale with a gated, asynchronous update path.

    set() runs the before_update hook to completion first, and only then
    commits the new locale and notifies observers. Concurrent set() calls
    are serialized: each one waits for the previous to settle and then
    re-checks against the committed value, so the last call issued wins.

    Attributes:
        before_update: Async hook awaited with the candidate locale.
    """

    def __init__(
        self,
        initial_value: Optional[str] = None,
        before_update: Optional[BeforeUpdateHook] = None,
    ):
        self._value: ObservableValue[str] = ObservableValue(
            initial_value or FALLBACK_LOCALE
        )
        self.before_update = before_update or _no_op_hook
        self._lock = asyncio.Lock()

    def get(self) -> str:
        return self._value.get()

    @property
    def lock(self) -> asyncio.Lock:
        """Lock held while a set() runs its hook and commits."""
        return self._lock

    async def set(self, new_locale: str, force: bool = False) -> None:
        """Change the locale once the before_update hook has settled.

        Args:
            new_locale: Candidate locale.
            force: Run the hook even if new_locale is the current locale.

        Raises:
            Exception: Whatever the before_update hook raises; nothing is
                committed in that case.
        """
        if new_locale == self.get() and not force and not self._lock.locked():
            return

        async with self._lock:
            previous = self.get()
            if new_locale == previous and not force:
                return

            await self.before_update(new_locale)
            self._value.set(new_locale)
            logger.info("locale_committed", locale=new_locale, previous=previous)

    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register an observer called with each committed locale."""
        return self._value.on_change(callback)

    def __repr__(self) -> str:
        return f"LocaleCell({self.get()!r})"
