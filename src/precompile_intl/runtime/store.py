"""Locale runtime store: dictionaries, loaders, fallback chains, active locale.

Holds the compiled templates of every locale, the loaders registered for
locales not loaded yet, and the observable active locale that the
formatting helpers read.

Architecture:
    - add_messages() merges templates synchronously
    - register() queues loaders; they run when a locale is switched to
    - set_active_locale() switches at once when nothing needs loading,
      otherwise returns an awaitable LocaleSwitch completing after the loads
    - At most one load task exists per locale; concurrent switches share it
    - Lookups walk the chain: tag, its parents, then the fallback locale
      and its parents

Concurrency:
    asyncio cooperative model for loading. State is guarded by one RLock so
    synchronous callers on other threads (lookups, add_messages) stay safe.
    Observable updates and their notifications happen under the same lock.

Python 3.13+.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable, Generator, Mapping
from dataclasses import dataclass, field
from threading import RLock
from types import MappingProxyType
from typing import Any

from precompile_intl.constants import DEFAULT_CURRENCY, DEFAULT_LOCALE
from precompile_intl.diagnostics import (
    ErrorTemplate,
    IntlError,
    LocaleLoadFailedError,
    MissingMessageError,
    UnknownLocaleError,
)
from precompile_intl.enums import LocaleDetection
from precompile_intl.locale_utils import get_system_locale, locale_chain, to_bcp47

from .observable import Observable, Subscriber, Unsubscribe
from .types import (
    Loader,
    LoaderResult,
    LocaleCode,
    MessageDictionary,
    MessageKey,
    MissingMessageHandler,
    Template,
)

__all__ = [
    "FallbackInfo",
    "IntlConfig",
    "LocaleStore",
    "LocaleSwitch",
    "add_messages",
    "default_store",
    "format_message",
    "get_template",
    "init",
    "is_loading",
    "locale",
    "register",
    "set_active_locale",
    "wait_locale",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """A message was resolved from a later member of the fallback chain.

    Attributes:
        requested_locale: Locale the lookup was made for
        resolved_locale: Locale whose dictionary contained the message
        message_key: The message key that was resolved
    """

    requested_locale: LocaleCode
    resolved_locale: LocaleCode
    message_key: MessageKey


@dataclass(frozen=True, slots=True)
class IntlConfig:
    """Runtime configuration set by init().

    Attributes:
        fallback_locale: Last resort of every chain; None before init()
        formats: Named formats per kind ("number", "date", "time"), each a
            mapping from name to a style string
        currency: Currency used by the plain "currency" number style
        missing_message_handler: Produces text for keys missing everywhere
        on_fallback: Called when a message resolves from a fallback locale
    """

    fallback_locale: LocaleCode | None = None
    formats: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    currency: str = DEFAULT_CURRENCY
    missing_message_handler: MissingMessageHandler | None = None
    on_fallback: Callable[[FallbackInfo], None] | None = None

    def named_formats(self, kind: str) -> Mapping[str, str]:
        """Named formats of one kind (empty mapping when none)."""
        return self.formats.get(kind, MappingProxyType({}))


class LocaleSwitch:
    """Outcome of set_active_locale(), awaitable until the switch applies.

    A switch that needed no loading is already done; awaiting it returns
    immediately. Otherwise awaiting waits for every load and raises
    LocaleLoadFailedError if one fails. Cancelling the waiter does not
    cancel the loads.

    Example:
        >>> switch = store.set_active_locale("fr")
        >>> await switch
        'fr'
    """

    __slots__ = ("_task", "locale")

    def __init__(self, locale: LocaleCode, task: "asyncio.Task[LocaleCode] | None" = None) -> None:
        self.locale = locale
        self._task = task

    @property
    def done(self) -> bool:
        """True when the switch has been applied or has failed."""
        return self._task is None or self._task.done()

    async def wait(self) -> LocaleCode:
        """Wait for the switch to apply.

        Raises:
            LocaleLoadFailedError: If a loader of a chain member failed
        """
        if self._task is not None:
            await asyncio.shield(self._task)
        return self.locale

    def __await__(self) -> Generator[Any, None, LocaleCode]:
        return self.wait().__await__()

    def __repr__(self) -> str:
        state = "done" if self.done else "pending"
        return f"LocaleSwitch(locale={self.locale!r}, {state})"


class LocaleStore:
    """Registry of per-locale message dictionaries and loaders.

    Attributes:
        locale: Observable active locale tag (None until a switch)
        is_loading: Observable flag, True while any load is in flight

    Example:
        >>> store = LocaleStore()
        >>> store.init("en")
        LocaleSwitch(locale='en', done)
        >>> store.add_messages("en", {"greeting": "Hello"})
        >>> store.format_message("greeting", locale="fr")
        'Hello'
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._dictionaries: dict[LocaleCode, MessageDictionary] = {}
        self._loaders: dict[LocaleCode, list[Loader]] = {}
        self._pending: dict[LocaleCode, asyncio.Task[None]] = {}
        # Strong references: the event loop only keeps weak ones
        self._switches: set[asyncio.Task[LocaleCode]] = set()
        self._config = IntlConfig()
        self.locale: Observable[LocaleCode | None] = Observable(None, lock=self._lock)
        self.is_loading: Observable[bool] = Observable(False, lock=self._lock)

    def __repr__(self) -> str:
        return (
            f"LocaleStore(active={self.locale.value!r}, "
            f"locales={self.locales!r}, pending={len(self._pending)})"
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> IntlConfig:
        """Current configuration."""
        with self._lock:
            return self._config

    def init(
        self,
        fallback_locale: str,
        initial_locale: str | LocaleDetection | None = None,
        *,
        formats: Mapping[str, Mapping[str, str]] | None = None,
        currency: str = DEFAULT_CURRENCY,
        missing_message_handler: MissingMessageHandler | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> LocaleSwitch:
        """Configure the store and optionally switch to an initial locale.

        Args:
            fallback_locale: Locale appended to every lookup chain
            initial_locale: Tag to activate, LocaleDetection.SYSTEM for the
                host locale, or None to leave the active locale unchanged
            formats: Named formats, e.g. {"number": {"price": "::currency/EUR"}}
            currency: Currency of the plain "currency" number style
            missing_message_handler: Called with (locale, key) instead of
                raising MissingMessageError from format_message()
            on_fallback: Called with FallbackInfo when a lookup resolves
                from a fallback locale

        Returns:
            The LocaleSwitch of the initial switch, or a completed switch

        Raises:
            UnknownLocaleError: If the initial locale's chain is entirely unknown
        """
        fallback = to_bcp47(fallback_locale)
        frozen_formats = MappingProxyType(
            {kind: MappingProxyType(dict(named)) for kind, named in (formats or {}).items()}
        )
        with self._lock:
            self._config = IntlConfig(
                fallback_locale=fallback,
                formats=frozen_formats,
                currency=currency,
                missing_message_handler=missing_message_handler,
                on_fallback=on_fallback,
            )
        logger.debug("Configured fallback locale '%s'", fallback)

        if initial_locale is None:
            return LocaleSwitch(self.locale.value or fallback)
        if initial_locale is LocaleDetection.SYSTEM:
            initial_locale = get_system_locale()
            logger.debug("Detected system locale '%s'", initial_locale)
        return self.set_active_locale(initial_locale)

    # ------------------------------------------------------------------
    # Dictionaries and loaders
    # ------------------------------------------------------------------

    def add_messages(self, locale: str, fragment: Mapping[MessageKey, Template]) -> None:
        """Merge templates into a locale's dictionary.

        Later fragments override earlier templates of the same key; keys not
        in the fragment are kept. Adding the same fragment twice is a no-op.

        Raises:
            TypeError: If fragment is not a mapping
        """
        if not isinstance(fragment, Mapping):
            msg = f"Message fragment must be a mapping, got {type(fragment).__name__}"
            raise TypeError(msg)
        tag = to_bcp47(locale)
        with self._lock:
            self._dictionaries.setdefault(tag, {}).update(fragment)

    def register(self, locale: str, loader: Loader) -> None:
        """Queue a loader for a locale without invoking it.

        The loader is a callable returning a mapping (or an awaitable of
        one), or an awaitable itself. A result with a `messages` mapping
        attribute, such as a generated module, is accepted too.
        """
        tag = to_bcp47(locale)
        with self._lock:
            self._loaders.setdefault(tag, []).append(loader)
        logger.debug("Registered loader for '%s'", tag)

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Sorted tags that have a dictionary or a queued loader."""
        with self._lock:
            return tuple(sorted(self._dictionaries.keys() | self._loaders.keys()))

    def chain(self, locale: str) -> tuple[LocaleCode, ...]:
        """Lookup chain of a locale under the current configuration."""
        return locale_chain(to_bcp47(locale), self.config.fallback_locale)

    def _is_known(self, tag: LocaleCode) -> bool:
        return tag in self._dictionaries or bool(self._loaders.get(tag)) or tag in self._pending

    def _needs_load(self, tag: LocaleCode) -> bool:
        return bool(self._loaders.get(tag)) or tag in self._pending

    # ------------------------------------------------------------------
    # Switching
    # ------------------------------------------------------------------

    def set_active_locale(self, locale: str) -> LocaleSwitch:
        """Switch the active locale, loading chain members as needed.

        Must be called from the event loop thread when loading is needed.
        Switching again before a previous switch completes does not cancel
        its loads; the active locale ends up at whichever switch applies last.

        Raises:
            UnknownLocaleError: If no chain member has messages or loaders
            IntlError: If loading is needed and no event loop is running
        """
        tag = to_bcp47(locale)
        with self._lock:
            chain = locale_chain(tag, self._config.fallback_locale)
            if not any(self._is_known(member) for member in chain):
                raise UnknownLocaleError(ErrorTemplate.locale_unknown(tag, chain), locale=tag)

            to_load = [member for member in chain if self._needs_load(member)]
            if not to_load:
                self.locale.set(tag)
                logger.debug("Switched to '%s'", tag)
                return LocaleSwitch(tag)

            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise IntlError(ErrorTemplate.event_loop_required(tag)) from None

            loads = [self._ensure_loading(member, loop) for member in to_load]
            task = loop.create_task(self._apply_switch(tag, loads))
            self._switches.add(task)
            task.add_done_callback(self._switch_finished)
        return LocaleSwitch(tag, task)

    def _ensure_loading(
        self, tag: LocaleCode, loop: asyncio.AbstractEventLoop
    ) -> "asyncio.Task[None]":
        """Existing load task of a locale, or a new one."""
        task = self._pending.get(tag)
        if task is None:
            task = loop.create_task(self._load(tag))
            self._pending[tag] = task
            self.is_loading.set(True)
            logger.debug("Started loading '%s'", tag)
        return task

    async def _apply_switch(self, tag: LocaleCode, loads: list["asyncio.Task[None]"]) -> LocaleCode:
        await asyncio.gather(*(asyncio.shield(load) for load in loads))
        with self._lock:
            self.locale.set(tag)
        logger.debug("Switched to '%s' after loading", tag)
        return tag

    def _switch_finished(self, task: "asyncio.Task[LocaleCode]") -> None:
        self._switches.discard(task)
        if task.cancelled():
            return
        # Retrieving the exception keeps unawaited failed switches quiet
        error = task.exception()
        if error is not None:
            logger.warning("Locale switch failed: %s", error)

    async def _load(self, tag: LocaleCode) -> None:
        """Run every queued loader of a locale and merge the results.

        Fragments are merged only if every loader succeeds; on failure the
        loaders stay queued so a later switch retries them.
        """
        with self._lock:
            loaders = list(self._loaders.get(tag, ()))
        try:
            try:
                fragments = await asyncio.gather(
                    *(self._call_loader(tag, loader) for loader in loaders)
                )
            except Exception as e:
                logger.warning("Loading '%s' failed: %s", tag, e)
                raise LocaleLoadFailedError(
                    ErrorTemplate.locale_load_failed(tag, e), locale=tag, cause=e
                ) from e

            with self._lock:
                dictionary = self._dictionaries.setdefault(tag, {})
                for fragment in fragments:
                    dictionary.update(fragment)
                queued = self._loaders.get(tag, [])
                for loader in loaders:
                    if loader in queued:
                        queued.remove(loader)
                if not queued:
                    self._loaders.pop(tag, None)
            logger.debug("Loaded %d fragment(s) for '%s'", len(fragments), tag)
        finally:
            with self._lock:
                if self._pending.get(tag) is asyncio.current_task():
                    del self._pending[tag]
                self.is_loading.set(bool(self._pending))

    @staticmethod
    async def _call_loader(tag: LocaleCode, loader: Loader) -> LoaderResult:
        result: Any = loader() if callable(loader) else loader
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, Mapping):
            result = getattr(result, "messages", result)
        if not isinstance(result, Mapping):
            raise TypeError(ErrorTemplate.loader_result_invalid(tag, result).message)
        return result

    async def wait_locale(self, locale: str | None = None) -> None:
        """Wait for pending loads of a locale's chain (all loads when None).

        Raises:
            LocaleLoadFailedError: If one of the awaited loads fails
        """
        with self._lock:
            if locale is None:
                tasks = list(self._pending.values())
            else:
                chain = locale_chain(to_bcp47(locale), self._config.fallback_locale)
                tasks = [self._pending[tag] for tag in chain if tag in self._pending]
        if tasks:
            await asyncio.gather(*(asyncio.shield(task) for task in tasks))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def formatting_locale(self) -> LocaleCode:
        """Locale the helpers format with: active, else fallback, else default."""
        with self._lock:
            return self.locale.value or self._config.fallback_locale or DEFAULT_LOCALE

    def _resolve_locale(self, locale: str | None) -> LocaleCode:
        if locale is not None:
            return to_bcp47(locale)
        with self._lock:
            current = self.locale.value or self._config.fallback_locale
        if current is None:
            raise UnknownLocaleError(ErrorTemplate.no_active_locale(), locale="")
        return current

    def get_template(self, locale: str | None, key: MessageKey) -> Template:
        """Find a template along the locale's chain.

        Args:
            locale: Locale tag, or None for the active locale

        Raises:
            MissingMessageError: If no resolved dictionary in the chain has key
            UnknownLocaleError: If no chain member has messages or loaders
        """
        tag = self._resolve_locale(locale)
        with self._lock:
            chain = locale_chain(tag, self._config.fallback_locale)
            on_fallback = self._config.on_fallback
            for member in chain:
                dictionary = self._dictionaries.get(member)
                if dictionary is not None and key in dictionary:
                    template = dictionary[key]
                    break
            else:
                if not any(self._is_known(member) for member in chain):
                    raise UnknownLocaleError(ErrorTemplate.locale_unknown(tag, chain), locale=tag)
                raise MissingMessageError(
                    ErrorTemplate.message_not_found(key, tag), key=key, locale=tag
                )

        if member != tag:
            logger.debug("Message '%s' resolved from '%s' (requested '%s')", key, member, tag)
            if on_fallback is not None:
                on_fallback(FallbackInfo(tag, member, key))
        return template

    def has_message(self, key: MessageKey, locale: str | None = None) -> bool:
        """True if the key resolves along the locale's chain."""
        tag = self._resolve_locale(locale)
        with self._lock:
            chain = locale_chain(tag, self._config.fallback_locale)
            return any(key in self._dictionaries.get(member, ()) for member in chain)

    def format_message(
        self, key: MessageKey, value: Any = None, *, locale: str | None = None
    ) -> str:
        """Look up a template and evaluate it.

        Args:
            key: Message key
            value: The single argument value, or a mapping (or list) of
                arguments for multi-argument messages; ignored for static ones
            locale: Locale tag, or None for the active locale

        Raises:
            MissingMessageError: If the key is missing and no
                missing_message_handler is configured
            UnknownLocaleError: If no chain member has messages or loaders
        """
        try:
            template = self.get_template(locale, key)
        except MissingMessageError as e:
            handler = self.config.missing_message_handler
            if handler is None:
                raise
            return handler(e.locale, key)
        if isinstance(template, str):
            return template
        return template(value)

    # ------------------------------------------------------------------
    # Observation and reset
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber[LocaleCode | None]) -> Unsubscribe:
        """Subscribe to active locale changes (shorthand for locale.subscribe)."""
        return self.locale.subscribe(callback)

    def clear(self) -> None:
        """Forget all messages, loaders, pending loads and configuration.

        Subscribers stay registered and see the reset to None/False.
        """
        with self._lock:
            for task in self._pending.values():
                task.cancel()
            self._pending.clear()
            self._switches.clear()
            self._dictionaries.clear()
            self._loaders.clear()
            self._config = IntlConfig()
            self.locale.set(None)
            self.is_loading.set(False)


# ============================================================================
# DEFAULT STORE
# ============================================================================

default_store = LocaleStore()
"""Process-wide store read by the formatting helpers."""

locale = default_store.locale
is_loading = default_store.is_loading
add_messages = default_store.add_messages
register = default_store.register
init = default_store.init
set_active_locale = default_store.set_active_locale
get_template = default_store.get_template
format_message = default_store.format_message
wait_locale = default_store.wait_locale
