"""
Folder navigation over a prefix/delimiter listing.

The navigator owns one ``NavigationState``. Every move (opening a folder,
submitting typed text, going up) is a *commit* of a new prefix followed by one
listing call. Commits may overlap; a response is applied only if its prefix is
still the current one when it arrives, so a slow answer for a folder the user
already left never overwrites the view.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from bucketview.models import ListingEntry, ListingPayload
from bucketview.services.listing import entries_from_payload
from bucketview.services.paths import ascend, normalize

log = logging.getLogger("bucketview.navigator")

Lister = Callable[[str], Awaitable[ListingPayload]]


@dataclass
class NavigationState:
    current_prefix: str = ""
    input_text: str = ""
    entries: list[ListingEntry] = field(default_factory=list)
    loading: bool = False
    error: str | None = None


class Navigator:
    def __init__(self, lister: Lister):
        self._lister = lister
        self.state = NavigationState()
        self._pending: set[asyncio.Task] = set()

    @property
    def current_prefix(self) -> str:
        return self.state.current_prefix

    def reset(self) -> None:
        """Back to an unfetched root, e.g. after the credentials changed."""
        self.state = NavigationState()

    def rebind(self, lister: Lister) -> None:
        self._lister = lister
        self.reset()

    async def start(self) -> None:
        await self.commit("")

    def set_input(self, text: str) -> None:
        self.state.input_text = text

    async def commit(self, prefix: str) -> None:
        st = self.state
        st.current_prefix = prefix
        st.input_text = prefix
        st.loading = True
        st.error = None
        try:
            payload = await self._lister(prefix)
        except Exception as e:
            if self.state is st:
                self.apply_failure(prefix, str(e) or type(e).__name__)
            return
        # a reset() while we were waiting replaced the state; this answer belongs to the old one
        if self.state is st:
            self.apply_listing(prefix, payload)

    def commit_nowait(self, prefix: str) -> asyncio.Task:
        """Start a commit without waiting for its listing (the UI-thread style of use)."""
        task = asyncio.ensure_future(self.commit(prefix))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def settle(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def submit_input(self) -> None:
        await self.commit(normalize(self.state.input_text))

    async def ascend(self) -> None:
        if not self.state.current_prefix:
            return
        await self.commit(ascend(self.state.current_prefix))

    async def refresh(self) -> None:
        await self.commit(self.state.current_prefix)

    async def open(self, entry: ListingEntry) -> str | None:
        """Descend into a folder; for a file, return its key so the caller can presign it."""
        if entry.is_folder:
            await self.commit(entry.key)
            return None
        return entry.key

    def find(self, name: str) -> ListingEntry | None:
        name = name.rstrip("/")
        for entry in self.state.entries:
            if entry.display_name == name:
                return entry
        return None

    def apply_listing(self, prefix: str, payload: ListingPayload) -> bool:
        st = self.state
        if prefix != st.current_prefix:
            log.debug("stale listing discarded prefix=%r current=%r", prefix, st.current_prefix)
            return False
        st.entries = entries_from_payload(prefix, payload)
        st.loading = False
        st.error = None
        return True

    def apply_failure(self, prefix: str, message: str) -> bool:
        st = self.state
        if prefix != st.current_prefix:
            log.debug("stale listing failure discarded prefix=%r current=%r", prefix, st.current_prefix)
            return False
        log.info("listing failed prefix=%r error=%s", prefix, message)
        st.entries = []
        st.loading = False
        st.error = message
        return True
