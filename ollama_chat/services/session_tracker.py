"""In-memory pointer to the active chat session."""


class CurrentSessionTracker:
    """Holds at most one session id for the lifetime of the process.

    The tracker never touches the database; callers validate ids against
    the session store before calling ``set``.
    """

    def __init__(self, session_id: int | None = None) -> None:
        self._session_id = session_id

    def get(self) -> int | None:
        return self._session_id

    def set(self, session_id: int) -> None:
        self._session_id = session_id

    def clear(self) -> None:
        self._session_id = None
