import random
import time
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from errors import ARCHIVE_ERROR_MESSAGE, GenerationInProgress, IncompleteCase
from schemas import CATALYST_OPTIONS, CaseParameters, GenerationStatus

# A stream that has produced nothing for this long is treated as abandoned.
STALE_STREAM_SECONDS = 120.0


class CaseFile:
    """Form parameters, story buffer and generation status for one page load.

    Only the active generation loop appends to ``story``; a second generation
    is refused while the status is streaming, unless that stream has gone
    quiet for ``stale_after`` seconds (its client vanished before it started).
    """

    def __init__(
        self,
        params: Optional[CaseParameters] = None,
        stale_after: float = STALE_STREAM_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.params = params or CaseParameters()
        self.story = ""
        self.status = GenerationStatus.IDLE
        self.stale_after = stale_after
        self._clock = clock
        self.last_activity = clock()

    def update(self, field: str, value: str) -> CaseParameters:
        if field not in CaseParameters.model_fields:
            raise ValueError(f"Unknown case parameter: {field}")
        # Re-validate so an unsupported language is rejected.
        self.params = CaseParameters.model_validate({**self.params.model_dump(), field: value})
        return self.params

    def randomize_catalyst(self, rng: Optional[random.Random] = None) -> CaseParameters:
        choice = (rng or random).choice(CATALYST_OPTIONS)
        self.params = self.params.model_copy(update={"catalyst": choice})
        return self.params

    @property
    def is_streaming(self) -> bool:
        return self.status == GenerationStatus.STREAMING

    @property
    def is_stale(self) -> bool:
        return self.is_streaming and self._clock() - self.last_activity > self.stale_after

    def begin(self) -> CaseParameters:
        if self.is_streaming and not self.is_stale:
            raise GenerationInProgress("A case file is already being compiled")
        missing = self.params.missing_fields()
        if missing:
            raise IncompleteCase(missing)
        self.story = ""
        self.status = GenerationStatus.STREAMING
        self.last_activity = self._clock()
        return self.params

    def append(self, fragment: str) -> None:
        self.story += fragment
        self.last_activity = self._clock()

    def finish(self) -> None:
        self.status = GenerationStatus.IDLE

    def fail(self) -> None:
        self.story = ARCHIVE_ERROR_MESSAGE
        self.status = GenerationStatus.ERROR


class CaseRegistry:
    """In-memory case files keyed by server-issued session ids.

    Holds at most ``max_cases``; past that the least recently used idle case
    is dropped. Streaming cases are never evicted.
    """

    def __init__(self, max_cases: int = 256):
        self.max_cases = max_cases
        self._cases: "OrderedDict[str, CaseFile]" = OrderedDict()

    def issue(self) -> str:
        session_id = uuid.uuid4().hex
        self._cases[session_id] = CaseFile()
        self._evict()
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[CaseFile]:
        case = self._cases.get(session_id) if session_id else None
        if case is not None:
            self._cases.move_to_end(session_id)
        return case

    def discard(self, session_id: Optional[str]) -> None:
        if session_id:
            self._cases.pop(session_id, None)

    def _evict(self) -> None:
        if len(self._cases) <= self.max_cases:
            return
        for session_id in [sid for sid, case in self._cases.items() if not case.is_streaming]:
            if len(self._cases) <= self.max_cases:
                break
            del self._cases[session_id]

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._cases

    def __len__(self) -> int:
        return len(self._cases)
