"""
Conversation State - the append-only turn log replayed to the model
"""
import threading
from datetime import datetime
from typing import List, Dict, Iterator, Tuple
from dataclasses import dataclass, field
from enum import Enum


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """A single conversation turn. Immutable once appended."""
    role: Role
    text: str
    index: int
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict:
        return {"role": self.role.value, "content": self.text}


class ConversationStore:
    """
    Ordered, append-only log of conversation turns.

    Turns are never edited or removed for the lifetime of the process, and
    each keeps the index it was given at append time. The whole sequence is
    replayed to the model on every inference call.

    Appends are serialized by a lock; readers get tuple snapshots, so they
    always see a consistent prefix of the log.
    """

    def __init__(self):
        self._turns: List[Turn] = []
        self._lock = threading.Lock()

    def append(self, role: Role, text: str) -> Turn:
        with self._lock:
            turn = Turn(role=role, text=text, index=len(self._turns))
            self._turns.append(turn)
            return turn

    def add_user(self, text: str) -> Turn:
        return self.append(Role.USER, text)

    def add_assistant(self, text: str) -> Turn:
        return self.append(Role.ASSISTANT, text)

    def snapshot(self) -> Tuple[Turn, ...]:
        with self._lock:
            return tuple(self._turns)

    def to_messages(self) -> List[Dict]:
        """Format the log for the chat completion API."""
        return [turn.to_dict() for turn in self.snapshot()]

    @property
    def last(self) -> Turn:
        with self._lock:
            if not self._turns:
                raise IndexError("conversation is empty")
            return self._turns[-1]

    def __getitem__(self, index: int) -> Turn:
        with self._lock:
            return self._turns[index]

    def __len__(self) -> int:
        with self._lock:
            return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.snapshot())
