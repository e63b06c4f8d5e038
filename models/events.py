# models/events.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

@dataclass(frozen=True)
class ReplacementEvent(ABC):
    """
    Base class for the notifications produced for each edit.

    Every event exposes the text it replaced, the text that replaced it and some
    context, so reporting code can treat all kinds alike.
    """

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    @abstractmethod
    def original(self) -> str:
        ...

    @property
    @abstractmethod
    def replacement(self) -> str:
        ...

    @property
    def context(self) -> Optional[str]:
        return None

    @property
    @abstractmethod
    def message(self) -> str:
        ...

@dataclass(frozen=True)
class RemovedProjectUrl(ReplacementEvent):
    original_url: str
    relative_url: str

    @property
    def original(self) -> str:
        return self.original_url

    @property
    def replacement(self) -> str:
        return self.relative_url

    @property
    def message(self) -> str:
        return f"Replaced URL '{self.original_url}' with '{self.relative_url}'"

@dataclass(frozen=True)
class RemovedBadgeWithLink(ReplacementEvent):
    image_url: str
    label: str
    link_url: str

    @property
    def original(self) -> str:
        return self.image_url

    @property
    def replacement(self) -> str:
        return ""

    @property
    def context(self) -> Optional[str]:
        return self.link_url

    @property
    def message(self) -> str:
        return f"Removed badge '{self.label}' with URL '{self.image_url}' and link '{self.link_url}'"

@dataclass(frozen=True)
class RemovedBadgeWithoutLink(ReplacementEvent):
    image_url: str
    label: str

    @property
    def original(self) -> str:
        return self.image_url

    @property
    def replacement(self) -> str:
        return ""

    @property
    def context(self) -> Optional[str]:
        return self.label

    @property
    def message(self) -> str:
        return f"Removed badge '{self.label}' with URL '{self.image_url}'"

@dataclass(frozen=True)
class FixedAnchor(ReplacementEvent):
    path: Union[str, Path, None]
    url: str
    fixed_url: str

    @property
    def original(self) -> str:
        return self.url

    @property
    def replacement(self) -> str:
        return self.fixed_url

    @property
    def context(self) -> Optional[str]:
        return str(self.path) if self.path is not None else None

    @property
    def message(self) -> str:
        return f"Replaced anchor '{self.url}' with '{self.fixed_url}'"

# Callback receiving each event as it is produced.
Observer = Callable[[ReplacementEvent], None]

def notify(observer: Optional[Observer], event: ReplacementEvent):
    if observer is not None:
        observer(event)
