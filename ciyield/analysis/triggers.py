"""
Trigger normalization.

GitHub Actions accepts `on:` as a single event name, a list of names, or a
mapping of event -> config. Everything downstream works on the mapping form.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator

from ..utils.helpers import is_sequence, safe_get


def normalize_triggers(on_config: Any) -> Dict[str, Any]:
    """Return `{event: config}`, with `True` standing in for "no details"."""
    if not on_config:
        return {}
    if isinstance(on_config, str):
        return {on_config: True}
    if is_sequence(on_config):
        return {name: True for name in on_config if isinstance(name, str)}
    if isinstance(on_config, Mapping):
        return dict(on_config)
    return {}


class TriggerSet(Mapping):
    """Read-only view over normalized triggers with push classification."""

    def __init__(self, on_config: Any = None):
        self._events = normalize_triggers(on_config)

    def __getitem__(self, event: str) -> Any:
        return self._events[event]

    def __iter__(self) -> Iterator[str]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"TriggerSet({self._events!r})"

    @property
    def is_tag_only_push(self) -> bool:
        """A push filtered to tags, with no branch filters at all."""
        push = self._events.get("push")
        if not isinstance(push, Mapping):
            return False
        tags = push.get("tags")
        return (
            is_sequence(tags)
            and len(tags) > 0
            and not push.get("branches")
            and not push.get("branches-ignore")
        )

    @property
    def has_commit_push(self) -> bool:
        return "push" in self._events and not self.is_tag_only_push

    @property
    def has_tag_push(self) -> bool:
        return "push" in self._events and self.is_tag_only_push

    def has_path_filter(self, event: str) -> bool:
        return bool(
            safe_get(self._events, event, "paths")
            or safe_get(self._events, event, "paths-ignore")
        )


def triggers_of(parsed: Mapping) -> TriggerSet:
    """
    Build the TriggerSet of a parsed workflow document.

    YAML 1.1 loaders read the bare key `on` as boolean True, so that key is
    accepted as well.
    """
    if not isinstance(parsed, Mapping):
        return TriggerSet()
    on_config = parsed.get("on")
    if on_config is None:
        on_config = parsed.get(True)
    return TriggerSet(on_config)
