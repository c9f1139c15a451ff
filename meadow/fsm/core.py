# Small finite state machine in the spirit of the 'transitions' library
# https://github.com/pytransitions/transitions

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from graphviz import Digraph

Callback = Callable[["EventData"], Any]
Condition = Callable[["EventData"], bool]
StateName = str | Enum

WILDCARD = "*"


class MachineError(RuntimeError):
    """Raised when a trigger the machine does not know is fired."""


def _key(name: StateName) -> str:
    return name.name.lower() if isinstance(name, Enum) else str(name)


def _listify(value: Optional[Callback | Sequence[Callback]]) -> List[Callback]:
    if value is None:
        return []
    if callable(value):
        return [value]
    return [cb for cb in value if callable(cb)]


class State:
    """A named state with enter/exit callbacks."""

    def __init__(
        self,
        name: StateName,
        *,
        on_enter: Optional[Callback | Sequence[Callback]] = None,
        on_exit: Optional[Callback | Sequence[Callback]] = None,
    ) -> None:
        self._name = name
        self.on_enter = _listify(on_enter)
        self.on_exit = _listify(on_exit)

    @property
    def name(self) -> str:
        return _key(self._name)

    @property
    def value(self) -> Any:
        return self._name

    def __repr__(self) -> str:
        return f"State({self.name!r})"


class EventData:
    """Context handed to conditions and callbacks during a transition."""

    def __init__(
        self,
        machine: "Machine",
        trigger: Optional[str],
        kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.machine = machine
        self.trigger = trigger
        self.kwargs = kwargs or {}
        self.source: Optional[State] = machine.current_state
        self.dest: Optional[State] = None


class Transition:
    def __init__(
        self,
        source: str,
        dest: str,
        *,
        conditions: Optional[Condition | Sequence[Condition]] = None,
    ) -> None:
        self.source = source
        self.dest = dest
        self.conditions: List[Condition] = _listify(conditions)

    def execute(self, data: EventData) -> bool:
        data.dest = data.machine.get_state(self.dest)
        if not all(guard(data) for guard in self.conditions):
            return False

        data.machine._change_state(data.dest, data)
        return True


class Machine:
    """Deterministic state machine; triggers are fired by name.

    Firing a known trigger that has no transition out of the current state
    is a no-op returning False. Firing an unknown trigger raises
    ``MachineError``.
    """

    def __init__(
        self,
        states: Iterable[StateName | State],
        initial_state: StateName,
    ) -> None:
        self._states: Dict[str, State] = {}
        self._transitions: Dict[str, Dict[str, List[Transition]]] = {}

        for state in states:
            self.add_state(state)
        if _key(initial_state) not in self._states:
            raise ValueError("Initial state must be in the provided list of states.")

        self._current_state = self._states[_key(initial_state)]

    @property
    def states(self) -> Dict[str, State]:
        return dict(self._states)

    @property
    def current_state(self) -> State:
        return self._current_state

    @property
    def state(self) -> Any:
        """Value the current state was registered with (e.g. the Enum member)."""
        return self._current_state.value

    def is_state(self, name: StateName) -> bool:
        return self._current_state.name == _key(name)

    def add_state(
        self,
        state: StateName | State,
        *,
        on_enter: Optional[Callback | Sequence[Callback]] = None,
        on_exit: Optional[Callback | Sequence[Callback]] = None,
    ) -> State:
        if not isinstance(state, State):
            state = State(state, on_enter=on_enter, on_exit=on_exit)
        if state.name in self._states:
            raise ValueError(f"State '{state.name}' already registered.")
        self._states[state.name] = state
        return state

    def get_state(self, name: StateName) -> State:
        key = _key(name)
        if key not in self._states:
            raise ValueError(f"State '{key}' not found in machine states.")
        return self._states[key]

    def on_enter(self, name: StateName, callback: Callback) -> None:
        self.get_state(name).on_enter.append(callback)

    def add_transition(
        self,
        trigger: str,
        sources: StateName | Sequence[StateName],
        dest: StateName,
        *,
        conditions: Optional[Condition | Sequence[Condition]] = None,
    ) -> None:
        dest_name = self.get_state(dest).name
        if isinstance(sources, (list, tuple)):
            source_names = [_key(s) for s in sources]
        else:
            source_names = [_key(sources)]

        by_source = self._transitions.setdefault(trigger, defaultdict(list))
        for src in source_names:
            if src != WILDCARD:
                self.get_state(src)
            by_source[src].append(
                Transition(src, dest_name, conditions=conditions)
            )

    def may_trigger(self, trigger: str) -> bool:
        by_source = self._transitions.get(trigger, {})
        return bool(by_source.get(self._current_state.name) or by_source.get(WILDCARD))

    def trigger(self, trigger: str, **kwargs: Any) -> bool:
        if trigger not in self._transitions:
            raise MachineError(f"Unknown trigger '{trigger}'.")

        by_source = self._transitions[trigger]
        data = EventData(self, trigger, kwargs)
        for key in (self._current_state.name, WILDCARD):
            for transition in by_source.get(key, []):
                if transition.execute(data):
                    return True
        return False

    def to_graphviz(self) -> Digraph:
        g = Digraph()
        for state in self._states.values():
            shape = "doublecircle" if state is self._current_state else "circle"
            g.node(state.name, shape=shape)

        for trigger, by_source in self._transitions.items():
            for src, transitions in by_source.items():
                sources = list(self._states) if src == WILDCARD else [src]
                for transition in transitions:
                    for name in sources:
                        g.edge(name, transition.dest, label=trigger)
        return g

    def _change_state(self, dest: State, data: EventData) -> None:
        previous = self._current_state
        if previous is dest:
            return
        data.source = previous
        for callback in previous.on_exit:
            callback(data)
        self._current_state = dest
        for callback in dest.on_enter:
            callback(data)
