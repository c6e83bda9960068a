"""Generic keyed text-field state shared by every input of a form."""

from typing import Dict, Mapping


class FormState:
    """
    Holds the current value of every named field of a form.

    The key set is fixed by the defaults given at construction. Values are
    always strings; an empty string means "unset".
    """

    def __init__(self, defaults: Mapping[str, str]):
        self._defaults: Dict[str, str] = dict(defaults)
        self._fields: Dict[str, str] = dict(defaults)

    @property
    def fields(self) -> Dict[str, str]:
        """Snapshot of the current field values."""
        return dict(self._fields)

    def get(self, name: str, default: str = "") -> str:
        return self._fields.get(name, default)

    def __getitem__(self, name: str) -> str:
        return self._fields[name]

    def on_change(self, name: str, value: str) -> None:
        """Set one field, keeping every other field as it is."""
        updated = {k: v for k, v in self._fields.items() if k != name}
        updated[name] = value
        self._fields = updated

    def reset(self) -> None:
        """Restore the defaults given at construction."""
        self._fields = dict(self._defaults)

    def __repr__(self) -> str:
        return f"FormState({self._fields!r})"
