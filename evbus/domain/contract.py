"""Key -> payload type contract, checked at dispatch time."""

from __future__ import annotations

from typing import Any, Hashable, Mapping

from pydantic import TypeAdapter, ValidationError

from evbus.domain.errors import PayloadValidationError


class PayloadContract:
    """Associates event keys with the payload type their handlers expect.

    Any type pydantic can validate is accepted (``BaseModel`` subclasses,
    ``TypedDict``s, plain types). Keys missing from the contract are
    unconstrained.
    """

    def __init__(self, payload_types: Mapping[Hashable, Any] | None = None) -> None:
        self._types: dict[Hashable, Any] = dict(payload_types or {})
        self._adapters: dict[Hashable, TypeAdapter] = {}

    def __contains__(self, key: Hashable) -> bool:
        return key in self._types

    def payload_type(self, key: Hashable) -> Any | None:
        return self._types.get(key)

    def validate(self, key: Hashable, payload: Any) -> None:
        """Raise ``PayloadValidationError`` if *payload* does not fit *key*.

        Validation is strict, so ``"500"`` is not accepted for an ``int``
        field. Undeclared keys always pass.
        """
        if key not in self._types:
            return
        adapter = self._adapters.get(key)
        if adapter is None:
            adapter = TypeAdapter(self._types[key])
            self._adapters[key] = adapter
        try:
            adapter.validate_python(payload, strict=True)
        except ValidationError as exc:
            raise PayloadValidationError(key, str(exc)) from exc
