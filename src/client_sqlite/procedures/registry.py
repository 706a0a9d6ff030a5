# src/client_sqlite/procedures/registry.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from client_sqlite.domain.errors import (
    DuplicateProcedureError,
    InputValidationError,
    InvalidLogLevelError,
    ProcedureNotFoundError,
)
from client_sqlite.logging import get_logger

_LOG = get_logger(__name__)

Handler = Callable[[Any], Awaitable[Any]]
PathLike = Union[str, Sequence[str]]


def normalize_path(path: PathLike) -> tuple[str, ...]:
    """
    "db.query" and ("db", "query") name the same procedure.
    """
    parts = tuple(path.split(".")) if isinstance(path, str) else tuple(path)
    if not parts or any(not p for p in parts):
        raise ValueError(f"Invalid procedure path: {path!r}")
    return parts


@dataclass(frozen=True)
class Procedure:
    path: tuple[str, ...]
    input_model: type[BaseModel]
    output_model: type[BaseModel]
    description: str
    handler: Handler

    @property
    def name(self) -> str:
        return ".".join(self.path)


class ProcedureRegistry:
    """
    Maps hierarchical paths to procedures and dispatches calls.

    Registration is explicit (no import-time side effects). Registering the
    same path twice raises DuplicateProcedureError.

    `call` is the full contract of a remote call:
    - payload validated against input_model (before any handler work)
    - handler awaited
    - result validated against output_model
    Handler exceptions propagate unchanged.
    """

    def __init__(self) -> None:
        self._procedures: dict[tuple[str, ...], Procedure] = {}

    def register(self, procedure: Procedure) -> None:
        if procedure.path in self._procedures:
            raise DuplicateProcedureError(
                f"Procedure already registered: {procedure.name}",
                details={"path": procedure.name},
            )
        self._procedures[procedure.path] = procedure
        _LOG.debug("Registered procedure %s", procedure.name)

    def register_many(self, procedures: Iterable[Procedure]) -> None:
        for procedure in procedures:
            self.register(procedure)

    def get(self, path: PathLike) -> Procedure:
        name = path if isinstance(path, str) else ".".join(path)
        try:
            return self._procedures[normalize_path(path)]
        except (KeyError, ValueError):
            raise ProcedureNotFoundError(f"Procedure not found: {name}", details={"path": name}) from None

    def procedures(self) -> list[Procedure]:
        return list(self._procedures.values())

    def __contains__(self, path: object) -> bool:
        try:
            return normalize_path(path) in self._procedures  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def __len__(self) -> int:
        return len(self._procedures)

    async def call(self, path: PathLike, payload: Optional[Union[Mapping[str, Any], BaseModel]] = None) -> BaseModel:
        procedure = self.get(path)
        params = _parse_input(procedure, payload)

        _LOG.debug("Calling %s", procedure.name)
        result = await procedure.handler(params)

        if isinstance(result, procedure.output_model):
            return result
        return procedure.output_model.model_validate(result)


def _parse_input(
    procedure: Procedure,
    payload: Optional[Union[Mapping[str, Any], BaseModel]],
) -> BaseModel:
    if isinstance(payload, procedure.input_model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True, exclude_unset=True)
    try:
        return procedure.input_model.model_validate(payload if payload is not None else {})
    except PydanticValidationError as e:
        raise _translate_validation_error(procedure, e) from e


def _translate_validation_error(procedure: Procedure, exc: PydanticValidationError) -> InputValidationError:
    errors = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors(include_url=False)
    ]
    details = {"procedure": procedure.name, "errors": errors}

    bad_levels = [err for err in errors if err["type"] == "invalid_log_level"]
    if bad_levels:
        return InvalidLogLevelError(bad_levels[0]["msg"], details=details)

    return InputValidationError(f"Invalid input for {procedure.name}", details=details)
