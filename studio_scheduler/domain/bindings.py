"""How a booking's room or editor slot is satisfied.

A binding is exactly one of three variants, discriminated on ``kind``:

* ``Unassigned``    – nothing held, never conflict-checked.
* ``SystemResource`` – a managed Room/Editor, conflict-checked unless the
  resource has ``ignore_conflict`` set.
* ``ClientSupplied`` – a free-text description of the client's own room or
  editor. The studio has no view of the client's calendar, so these are
  never conflict-checked.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from studio_scheduler.domain.errors import InvalidBinding


class Unassigned(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unassigned"] = "unassigned"


class SystemResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["system"] = "system"
    resource_id: int
    ignore_conflict: bool = False


class ClientSupplied(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["client"] = "client"
    name: str
    type: str | None = None
    capacity: int | None = None
    phone: str | None = None
    email: str | None = None


ResourceBinding = Annotated[
    Union[Unassigned, SystemResource, ClientSupplied],
    Field(discriminator="kind"),
]

BindingChoice = Literal["system", "client"]

UNASSIGNED = Unassigned()


def build_binding(
    label: str,
    choice: BindingChoice | None,
    resource_id: int | None = None,
    client_fields: dict[str, object] | None = None,
) -> Unassigned | SystemResource | ClientSupplied:
    """Pick exactly one binding variant from raw form input.

    *label* is ``"room"`` or ``"editor"`` and only feeds error messages.
    *client_fields* maps ClientSupplied attribute names to raw values; empty
    strings count as absent. Raises ``InvalidBinding`` when the fields do not
    match the chosen variant.
    """
    supplied = {
        key: value
        for key, value in (client_fields or {}).items()
        if value not in (None, "")
    }

    if choice is None:
        if resource_id is not None or supplied:
            raise InvalidBinding(
                f"{label}: fields supplied without choosing system or client"
            )
        return UNASSIGNED

    if choice == "system":
        if resource_id is None:
            raise InvalidBinding(f"{label}: system {label} selected but no id given")
        if supplied:
            raise InvalidBinding(
                f"{label}: system {label} cannot carry client fields "
                f"({', '.join(sorted(supplied))})"
            )
        return SystemResource(resource_id=resource_id)

    if resource_id is not None:
        raise InvalidBinding(f"{label}: client {label} cannot carry a system id")
    if not supplied.get("name"):
        raise InvalidBinding(f"{label}: client {label} requires a name")
    return ClientSupplied(**supplied)


def lenient_binding(
    choice: BindingChoice | None, resource_id: int | None
) -> Unassigned | SystemResource:
    """Binding for conflict pre-checks on half-filled forms.

    Only a system id matters to the detector, so anything else (including
    client descriptions) collapses to ``Unassigned``.
    """
    if choice in (None, "system") and resource_id is not None:
        return SystemResource(resource_id=resource_id)
    return UNASSIGNED
