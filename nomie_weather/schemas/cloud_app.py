"""Pydantic schema for the cloud app response rendered by Nomie."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CloudAppResponse(BaseModel):
    """What Nomie displays (``html``) and executes (``commands``).

    Serialized with ``exclude_none`` so absent fields are omitted entirely.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(
        default=None,
        description="Card title, e.g. 'Portland Weather'.",
    )
    html: str = Field(
        ...,
        description="HTML fragment shown to the user.",
    )
    commands: list[str] | None = Field(
        default=None,
        description=(
            "Nomie track commands to execute. Present only when the user's "
            "cooldown elapsed and the new timestamp was stored."
        ),
    )
    age: float | None = Field(
        default=None,
        description="Minutes since commands were last handed out to this user.",
    )
    err: str | None = Field(
        default=None,
        description="Machine-readable error code when part of the run failed.",
    )
    err_message: str | None = Field(
        default=None,
        alias="errMessage",
        description="Human-readable summary of the failure.",
    )
