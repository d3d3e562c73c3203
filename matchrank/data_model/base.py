"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults.

    Unknown fields are rejected so that records crossing into the ranking
    core carry exactly the fields the calculators declare.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
