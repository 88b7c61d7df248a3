"""Verification settings for the factory.

Settings decide how hard the factory works before it hands out a
``Num``: how many input tuples it is willing to enumerate
exhaustively, how many random samples it draws above that, and the
seed those samples come from.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class VerificationSettings(BaseModel):
    """How a width-specialised ``Num`` is checked against its contract."""

    exhaustive_limit: int = Field(
        default=70_000,
        ge=0,
        description="Largest width.size ** arity checked exhaustively",
    )
    sample_count: int = Field(
        default=10_000,
        ge=1,
        description="Input tuples per check when not exhaustive",
    )
    seed: int = Field(default=0, description="Seed for sampled input tuples")
    extra_edges: list[int] = Field(
        default_factory=list,
        description="Values always sampled when they fit the width",
    )

    model_config = {"frozen": True}

    @field_validator("extra_edges")
    @classmethod
    def unique_edges(cls, v: list[int]) -> list[int]:
        seen: set[int] = set()
        out: list[int] = []
        for e in v:
            if e not in seen:
                seen.add(e)
                out.append(e)
        return out


DEFAULT_SETTINGS = VerificationSettings()
