"""Typed view of a deal's `details.calculator` snapshot.

The snapshot is loose, nested and partially optional JSON written by the
calculator UI. It is validated once here; everything downstream works with
these models. Unknown keys are kept (`extra="allow"`) but never relied on.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from uptown_docs.schemas.documents import ScheduleRow


class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class SnapshotUnitInfo(_Loose):
    """`unitInfo` — identity plus optional structural fields."""

    unit_id: Any = None
    unit_code: str | None = None
    unit_type: str | None = None
    unit_area: Any = None
    area: Any = None
    garden_area: Any = None
    garden: Any = None
    building_number: Any = None
    building: Any = None
    block_sector: Any = None
    block: Any = None
    zone: Any = None

    @field_validator("unit_code", "unit_type", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        return None if v is None else str(v)


class SnapshotPlan(_Loose):
    """`generatedPlan` — schedule, down payment and totals."""

    schedule: list[ScheduleRow] | None = None
    down_payment_amount: Any = Field(default=None, alias="downPaymentAmount")
    totals: dict[str, Any] | None = None

    @field_validator("schedule", mode="before")
    @classmethod
    def keep_row_objects(cls, v: Any) -> list[Any] | None:
        if not isinstance(v, list):
            return None
        return [row for row in v if isinstance(row, dict)]

    @field_validator("totals", mode="before")
    @classmethod
    def drop_non_object_totals(cls, v: Any) -> dict[str, Any] | None:
        return v if isinstance(v, dict) else None


class SnapshotInputs(_Loose):
    """`inputs` — only the dates and language are read."""

    offer_date: str | None = Field(default=None, alias="offerDate")
    first_payment_date: str | None = Field(default=None, alias="firstPaymentDate")
    language: str | None = None

    @field_validator("offer_date", "first_payment_date", "language", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)


class CalculatorSnapshot(_Loose):
    """The whole `details.calculator` blob."""

    client_info: dict[str, Any] = Field(default_factory=dict, alias="clientInfo")
    unit_info: SnapshotUnitInfo | None = Field(default=None, alias="unitInfo")
    generated_plan: SnapshotPlan | None = Field(default=None, alias="generatedPlan")
    unit_pricing_breakdown: dict[str, Any] | None = Field(default=None, alias="unitPricingBreakdown")
    inputs: SnapshotInputs = Field(default_factory=SnapshotInputs)
    language: str | None = None
    currency: str | None = None

    @field_validator("client_info", mode="before")
    @classmethod
    def default_client_info(cls, v: Any) -> dict[str, Any]:
        return v if isinstance(v, dict) else {}

    @field_validator("unit_info", "generated_plan", "unit_pricing_breakdown", mode="before")
    @classmethod
    def drop_non_objects(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @field_validator("inputs", mode="before")
    @classmethod
    def default_inputs(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @field_validator("language", "currency", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @property
    def schedule(self) -> list[ScheduleRow]:
        if self.generated_plan and self.generated_plan.schedule:
            return list(self.generated_plan.schedule)
        return []

    @property
    def down_payment_amount(self) -> Any:
        return self.generated_plan.down_payment_amount if self.generated_plan else None

    @property
    def snapshot_language(self) -> str | None:
        """`language`, then `inputs.language`."""
        return self.language or self.inputs.language or None

    @classmethod
    def from_deal_details(cls, details: Any) -> CalculatorSnapshot:
        """Parse `deals.details` (any shape) into a snapshot; missing blob → empty snapshot."""
        calc = details.get("calculator") if isinstance(details, dict) else None
        return cls.model_validate(calc if isinstance(calc, dict) else {})

