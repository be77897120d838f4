"""Pydantic schemas for tax table validation.

These schemas validate the tax_tables/*.yaml files and provide typed access
to brackets, state rates and FICA parameters.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .brackets import check_bracket_sequence, fill_flat_amounts

# Brackets used for filing statuses a table does not list
DEFAULT_FILING_STATUS = "Single"


class TaxBracket(BaseModel):
    """Single bracket of a progressive schedule."""
    model_config = ConfigDict(extra="forbid")

    min: float = Field(..., ge=0, description="Lower bound (exclusive) of the bracket")
    max: Optional[float] = Field(default=None, description="Upper bound (None for the top bracket)")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")
    flat_amount: Optional[float] = Field(
        default=None, ge=0,
        description="Cumulative tax of all lower brackets (computed if omitted)",
    )


class FederalTaxTable(BaseModel):
    """Federal brackets for one tax year, keyed by filing status."""
    model_config = ConfigDict(extra="forbid")

    year: int = Field(..., ge=1900)
    filing_statuses: Dict[str, List[TaxBracket]]

    @model_validator(mode="after")
    def check_brackets(self) -> "FederalTaxTable":
        problems = []
        if DEFAULT_FILING_STATUS not in self.filing_statuses:
            problems.append(f"missing required filing status {DEFAULT_FILING_STATUS!r}")
        for status, brackets in self.filing_statuses.items():
            issues = check_bracket_sequence(brackets)
            if not issues:
                issues = fill_flat_amounts(brackets)
            problems.extend(f"{status}: {issue}" for issue in issues)
        if problems:
            raise ValueError("; ".join(problems))
        return self


class StateTaxInfo(BaseModel):
    """Withholding rate definition for one state."""
    model_config = ConfigDict(extra="forbid")

    rate: float = Field(..., ge=0, le=1, description="Single effective rate")
    has_progressive_tax: bool = Field(
        default=False,
        description="State law is graduated; rate is the top marginal rate",
    )
    name: str


class StateTaxTable(BaseModel):
    model_config = ConfigDict(extra="forbid")

    states: Dict[str, StateTaxInfo]


class SocialSecurityRules(BaseModel):
    """Social Security tax rules."""
    model_config = ConfigDict(extra="forbid")

    rate: float = Field(..., ge=0, le=1, description="SS tax rate (employee portion)")
    wage_base: Dict[int, float] = Field(..., min_length=1, description="Wage base by year")


class MedicareRules(BaseModel):
    """Medicare tax rules."""
    model_config = ConfigDict(extra="forbid")

    rate: float = Field(..., ge=0, le=1)
    additional_rate: float = Field(..., ge=0, le=1)
    additional_threshold: float = Field(..., gt=0)


class FicaRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    social_security: SocialSecurityRules
    medicare: MedicareRules
