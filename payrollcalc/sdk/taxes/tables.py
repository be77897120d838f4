"""Tax table resolution.

Loads federal bracket tables, state rates and FICA parameters from YAML
files and resolves the table that applies to a given tax year or state.

Layout of a tax tables directory:
    federal/<year>.yaml   brackets per filing status
    states.yaml           single effective rate per state
    fica.yaml             Social Security and Medicare parameters

The bundled tables live in payrollcalc/tax_tables/. A custom directory can
be configured with the tax_tables_dir setting (see sdk.config).
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from ..config import get_tax_tables_dir
from .schemas import (
    DEFAULT_FILING_STATUS,
    FederalTaxTable,
    FicaRules,
    StateTaxInfo,
    StateTaxTable,
    TaxBracket,
)

logger = logging.getLogger(__name__)

# Pay periods by frequency
PAY_PERIODS = {
    "Weekly": 52,
    "Biweekly": 26,
    "Semimonthly": 24,
    "Monthly": 12,
}
DEFAULT_PAY_PERIODS = 26


class TaxTableError(Exception):
    """Raised when tax table files are missing or malformed."""
    pass


def get_pay_periods(frequency: Optional[str]) -> int:
    """Get number of pay periods per year for a frequency (default 26)."""
    return PAY_PERIODS.get(frequency, DEFAULT_PAY_PERIODS)


def _get_bundled_tables_dir() -> Path:
    """Get the tax_tables directory shipped with the package."""
    package_root = Path(__file__).parent.parent.parent  # taxes -> sdk -> payrollcalc
    return package_root / "tax_tables"


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise TaxTableError(f"Tax table file not found: {path}")
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise TaxTableError(f"Tax table file is empty or not a mapping: {path}")
    return data


@lru_cache(maxsize=8)
def _load_federal_tables(tables_dir: str) -> Dict[int, FederalTaxTable]:
    """Load and validate every federal/<year>.yaml in a directory."""
    federal_dir = Path(tables_dir) / "federal"
    tables = {}
    for path in sorted(federal_dir.glob("*.yaml")):
        if not path.stem.isdigit():
            continue
        try:
            table = FederalTaxTable.model_validate(_load_yaml(path))
        except ValidationError as e:
            raise TaxTableError(f"Invalid federal tax table {path}: {e}") from e
        if table.year != int(path.stem):
            raise TaxTableError(f"{path} declares year {table.year}, expected {path.stem}")
        tables[table.year] = table
        logger.debug(f"loaded federal tax table {table.year} from {path}")

    if not tables:
        raise TaxTableError(f"No federal tax tables found in {federal_dir}")
    return tables


@lru_cache(maxsize=8)
def _load_state_table(tables_dir: str) -> StateTaxTable:
    path = Path(tables_dir) / "states.yaml"
    try:
        return StateTaxTable.model_validate(_load_yaml(path))
    except ValidationError as e:
        raise TaxTableError(f"Invalid state tax table {path}: {e}") from e


@lru_cache(maxsize=8)
def _load_fica_rules(tables_dir: str) -> FicaRules:
    path = Path(tables_dir) / "fica.yaml"
    try:
        return FicaRules.model_validate(_load_yaml(path))
    except ValidationError as e:
        raise TaxTableError(f"Invalid FICA rules {path}: {e}") from e


def clear_table_cache() -> None:
    """Drop cached tables so edited YAML files are re-read."""
    _load_federal_tables.cache_clear()
    _load_state_table.cache_clear()
    _load_fica_rules.cache_clear()


class TaxTableProvider:
    """Resolves tax tables for a tax year or state from one tables directory.

    Missing data never raises here: unknown years fall back to the nearest
    earlier year, unknown states have no withholding, and unknown filing
    statuses use the Single brackets.
    """

    def __init__(self, tables_dir: Optional[Path] = None):
        self.tables_dir = Path(tables_dir) if tables_dir else _get_bundled_tables_dir()

    @classmethod
    def from_settings(cls) -> "TaxTableProvider":
        """Build a provider for the configured (or bundled) tables directory."""
        return cls(get_tax_tables_dir())

    @property
    def _key(self) -> str:
        return str(self.tables_dir.resolve())

    @property
    def federal_years(self) -> List[int]:
        """Years with a federal table, ascending."""
        return sorted(_load_federal_tables(self._key))

    def resolve_tax_year(self, year: int) -> int:
        """Get the table year to use for a tax year.

        Uses the nearest defined year at or before ``year``. Years before the
        earliest table use the earliest table.
        """
        years = self.federal_years
        candidates = [y for y in years if y <= year]
        if not candidates:
            return years[0]
        return candidates[-1]

    def get_federal_table(self, year: int) -> FederalTaxTable:
        """Get the federal table that applies to a tax year."""
        resolved = self.resolve_tax_year(year)
        if resolved != year:
            logger.debug(f"no federal table for {year}, using {resolved}")
        return _load_federal_tables(self._key)[resolved]

    def get_brackets(self, year: int, filing_status: Optional[str]) -> List[TaxBracket]:
        """Get brackets for a filing status, falling back to Single."""
        table = self.get_federal_table(year)
        brackets = table.filing_statuses.get(filing_status)
        if brackets is None:
            logger.debug(f"unrecognized filing status {filing_status!r}, using {DEFAULT_FILING_STATUS}")
            brackets = table.filing_statuses[DEFAULT_FILING_STATUS]
        return brackets

    def get_state_info(self, state_code: Optional[str]) -> Optional[StateTaxInfo]:
        """Get a state's rate definition, or None if the state is unknown."""
        if not state_code:
            return None
        return _load_state_table(self._key).states.get(state_code.upper())

    def get_state_rate(self, state_code: Optional[str]) -> float:
        """Get a state's effective withholding rate (0 if unknown or missing)."""
        info = self.get_state_info(state_code)
        return info.rate if info else 0.0

    def get_fica_rules(self) -> FicaRules:
        return _load_fica_rules(self._key)

    def get_ss_wage_base(self, year: int) -> float:
        """Get the Social Security wage base, falling back to the earliest year."""
        wage_base = self.get_fica_rules().social_security.wage_base
        if year in wage_base:
            return wage_base[year]
        earliest = min(wage_base)
        logger.debug(f"no SS wage base for {year}, using {earliest}")
        return wage_base[earliest]


def get_tax_tables() -> TaxTableProvider:
    """Get a provider for the configured tax tables."""
    return TaxTableProvider.from_settings()
