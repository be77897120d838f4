"""Tests for tax table loading and year/state/filing status resolution.

Custom table directories are built under tmp_path so malformed tables can
be tested without touching the bundled YAML.
"""

import shutil

import pytest
import yaml

from payrollcalc.sdk import set_setting
from payrollcalc.sdk.taxes import TaxTableError, TaxTableProvider, get_pay_periods, get_tax_tables


@pytest.fixture
def custom_tables(tmp_path, tables):
    """Copy of the bundled tables that a test may edit."""
    tables_dir = tmp_path / "tax_tables"
    shutil.copytree(tables.tables_dir, tables_dir)
    return tables_dir


def write_federal(tables_dir, year, filing_statuses):
    path = tables_dir / "federal" / f"{year}.yaml"
    path.write_text(yaml.safe_dump({"year": year, "filing_statuses": filing_statuses}))
    return path


class TestPayPeriods:

    @pytest.mark.parametrize("frequency,periods", [
        ("Weekly", 52),
        ("Biweekly", 26),
        ("Semimonthly", 24),
        ("Monthly", 12),
    ])
    def test_known_frequencies(self, frequency, periods):
        assert get_pay_periods(frequency) == periods

    def test_unknown_frequency_defaults_to_biweekly(self):
        assert get_pay_periods("Fortnightly-ish") == 26
        assert get_pay_periods(None) == 26


class TestYearResolution:

    def test_bundled_years(self, tables):
        assert tables.federal_years == [2024, 2025]

    def test_exact_year(self, tables):
        assert tables.get_federal_table(2024).year == 2024

    def test_later_year_uses_latest_defined(self, tables):
        assert tables.resolve_tax_year(2031) == 2025
        assert tables.get_federal_table(2031).year == 2025

    def test_earlier_year_uses_earliest_defined(self, tables):
        assert tables.resolve_tax_year(2019) == 2024

    def test_gap_uses_nearest_earlier_year(self, custom_tables):
        (custom_tables / "federal" / "2025.yaml").rename(custom_tables / "federal" / "2026.yaml")
        text = (custom_tables / "federal" / "2026.yaml").read_text().replace("year: 2025", "year: 2026")
        (custom_tables / "federal" / "2026.yaml").write_text(text)

        provider = TaxTableProvider(custom_tables)
        assert provider.resolve_tax_year(2025) == 2024
        assert provider.resolve_tax_year(2026) == 2026


class TestFilingStatus:

    def test_known_status(self, tables):
        brackets = tables.get_brackets(2025, "MarriedFilingJointly")
        assert brackets[0].max == 23850

    def test_unknown_status_falls_back_to_single(self, tables):
        assert tables.get_brackets(2025, "Widowed") == tables.get_brackets(2025, "Single")

    def test_missing_status_falls_back_to_single(self, tables):
        assert tables.get_brackets(2025, None) == tables.get_brackets(2025, "Single")


class TestStates:

    def test_state_rate(self, tables):
        assert tables.get_state_rate("CA") == pytest.approx(0.093)

    def test_state_code_case_insensitive(self, tables):
        assert tables.get_state_rate("ca") == tables.get_state_rate("CA")

    @pytest.mark.parametrize("code", ["TX", "FL", "WA", "ZZ", "", None])
    def test_no_tax_unknown_or_missing_state_is_zero(self, tables, code):
        assert tables.get_state_rate(code) == 0

    def test_unknown_state_has_no_info(self, tables):
        assert tables.get_state_info("ZZ") is None

    def test_progressive_flag(self, tables):
        assert tables.get_state_info("CA").has_progressive_tax is True
        assert tables.get_state_info("PA").has_progressive_tax is False


class TestFica:

    def test_wage_base_by_year(self, tables):
        assert tables.get_ss_wage_base(2024) == 168600
        assert tables.get_ss_wage_base(2025) == 176100

    def test_unknown_year_uses_earliest_wage_base(self, tables):
        assert tables.get_ss_wage_base(2030) == 168600

    def test_medicare_rules(self, tables):
        medicare = tables.get_fica_rules().medicare
        assert medicare.rate == pytest.approx(0.0145)
        assert medicare.additional_threshold == 200000


class TestTableValidation:

    def test_missing_flat_amounts_are_computed(self, custom_tables):
        write_federal(custom_tables, 2025, {
            "Single": [
                {"min": 0, "max": 10000, "rate": 0.10},
                {"min": 10000, "max": None, "rate": 0.20},
            ],
        })
        brackets = TaxTableProvider(custom_tables).get_brackets(2025, "Single")
        assert brackets[1].flat_amount == pytest.approx(1000)

    def test_inconsistent_flat_amount_rejected(self, custom_tables):
        write_federal(custom_tables, 2025, {
            "Single": [
                {"min": 0, "max": 10000, "rate": 0.10, "flat_amount": 0},
                {"min": 10000, "max": None, "rate": 0.20, "flat_amount": 1500},
            ],
        })
        with pytest.raises(TaxTableError, match="flat_amount"):
            TaxTableProvider(custom_tables).get_federal_table(2025)

    def test_gap_in_brackets_rejected(self, custom_tables):
        write_federal(custom_tables, 2025, {
            "Single": [
                {"min": 0, "max": 10000, "rate": 0.10},
                {"min": 12000, "max": None, "rate": 0.20},
            ],
        })
        with pytest.raises(TaxTableError):
            TaxTableProvider(custom_tables).get_federal_table(2025)

    def test_single_schedule_required(self, custom_tables):
        write_federal(custom_tables, 2025, {
            "MarriedFilingJointly": [
                {"min": 0, "max": 20000, "rate": 0.10},
                {"min": 20000, "max": None, "rate": 0.20},
            ],
        })
        with pytest.raises(TaxTableError, match="Single"):
            TaxTableProvider(custom_tables).get_federal_table(2025)

    def test_year_must_match_file_name(self, custom_tables):
        path = custom_tables / "federal" / "2025.yaml"
        path.write_text(path.read_text().replace("year: 2025", "year: 2023"))
        with pytest.raises(TaxTableError, match="declares year"):
            TaxTableProvider(custom_tables).federal_years

    def test_rate_out_of_range_rejected(self, custom_tables):
        (custom_tables / "states.yaml").write_text(yaml.safe_dump({
            "states": {"XX": {"rate": 1.5, "name": "Nowhere"}},
        }))
        with pytest.raises(TaxTableError):
            TaxTableProvider(custom_tables).get_state_rate("XX")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(TaxTableError, match="No federal tax tables"):
            TaxTableProvider(tmp_path / "nowhere").federal_years


class TestConfiguredTables:

    def test_tax_tables_dir_setting(self, custom_tables):
        (custom_tables / "states.yaml").write_text(yaml.safe_dump({
            "states": {"CA": {"rate": 0.05, "name": "California"}},
        }))
        set_setting("tax_tables_dir", str(custom_tables))
        assert get_tax_tables().get_state_rate("CA") == pytest.approx(0.05)

    def test_env_override(self, custom_tables, monkeypatch):
        monkeypatch.setenv("PAYROLL_CALC_TAX_TABLES", str(custom_tables))
        assert get_tax_tables().tables_dir == custom_tables
