"""
Report Export Test Module

Covers currency formatting, the report DataFrames and the XLSX workbook.
"""

from io import BytesIO
from typing import List

import pandas as pd
import pytest
from openpyxl import load_workbook

from revenue_reports.models import Account, Estimate
from revenue_reports.services.exports import (
    build_report_frames,
    default_report_filename,
    export_report_xlsx,
    format_currency,
)


class TestFormatCurrency:
    """Compact dollar formatting."""

    @pytest.mark.parametrize('value,expected', [
        (0, '$0'),
        (None, '$0'),
        ('not money', '$0'),
        (950, '$950'),
        (52300, '$52.3K'),
        (1000, '$1.0K'),
        (999.7, '$1.0K'),
        (999949, '$999.9K'),
        (999960, '$1.0M'),
        (1240000, '$1.2M'),
        ('$2,500,000', '$2.5M'),
        (-52300, '-$52.3K'),
    ])
    def test_format_currency(self, value, expected: str):
        assert format_currency(value) == expected


class TestReportFrames:
    """Report tables built from the aggregation services."""

    def test_sheet_names(self, scenario_estimates, sample_accounts):
        frames = build_report_frames(scenario_estimates, sample_accounts, 2025)
        assert list(frames) == [
            'Overall Stats',
            'Account Performance',
            'Department Breakdown',
            'Detailed Estimates',
        ]

    def test_overall_sheet_values(self, scenario_estimates, sample_accounts):
        overall = build_report_frames(scenario_estimates, sample_accounts, 2025)['Overall Stats']
        values = dict(zip(overall['Metric'], overall['Value']))

        assert values['Report Year'] == 2025
        assert values['Total Estimates'] == 3
        assert values['Win Rate (%)'] == 33.3
        assert values['Total Value'] == 17000

    def test_account_and_department_rows(self, scenario_estimates, sample_accounts):
        frames = build_report_frames(scenario_estimates, sample_accounts, 2025)

        accounts: pd.DataFrame = frames['Account Performance']
        departments: pd.DataFrame = frames['Department Breakdown']

        assert accounts['Account'].tolist() == ['Triovest Realty', 'Harbourfront Condos']
        assert departments['Department'].tolist() == ['Maintenance', 'Construction', 'Uncategorized']

    def test_detailed_estimates_include_outcome(
        self,
        scenario_estimates: List[Estimate],
        sample_accounts: List[Account],
    ):
        detail = build_report_frames(scenario_estimates, sample_accounts, 2025)['Detailed Estimates']
        assert detail['Outcome'].tolist() == ['won', 'lost', 'lost']

    def test_empty_report(self):
        frames = build_report_frames([], [], 2025)
        assert frames['Account Performance'].empty
        assert frames['Overall Stats'].shape[0] == 12


class TestExportXlsx:
    """XLSX workbook output."""

    def test_writes_workbook_to_buffer(self, scenario_estimates, sample_accounts):
        buffer = BytesIO()

        export_report_xlsx(scenario_estimates, sample_accounts, 2025, buffer)

        buffer.seek(0)
        workbook = load_workbook(buffer)
        assert workbook.sheetnames == [
            'Overall Stats',
            'Account Performance',
            'Department Breakdown',
            'Detailed Estimates',
        ]
        sheet = workbook['Account Performance']
        assert sheet['A1'].value == 'Account'
        assert sheet['A1'].font.bold is True
        assert sheet['A2'].value == 'Triovest Realty'

    def test_default_filename(self, scenario_estimates, sample_accounts, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        target = export_report_xlsx(scenario_estimates, sample_accounts, 2025)

        assert target == default_report_filename(2025) == 'End_of_Year_Report_2025.xlsx'
        assert (tmp_path / target).exists()
