from datetime import datetime, timezone

import pytest

from tests import INPUT_DIRECTORY
from wsprtrack.reports import (
    InvalidReportError,
    merge_reports,
    parse_report,
    RawReport,
    RawReportFile,
    Reception,
)


def test_raw_report():
    report = RawReport(
        '2025-07-01T12:08:31Z',
        'kd2xyz',
        'fn20',
        13,
        [('W1AW', 'FN31', 14097050, -18), Reception('K2ABC', frequency=14097060)],
    )

    assert report.time == datetime(2025, 7, 1, 12, 8, tzinfo=timezone.utc)
    assert report.callsign == 'KD2XYZ'
    assert report.locator == 'FN20'
    assert report.power_index == 4
    assert report.receivers == ('K2ABC', 'W1AW')
    assert report.key == (datetime(2025, 7, 1, 12, 8, tzinfo=timezone.utc), 'KD2XYZ')
    assert RawReport(datetime(2025, 7, 1, 12, 8), 'KD2XYZ', 'FN20', 13).power_index == 4
    assert RawReport(datetime(2025, 7, 1, 12, 8), 'KD2XYZ', 'FN20', 14).power_index is None


def test_parse_report():
    full_row = [
        '2025-07-01 12:08:00',
        'KD2XYZ',
        'FN20',
        13,
        [['W1AW', 'FN31', 14097050, -18]],
    ]
    short_row = ['2025-07-01 12:08:00', 'KD2XYZ', 'FN20', 13, [['W1AW', 14097050]]]
    mapping_row = {
        'time': '2025-07-01 12:08:00',
        'tx_sign': 'KD2XYZ',
        'tx_loc': 'FN20',
        'power': 13,
        'receptions': [{'rx_sign': 'W1AW', 'frequency': 14097050}],
    }

    full_report = parse_report(full_row)
    short_report = parse_report(short_row)
    mapping_report = parse_report(mapping_row)

    assert full_report.key == short_report.key == mapping_report.key
    assert full_report.receptions == (Reception('W1AW', 'FN31', 14097050.0, -18.0),)
    assert short_report.receptions == (Reception('W1AW', None, 14097050.0, None),)
    assert mapping_report.receptions == short_report.receptions


def test_parse_invalid_report():
    with pytest.raises(InvalidReportError):
        parse_report(['2025-07-01 12:08:00', 'KD2XYZ', 'FN20', 14, []])
    with pytest.raises(InvalidReportError):
        parse_report(['2025-07-01 12:08:00', 'KD2XYZ', 'ZZ20', 13, []])
    with pytest.raises(InvalidReportError):
        parse_report(['not a time', 'KD2XYZ', 'FN20', 13, []])
    with pytest.raises(InvalidReportError):
        parse_report(['2025-07-01 12:08:00', 'KD2XYZ', 'FN20', 13, [['W1AW']]])
    with pytest.raises(InvalidReportError):
        parse_report(['2025-07-01 12:08:00', 'KD2XYZ'])


def test_json_file():
    reports = RawReportFile(INPUT_DIRECTORY / 'reports.json').reports

    assert [str(report) for report in reports] == [
        '2025-07-01 12:08 KD2XYZ FN20 13',
        '2025-07-01 12:10 0C0IAQ FQ30 30',
        '2025-07-01 12:18 KD2XYZ FN20 13',
    ]
    assert reports[0].receivers == ('VE3XYZ', 'W1AW')


def test_csv_file():
    reports = RawReportFile(INPUT_DIRECTORY / 'reports.csv').reports

    assert len(reports) == 2
    assert reports[0].callsign == 'KD2XYZ'
    assert reports[1].receivers == ('K2ABC', 'W1AW')
    assert reports[1].receptions[0].locator is None
    assert reports[1].receptions[0].snr is None
    assert reports[1].receptions[1].frequency == 14097052


def test_unsupported_file():
    with pytest.raises(NotImplementedError):
        RawReportFile(INPUT_DIRECTORY / 'reports.txt')


def report(minute: int, callsign: str = 'KD2XYZ', receivers: int = 1) -> RawReport:
    return RawReport(
        datetime(2025, 7, 1, 12, minute),
        callsign,
        'FN20',
        13,
        [(f'RX{index}', 14097050) for index in range(receivers)],
    )


def test_merge_reports():
    old_reports = [report(8), report(10, '0C0IAQ'), report(18)]
    new_reports = [report(10, '0C0IAQ', receivers=3), report(20, '0C0IAQ'), report(28)]

    merged = merge_reports(old_reports, new_reports)

    assert [entry.key for entry in merged] == sorted(
        {entry.key for entry in old_reports + new_reports}
    )
    assert merged[1] is new_reports[0]
    assert len(merged[1].receptions) == 3
    assert merge_reports(merged, new_reports) == merged
    assert merge_reports([], new_reports) == new_reports
    assert merge_reports(old_reports, []) == old_reports


def test_merge_reports_same_time():
    old_reports = [report(8, 'AB1CD'), report(8, 'KD2XYZ')]
    new_reports = [report(8, 'KD2XYZ', receivers=2), report(8, 'ZZ9ZZ')]

    merged = merge_reports(old_reports, new_reports)

    assert [entry.callsign for entry in merged] == ['AB1CD', 'KD2XYZ', 'ZZ9ZZ']
    assert len(merged[1].receptions) == 2
