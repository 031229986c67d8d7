import json
from os import PathLike
from pathlib import Path
from typing import List

import pandas

from wsprtrack.reports.base import RawReport
from wsprtrack.reports.parsing import InvalidReportError, parse_report
from wsprtrack.utilities import get_logger

LOGGER = get_logger('wsprtrack.reports')

REPORT_COLUMNS = ['time', 'tx_sign', 'tx_loc', 'power']
RECEPTION_COLUMNS = ['rx_sign', 'rx_loc', 'frequency', 'snr']


class RawReportFile:
    def __init__(self, filename: PathLike):
        """
        read raw reports from a wspr.live export, either a JSONCompact query result (`.json`) or a CSV file with one
        row per reception (`.csv`) with columns `time`, `tx_sign`, `tx_loc`, `power`, `rx_sign`, `rx_loc`,
        `frequency`, and `snr`

        :param filename: path to file
        """

        if not isinstance(filename, Path):
            if isinstance(filename, str):
                filename = filename.strip('"')
            filename = Path(filename)

        if filename.suffix.lower() not in ['.json', '.csv']:
            raise NotImplementedError(f'reading reports from "{filename.suffix}" is not implemented')

        self.location = filename.expanduser()

    def rows(self) -> list:
        if self.location.suffix.lower() == '.json':
            with open(self.location) as input_file:
                data = json.load(input_file)
            if isinstance(data, dict):
                data = data['data']
            return data
        else:
            records = pandas.read_csv(self.location)
            missing_columns = [
                column
                for column in REPORT_COLUMNS + ['rx_sign', 'frequency']
                if column not in records.columns
            ]
            if len(missing_columns) > 0:
                raise InvalidReportError(
                    f'{self.location} is missing columns {missing_columns}'
                )

            reception_columns = [
                column for column in RECEPTION_COLUMNS if column in records.columns
            ]
            rows = []
            for (time, callsign, locator, power), receptions in records.groupby(
                REPORT_COLUMNS, sort=False
            ):
                rows.append(
                    {
                        'time': time,
                        'tx_sign': callsign,
                        'tx_loc': locator,
                        'power': power,
                        'receptions': receptions[reception_columns].to_dict('records'),
                    }
                )
            return rows

    @property
    def reports(self) -> List[RawReport]:
        """ every readable report in the file, sorted by time and callsign """

        reports = {}
        for row in self.rows():
            try:
                report = parse_report(row)
            except InvalidReportError as error:
                LOGGER.error(f'{error.__class__.__name__} - {error}')
                continue
            reports[report.key] = report

        LOGGER.debug(f'read {len(reports)} reports from {self.location}')
        return sorted(reports.values())

    def __repr__(self):
        return f'{self.__class__.__name__}({repr(str(self.location))})'
