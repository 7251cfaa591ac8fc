import logging
from typing import List, Any

from prettytable import PrettyTable

JOB_HEADERS = ["Job", "Scheduled", "Queue", "User"]


def setup_logging(level: str = "WARNING", verbose: bool = False):
    """Configure the root logger once for a CLI run."""
    if verbose:
        level = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def print_job_table(headers: List[str], data: List[List[Any]]) -> str:
    """Prints a nicely formatted table using PrettyTable."""
    table = PrettyTable()
    table.field_names = headers
    for row in data:
        table.add_row(row)

    table.align = 'l'
    return table.get_string()


def job_rows(jobs) -> List[List[Any]]:
    return [[j.job_number, j.date, j.queue or "-", j.user or "-"] for j in jobs]
