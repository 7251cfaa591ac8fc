from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from dateutil import parser as dateparse


@dataclass
class Job:
    job_number: int
    date: str
    queue: Optional[str] = None
    user: Optional[str] = None
    # wrapper that produced this job, used by remove()
    wrapper: Optional[object] = field(default=None, repr=False, compare=False)

    def remove(self):
        """Remove this job from the at queue. Raises JobNotFoundError if at no longer has it."""
        if self.job_number is None:
            return
        wrapper = self.wrapper
        if wrapper is None:
            from wrapper import AtWrapper
            wrapper = AtWrapper()
        wrapper.remove_job(self.job_number)

    def scheduled_at(self) -> datetime:
        """Parse the date string printed by at, e.g. 'Mon Nov 15 10:55:00 2010' or '2010-11-15 10:53'."""
        try:
            return dateparse.parse(self.date)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Unparseable at date {self.date!r}: {e}") from e

    def to_dict(self) -> dict:
        return {
            "job_number": self.job_number,
            "date": self.date,
            "queue": self.queue,
            "user": self.user,
        }
