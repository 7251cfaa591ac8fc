"""
Wrapper around the `at` binary.

Builds the shell command for each operation, runs it and scrapes the job
details out of whatever `at` prints. It covers the commonly used parts of
`at`, not all of it.
"""
import logging
import re
from typing import List, Optional

from config import DEFAULTS
from executor import run_command
from models import Job
from utils import escape, queue_letter

logger = logging.getLogger(__name__)

SWITCHES = {
    "queue": "-q",
    "list_queue": "-l",
    "file": "-f",
    "remove": "-d",
    "cat": "-c",
}

# "job 5 at Mon Nov 15 10:55:00 2010"
ADD_REGEX = re.compile(r"^job (\d+) at ([\w\d\- :]+)$")
ADD_FIELDS = ("job_number", "date")

# "17      Mon Nov 15 10:55:00 2010 a simon" or "2       2010-11-15 10:53 a root"
QUEUE_REGEX = re.compile(r"^(\d+)\s+([\w\d\- :]+) (\w) ([\w-]+)$")
QUEUE_FIELDS = ("job_number", "date", "queue", "user")


class AtError(Exception):
    """Base class for errors reported by the at wrapper."""
    pass


class JobAddError(AtError):
    """Raised when at did not confirm a new job."""

    def __init__(self, command: str, output: List[str]):
        super().__init__(f"The job has failed to be added to the queue. Exec command: {command}")
        self.command = command
        self.output = output


class JobNotFoundError(AtError):
    """Raised when at has no job with the given number."""

    def __init__(self, job_number, output: List[str] = None):
        super().__init__(f"The job number {job_number} could not be found")
        self.job_number = job_number
        self.output = output or []


class AtWrapper:
    def __init__(self, binary: str = None, escape: bool = None, timeout: Optional[int] = None):
        self.binary = binary or DEFAULTS["binary"]
        self.escape = DEFAULTS["escape"] if escape is None else escape
        self.timeout = timeout

    @classmethod
    def from_config(cls, cfg):
        return cls(binary=cfg.get("binary"), escape=cfg.get("escape"), timeout=cfg.get("timeout"))

    def set_escape(self, escape: bool):
        self.escape = escape
        return self

    def cmd(self, command: str, time: str, queue: Optional[str] = None) -> Job:
        return self.add_command(command, time, queue)

    def file(self, path: str, time: str, queue: Optional[str] = None) -> Job:
        return self.add_file(path, time, queue)

    def lq(self, queue: Optional[str] = None) -> List[Job]:
        return self.list_queue(queue)

    def add_command(self, command: str, time: str, queue: Optional[str] = None) -> Job:
        """Schedule a shell command, piped to at on stdin."""
        if self.escape:
            # printf, unlike dash echo, leaves backslashes alone
            exec_string = f"printf '%s\\n' {escape(command)} | {self.binary}"
        else:
            exec_string = f"echo '{command}' | {self.binary}"
        exec_string += self._queue_switch(queue)
        exec_string += f" {escape(time, self.escape)}"
        return self._add_job(exec_string)

    def add_file(self, path: str, time: str, queue: Optional[str] = None) -> Job:
        """Schedule the commands in a file (at -f)."""
        exec_string = f"{self.binary} {SWITCHES['file']} {escape(path, self.escape)}"
        exec_string += self._queue_switch(queue)
        exec_string += f" {escape(time, self.escape)}"
        return self._add_job(exec_string)

    def list_queue(self, queue: Optional[str] = None) -> List[Job]:
        """
        Jobs currently waiting in at. With no queue, jobs from every queue
        are returned.
        """
        exec_string = f"{self.binary} {SWITCHES['list_queue']}" + self._queue_switch(queue)
        return self.transform(self._exec(exec_string), "queue")

    def remove_job(self, job_number):
        exec_string = f"{self.binary} {SWITCHES['remove']} {escape(self._job_number(job_number), self.escape)}"
        output = self._exec(exec_string)
        # at -d is silent on success
        if output:
            raise JobNotFoundError(job_number, output)
        logger.info("Removed at job %s", job_number)

    def job_content(self, job_number) -> str:
        """The script at will run for a job (at -c)."""
        exec_string = f"{self.binary} {SWITCHES['cat']} {escape(self._job_number(job_number), self.escape)}"
        result = run_command(exec_string, timeout=self.timeout)
        if result["exit_code"] != 0 or not result["output"]:
            raise JobNotFoundError(job_number, result["output"])
        return "\n".join(result["output"])

    def transform(self, output: List[str], kind: str = "add") -> List[Job]:
        """Turn lines printed by at into Jobs; lines that don't match are skipped."""
        if kind == "add":
            regex, fields = ADD_REGEX, ADD_FIELDS
        else:
            regex, fields = QUEUE_REGEX, QUEUE_FIELDS

        jobs = []
        for line in output:
            m = regex.match(line)
            if not m:
                logger.debug("Skipping unmatched line: %r", line)
                continue
            details = dict(zip(fields, m.groups()))
            details["job_number"] = int(details["job_number"])
            jobs.append(Job(wrapper=self, **details))
        return jobs

    def _add_job(self, exec_string: str) -> Job:
        output = self._exec(exec_string)
        jobs = self.transform(output)
        if not jobs:
            raise JobAddError(exec_string, output)
        job = jobs[0]
        logger.info("Added at job %s for %s", job.job_number, job.date)
        return job

    def _queue_switch(self, queue: Optional[str]) -> str:
        if queue is None:
            return ""
        return f" {SWITCHES['queue']} {queue_letter(queue)}"

    @staticmethod
    def _job_number(job_number) -> int:
        try:
            return int(job_number)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid job number {job_number!r}")

    def _exec(self, exec_string: str) -> List[str]:
        return run_command(exec_string, timeout=self.timeout)["output"]
