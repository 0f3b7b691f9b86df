"""CSV-backed progress store.

The store is a UTF-8, comma-delimited file with a header row followed by
``source_url,slug,completed_steps`` rows, for example::

    source_url,slug,status
    https://gitlab.example.com/team/api,api,cloned>pushed
    https://gitlab.example.com/team/web,web,

Updates never edit the live file. The full new content is written to a
staging file which then replaces the store with ``os.replace``, so a crash
mid-write leaves the previous version intact. Only the line being updated is
re-serialized; every other line, including the header, is copied through
unchanged.
"""

import csv
import io
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterator, List, Optional

from loguru import logger

from ..errors import RecordNotFoundError, StoreIOError
from ..models.record import MigrationRecord, Step, StoreRow, format_steps, parse_steps
from .base import ProgressTracker

URL_FIELD = 0
SLUG_FIELD = 1
STEPS_FIELD = 2


def _split_line_ending(line: str):
    body = line.rstrip('\r\n')
    return body, line[len(body) :]


def _parse_fields(line: str) -> Optional[List[str]]:
    """Parse one CSV line, returning None for blank lines."""
    body, _ = _split_line_ending(line)
    if not body.strip():
        return None
    return next(csv.reader([body]))


def _format_fields(fields: List[str], line_ending: str) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator='\n').writerow(fields)
    return buffer.getvalue()[:-1] + line_ending


class ProgressStore(ProgressTracker):
    """Durable mapping from repository slug to completed steps."""

    def __init__(
        self,
        csv_file: str,
        tmp_file: Optional[str] = None,
        encoding: str = 'utf-8',
    ):
        """Initialize progress store.

        Args:
            csv_file: Path to the progress CSV file
            tmp_file: Optional staging path used when replacing the store; must
                live on the same filesystem as ``csv_file``
            encoding: File encoding
        """
        self.path = Path(csv_file)
        self.tmp_file = Path(tmp_file) if tmp_file else None
        self.encoding = encoding
        self.logger = logger.bind(component='ProgressStore')

    def _read_lines(self) -> List[str]:
        try:
            # newline='' keeps line endings untranslated so they survive rewrites
            with open(self.path, 'r', encoding=self.encoding, newline='') as f:
                return f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(
                f'Cannot read progress store {self.path}: {e}', path=str(self.path)
            ) from e

    def read_records(self) -> Iterator[StoreRow]:
        """Iterate over the data rows of the store.

        The header line and blank lines are never yielded. Missing trailing
        fields are treated as empty. Each call re-reads the file.

        Yields:
            Parsed store rows in file order
        """
        lines = self._read_lines()
        for index, line in enumerate(lines[1:], start=2):
            fields = _parse_fields(line)
            if fields is None:
                continue

            source_url = fields[URL_FIELD] if len(fields) > URL_FIELD else ''
            slug = fields[SLUG_FIELD] if len(fields) > SLUG_FIELD else ''
            steps = fields[STEPS_FIELD] if len(fields) > STEPS_FIELD else ''

            yield StoreRow(
                line_number=index,
                record=MigrationRecord(
                    source_url=source_url,
                    slug=slug,
                    completed_steps=parse_steps(steps),
                ),
            )

    def get_record(self, slug: str) -> Optional[MigrationRecord]:
        slug = slug.strip()
        if not slug:
            return None

        for row in self.read_records():
            if row.record.slug == slug:
                return row.record
        return None

    def mark_complete(self, slug: str, step: Step) -> bool:
        """Idempotently append ``step`` to the first row carrying ``slug``.

        Args:
            slug: Repository slug
            step: Completed step

        Returns:
            True if the store was rewritten, False if the step was present

        Raises:
            RecordNotFoundError: If no row carries the slug
            StoreIOError: If the store cannot be read or replaced
        """
        slug = slug.strip()
        lines = self._read_lines()

        for index in range(1, len(lines)):
            fields = _parse_fields(lines[index])
            if not fields or len(fields) <= SLUG_FIELD:
                continue
            if fields[SLUG_FIELD].strip() != slug:
                continue

            steps = parse_steps(fields[STEPS_FIELD] if len(fields) > STEPS_FIELD else '')
            if step.value in steps:
                self.logger.debug(f'{slug}: {step.value} already recorded')
                return False

            steps.append(step.value)
            while len(fields) <= STEPS_FIELD:
                fields.append('')
            fields[STEPS_FIELD] = format_steps(steps)

            _, line_ending = _split_line_ending(lines[index])
            lines[index] = _format_fields(fields, line_ending)

            self._replace(lines)
            self.logger.debug(f'{slug}: recorded {step.value} ({fields[STEPS_FIELD]})')
            return True

        raise RecordNotFoundError(slug)

    def _replace(self, lines: List[str]) -> None:
        """Write ``lines`` to a staging file and swap it over the store."""
        try:
            if self.tmp_file is not None:
                staging = self.tmp_file
                staging.parent.mkdir(parents=True, exist_ok=True)
                fd = os.open(staging, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
            else:
                fd, staging_name = tempfile.mkstemp(
                    prefix=f'.{self.path.name}.', suffix='.tmp', dir=self.path.parent
                )
                staging = Path(staging_name)
        except OSError as e:
            raise StoreIOError(
                f'Cannot create staging file for {self.path}: {e}', path=str(self.path)
            ) from e

        try:
            with os.fdopen(fd, 'w', encoding=self.encoding, newline='') as f:
                f.writelines(lines)
                f.flush()
                os.fsync(f.fileno())
            shutil.copymode(self.path, staging)
            os.replace(staging, self.path)
        except OSError as e:
            try:
                staging.unlink(missing_ok=True)
            except OSError as cleanup_error:
                self.logger.warning(
                    f'Failed to remove staging file {staging}: {cleanup_error}'
                )
            raise StoreIOError(
                f'Cannot replace progress store {self.path}: {e}', path=str(self.path)
            ) from e
