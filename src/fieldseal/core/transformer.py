"""
Selective sealing of marked XML elements.

An element takes part when it carries the marker attribute (``mode`` by
default) with one of the two literals of the active :class:`MarkerScheme`.
Per element, for a requested direction:

    PLAIN  + seal -> text replaced by a payload, marker set to SEALED
    SEALED + open -> payload replaced by its plaintext, marker set to PLAIN
    PLAIN  + open, SEALED + seal -> untouched
    empty text -> untouched

Elements are processed in document order and the run stops at the first
failing element. Elements before it stay transformed in memory; callers
must not persist the document after an error.
"""

from __future__ import annotations

import logging
import warnings
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from fieldseal.security import payload
from fieldseal.security.encryption import Password, open_value, seal_value

from .document import find_marked, get_text, node_paths, set_text
from .exceptions import FieldSealError, UnrecognizedMarkerWarning
from .models import DEFAULT_SCHEME, Direction, MarkerScheme, TransformReport

logger = logging.getLogger(__name__)

Document = Union[ET.ElementTree, ET.Element]


@dataclass
class _Job:
    element: ET.Element
    path: str
    value: str


class FieldTransformer:
    """
    Applies one direction to every eligible element of a document.

    ``strict`` turns silently skipped, unrecognized marker values into
    :class:`UnrecognizedMarkerWarning` warnings. ``workers`` above one runs
    the key derivation and cipher work on a thread pool; results are still
    applied in document order and the first failure in that order is the one
    raised, so the outcome matches a sequential run.
    """

    def __init__(
        self,
        scheme: MarkerScheme = DEFAULT_SCHEME,
        strict: bool = False,
        workers: int = 1,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.scheme = scheme
        self.strict = strict
        self.workers = workers
        self.last_report: Optional[TransformReport] = None

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def _plan(self, root: ET.Element, direction: Direction, report: TransformReport) -> List[_Job]:
        attribute = self.scheme.attribute
        paths = node_paths(root)
        jobs: List[_Job] = []

        for element in find_marked(root, attribute):
            path = paths.get(element, f"<{element.tag}>")
            marker = element.get(attribute)
            state = self.scheme.parse(marker)

            if state is None:
                report.skipped_unrecognized.append(path)
                if self.strict:
                    logger.warning("%s: unrecognized %s=%r, skipped", path, attribute, marker)
                    warnings.warn(
                        f"{path}: unrecognized {attribute}={marker!r}, element skipped",
                        UnrecognizedMarkerWarning,
                        stacklevel=3,
                    )
                else:
                    logger.debug("%s: unrecognized %s=%r, skipped", path, attribute, marker)
                continue

            if state is not direction.source_state:
                report.skipped_in_state.append(path)
                continue

            value = get_text(element)
            if not value:
                report.skipped_empty.append(path)
                continue

            if direction is Direction.SEAL and payload.is_payload(value):
                logger.warning("%s: marked %s but value already looks sealed", path, self.scheme.plain)

            jobs.append(_Job(element=element, path=path, value=value))

        return jobs

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _commit(self, job: _Job, new_value: str, direction: Direction, report: TransformReport) -> None:
        set_text(job.element, new_value)
        job.element.set(self.scheme.attribute, self.scheme.literal(direction.target_state))
        report.transformed.append(job.path)
        logger.debug("%s: %s", job.path, direction.target_state.value)

    def _run_sequential(self, jobs, work, direction, report) -> None:
        for job in jobs:
            try:
                new_value = work(job.value)
            except FieldSealError as e:
                e.node = job.path
                raise
            self._commit(job, new_value, direction, report)

    def _run_parallel(self, jobs, work, direction, report) -> None:
        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="fieldseal") as pool:
            futures = [pool.submit(work, job.value) for job in jobs]
            try:
                for job, future in zip(jobs, futures):
                    try:
                        new_value = future.result()
                    except FieldSealError as e:
                        e.node = job.path
                        raise
                    self._commit(job, new_value, direction, report)
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def transform(self, document: Document, password: Password, direction: Direction | str) -> Document:
        """
        Seal or open every eligible element of ``document`` in place and return it.

        Raises FormatError, AuthenticationError or CryptoError for the first
        failing element; the exception's ``node`` names that element.
        """
        direction = Direction.parse(direction)
        root = document.getroot() if isinstance(document, ET.ElementTree) else document
        report = TransformReport(direction=direction)
        self.last_report = report

        jobs = self._plan(root, direction, report)
        work: Callable[[str], str]
        if direction is Direction.SEAL:
            work = lambda value: seal_value(password, value)
        else:
            work = lambda value: open_value(password, value)

        if self.workers > 1 and len(jobs) > 1:
            self._run_parallel(jobs, work, direction, report)
        else:
            self._run_sequential(jobs, work, direction, report)

        logger.info(report.summary())
        return document


def transform(
    document: Document,
    password: Password,
    direction: Direction | str,
    scheme: MarkerScheme = DEFAULT_SCHEME,
    strict: bool = False,
    workers: int = 1,
) -> Document:
    """Convenience wrapper around :meth:`FieldTransformer.transform`."""
    return FieldTransformer(scheme=scheme, strict=strict, workers=workers).transform(
        document, password, direction
    )
