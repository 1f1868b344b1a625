"""
Add link records to a destination one at a time, in reverse order.

Reading lists show the most recently added item first, so the records are
added last to first: the destination then lists them in their original order.

Two ways of driving an import are available and the caller picks one:

* ``run_bulk`` adds every record synchronously and completes.
* ``StepwiseImport`` adds exactly one record per ``step()`` call and leaves
  it to the caller to call ``step()`` again, e.g. once the destination
  signals it is ready (see ``drive_stepwise``). The next record is always
  ``total - processed - 1``, so a run can be paused at any point simply by
  not stepping and resumed later without losing or reordering records.

Both produce the same ledger and the same sequence of sink calls. A failing
record (invalid URL or a sink error) is counted as failed and the run goes on.
"""

from typing import Callable, Optional, Sequence, Union

from tqdm import tqdm

from common.logging import get_or_setup_logger
from importer.models import ImportLedger, ImportMode
from importer.sink import BaseLinkSink, SinkError, is_valid_url

CompletionCallback = Callable[[ImportLedger], None]


def add_link(sink: BaseLinkSink, record, ledger: ImportLedger, logger) -> bool:
    """
    Add a single record to the sink and count the outcome.

    Returns
    -------
    bool
        True if the sink accepted the record.
    """
    if not is_valid_url(record.url):
        logger.warning(f"Not a valid URL, counting as failed: {record.url!r}")
        ledger.record_failure()
        return False

    try:
        sink.add_record(record)
    except SinkError as e:
        logger.error(f"Error adding {record.url} to the reading list: {e}")
        ledger.record_failure()
        return False
    except Exception:
        logger.exception(f"Unexpected error adding {record.url} to the reading list")
        ledger.record_failure()
        return False

    logger.debug(f"Added {record.url}")
    ledger.record_success()
    return True


def _complete(ledger: ImportLedger, on_complete: Optional[CompletionCallback], logger) -> None:
    logger.info(f"Import complete: {ledger.added} links were successfully added ({ledger.failed} failed)")
    if on_complete is not None:
        on_complete(ledger)


def run_bulk(
    records: Sequence,
    sink: BaseLinkSink,
    on_complete: Optional[CompletionCallback] = None,
    logger=None,
    show_progress: bool = False,
) -> ImportLedger:
    """
    Add all records to the sink in one synchronous pass.

    Parameters
    ----------
    records : Sequence[LinkRecord]
        Records in their original order.
    sink : BaseLinkSink
        Destination.
    on_complete : callable, optional
        Called once with the final ledger.
    logger : logging.Logger, optional
        Logger to use.
    show_progress : bool, optional
        Show a progress bar.

    Returns
    -------
    ImportLedger
        Final counts.
    """
    logger = logger or get_or_setup_logger()
    ledger = ImportLedger()
    logger.info(f"Adding {len(records)} links at once")

    progress_bar = tqdm(total=len(records), desc="Adding to reading list", unit="link", disable=not show_progress)
    for record in reversed(records):
        add_link(sink, record, ledger, logger)
        progress_bar.update(1)
    progress_bar.close()

    _complete(ledger, on_complete, logger)
    return ledger


class StepwiseImport:
    """
    An import run that advances one record per ``step()`` call.

    Parameters
    ----------
    records : Sequence[LinkRecord]
        Records in their original order. The list is copied when the run starts.
    sink : BaseLinkSink
        Destination.
    on_complete : callable, optional
        Called once with the final ledger, on the first ``step()`` after the
        last record.
    logger : logging.Logger, optional
        Logger to use.
    """

    def __init__(
        self,
        records: Sequence,
        sink: BaseLinkSink,
        on_complete: Optional[CompletionCallback] = None,
        logger=None,
    ):
        self.records = tuple(records)
        self.sink = sink
        self.on_complete = on_complete
        self.logger = logger or get_or_setup_logger()
        self.ledger = ImportLedger()
        self._completed = False
        self._in_flight = False

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def next_index(self) -> int:
        """Index of the record the next step adds; negative once all are processed."""
        return self.total - self.ledger.processed - 1

    @property
    def done(self) -> bool:
        """True once completion has been signalled."""
        return self._completed

    def step(self) -> bool:
        """
        Add the next record, or signal completion when none are left.

        Returns
        -------
        bool
            True if a record was processed, False if the run is complete.

        Raises
        ------
        RuntimeError
            If called while a previous step is still adding its record.
        """
        if self._in_flight:
            raise RuntimeError("step() called while a link is still being added")

        index = self.next_index
        if index < 0:
            if not self._completed:
                self._completed = True
                _complete(self.ledger, self.on_complete, self.logger)
            return False

        self._in_flight = True
        try:
            add_link(self.sink, self.records[index], self.ledger, self.logger)
        finally:
            self._in_flight = False
        return True


def drive_stepwise(
    stepper: StepwiseImport,
    wait: Optional[Callable[[], None]] = None,
    show_progress: bool = False,
) -> ImportLedger:
    """
    Step a run to completion, waiting for the destination between records.

    Parameters
    ----------
    stepper : StepwiseImport
        The run to drive. It may already have been partially stepped.
    wait : callable, optional
        Blocks until the next record may be added. Defaults to
        ``stepper.sink.wait_until_ready``.
    show_progress : bool, optional
        Show a progress bar.

    Returns
    -------
    ImportLedger
        Final counts.
    """
    wait = wait or stepper.sink.wait_until_ready
    stepper.logger.info(f"Adding {stepper.next_index + 1} links one at a time")

    progress_bar = tqdm(
        total=stepper.total,
        initial=stepper.ledger.processed,
        desc="Adding to reading list",
        unit="link",
        disable=not show_progress,
    )
    while stepper.step():
        progress_bar.update(1)
        progress_bar.set_postfix({"added": stepper.ledger.added, "failed": stepper.ledger.failed})
        if stepper.next_index >= 0:
            wait()
    progress_bar.close()

    return stepper.ledger


def run(
    records: Sequence,
    sink: BaseLinkSink,
    mode: Union[ImportMode, str] = ImportMode.BULK,
    on_complete: Optional[CompletionCallback] = None,
    wait: Optional[Callable[[], None]] = None,
    logger=None,
    show_progress: bool = False,
) -> ImportLedger:
    """
    Import records with the selected mode.

    Parameters
    ----------
    records : Sequence[LinkRecord]
        Records in their original order.
    sink : BaseLinkSink
        Destination.
    mode : ImportMode or str, optional
        ``ImportMode.BULK`` (default) or ``ImportMode.STEPWISE``.
    on_complete : callable, optional
        Called once with the final ledger.
    wait : callable, optional
        Stepwise mode only: blocks between records.
    logger : logging.Logger, optional
        Logger to use.
    show_progress : bool, optional
        Show a progress bar.

    Returns
    -------
    ImportLedger
        Final counts.
    """
    mode = ImportMode(mode)
    if mode is ImportMode.BULK:
        return run_bulk(records, sink, on_complete=on_complete, logger=logger, show_progress=show_progress)

    stepper = StepwiseImport(records, sink, on_complete=on_complete, logger=logger)
    return drive_stepwise(stepper, wait=wait, show_progress=show_progress)
