"""
Import session: the loaded links, the read archive toggle and the run state.
"""

from typing import Callable, List, Optional, Union

from common.logging import get_or_setup_logger
from importer.models import ImportLedger, ImportMode
from importer.sequencer import CompletionCallback, StepwiseImport, drive_stepwise, run_bulk
from importer.sink import BaseLinkSink
from pocket.export_parser import PocketExportParser, ensure_links
from pocket.models import LinkRecord, ParsedExport


class ImportSession:
    """
    Holds the links of one loaded export and the ledger of its import run.

    Loading another export replaces the links and resets the ledger.

    Parameters
    ----------
    include_read : bool, optional
        Import the Read Archive section after the Unread one.
    mode : ImportMode or str, optional
        How ``start`` drives the import (default: bulk).
    parser : PocketExportParser, optional
        Parser used by ``load_file`` and ``load_html``.
    logger : logging.Logger, optional
        Logger to use.
    """

    def __init__(
        self,
        include_read: bool = False,
        mode: Union[ImportMode, str] = ImportMode.BULK,
        parser: Optional[PocketExportParser] = None,
        logger=None,
    ):
        self.logger = logger or get_or_setup_logger()
        self.parser = parser or PocketExportParser(logger=self.logger)
        self.include_read = include_read
        self.mode = ImportMode(mode)
        self.records = ParsedExport()
        self.ledger = ImportLedger()
        self.stepper: Optional[StepwiseImport] = None

    @property
    def effective_records(self) -> List[LinkRecord]:
        if self.include_read:
            return self.records.all_records
        return list(self.records.unread)

    @property
    def is_running(self) -> bool:
        return self.stepper is not None and not self.stepper.done

    def set_records(self, parsed: ParsedExport) -> ParsedExport:
        """
        Replace the session links with ``parsed``.

        Raises
        ------
        EmptyResultError
            If the export has no links; the previous links are kept.
        """
        ensure_links(parsed)
        self.records = parsed
        self.ledger = ImportLedger()
        self.stepper = None
        self.logger.info(
            f"Loaded {len(parsed.unread)} unread and {len(parsed.read_archive)} archived links"
        )
        return parsed

    def load_html(self, html_content: str) -> ParsedExport:
        """Parse export HTML and make it the session's links."""
        return self.set_records(self.parser.parse(html_content))

    def load_file(self, file_path: str) -> ParsedExport:
        """Read and parse an export file and make it the session's links."""
        return self.set_records(self.parser.load_export(file_path))

    def apply_filter(self, predicate: Callable[[LinkRecord], bool]) -> ParsedExport:
        """Keep only the links matching ``predicate`` in both sections."""
        self.records = ParsedExport(
            unread=[record for record in self.records.unread if predicate(record)],
            read_archive=[record for record in self.records.read_archive if predicate(record)],
        )
        return self.records

    def start(
        self,
        sink: BaseLinkSink,
        on_complete: Optional[CompletionCallback] = None,
        wait: Optional[Callable[[], None]] = None,
        show_progress: bool = False,
    ) -> ImportLedger:
        """
        Import the effective links into ``sink`` with the session mode.

        In stepwise mode the run object stays available as ``self.stepper``
        so a caller can inspect it; ``wait`` is called between links.
        """
        records = self.effective_records
        if self.mode is ImportMode.BULK:
            self.ledger = run_bulk(records, sink, on_complete=on_complete, logger=self.logger,
                                   show_progress=show_progress)
            return self.ledger

        self.stepper = self.begin_stepwise(sink, on_complete=on_complete)
        return drive_stepwise(self.stepper, wait=wait, show_progress=show_progress)

    def begin_stepwise(self, sink: BaseLinkSink, on_complete: Optional[CompletionCallback] = None) -> StepwiseImport:
        """
        Create a stepwise run over the effective links without stepping it.

        The session ledger is the run's ledger, so it reflects progress as the
        caller steps.
        """
        self.stepper = StepwiseImport(self.effective_records, sink, on_complete=on_complete, logger=self.logger)
        self.ledger = self.stepper.ledger
        return self.stepper
