import psycopg

from taxdoc.database.connection import get_connection
from taxdoc.database.repositories.tax_repository import TaxRepository
from taxdoc.logging.logger import Log
from taxdoc.processor.exceptions import StorageError
from taxdoc.processor.models import DocumentEntry, TaxDataAggregate


class AggregateMerger:
    """Appends a document's extraction result to the user's yearly aggregate."""

    def __init__(self, tax_repo: TaxRepository) -> None:
        self._tax_repo = tax_repo

    @staticmethod
    def merge(existing: TaxDataAggregate | None, entry: DocumentEntry) -> TaxDataAggregate:
        """Return a new aggregate with entry appended.

        Entries are never deduplicated or replaced, even when one with the
        same document id is already present.
        """
        base = existing if existing is not None else TaxDataAggregate()
        return TaxDataAggregate(
            documents=[*base.documents, entry.to_dict()],
            extra=dict(base.extra),
        )

    def append(
        self,
        user_id: str,
        year: int,
        entry: DocumentEntry,
        skip_if_recorded: bool = False,
    ) -> TaxDataAggregate:
        """Merge entry into the stored aggregate inside one transaction.

        The aggregate row is created if missing and then locked, so
        concurrent appends for the same (user_id, year) run one after the
        other and none of them is lost.

        ``skip_if_recorded`` is for retries of the same upload: when an entry
        for this document id is already stored, the aggregate is returned
        unchanged instead of growing a second entry.

        Raises:
            StorageError: if any database call fails.
        """
        try:
            with get_connection() as conn:
                self._tax_repo.ensure_aggregate(conn, user_id, year)
                existing = self._tax_repo.find_aggregate(conn, user_id, year, for_update=True)
                if (
                    skip_if_recorded
                    and existing is not None
                    and self._has_entry(existing, entry.id)
                ):
                    conn.commit()
                    Log.info(f"Document {entry.id} already recorded in tax data {user_id}/{year}")
                    return existing
                merged = self.merge(existing, entry)
                self._tax_repo.upsert_aggregate(conn, user_id, year, merged)
                conn.commit()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to merge tax data for {user_id}/{year}: {exc}") from exc

        Log.info(
            f"Appended document {entry.id} to tax data {user_id}/{year} "
            f"({len(merged.documents)} documents)"
        )
        return merged

    @staticmethod
    def _has_entry(aggregate: TaxDataAggregate, document_id: str) -> bool:
        return any(
            isinstance(document, dict) and document.get("id") == document_id
            for document in aggregate.documents
        )
