from collections.abc import Callable

from taxdoc.config.settings import Settings
from taxdoc.database.models import TaxDocumentRecord
from taxdoc.database.repositories.tax_repository import TaxRepository
from taxdoc.extraction.field_extractor import FieldExtractor
from taxdoc.logging.logger import Log
from taxdoc.ocr.tesseract_adapter import TesseractAdapter
from taxdoc.processor.assembler import DocumentTextAssembler
from taxdoc.processor.file_loader import FileLoader
from taxdoc.processor.merger import AggregateMerger
from taxdoc.processor.models import IngestionResult, UploadedFile
from taxdoc.processor.pipeline import IngestionContext, PipelineStep
from taxdoc.processor.steps import (
    AssembleTextStep,
    CreateDocumentStep,
    ExtractFieldsStep,
    MergeAggregateStep,
)
from taxdoc.rasterizer.factory import RasterizerFactory


class Processor:
    """Orchestrates the ingestion pipeline for one uploaded tax document.

    Pipeline: create document -> assemble text -> extract fields -> merge.
    OCR problems degrade the extracted text instead of failing; storage
    failures propagate unchanged.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def ingest(
        self,
        user_id: str,
        upload: UploadedFile,
        document_id: str | None = None,
        on_document_created: Callable[[TaxDocumentRecord], None] | None = None,
    ) -> IngestionResult:
        """Run every step for one upload.

        Pass ``document_id`` to resume an upload whose document row already
        exists; ``on_document_created`` is called once a new row is stored.
        """
        Log.info(f"Ingesting {upload.original_name} for user {user_id}")
        context = IngestionContext(
            user_id=user_id,
            upload=upload,
            resume_document_id=document_id,
            on_document_created=on_document_created,
        )
        for step in self._steps:
            context = step.run(context)

        if context.document is None or context.aggregate is None:
            raise ValueError("Pipeline finished without a document and aggregate")
        return IngestionResult(
            document=context.document,
            records=context.records,
            aggregate=context.aggregate,
        )


def build_processor(settings: Settings) -> Processor:
    """Build a Processor with all required adapters."""
    file_loader = FileLoader(files_root=settings.files_root)
    tax_repo = TaxRepository()
    assembler = DocumentTextAssembler(
        rasterizer=RasterizerFactory.create(settings),
        ocr_engine=TesseractAdapter(
            lang=settings.tesseract_lang,
            tessdata_dir=settings.tessdata_dir,
            tesseract_cmd=settings.tesseract_cmd,
            timeout_seconds=settings.ocr_timeout_seconds,
        ),
        scratch_root=settings.scratch_root,
        max_workers=settings.ocr_max_workers,
    )
    return Processor(
        steps=[
            CreateDocumentStep(file_loader=file_loader, tax_repo=tax_repo),
            AssembleTextStep(file_loader=file_loader, assembler=assembler),
            ExtractFieldsStep(field_extractor=FieldExtractor()),
            MergeAggregateStep(
                merger=AggregateMerger(tax_repo),
                preview_chars=settings.raw_text_preview_chars,
            ),
        ]
    )
