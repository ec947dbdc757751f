from taxdoc.database.repositories.tax_repository import TaxRepository
from taxdoc.extraction.field_extractor import FieldExtractor
from taxdoc.logging.logger import Log
from taxdoc.processor.assembler import DocumentTextAssembler
from taxdoc.processor.file_loader import FileLoader
from taxdoc.processor.merger import AggregateMerger
from taxdoc.processor.models import DocumentEntry
from taxdoc.processor.pipeline import IngestionContext, PipelineStep


class CreateDocumentStep(PipelineStep):
    def __init__(self, file_loader: FileLoader, tax_repo: TaxRepository) -> None:
        self._file_loader = file_loader
        self._tax_repo = tax_repo

    def run(self, context: IngestionContext) -> IngestionContext:
        upload = context.upload
        self._file_loader.locate(upload)  # raises NoUploadError before anything is stored
        if context.resume_document_id is not None:
            context.document = self._tax_repo.find_document_by_id(context.resume_document_id)
            Log.info(f"Reusing document {context.document.id} for user {context.user_id}")
            return context

        context.document = self._tax_repo.create_document(
            user_id=context.user_id,
            year=upload.declared_year,
            document_type=upload.declared_type,
            file_name=upload.original_name,
            file_path=str(upload.path),
        )
        Log.info(
            f"Created {upload.declared_type} document {context.document.id} "
            f"for user {context.user_id}, year {upload.declared_year}"
        )
        if context.on_document_created is not None:
            context.on_document_created(context.document)
        return context


class AssembleTextStep(PipelineStep):
    def __init__(self, file_loader: FileLoader, assembler: DocumentTextAssembler) -> None:
        self._file_loader = file_loader
        self._assembler = assembler

    def run(self, context: IngestionContext) -> IngestionContext:
        path = self._file_loader.locate(context.upload)
        context.extracted_text = self._assembler.assemble(path)
        return context


class ExtractFieldsStep(PipelineStep):
    def __init__(self, field_extractor: FieldExtractor) -> None:
        self._field_extractor = field_extractor

    def run(self, context: IngestionContext) -> IngestionContext:
        context.records = self._field_extractor.extract(
            context.extracted_text,
            context.upload.declared_type,
        )
        Log.info(f"Extracted {len(context.records)} record(s) from {context.upload.original_name}")
        return context


class MergeAggregateStep(PipelineStep):
    def __init__(self, merger: AggregateMerger, preview_chars: int = 500) -> None:
        self._merger = merger
        self._preview_chars = preview_chars

    def run(self, context: IngestionContext) -> IngestionContext:
        if context.document is None:
            raise ValueError("IngestionContext.document must be set before merging")
        context.entry = DocumentEntry(
            id=context.document.id,
            type=context.upload.declared_type,
            records=list(context.records),
            raw_text_preview=context.extracted_text[: self._preview_chars],
        )
        context.aggregate = self._merger.append(
            context.user_id,
            context.upload.declared_year,
            context.entry,
            skip_if_recorded=context.resume_document_id is not None,
        )
        return context
