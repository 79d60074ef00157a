#    Copyright 2023 SECTRA AB
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.


"""Registry queries and document retrieval for one user session."""
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from xdsimaging.errors import (
    DateFormatError,
    MalformedResponseError,
    TransportError,
)
from xdsimaging.kos_parser import KosParser
from xdsimaging.linker import DocumentLinker
from xdsimaging.model import (
    Document,
    DocumentSet,
    KosDocument,
    QueryFilter,
    ReportDocument,
    Series,
)
from xdsimaging.query import build_import_query, build_query
from xdsimaging.registry import RegistryResponseParser
from xdsimaging.report_parser import ReportPayloadParser

FetchRegistryResponse = Callable[[str, str], str]
FetchDocumentBytes = Callable[[str, str], bytes]


@dataclass
class SessionContext:
    """
    State of one registry query and of the import selection made on its
    documents. Every query produces a new context.
    """

    patient_id: str
    query_filter: QueryFilter = field(default_factory=QueryFilter)
    query: str = ""
    documents: DocumentSet = field(default_factory=DocumentSet)
    error: Optional[str] = None
    selected_study: Optional[str] = None
    selected_series: Optional[str] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


class DocumentBroker:
    """Queries a registry for the documents of a patient and retrieves the
    content of documents on demand.

    Parameters
    ----------
    fetch_registry_response: Callable[[str, str], str]
        Called with patient id and query string, returns the registry response
        text. Raises `TransportError` on failure.
    fetch_document_bytes: Callable[[str, str], bytes]
        Called with repository id and document unique id, returns the
        retrieved document bytes. Raises `TransportError` on failure.
    """

    def __init__(
        self,
        fetch_registry_response: FetchRegistryResponse,
        fetch_document_bytes: FetchDocumentBytes,
        response_parser: Optional[RegistryResponseParser] = None,
        linker: Optional[DocumentLinker] = None,
        kos_parser: Optional[KosParser] = None,
        report_parser: Optional[ReportPayloadParser] = None,
    ):
        self._fetch_registry_response = fetch_registry_response
        self._fetch_document_bytes = fetch_document_bytes
        self._response_parser = response_parser or RegistryResponseParser()
        self._linker = linker or DocumentLinker()
        self._kos_parser = kos_parser or KosParser()
        self._report_parser = report_parser or ReportPayloadParser()

    def query(
        self, patient_id: str, query_filter: Optional[QueryFilter] = None
    ) -> SessionContext:
        """Query the registry and return a new context with the linked
        documents. A failed query gives a context with an error and no
        documents."""
        if query_filter is None:
            query_filter = QueryFilter()
        context = SessionContext(
            patient_id=patient_id,
            query_filter=query_filter,
            query=build_query(query_filter),
        )
        try:
            response = self._fetch_registry_response(patient_id, context.query)
            document_set = self._response_parser.parse(response, patient_id)
            context.documents = self._linker.link(document_set)
        except (TransportError, MalformedResponseError, DateFormatError) as exception:
            logging.warning(
                f"Registry query for patient {patient_id} failed.", exc_info=True
            )
            context.error = str(exception)
        return context

    def retrieve(self, context: SessionContext, document: Document) -> Document:
        """Fetch and parse the content of a document of the context, unless
        already done."""
        if context.documents.find(document.unique_id) is not document:
            raise ValueError(
                f"Document {document.unique_id} is not part of the session."
            )
        if document.is_retrieved:
            return document
        data = self._fetch_document_bytes(document.repository_id, document.unique_id)
        if isinstance(document, KosDocument):
            self._kos_parser.populate(document, data)
        else:
            self._report_parser.populate(document, data)
        return document

    def retrieve_exam(
        self, context: SessionContext, report: ReportDocument
    ) -> ReportDocument:
        """Retrieve a report and the KOS documents linked to it."""
        self.retrieve(context, report)
        for kos in report.ref_kos:
            self.retrieve(context, kos)
        return report

    @staticmethod
    def select_study(context: SessionContext, document: Document) -> None:
        """Select the study of a document for import."""
        if document.retrieve_url == "":
            raise ValueError(f"Document {document.unique_id} has no study uid.")
        context.selected_study = document.retrieve_url
        context.selected_series = None

    @staticmethod
    def select_series(context: SessionContext, series: Series) -> None:
        """Select a single series for import."""
        if series.study_uid is None or series.series_uid is None:
            raise ValueError(
                f"Could not find study and series uid in url {series.retrieve_url}."
            )
        context.selected_study = series.study_uid
        context.selected_series = series.series_uid

    @staticmethod
    def import_query(context: SessionContext) -> str:
        """Return the import query string of the current selection."""
        if context.selected_study is None:
            raise ValueError("No study selected for import.")
        return build_import_query(context.selected_study, context.selected_series)
