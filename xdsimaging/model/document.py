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

"""Models for documents listed in a registry response."""
import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, List, Optional, Sequence, Union

from xdsimaging.config import settings
from xdsimaging.model.series import Series


class DocumentKind(Enum):
    """Kind of a registry document, valued by its mime type."""

    REPORT = "text/xml"
    KOS = "application/dicom"

    @classmethod
    def from_mime_type(cls, mime_type: str) -> Optional["DocumentKind"]:
        try:
            return cls(mime_type)
        except ValueError:
            return None


def merge_unique(values: Sequence[str], additions: Iterable[str]) -> List[str]:
    """Return values followed by the additions not already present. Empty
    strings are dropped and the first occurrence of a value sets its order."""
    merged = dict.fromkeys(value for value in values if value != "")
    merged.update(dict.fromkeys(value for value in additions if value != ""))
    return list(merged)


@dataclass
class Report:
    """
    Report extracted from a retrieved CDA payload.

    The pdf is kept as the base64 text found in the payload.
    """

    author: str
    title: str
    pdf: str

    def decode_pdf(self) -> bytes:
        return base64.b64decode(self.pdf, validate=False)

    @property
    def data_uri(self) -> str:
        return f"data:application/pdf;base64,{self.pdf.strip()}"


@dataclass
class RegistryDocument:
    """Attributes shared by all documents in a registry response."""

    kind: ClassVar[DocumentKind]

    unique_id: str
    repository_id: str
    accession_number: str = ""
    sop_instance_uid: str = ""
    description: str = ""
    creation_time: str = ""
    retrieve_url: str = ""
    modalities: List[str] = field(default_factory=list)
    anatomic_regions: List[str] = field(default_factory=list)

    @property
    def mime_type(self) -> str:
        return self.kind.value

    @property
    def modality(self) -> str:
        """Modalities joined for display."""
        return settings.display_separator.join(self.modalities)

    @property
    def anatomic_region(self) -> str:
        """Anatomic regions joined for display."""
        return settings.display_separator.join(self.anatomic_regions)


@dataclass
class KosDocument(RegistryDocument):
    """Key Object Selection document pointing to one imaging study. The series
    are empty until the document has been retrieved and parsed."""

    kind: ClassVar[DocumentKind] = DocumentKind.KOS

    series: List[Series] = field(default_factory=list)

    @property
    def is_retrieved(self) -> bool:
        return len(self.series) > 0


@dataclass
class ReportDocument(RegistryDocument):
    """Clinical report document (CDA)."""

    kind: ClassVar[DocumentKind] = DocumentKind.REPORT

    exam_date: str = ""
    ref_kos: List[KosDocument] = field(default_factory=list)
    report: Optional[Report] = None

    @property
    def is_retrieved(self) -> bool:
        return self.report is not None

    def is_linked_to(self, kos: KosDocument) -> bool:
        return any(linked is kos for linked in self.ref_kos)


Document = Union[ReportDocument, KosDocument]
