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

"""Document set model."""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from xdsimaging.model.document import Document, KosDocument, ReportDocument
from xdsimaging.model.patient import PatientInfo


@dataclass
class DocumentSet:
    """
    Documents found for a patient by one registry query.

    A new query always produces a new document set.
    """

    patient_info: Optional[PatientInfo] = None
    reports: List[ReportDocument] = field(default_factory=list)
    kos_objects: List[KosDocument] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return len(self.reports) == 0 and len(self.kos_objects) == 0

    def documents(self) -> Iterator[Document]:
        yield from self.reports
        yield from self.kos_objects

    def find(self, unique_id: str) -> Optional[Document]:
        return next(
            (
                document
                for document in self.documents()
                if document.unique_id == unique_id
            ),
            None,
        )
