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

"""Parser for registry stored query responses."""
import datetime
import logging
from itertools import islice
from typing import Dict, List, Optional, Sequence, Tuple

from xdsimaging.config import settings
from xdsimaging.errors import MalformedResponseError, MissingPatientInfoError
from xdsimaging.model import (
    Document,
    DocumentKind,
    DocumentSet,
    KosDocument,
    PatientInfo,
    PatientSex,
    ReportDocument,
    merge_unique,
)
from xdsimaging.registry.fragment import Element, Fragment


class RegistryResponseParser:
    """Parses the response of a find documents stored query into a document
    set. The returned documents are not linked, see `DocumentLinker`."""

    status_marker = "ResponseStatusType:"
    success_status = "Success"
    document_id_marker = "XDSDocumentEntry.patientId"

    def parse(self, response: str, patient_id: str = "") -> DocumentSet:
        """Parse response text.

        Parameters
        ----------
        response: str
            Full text of the registry response.
        patient_id: str = ""
            Identifier of the queried patient, stored in the patient info.

        Returns
        ----------
        DocumentSet
            Reports and KOS documents in response order. Empty if the registry
            did not report success or found no documents.
        """
        fragment = Fragment(response)
        status = fragment.token(self.status_marker)
        if status is None:
            raise MalformedResponseError("Response has no status marker.")
        if status != self.success_status:
            logging.debug(f"Registry response status is {status}.")
            return DocumentSet()
        count = self._result_count(fragment)
        if count == 0:
            return DocumentSet()
        repository_id = self._repository_id(fragment)
        extrinsic_objects = list(islice(fragment.elements("ExtrinsicObject"), count))
        if len(extrinsic_objects) < count:
            raise MalformedResponseError(
                f"Response announces {count} documents but contains "
                f"{len(extrinsic_objects)}."
            )
        document_set = DocumentSet(
            patient_info=self.parse_patient_info(extrinsic_objects, patient_id)
        )
        for extrinsic_object in extrinsic_objects:
            document = self.parse_document(extrinsic_object, repository_id)
            if isinstance(document, ReportDocument):
                document_set.reports.append(document)
            elif isinstance(document, KosDocument):
                document_set.kos_objects.append(document)
        logging.debug(
            f"Parsed {len(document_set.reports)} reports and "
            f"{len(document_set.kos_objects)} KOS documents."
        )
        return document_set

    def parse_document(
        self, extrinsic_object: Element, repository_id: str
    ) -> Optional[Document]:
        """Parse the metadata of one document. Returns None for documents that
        are neither reports nor KOS documents."""
        mime_type = extrinsic_object.attributes.get("mimeType")
        if mime_type is None:
            raise MalformedResponseError(
                f"Document {extrinsic_object.attributes.get('id', '')} "
                "has no mime type."
            )
        kind = DocumentKind.from_mime_type(mime_type)
        if kind is None:
            logging.debug(f"Skipping document with mime type {mime_type}.")
            return None
        metadata = extrinsic_object.body
        accession_number, retrieve_url = self._reference_ids(metadata)
        attributes = {
            "unique_id": self._document_id(metadata),
            "repository_id": repository_id,
            "accession_number": accession_number,
            "sop_instance_uid": self._sop_instance_uid(metadata),
            "description": self._description(metadata),
            "creation_time": self._slot_value(metadata, "creationTime"),
            "retrieve_url": retrieve_url,
        }
        if kind == DocumentKind.REPORT:
            return ReportDocument(**attributes)
        modalities, regions = self._event_codes(metadata)
        return KosDocument(
            **attributes, modalities=modalities, anatomic_regions=regions
        )

    def parse_patient_info(
        self, extrinsic_objects: Sequence[Element], patient_id: str
    ) -> Optional[PatientInfo]:
        """Return the patient info of the first document having a source
        patient info slot, or None if no document has one."""
        source_patient_info = next(
            (
                slot
                for slot in (
                    extrinsic_object.body.slot("sourcePatientInfo")
                    for extrinsic_object in extrinsic_objects
                )
                if slot is not None
            ),
            None,
        )
        if source_patient_info is None:
            return None
        fields: Dict[str, str] = {}
        for value in source_patient_info.values():
            key, separator, field = value.partition("|")
            if separator != "" and key not in fields:
                fields[key] = field
        name = fields.get("PID-5", "").split("^")
        return PatientInfo(
            last_name=name[0],
            first_name=name[1] if len(name) > 1 else "",
            sex=self._sex(fields.get("PID-8", "")),
            birth_date=self._birth_date(fields.get("PID-7")),
            ins=patient_id,
        )

    @staticmethod
    def _result_count(fragment: Fragment) -> int:
        count = fragment.attribute("totalResultCount")
        if count is None:
            raise MalformedResponseError("Response has no total result count.")
        try:
            result_count = int(count)
        except ValueError as exception:
            raise MalformedResponseError(
                f"Total result count {count} is not a number."
            ) from exception
        if result_count < 0:
            raise MalformedResponseError(f"Total result count {count} is negative.")
        return result_count

    @staticmethod
    def _repository_id(fragment: Fragment) -> str:
        slot = fragment.slot("repositoryUniqueId")
        repository_id = slot.first_value() if slot is not None else None
        if repository_id is None:
            raise MalformedResponseError("Response has no repository unique id.")
        return repository_id

    def _document_id(self, metadata: Fragment) -> str:
        following = metadata.after(self.document_id_marker)
        if following is None:
            return ""
        return following.attribute("value") or ""

    @staticmethod
    def _sop_instance_uid(metadata: Fragment) -> str:
        return next(
            (
                identifier.attributes.get("value", "")
                for identifier in metadata.elements("ExternalIdentifier")
                if identifier.attributes.get("identificationScheme")
                == settings.unique_id_scheme
            ),
            "",
        )

    @staticmethod
    def _description(metadata: Fragment) -> str:
        name = metadata.without("Classification", "ExternalIdentifier").element(
            "Name"
        )
        if name is None:
            return ""
        return name.body.localized_string() or ""

    @staticmethod
    def _slot_value(metadata: Fragment, name: str) -> str:
        slot = metadata.slot(name)
        if slot is None:
            return ""
        return slot.first_value() or ""

    @staticmethod
    def _reference_ids(metadata: Fragment) -> Tuple[str, str]:
        """Return accession number and retrieve url from the reference id
        list."""
        slot = metadata.slot("referenceIdList")
        if slot is None:
            return "", ""
        values = slot.values()
        return (
            RegistryResponseParser._reference_id(
                values, settings.accession_number_identifier
            ),
            RegistryResponseParser._reference_id(
                values, settings.retrieve_url_identifier
            ),
        )

    @staticmethod
    def _reference_id(values: Sequence[str], identifier: str) -> str:
        matching = [value for value in values if identifier in value]
        if len(matching) == 0:
            return ""
        if len(matching) > 1:
            logging.debug(
                f"Found {len(matching)} reference ids matching {identifier}, "
                "using the first."
            )
        return matching[0].split("^")[0]

    @staticmethod
    def _event_codes(metadata: Fragment) -> Tuple[List[str], List[str]]:
        """Return modalities and anatomic regions from the event code list."""
        modalities: List[str] = []
        regions: List[str] = []
        for classification in metadata.elements("Classification"):
            if (
                classification.attributes.get("classificationScheme")
                != settings.event_code_scheme
            ):
                continue
            coding_scheme_slot = classification.body.slot("codingScheme")
            if coding_scheme_slot is not None:
                coding_scheme = coding_scheme_slot.first_value()
            else:
                coding_scheme = classification.body.first_value()
            if coding_scheme == settings.modality_coding_scheme:
                modality = classification.attributes.get("nodeRepresentation", "")
                modalities = merge_unique(modalities, [modality])
            elif coding_scheme == settings.region_coding_scheme:
                region = classification.body.localized_string() or ""
                regions = merge_unique(regions, [region])
        return modalities, regions

    @staticmethod
    def _birth_date(value: Optional[str]) -> datetime.date:
        if value is None or value == "":
            raise MissingPatientInfoError("Source patient info has no birth date.")
        try:
            return datetime.datetime.strptime(value[:8], "%Y%m%d").date()
        except ValueError as exception:
            raise MissingPatientInfoError(
                f"Birth date {value} is not a valid date."
            ) from exception

    @staticmethod
    def _sex(value: str) -> PatientSex:
        try:
            return PatientSex[value.strip().upper()]
        except KeyError:
            return PatientSex.U
