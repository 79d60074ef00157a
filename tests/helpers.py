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


import base64
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Sequence

import pydicom
from pydicom import Dataset
from pydicom.dataset import FileMetaDataset
from pydicom.uid import ExplicitVRLittleEndian, KeyObjectSelectionDocumentStorage

DICOM_MIME_TYPE = "application/dicom"
XML_MIME_TYPE = "text/xml"
REPOSITORY_ID = "1.2.250.1.213.1.1.9"
EVENT_CODE_SCHEME = "urn:uuid:2c6b8cb7-8b2a-4051-b291-b1ae6a575ef4"
UNIQUE_ID_SCHEME = "urn:uuid:2e82c1f6-a085-4c72-9da3-8640a32e42ab"
PATIENT_ID_SCHEME = "urn:uuid:58a6f841-87b3-4a3e-92fd-a8ffeff98427"
MODALITY_CODING_SCHEME = "1.2.250.1.213.1.1.5.618"
REGION_CODING_SCHEME = "1.2.250.1.213.1.1.5.695"
DEFAULT_PATIENT_INFO = ("PID-5|DUPONT^JEAN^^^^^L", "PID-7|19800102", "PID-8|M")


@dataclass
class RegistryEntry:
    unique_id: str
    mime_type: str = DICOM_MIME_TYPE
    accession_number: str = ""
    study_instance_uid: str = ""
    description: str = ""
    creation_time: str = "20230115143045"
    modalities: Sequence[str] = ()
    regions: Sequence[str] = ()
    patient_info: Optional[Sequence[str]] = DEFAULT_PATIENT_INFO


@dataclass
class KosSeries:
    uid: str
    modality: str
    description: str
    image_count: int = 1
    retrieve_url: Optional[str] = None


def _slot(name: str, values: Sequence[str]) -> str:
    value_elements = "".join(f"<ns4:Value>{value}</ns4:Value>" for value in values)
    return (
        f'<ns4:Slot name="{name}"><ns4:ValueList>{value_elements}'
        "</ns4:ValueList></ns4:Slot>"
    )


def _event_code(code: str, coding_scheme: str, display_name: str) -> str:
    return (
        f'<ns4:Classification classificationScheme="{EVENT_CODE_SCHEME}" '
        f'classifiedObject="document" id="urn:uuid:{code}" '
        f'nodeRepresentation="{code}" '
        'objectType="urn:oasis:names:tc:ebxml-regrep:ObjectType:RegistryObject:'
        'Classification">'
        f"{_slot('codingScheme', [coding_scheme])}"
        f'<ns4:Name><ns4:LocalizedString value="{display_name}"/></ns4:Name>'
        "</ns4:Classification>"
    )


def build_extrinsic_object(
    entry: RegistryEntry, patient_id: str = "248039263001064"
) -> str:
    slots = [
        _slot("creationTime", [entry.creation_time]),
        _slot("repositoryUniqueId", [REPOSITORY_ID]),
    ]
    if entry.patient_info is not None:
        slots.append(_slot("sourcePatientInfo", entry.patient_info))
    reference_ids = []
    if entry.accession_number != "":
        reference_ids.append(
            f"{entry.accession_number}^^^&amp;1.2.250.1.999&amp;ISO"
            "^urn:ihe:iti:xds:2013:accession"
        )
    if entry.study_instance_uid != "":
        reference_ids.append(
            f"{entry.study_instance_uid}^^^^urn:ihe:iti:xds:2016:studyInstanceUID"
        )
    if len(reference_ids) > 0:
        slots.append(_slot("urn:ihe:iti:xds:2013:referenceIdList", reference_ids))
    event_codes = [
        _event_code(modality, MODALITY_CODING_SCHEME, f"Modality {modality}")
        for modality in entry.modalities
    ] + [
        _event_code(f"R{index}", REGION_CODING_SCHEME, region)
        for index, region in enumerate(entry.regions)
    ]
    return (
        f'<ns4:ExtrinsicObject id="urn:uuid:{entry.unique_id}" '
        f'mimeType="{entry.mime_type}" '
        'objectType="urn:uuid:7edca82f-054d-47f2-a032-9b2a5b5186c1" '
        'status="urn:oasis:names:tc:ebxml-regrep:StatusType:Approved">'
        + "".join(slots)
        + f'<ns4:Name><ns4:LocalizedString value="{entry.description}"/></ns4:Name>'
        + "".join(event_codes)
        + f'<ns4:ExternalIdentifier identificationScheme="{PATIENT_ID_SCHEME}" '
        f'value="{patient_id}^^^&amp;1.2.250.1.213.1.4.8&amp;ISO">'
        '<ns4:Name><ns4:LocalizedString value="XDSDocumentEntry.patientId"/>'
        "</ns4:Name></ns4:ExternalIdentifier>"
        f'<ns4:ExternalIdentifier identificationScheme="{UNIQUE_ID_SCHEME}" '
        f'value="{entry.unique_id}">'
        '<ns4:Name><ns4:LocalizedString value="XDSDocumentEntry.uniqueId"/>'
        "</ns4:Name></ns4:ExternalIdentifier>"
        "</ns4:ExtrinsicObject>"
    )


def build_registry_response(
    entries: Sequence[RegistryEntry],
    status: str = "Success",
    total_result_count: Optional[int] = None,
) -> str:
    """Build a stored query response wrapped in a multipart message."""
    if total_result_count is None:
        total_result_count = len(entries)
    objects = "".join(build_extrinsic_object(entry) for entry in entries)
    return (
        "--uuid:boundary\r\n"
        'Content-Type: application/xop+xml; charset=UTF-8; type="application/soap+xml"'
        "\r\n\r\n"
        '<soapenv:Envelope xmlns:soapenv="http://www.w3.org/2003/05/soap-envelope">'
        "<soapenv:Body>"
        '<ns2:AdhocQueryResponse '
        'xmlns:ns2="urn:oasis:names:tc:ebxml-regrep:xsd:query:3.0" '
        'xmlns:ns4="urn:oasis:names:tc:ebxml-regrep:xsd:rim:3.0" '
        f'status="urn:oasis:names:tc:ebxml-regrep:ResponseStatusType:{status}" '
        f'totalResultCount="{total_result_count}">'
        f"<ns4:RegistryObjectList>{objects}</ns4:RegistryObjectList>"
        "</ns2:AdhocQueryResponse></soapenv:Body></soapenv:Envelope>\r\n"
        "--uuid:boundary--"
    )


def kos_text_value(series: Sequence[KosSeries], study_description: str) -> str:
    text_value = f"Examen : {study_description}\n"
    for item in series:
        text_value += f"Série-{item.uid} : {item.modality} @  : {item.description}\n"
    return text_value


def build_kos_dataset(
    sop_instance_uid: str,
    study_description: str,
    series: Sequence[KosSeries],
    text_value: Optional[str] = None,
) -> Dataset:
    dataset = Dataset()
    dataset.SpecificCharacterSet = "ISO_IR 192"
    dataset.SOPClassUID = KeyObjectSelectionDocumentStorage
    dataset.SOPInstanceUID = sop_instance_uid
    dataset.StudyDescription = study_description
    if text_value is None:
        text_value = kos_text_value(series, study_description)
    dataset.TextValue = text_value
    referenced_series: List[Dataset] = []
    for item in series:
        series_dataset = Dataset()
        series_dataset.SeriesInstanceUID = item.uid
        if item.retrieve_url is not None:
            series_dataset.RetrieveURL = item.retrieve_url
        instances = []
        for index in range(item.image_count):
            instance = Dataset()
            instance.ReferencedSOPClassUID = "1.2.840.10008.5.1.4.1.1.2"
            instance.ReferencedSOPInstanceUID = f"{item.uid}.{index + 1}"
            instances.append(instance)
        series_dataset.ReferencedSOPSequence = instances
        referenced_series.append(series_dataset)
    evidence = Dataset()
    evidence.StudyInstanceUID = "1.2.3.4"
    evidence.ReferencedSeriesSequence = referenced_series
    dataset.CurrentRequestedProcedureEvidenceSequence = [evidence]
    return dataset


def build_kos_bytes(dataset: Dataset, prefix: bytes = b"") -> bytes:
    """Write dataset as a DICOM file, preceded by prefix (e.g. multipart
    headers)."""
    file_meta = FileMetaDataset()
    file_meta.MediaStorageSOPClassUID = dataset.SOPClassUID
    file_meta.MediaStorageSOPInstanceUID = dataset.SOPInstanceUID
    file_meta.TransferSyntaxUID = ExplicitVRLittleEndian
    dataset.file_meta = file_meta
    buffer = BytesIO()
    pydicom.dcmwrite(buffer, dataset, enforce_file_format=True)
    return prefix + buffer.getvalue()


def build_cda(
    pdf: bytes = b"%PDF-1.4 report",
    family: str = "MARTIN",
    given: str = "Paul",
    title: str = "Compte rendu d'imagerie",
    embed_pdf: bool = True,
) -> bytes:
    if embed_pdf:
        encoded = base64.b64encode(pdf).decode("ascii")
        body = (
            '<nonXMLBody><text mediaType="application/pdf" representation="B64">'
            f"{encoded}</text></nonXMLBody>"
        )
    else:
        body = (
            "<structuredBody><section><text>Pas de PDF</text></section>"
            "</structuredBody>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<ClinicalDocument xmlns="urn:hl7-org:v3">\n'
        f"<title>{title}</title>\n"
        '<author><time value="20230115143045"/><assignedAuthor>'
        '<id root="1.2.250.1.71.4.2.1" extension="810000000001"/>'
        "<assignedPerson><name><prefix>Dr</prefix>"
        f"<family>{family}</family><given>{given}</given>"
        "</name></assignedPerson></assignedAuthor></author>\n"
        f"<component>{body}</component>\n"
        "</ClinicalDocument>"
    ).encode("utf-8")
