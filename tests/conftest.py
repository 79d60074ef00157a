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


from typing import List

import pytest
from pydicom import Dataset

from tests.helpers import (
    XML_MIME_TYPE,
    KosSeries,
    RegistryEntry,
    build_cda,
    build_kos_bytes,
    build_kos_dataset,
    build_registry_response,
)
from xdsimaging.config import settings
from xdsimaging.model import DocumentSet
from xdsimaging.registry import RegistryResponseParser

STUDY_URL = "http://pacs.example/dicom-web/studies/1.2.3.4"


@pytest.fixture
def patient_id():
    yield "248039263001064"


@pytest.fixture
def registry_entries():
    yield [
        RegistryEntry(
            "1.2.250.1.1.1",
            mime_type=XML_MIME_TYPE,
            accession_number="ACC1",
            study_instance_uid="1.2.3.4",
            description="Compte rendu",
            creation_time="20230115143045",
        ),
        RegistryEntry(
            "1.2.250.1.2.1",
            accession_number="ACC1",
            study_instance_uid="1.2.3.4",
            description="Scanner thorax",
            creation_time="20230115143000",
            modalities=["CT"],
            regions=["Thorax"],
        ),
        RegistryEntry(
            "1.2.250.1.2.2",
            accession_number="ACC1",
            study_instance_uid="1.2.3.4",
            description="IRM thorax",
            creation_time="20230115143010",
            modalities=["CT", "MR"],
            regions=["Thorax"],
        ),
        RegistryEntry(
            "1.2.250.1.1.2",
            mime_type=XML_MIME_TYPE,
            accession_number="ACC2",
            study_instance_uid="1.2.3.5",
            description="Compte rendu ancien",
            creation_time="20210304080910",
        ),
    ]


@pytest.fixture
def registry_response(registry_entries: List[RegistryEntry]):
    yield build_registry_response(registry_entries)


@pytest.fixture
def document_set(registry_response: str, patient_id: str) -> DocumentSet:
    return RegistryResponseParser().parse(registry_response, patient_id)


@pytest.fixture
def kos_series():
    yield [
        KosSeries(
            "1.2.3.4.1",
            "CT",
            "Abdomen",
            image_count=3,
            retrieve_url=f"{STUDY_URL}/series/1.2.3.4.1",
        ),
        KosSeries(
            "1.2.3.4.2",
            "CT",
            "Thorax",
            image_count=2,
            retrieve_url=f"{STUDY_URL}/series/1.2.3.4.2",
        ),
    ]


@pytest.fixture
def kos_dataset(kos_series: List[KosSeries]):
    yield build_kos_dataset("1.2.3.4.100", "Scanner thorax abdomen", kos_series)


@pytest.fixture
def kos_bytes(kos_dataset: Dataset):
    yield build_kos_bytes(
        kos_dataset,
        prefix=b"--boundary\r\nContent-Type: application/dicom\r\n\r\n",
    )


@pytest.fixture
def cda_payload():
    yield build_cda()


@pytest.fixture
def restore_settings():
    accession_number_identifier = settings.accession_number_identifier
    display_separator = settings.display_separator
    yield settings
    settings.accession_number_identifier = accession_number_identifier
    settings.display_separator = display_separator
