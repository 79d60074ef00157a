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


"""Parser for retrieved Key Object Selection documents."""
import logging
import re
from io import BytesIO
from typing import Dict, List, Optional, Tuple

import pydicom

from xdsimaging.dicom_schema import KosDicomSchema
from xdsimaging.errors import NotADicomStreamError
from xdsimaging.model import KosContent, KosDocument, Series

DICOM_PREFIX = b"DICM"
PREAMBLE_LENGTH = 128

_SERIES_LINE_PATTERN = re.compile(
    r"(?P<uid>\d[\d.]*)\s*:(?P<modality>[^:\n]*):(?P<description>[^\n]*)"
)


def locate_dicom_stream(data: bytes) -> bytes:
    """Return the DICOM file embedded in data, starting with its 128 byte
    preamble. Data before the preamble (e.g. multipart headers) is dropped."""
    index = data.find(DICOM_PREFIX)
    if index == -1:
        raise NotADicomStreamError("Data has no DICM prefix.")
    if index < PREAMBLE_LENGTH:
        raise NotADicomStreamError(
            f"DICM prefix at offset {index} leaves no room for the preamble."
        )
    return data[index - PREAMBLE_LENGTH :]


def parse_series_lines(text_value: str) -> Dict[str, Tuple[str, str]]:
    """Return modality and description by series uid from a KOS text value.

    Lines are of the form `<uid> : <modality> : <description>`, text before the
    uid and a trailing `@` on the modality are ignored."""
    series_lines: Dict[str, Tuple[str, str]] = {}
    for line in text_value.splitlines():
        match = _SERIES_LINE_PATTERN.search(line)
        if match is None:
            continue
        modality = match.group("modality").strip()
        if modality.endswith("@"):
            modality = modality[:-1].rstrip()
        series_lines.setdefault(
            match.group("uid"), (modality, match.group("description").strip())
        )
    return series_lines


class KosParser:
    """Decodes retrieved KOS documents into the series they reference."""

    def __init__(self, schema: Optional[KosDicomSchema] = None):
        if schema is None:
            schema = KosDicomSchema()
        self._schema = schema

    def parse(self, data: bytes) -> KosContent:
        dataset = pydicom.dcmread(BytesIO(locate_dicom_stream(data)))
        return self._schema.load(dataset)

    @staticmethod
    def series(content: KosContent, anatomic_location: str = "") -> List[Series]:
        """Return the referenced series, described by the text value and
        sorted descending by description."""
        series_lines = parse_series_lines(content.text_value or "")
        series = []
        for referenced in content.referenced_series:
            modality, description = series_lines.get(
                referenced.series_instance_uid, ("", "")
            )
            series.append(
                Series(
                    description=description,
                    modality=modality,
                    image_count=referenced.image_count or 0,
                    anatomic_location=anatomic_location,
                    retrieve_url=referenced.retrieve_url or "",
                    series_instance_uid=referenced.series_instance_uid,
                )
            )
        series.sort(key=lambda item: item.description, reverse=True)
        return series

    def populate(self, document: KosDocument, data: bytes) -> List[Series]:
        """Fill in the series of a KOS document from its retrieved bytes.

        Does nothing if the document already has series. If the data can not
        be decoded a warning is logged and the document is left without
        series."""
        if document.is_retrieved:
            return document.series
        try:
            content = self.parse(data)
        except Exception:
            logging.warning(
                f"Could not decode KOS document {document.unique_id}.",
                exc_info=True,
            )
            return document.series
        document.series = self.series(content, document.anatomic_region)
        document.sop_instance_uid = content.sop_instance_uid
        if content.study_description:
            document.description = content.study_description
        logging.debug(
            f"Found {len(document.series)} series in KOS document "
            f"{document.unique_id}."
        )
        return document.series
