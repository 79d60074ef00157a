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


"""Linking of reports and KOS documents into exams."""
import datetime
import logging

from xdsimaging.errors import DateFormatError
from xdsimaging.model import DocumentSet, KosDocument, ReportDocument, merge_unique

RAW_DATE_FORMAT = "%Y%m%d%H%M%S"
EXAM_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"


def normalize_exam_date(creation_time: str) -> str:
    """Convert a raw `YYYYMMDDHHMMSS` timestamp to `DD/MM/YYYY HH:MM:SS`.
    Characters after the first 14 (e.g. a time zone) are ignored."""
    if len(creation_time) < 14:
        raise DateFormatError(
            f"Timestamp {creation_time!r} is shorter than 14 characters."
        )
    try:
        parsed = datetime.datetime.strptime(creation_time[:14], RAW_DATE_FORMAT)
    except ValueError as exception:
        raise DateFormatError(
            f"Timestamp {creation_time!r} is not a valid timestamp."
        ) from exception
    return parsed.strftime(EXAM_DATE_FORMAT)


class DocumentLinker:
    """Links the reports of a document set to the KOS documents sharing their
    accession number.

    Linking is done in place and can be repeated on the same document set
    without changing the result."""

    def link(self, document_set: DocumentSet) -> DocumentSet:
        # Sort is stable, reports with equal timestamps keep response order.
        document_set.reports.sort(
            key=lambda report: report.creation_time, reverse=True
        )
        for report in document_set.reports:
            report.exam_date = normalize_exam_date(report.creation_time)
            if report.accession_number == "":
                continue
            # TODO index KOS documents by accession number if patients with
            # hundreds of documents show up.
            for kos in document_set.kos_objects:
                if kos.accession_number == report.accession_number:
                    self.link_kos(report, kos)
            if len(report.ref_kos) > 0:
                report.description = f"{report.modality} / {report.anatomic_region}"
        return document_set

    @staticmethod
    def link_kos(report: ReportDocument, kos: KosDocument) -> None:
        if not report.is_linked_to(kos):
            report.ref_kos.append(kos)
            logging.debug(
                f"Linked KOS {kos.unique_id} to report {report.unique_id}."
            )
        report.sop_instance_uid = kos.sop_instance_uid
        report.modalities = merge_unique(report.modalities, kos.modalities)
        report.anatomic_regions = merge_unique(
            report.anatomic_regions, kos.anatomic_regions
        )
